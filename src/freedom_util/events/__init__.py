"""In-process event dispatch."""

from .bus import Dispatch, EventBus

__all__ = ["Dispatch", "EventBus"]
