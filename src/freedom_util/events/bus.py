"""Synchronous event dispatch with typed, one-shot and predicate listeners.

Usage:
    bus = EventBus()

    # Listen to every "ready" event
    bus.on("ready", lambda data: print(data))

    # Listen to the next "ready" event only
    bus.once("ready", lambda data: print("first", data))

    # Listen to anything a predicate accepts
    bus.on(lambda event_type, data: event_type.startswith("module."), log_event)

    bus.emit("ready", {"id": 1})

Owners that need events hold an ``EventBus`` as an attribute rather than
inheriting from it.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
import logging
from typing import Any

LOGGER = logging.getLogger(__name__)

Handler = Callable[[Any], Any]
Predicate = Callable[[str, Any], Any]


class Dispatch(str, Enum):
    """Outcome signal returned by type listeners and by ``EventBus.emit``."""

    CONTINUE = "CONTINUE"
    STOP = "STOP"


def _is_stop(result: Any) -> bool:
    return result is Dispatch.STOP or result is False


class EventBus:
    """Lightweight in-process event dispatcher.

    Four listener categories are processed on every ``emit``, always in the
    same order: type listeners, one-shots, conditionals, once-conditionals.
    Handler exceptions propagate to the caller of ``emit``.
    """

    def __init__(self, name: str | None = None) -> None:
        self.name = name
        self._listeners: dict[str, list[Handler]] = {}
        self._oneshots: dict[str, list[Handler]] = {}
        self._conditional: list[tuple[Predicate, Handler]] = []
        self._once_conditional: list[tuple[Predicate, Handler]] = []

    def on(self, type_or_predicate: str | Predicate, handler: Handler) -> None:
        """Register a handler for every matching event.

        Args:
            type_or_predicate: Event type key, or a predicate called with
                ``(event_type, data)`` on every dispatch.
            handler: Callable invoked with the event data.
        """
        if callable(type_or_predicate):
            self._conditional.append((type_or_predicate, handler))
            self._log_registration("conditional", None)
        else:
            self._listeners.setdefault(type_or_predicate, []).append(handler)
            self._log_registration("listener", type_or_predicate)

    def once(self, type_or_predicate: str | Predicate, handler: Handler) -> None:
        """Register a handler that fires on the next matching event only.

        Args:
            type_or_predicate: Event type key, or a predicate called with
                ``(event_type, data)``. A predicate entry is dropped the first
                time it matches.
            handler: Callable invoked with the event data.
        """
        if callable(type_or_predicate):
            self._once_conditional.append((type_or_predicate, handler))
            self._log_registration("once_conditional", None)
        else:
            self._oneshots.setdefault(type_or_predicate, []).append(handler)
            self._log_registration("oneshot", type_or_predicate)

    def emit(self, event_type: str, data: Any = None) -> Dispatch:
        """Dispatch ``data`` to every listener matching ``event_type``.

        A type listener returning ``Dispatch.STOP`` (or exactly ``False``)
        ends the whole dispatch: later type listeners, one-shots and both
        predicate categories are skipped for this call.

        Returns:
            ``Dispatch.STOP`` when a type listener stopped the dispatch,
            ``Dispatch.CONTINUE`` otherwise.
        """
        # Sequences are read live on every step; handlers may mutate them.
        index = 0
        while index < len(self._listeners.get(event_type, ())):
            if _is_stop(self._listeners[event_type][index](data)):
                LOGGER.debug(
                    "events.dispatch.stopped",
                    extra={
                        "event": "events.dispatch.stopped",
                        "event_type": event_type,
                        "bus": self.name,
                        "listener_index": index,
                    },
                )
                return Dispatch.STOP
            index += 1

        if event_type in self._oneshots:
            index = 0
            while index < len(self._oneshots[event_type]):
                self._oneshots[event_type][index](data)
                index += 1
            self._oneshots[event_type] = []

        index = 0
        while index < len(self._conditional):
            predicate, handler = self._conditional[index]
            if predicate(event_type, data):
                handler(data)
            index += 1

        index = len(self._once_conditional)
        while True:
            index = min(index, len(self._once_conditional)) - 1
            if index < 0:
                break
            predicate, handler = self._once_conditional[index]
            if predicate(event_type, data):
                del self._once_conditional[index]
                handler(data)

        return Dispatch.CONTINUE

    def _log_registration(self, category: str, event_type: str | None) -> None:
        LOGGER.debug(
            "events.registered",
            extra={
                "event": "events.registered",
                "category": category,
                "event_type": event_type,
                "bus": self.name,
            },
        )
