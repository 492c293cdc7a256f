"""Top-level package for freedom-util."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .config import ensure_config_dir, load_config
    from .events import Dispatch, EventBus
    from .exceptions import (
        ConfigValidationError,
        FreedomUtilError,
        LocationUnavailableError,
        MalformedBaseUrlError,
    )
    from .urls import Location, ParsedUrl, is_absolute, make_absolute, resolve_path
    from .utils import mixin

__all__ = [
    "ConfigValidationError",
    "Dispatch",
    "EventBus",
    "FreedomUtilError",
    "Location",
    "LocationUnavailableError",
    "MalformedBaseUrlError",
    "ParsedUrl",
    "ensure_config_dir",
    "is_absolute",
    "load_config",
    "make_absolute",
    "mixin",
    "resolve_path",
]


def __getattr__(name: str) -> Any:
    """Lazily import symbols so importing the package stays cheap."""
    if name in {"Dispatch", "EventBus"}:
        from .events import Dispatch, EventBus

        return {"Dispatch": Dispatch, "EventBus": EventBus}[name]
    if name in {"Location", "ParsedUrl", "is_absolute", "make_absolute", "resolve_path"}:
        from . import urls

        return getattr(urls, name)
    if name in {"ensure_config_dir", "load_config"}:
        from .config import ensure_config_dir, load_config

        return {"ensure_config_dir": ensure_config_dir, "load_config": load_config}[name]
    if name in {
        "ConfigValidationError",
        "FreedomUtilError",
        "LocationUnavailableError",
        "MalformedBaseUrlError",
    }:
        from . import exceptions

        return getattr(exceptions, name)
    if name == "mixin":
        from .utils import mixin

        return mixin
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
