"""Domain exception hierarchy for freedom-util."""

from __future__ import annotations


class FreedomUtilError(RuntimeError):
    """Base class for all domain-level errors."""


class MalformedBaseUrlError(FreedomUtilError, ValueError):
    """Raised when a base URL has no scheme separator to resolve against."""


class LocationUnavailableError(FreedomUtilError):
    """Raised when no ambient location has been set for the current context."""


class ConfigValidationError(FreedomUtilError):
    """Raised when configuration cannot be validated safely."""
