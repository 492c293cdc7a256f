"""Configuration loading and validation for freedom-util."""

from __future__ import annotations

from copy import deepcopy
import logging
from pathlib import Path
import re
from typing import Any

from pydantic import (
    BaseModel,
    Field,
    ValidationError,
    field_validator,
)

from .exceptions import ConfigValidationError
from .urls import DEFAULT_ABSOLUTE_SCHEMES
from .utils import mixin

import tomllib  # stdlib since Python 3.11 (project requires >=3.11)

LOGGER = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".config" / "freedom-util"
CONFIG_PATH = CONFIG_DIR / "config.toml"

SCHEME_PATTERN = re.compile(r"^[a-z][a-z0-9+.-]*$")
VALID_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class LoggingConfig(BaseModel):
    """Logging behavior and output destinations."""

    level: str = "INFO"
    structured: bool = True
    log_to_file: bool = False
    log_file_path: str = "~/.local/state/freedom-util/app.log"

    @field_validator("level", mode="before")
    @classmethod
    def _validate_level(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("Logging level must be a string.")
        normalized = value.strip().upper()
        if normalized not in VALID_LOG_LEVELS:
            raise ValueError(f"Unsupported log level {normalized!r}.")
        return normalized

    @field_validator("log_file_path", mode="before")
    @classmethod
    def _validate_log_file_path(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("log_file_path must be a string.")
        normalized = value.strip()
        if not normalized:
            raise ValueError("log_file_path must not be empty.")
        return normalized


class ResolverConfig(BaseModel):
    """URL schemes that are treated as already absolute."""

    absolute_schemes: list[str] = Field(
        default_factory=lambda: list(DEFAULT_ABSOLUTE_SCHEMES)
    )

    @field_validator("absolute_schemes", mode="before")
    @classmethod
    def _validate_schemes(cls, value: Any) -> list[str]:
        if not isinstance(value, list):
            raise ValueError("absolute_schemes must be a list of scheme names.")
        normalized: list[str] = []
        for item in value:
            if not isinstance(item, str):
                raise ValueError("Each scheme in absolute_schemes must be a string.")
            candidate = item.strip().lower()
            if not SCHEME_PATTERN.match(candidate):
                raise ValueError(f"Invalid URL scheme {candidate!r}.")
            if candidate not in normalized:
                normalized.append(candidate)
        if not normalized:
            raise ValueError("absolute_schemes must contain at least one scheme.")
        return normalized


class LocationConfig(BaseModel):
    """Page location used when resolving URLs without an explicit base."""

    protocol: str = "http:"
    host: str = "localhost"
    pathname: str = "/"

    @field_validator("protocol", mode="before")
    @classmethod
    def _normalize_protocol(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("protocol must be a string.")
        normalized = value.strip().lower()
        if not normalized.endswith(":"):
            normalized += ":"
        if not SCHEME_PATTERN.match(normalized[:-1]):
            raise ValueError(f"Invalid protocol {value!r}.")
        return normalized

    @field_validator("host", mode="before")
    @classmethod
    def _normalize_host(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("host must be a string.")
        return value.strip()

    @field_validator("pathname", mode="before")
    @classmethod
    def _validate_pathname(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("pathname must be a string.")
        normalized = value.strip()
        if not normalized.startswith("/"):
            raise ValueError("pathname must start with '/'.")
        return normalized


class Config(BaseModel):
    """Root configuration model for all sections."""

    logging: LoggingConfig = LoggingConfig()
    resolver: ResolverConfig = ResolverConfig()
    location: LocationConfig = LocationConfig()


DEFAULT_CONFIG: dict[str, dict[str, Any]] = Config().model_dump()


def ensure_config_dir(config_dir: Path | None = None) -> Path:
    """Ensure that the config directory exists and return its path."""
    directory = config_dir or CONFIG_DIR
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        LOGGER.warning("Unable to create config directory %s: %s", directory, exc)
    return directory


def _safe_default_config() -> dict[str, dict[str, Any]]:
    """Return a deep copy of validated default config data."""
    return deepcopy(DEFAULT_CONFIG)


def _validate_config(raw: dict[str, Any]) -> dict[str, dict[str, Any]]:
    """Validate merged config and fallback to safe defaults when possible."""
    try:
        return Config.model_validate(raw).model_dump()
    except ValidationError as exc:
        LOGGER.warning("Configuration validation failed, using safe defaults: %s", exc)
        return _safe_default_config()
    except Exception as exc:  # noqa: BLE001 - unexpected model construction failure.
        raise ConfigValidationError(f"Unable to validate configuration: {exc}") from exc


def load_config(config_path: Path | None = None) -> dict[str, dict[str, Any]]:
    """
    Load configuration from TOML, merge with defaults, and validate.

    The optional ``config_path`` argument is intended for tests and tooling.
    """
    target_path = config_path or CONFIG_PATH

    raw_data: dict[str, Any] = {}
    if target_path.exists():
        try:
            raw_data = tomllib.loads(target_path.read_text(encoding="utf-8"))
        except (OSError, tomllib.TOMLDecodeError) as exc:
            LOGGER.warning("Failed to parse config at %s: %s", target_path, exc)
            raw_data = {}

    merged = mixin(_safe_default_config(), raw_data, force=True, deep_string_mixin=True)
    return _validate_config(dict(merged))

