"""Resolve relative URLs against a base URL or the ambient page location."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass
import logging

from .exceptions import LocationUnavailableError, MalformedBaseUrlError

LOGGER = logging.getLogger(__name__)

SCHEME_SEPARATOR = "://"
DEFAULT_ABSOLUTE_SCHEMES: tuple[str, ...] = (
    "http",
    "https",
    "chrome-extension",
    "resource",
)


@dataclass(frozen=True)
class ParsedUrl:
    """URL split into scheme, authority and path.

    ``path`` is either empty or starts with ``/``. Nothing is normalized:
    dot segments, repeated slashes, queries and fragments stay in ``path``.
    """

    scheme: str
    authority: str
    path: str

    @classmethod
    def parse(cls, text: str) -> ParsedUrl:
        scheme, separator, remainder = text.partition(SCHEME_SEPARATOR)
        if not separator:
            raise MalformedBaseUrlError(
                f"URL {text!r} has no {SCHEME_SEPARATOR!r} separator."
            )
        authority, slash, path = remainder.partition("/")
        return cls(scheme=scheme, authority=authority, path=slash + path)

    @property
    def origin(self) -> str:
        return f"{self.scheme}{SCHEME_SEPARATOR}{self.authority}"

    def join(self, reference: str) -> str:
        """Join a relative reference onto this URL, treated as a directory."""
        if reference.startswith("/"):
            return self.origin + reference
        return f"{self.origin}{self.path}/{reference}"

    def __str__(self) -> str:
        return self.origin + self.path


@dataclass(frozen=True)
class Location:
    """Browser-style location: ``protocol`` keeps its trailing colon."""

    protocol: str
    host: str
    pathname: str

    @property
    def href(self) -> str:
        return f"{self.protocol}//{self.host}{self.pathname}"


_current_location: ContextVar[Location | None] = ContextVar(
    "freedom_util_location", default=None
)


def set_location(location: Location) -> Token[Location | None]:
    """Install ``location`` as the ambient location for this context."""
    return _current_location.set(location)


def reset_location(token: Token[Location | None]) -> None:
    """Restore the ambient location that was active before ``set_location``."""
    _current_location.reset(token)


@contextmanager
def using_location(location: Location) -> Iterator[Location]:
    """Temporarily install ``location`` as the ambient location."""
    token = set_location(location)
    try:
        yield location
    finally:
        reset_location(token)


def current_location() -> Location:
    """Return the ambient location or raise when none has been set."""
    location = _current_location.get()
    if location is None:
        raise LocationUnavailableError("No ambient location has been set.")
    return location


def is_absolute(url: str, schemes: Iterable[str] = DEFAULT_ABSOLUTE_SCHEMES) -> bool:
    """Return True when ``url`` starts with an allow-listed ``<scheme>://``."""
    return any(url.startswith(scheme + SCHEME_SEPARATOR) for scheme in schemes)


def resolve_path(
    url: str,
    base: str,
    schemes: Iterable[str] = DEFAULT_ABSOLUTE_SCHEMES,
) -> str:
    """Resolve ``url`` against the directory of ``base``.

    Absolute URLs are returned unchanged. A reference starting with ``/`` is
    joined to the origin of ``base``; anything else is appended to the
    directory of ``base`` (everything before its last ``/``).

    Raises:
        MalformedBaseUrlError: The directory of ``base`` has no ``://``.
    """
    if is_absolute(url, schemes):
        return url
    directory, _, _ = base.rpartition("/")
    resolved = ParsedUrl.parse(directory).join(url)
    LOGGER.debug(
        "urls.resolved",
        extra={"event": "urls.resolved", "url": url, "base": base, "resolved": resolved},
    )
    return resolved


def make_absolute(
    url: str,
    location: Location | None = None,
    schemes: Iterable[str] = DEFAULT_ABSOLUTE_SCHEMES,
) -> str:
    """Resolve ``url`` against ``location`` or the ambient location."""
    target = location if location is not None else current_location()
    return resolve_path(url, target.href, schemes)
