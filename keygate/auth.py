"""API key extraction from the Authorization header.

Accepted format (exactly one scheme):
    Authorization: ApiKey <key>

The header value is split on every single space. The scheme token must be
exactly "ApiKey"; the token after it is returned untouched. Anything after
the key token is ignored.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

AUTH_HEADER = "Authorization"
SCHEME = "ApiKey"

HeaderMap = Mapping[str, str | Sequence[str]]


class ErrorKind(enum.Enum):
    NO_AUTH_HEADER = "no authorization header included"
    MALFORMED_HEADER = "malformed authorization header"

    @property
    def message(self) -> str:
        return self.value


class AuthHeaderError(Exception):
    """Base class for Authorization header extraction failures."""

    kind: ErrorKind

    def __init__(self) -> None:
        super().__init__(self.kind.message)


class NoAuthHeaderError(AuthHeaderError):
    kind = ErrorKind.NO_AUTH_HEADER


class MalformedHeaderError(AuthHeaderError):
    kind = ErrorKind.MALFORMED_HEADER


@dataclass(frozen=True)
class ExtractionResult:
    key: str
    error: ErrorKind | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _header_value(headers: HeaderMap) -> str:
    # Single lookup by the canonical name; case-insensitivity is up to the map.
    value = headers.get(AUTH_HEADER)
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return value[0] if value else ""


def get_api_key(headers: HeaderMap) -> str:
    """Return the API key from an ``Authorization: ApiKey <key>`` header.

    Raises NoAuthHeaderError when the header is absent or empty, and
    MalformedHeaderError when it has no key token or the scheme is not
    exactly "ApiKey".
    """
    value = _header_value(headers)
    if not value:
        raise NoAuthHeaderError()

    parts = value.split(" ")
    if len(parts) < 2 or parts[0] != SCHEME:
        raise MalformedHeaderError()
    return parts[1]


def extract(headers: HeaderMap) -> ExtractionResult:
    """Like get_api_key, but reports failures in the result instead of raising."""
    try:
        return ExtractionResult(key=get_api_key(headers))
    except AuthHeaderError as exc:
        return ExtractionResult(key="", error=exc.kind)
