"""core.exceptions

Centralised exception hierarchy for *cordyceps*.

Errors raised before any I/O (builder validation, enum decoding) and errors
raised by the transport share a common base so callers can catch everything
coming out of this package with a single ``except CordycepsError``.
"""

from __future__ import annotations

from http import HTTPStatus

# ---------------------------------------------------------------------------
# Base class
# ---------------------------------------------------------------------------


class CordycepsError(Exception):
    """Base class for all *cordyceps* errors."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.__class__.__name__)

    def to_json(self) -> dict[str, dict[str, str]]:
        """Unified error body, handy for logging or relaying to a UI."""
        return {'error': {'type': self.__class__.__name__, 'message': str(self)}}


# ---------------------------------------------------------------------------
# Local (pre-I/O) errors
# ---------------------------------------------------------------------------


class PayloadValidationError(CordycepsError):
    """Raised when a builder cannot produce a valid payload."""


class MissingFieldError(PayloadValidationError):
    """Raised by ``build()`` when a required field was never staged."""

    def __init__(self, field: str, message: str | None = None) -> None:
        self.field = field
        super().__init__(message or f'{field} are not set')


class EnumDecodeError(CordycepsError, ValueError):
    """Raised when a string is outside an enum's closed set of identifiers."""

    def __init__(self, enum_name: str, value: object) -> None:
        self.enum_name = enum_name
        self.value = value
        super().__init__(f'{value!r} is not a valid {enum_name}')


class FrameDecodeError(CordycepsError, ValueError):
    """Raised when a streamed chunk does not parse as a response frame."""


# ---------------------------------------------------------------------------
# Transport errors
# ---------------------------------------------------------------------------


class RequestFailedError(CordycepsError):
    """Raised when the service answers with a non-success status code."""

    def __init__(self, status_code: int, body: str = '') -> None:
        self.status_code = status_code
        self.body = body
        try:
            phrase = HTTPStatus(status_code).phrase
        except ValueError:
            phrase = 'Unknown Status'
        super().__init__(f'Request failed with status code: {status_code} {phrase}')


class TransportError(CordycepsError):
    """Connection-level failure (reset, protocol error, read error, ...)."""


# ---------------------------------------------------------------------------
# Wiring errors
# ---------------------------------------------------------------------------


class EndpointNotFoundError(CordycepsError):
    """Raised when `EndpointRegistry` has no URL for a payload type."""


class ConfigurationError(CordycepsError):
    """Raised when a required setting (e.g. the API key) is missing."""
