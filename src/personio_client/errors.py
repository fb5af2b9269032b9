"""Exception hierarchy for the Personio client.

Every failure the client itself detects derives from PersonioError, so callers
can catch one type. Status and envelope failures carry their codes as
attributes, which lets callers tell a 404 from a 401 without parsing messages.

Network failures (httpx.TransportError, httpx.TimeoutException) and task
cancellation (asyncio.CancelledError) are not wrapped. They reach the caller
exactly as httpx and asyncio raise them.
"""

from __future__ import annotations


class PersonioError(RuntimeError):
    """Base class for errors raised by the Personio client."""


class StatusError(PersonioError):
    """The upstream answered with a non-2xx HTTP status."""

    def __init__(self, status: int, reason: str = "") -> None:
        super().__init__(f"Personio returned HTTP {status} {reason}".rstrip())
        self.status = status
        self.reason = reason


class NotFoundError(StatusError):
    """HTTP 404: the requested entity does not exist."""


class EnvelopeError(PersonioError):
    """The upstream answered 2xx but flagged the call as failed."""

    def __init__(self, code: int, message: str) -> None:
        super().__init__(f"Personio returned error: code={code}, message={message}")
        self.code = code
        self.message = message


class DecodeError(PersonioError, ValueError):
    """The response body could not be parsed into the expected shape."""


__all__ = [
    "DecodeError",
    "EnvelopeError",
    "NotFoundError",
    "PersonioError",
    "StatusError",
]
