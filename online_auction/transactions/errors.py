"""Errors raised by the remote service clients.

A remote call either fails with a structured error reported by the service
(an HTTP error status with a ``{"name": ..., "detail": ...}`` body) or fails
below that, in the transport (refused connection, timeout, garbage body).
Both surface as ``RemoteCallError``; only the first carries a
``TransportException`` cause.
"""

from dataclasses import dataclass
from typing import Optional

REMOTE_ERROR_FALLBACK = "The transaction service could not complete the request."


@dataclass(frozen=True)
class ExceptionMessage:
    name: str
    detail: str


class TransportException(Exception):
    """Structured error reported by a remote service."""

    def __init__(self, error_code: int, exception_message: ExceptionMessage):
        super().__init__(exception_message.detail)
        self.error_code = error_code
        self.exception_message = exception_message

    @classmethod
    def from_response(cls, status_code: int, body) -> Optional["TransportException"]:
        """Build from an error response body, or None if it has no detail."""
        if not isinstance(body, dict) or not isinstance(body.get("detail"), str):
            return None
        return cls(status_code, ExceptionMessage(str(body.get("name", "")), body["detail"]))


class RemoteCallError(Exception):
    """A call to a remote service failed."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.__cause__ = cause

    @property
    def transport_exception(self) -> Optional[TransportException]:
        cause = self.__cause__
        return cause if isinstance(cause, TransportException) else None


def extract_message(error: BaseException) -> Optional[str]:
    """Return the remote detail carried by *error*, if it has one."""
    transport = getattr(error, "transport_exception", None)
    if transport is None and isinstance(error.__cause__, TransportException):
        transport = error.__cause__
    if transport is None:
        return None
    return transport.exception_message.detail
