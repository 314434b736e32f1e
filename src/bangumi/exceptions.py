"""
Bangumi client errors.

Invalid arguments are raised synchronously. Transport, parse and remote failures
are delivered through the completion callback or the returned future.
"""

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Where a failed round trip went wrong."""

    INVALID_ARGUMENT = "invalid_argument"
    TRANSPORT = "transport"
    PARSE = "parse"
    REMOTE = "remote"


class BangumiError(Exception):
    """Base class for all Bangumi client errors."""

    kind: ErrorKind

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BangumiInvalidArgument(BangumiError, ValueError):
    kind = ErrorKind.INVALID_ARGUMENT


class BangumiTransportError(BangumiError):
    """Network or socket failure while sending the request or reading the body."""

    kind = ErrorKind.TRANSPORT


class BangumiParseError(BangumiError):
    """Response body was not valid JSON, or was JSON `null`."""

    kind = ErrorKind.PARSE

    def __init__(self, message: str, body: str = ""):
        super().__init__(message)
        self.body = body


class BangumiRemoteError(BangumiError):
    """The API answered with a payload carrying an ``error`` field."""

    kind = ErrorKind.REMOTE

    def __init__(self, payload: Any):
        message = payload.get("error") if isinstance(payload, dict) else None
        super().__init__(str(message) if message is not None else "remote error")
        self.payload = payload
