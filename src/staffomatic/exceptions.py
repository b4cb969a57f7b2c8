"""Exception hierarchy for staffomatic.

All exceptions inherit from :class:`StaffomaticError`, which carries two
class-level attributes:

* ``kind`` -- an :class:`ErrorKind` naming the failure category, so callers
  can branch on it explicitly instead of matching exception types.
* ``exit_code`` -- a constant from :mod:`staffomatic.exit_codes` used by
  :func:`staffomatic.app.main` when the error escapes a CLI command.

HTTP failures are raised by :meth:`~staffomatic.client.connection.Connection.request`
via :func:`error_for_status`.

Subclass hierarchy::

    StaffomaticError           (UNKNOWN,       exit 1)
    +-- InvalidUsageError      (INVALID_USAGE, exit 2)
    +-- ConfigError            (CONFIG,        exit 1)
    +-- ConnectionError_       (CONNECTION,    exit 6)
    +-- HTTPError
        +-- ClientError        (CLIENT,        exit 7)
        |   +-- Unauthorized        (UNAUTHORIZED,  exit 3)
        |   +-- Forbidden           (FORBIDDEN,     exit 3)
        |   +-- NotFound            (NOT_FOUND,     exit 4)
        |   +-- UnprocessableEntity (UNPROCESSABLE, exit 7)
        +-- ServerError        (SERVER,        exit 5)
"""

from __future__ import annotations

import enum
from typing import Optional

from staffomatic.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CLIENT_ERROR,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_SERVER_ERROR,
)


class ErrorKind(str, enum.Enum):
    """Failure categories shared by every :class:`StaffomaticError`."""

    UNKNOWN = "unknown"
    INVALID_USAGE = "invalid_usage"
    CONFIG = "config"
    CONNECTION = "connection"
    CLIENT = "client"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    UNPROCESSABLE = "unprocessable"
    SERVER = "server"


class StaffomaticError(Exception):
    """Base exception for all staffomatic errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    kind: ErrorKind = ErrorKind.UNKNOWN
    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(StaffomaticError):
    """Raised for invalid CLI arguments or malformed option structs."""

    kind = ErrorKind.INVALID_USAGE
    exit_code = EXIT_INVALID_USAGE


class ConfigError(StaffomaticError):
    """Raised for configuration problems (invalid JSON, bad credential sources)."""

    kind = ErrorKind.CONFIG
    exit_code = EXIT_GENERIC_FAILURE


class ConnectionError_(StaffomaticError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    kind = ErrorKind.CONNECTION
    exit_code = EXIT_CONNECTION_ERROR


class HTTPError(StaffomaticError):
    """An error status returned by the API.

    Args:
        message: Human-readable error description.
        status_code: The HTTP status of the failed response.
        method: HTTP method of the failed request.
        url: URL of the failed request.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        method: Optional[str] = None,
        url: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.method = method
        self.url = url


class ClientError(HTTPError):
    """Raised on HTTP 4xx responses without a more specific subclass."""

    kind = ErrorKind.CLIENT
    exit_code = EXIT_CLIENT_ERROR


class Unauthorized(ClientError):
    """Raised on HTTP 401 -- missing or rejected credentials."""

    kind = ErrorKind.UNAUTHORIZED
    exit_code = EXIT_AUTH_FAILURE


class Forbidden(ClientError):
    """Raised on HTTP 403 -- authenticated but not allowed."""

    kind = ErrorKind.FORBIDDEN
    exit_code = EXIT_AUTH_FAILURE


class NotFound(ClientError):
    """Raised on HTTP 404."""

    kind = ErrorKind.NOT_FOUND
    exit_code = EXIT_NOT_FOUND


class UnprocessableEntity(ClientError):
    """Raised on HTTP 422, typically a validation failure on a PATCH/POST body."""

    kind = ErrorKind.UNPROCESSABLE


class ServerError(HTTPError):
    """Raised on HTTP 5xx responses."""

    kind = ErrorKind.SERVER
    exit_code = EXIT_SERVER_ERROR


_STATUS_ERRORS: dict[int, type[HTTPError]] = {
    401: Unauthorized,
    403: Forbidden,
    404: NotFound,
    422: UnprocessableEntity,
}


def error_for_status(
    status_code: int,
    message: str,
    method: Optional[str] = None,
    url: Optional[str] = None,
) -> Optional[HTTPError]:
    """Build the typed error for *status_code*, or ``None`` below 400.

    Args:
        status_code: HTTP status of the response.
        message: Error detail extracted from the response body.
        method: HTTP method of the request, kept on the error.
        url: Request URL, kept on the error.

    Returns:
        An :class:`HTTPError` subclass instance, not raised.
    """
    if status_code < 400:
        return None
    if status_code in _STATUS_ERRORS:
        cls = _STATUS_ERRORS[status_code]
    elif status_code >= 500:
        cls = ServerError
    else:
        cls = ClientError
    prefix = f"HTTP {status_code}"
    full_msg = f"{prefix}: {message}" if message else prefix
    return cls(full_msg, status_code=status_code, method=method, url=url)
