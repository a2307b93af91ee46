"""Exception hierarchy for endpointkit.

All exceptions inherit from :class:`EndpointKitError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`endpointkit.exit_codes`.
The CLI entry point catches ``EndpointKitError`` and exits with that code.

Request outcomes are reported through the closed set of
:class:`ClassifiedError` subclasses.  Each one is tagged with an
:class:`ErrorKind` and a fixed ``retryable`` flag, so retry and presentation
logic can switch on ``error.kind`` exhaustively.

Subclass hierarchy::

    EndpointKitError (exit 1)
    +-- ConfigError                  (exit 1)
    +-- AuthError                    (exit 3)
    +-- ClassifiedError
        +-- InvalidRequestError      (exit 2)
        +-- UnauthorizedError        (exit 3)
        +-- ForbiddenError           (exit 3)
        +-- NotFoundError            (exit 4)
        +-- ValidationFailedError    (exit 8)
        +-- ServerError              (exit 5, retryable)
        +-- TransportFailureError    (exit 6, retryable)
        +-- DecodeFailureError       (exit 7)

Cancellation is not part of the set: :class:`asyncio.CancelledError`
propagates untouched and is never classified.
"""

from __future__ import annotations

import enum
from typing import Iterable, Optional

from endpointkit.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_DECODE_FAILURE,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_REQUEST,
    EXIT_NOT_FOUND,
    EXIT_SERVER_ERROR,
    EXIT_TRANSPORT_FAILURE,
    EXIT_VALIDATION_FAILED,
)
from endpointkit.models import FieldError


class EndpointKitError(Exception):
    """Base exception for all endpointkit errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigError(EndpointKitError):
    """Raised for configuration problems (missing profiles, invalid JSON, bad credential sources)."""

    exit_code = EXIT_GENERIC_FAILURE


class AuthError(EndpointKitError):
    """Raised when credentials cannot be resolved by an auth plugin."""

    exit_code = EXIT_AUTH_FAILURE


class ErrorKind(str, enum.Enum):
    """Tag identifying each member of the closed classified-error set."""

    INVALID_REQUEST = "invalid_request"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    VALIDATION_FAILED = "validation_failed"
    SERVER_ERROR = "server_error"
    TRANSPORT_FAILURE = "transport_failure"
    DECODE_FAILURE = "decode_failure"


class ClassifiedError(EndpointKitError):
    """Typed outcome of interpreting a failed request.

    Subclasses fix :attr:`kind`, :attr:`retryable`, :attr:`exit_code` and
    :attr:`default_message` at class level; instances only add the payload
    specific to their kind (status code, field errors, or cause).
    """

    kind: ErrorKind
    retryable: bool = False
    default_message: str = "Request failed"

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def user_message(self) -> str:
        """Short message suitable for showing to an end user."""
        return self.default_message


class InvalidRequestError(ClassifiedError):
    """The request could not be built, or the API answered with an unexpected status.

    ``status_code`` is set when the error comes from an unmapped HTTP status
    and is ``None`` for caller-side build failures.
    """

    kind = ErrorKind.INVALID_REQUEST
    exit_code = EXIT_INVALID_REQUEST
    default_message = "Invalid request"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None) -> None:
        if message is None and status_code is not None:
            message = f"Request failed with status {status_code}"
        super().__init__(message)
        self.status_code = status_code

    @property
    def user_message(self) -> str:
        if self.status_code is not None:
            return f"Request failed with status {self.status_code}"
        return self.default_message


class UnauthorizedError(ClassifiedError):
    """HTTP 401. The caller must re-authenticate out of band."""

    kind = ErrorKind.UNAUTHORIZED
    exit_code = EXIT_AUTH_FAILURE
    default_message = "Please sign in to continue"


class ForbiddenError(ClassifiedError):
    """HTTP 403."""

    kind = ErrorKind.FORBIDDEN
    exit_code = EXIT_AUTH_FAILURE
    default_message = "You don't have permission to access this"


class NotFoundError(ClassifiedError):
    """HTTP 404."""

    kind = ErrorKind.NOT_FOUND
    exit_code = EXIT_NOT_FOUND
    default_message = "The requested resource was not found"


class ValidationFailedError(ClassifiedError):
    """HTTP 422 with the field errors the server reported, if any could be read."""

    kind = ErrorKind.VALIDATION_FAILED
    exit_code = EXIT_VALIDATION_FAILED
    default_message = "Validation failed"

    def __init__(
        self,
        field_errors: Iterable[FieldError] = (),
        message: Optional[str] = None,
    ) -> None:
        self.field_errors: tuple[FieldError, ...] = tuple(field_errors)
        if message is None and self.field_errors:
            message = "; ".join(f"{fe.field}: {fe.message}" for fe in self.field_errors)
        super().__init__(message)

    @property
    def user_message(self) -> str:
        if self.field_errors:
            return self.field_errors[0].message
        return self.default_message


class ServerError(ClassifiedError):
    """HTTP 5xx. Retryable."""

    kind = ErrorKind.SERVER_ERROR
    retryable = True
    exit_code = EXIT_SERVER_ERROR
    default_message = "Server error. Please try again later."

    def __init__(self, status_code: int, message: Optional[str] = None) -> None:
        super().__init__(message or f"HTTP {status_code}: server error")
        self.status_code = status_code


class TransportFailureError(ClassifiedError):
    """The request never produced an HTTP status (timeout, DNS, connection reset). Retryable."""

    kind = ErrorKind.TRANSPORT_FAILURE
    retryable = True
    exit_code = EXIT_TRANSPORT_FAILURE
    default_message = "Network connection error"

    def __init__(self, cause: BaseException, message: Optional[str] = None) -> None:
        super().__init__(message or f"Transport failure: {cause}")
        self.cause = cause
        self.__cause__ = cause


class DecodeFailureError(ClassifiedError):
    """A successful response body did not match the expected shape.

    Not retryable: the same payload would fail again.
    """

    kind = ErrorKind.DECODE_FAILURE
    exit_code = EXIT_DECODE_FAILURE
    default_message = "Failed to process server response"

    def __init__(self, cause: BaseException, message: Optional[str] = None) -> None:
        super().__init__(message or f"Could not decode response: {cause}")
        self.cause = cause
        self.__cause__ = cause
