"""Error classifier -- maps a transport outcome to a classified error.

=========================  ==========================================
Outcome                    Result
=========================  ==========================================
2xx                        ``None`` (proceed to decode)
401                        :class:`UnauthorizedError`
403                        :class:`ForbiddenError`
404                        :class:`NotFoundError`
422                        :class:`ValidationFailedError`
5xx                        :class:`ServerError` (retryable)
any other status           :class:`InvalidRequestError` with the code
no status, transport error :class:`TransportFailureError` (retryable)
cancellation               re-raised, never classified
=========================  ==========================================
"""

from __future__ import annotations

import asyncio
from typing import Optional

from pydantic import ValidationError

from endpointkit.exceptions import (
    ClassifiedError,
    DecodeFailureError,
    ForbiddenError,
    InvalidRequestError,
    NotFoundError,
    ServerError,
    TransportFailureError,
    UnauthorizedError,
    ValidationFailedError,
)
from endpointkit.models import FieldError, ValidationErrorBody


def parse_field_errors(body: bytes) -> list[FieldError]:
    """Best-effort read of a 422 body; anything unreadable yields no field errors."""
    if not body:
        return []
    try:
        return ValidationErrorBody.model_validate_json(body).errors
    except ValidationError:
        return []


def classify(
    status_code: Optional[int] = None,
    body: bytes = b"",
    transport_error: Optional[BaseException] = None,
) -> Optional[ClassifiedError]:
    """Classify one transport outcome.

    Args:
        status_code: HTTP status, or ``None`` if no response was received.
        body: Response body, consulted only for 422 field errors.
        transport_error: The exception raised by the transport when no
            status was received.

    Returns:
        ``None`` for a 2xx status, otherwise the classified error.

    Raises:
        asyncio.CancelledError: If *transport_error* is a cancellation.
        ValueError: If neither a status nor a transport error is given.
    """
    if status_code is None:
        if transport_error is None:
            raise ValueError("classify() needs a status code or a transport error")
        if isinstance(transport_error, asyncio.CancelledError):
            raise transport_error
        return TransportFailureError(transport_error)

    if 200 <= status_code < 300:
        return None
    if status_code == 401:
        return UnauthorizedError()
    if status_code == 403:
        return ForbiddenError()
    if status_code == 404:
        return NotFoundError()
    if status_code == 422:
        return ValidationFailedError(parse_field_errors(body))
    if 500 <= status_code < 600:
        return ServerError(status_code)
    return InvalidRequestError(status_code=status_code)


def classify_decode_failure(cause: BaseException) -> DecodeFailureError:
    """Wrap a decode error raised after a successful status."""
    if isinstance(cause, DecodeFailureError):
        return cause
    return DecodeFailureError(cause)
