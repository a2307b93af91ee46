"""Tests for the error classifier."""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from endpointkit.client.classifier import classify, classify_decode_failure, parse_field_errors
from endpointkit.exceptions import (
    DecodeFailureError,
    ErrorKind,
    ForbiddenError,
    InvalidRequestError,
    NotFoundError,
    ServerError,
    TransportFailureError,
    UnauthorizedError,
    ValidationFailedError,
)
from endpointkit.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_INVALID_REQUEST,
    EXIT_NOT_FOUND,
    EXIT_SERVER_ERROR,
    EXIT_TRANSPORT_FAILURE,
    EXIT_VALIDATION_FAILED,
)


class TestStatusMapping:
    @pytest.mark.parametrize("status", [200, 201, 204, 299])
    def test_success_is_none(self, status: int) -> None:
        assert classify(status) is None

    @pytest.mark.parametrize(
        "status, error_type, kind, exit_code",
        [
            (401, UnauthorizedError, ErrorKind.UNAUTHORIZED, EXIT_AUTH_FAILURE),
            (403, ForbiddenError, ErrorKind.FORBIDDEN, EXIT_AUTH_FAILURE),
            (404, NotFoundError, ErrorKind.NOT_FOUND, EXIT_NOT_FOUND),
            (422, ValidationFailedError, ErrorKind.VALIDATION_FAILED, EXIT_VALIDATION_FAILED),
        ],
    )
    def test_client_errors(self, status, error_type, kind, exit_code) -> None:
        error = classify(status)
        assert isinstance(error, error_type)
        assert error.kind is kind
        assert error.exit_code == exit_code
        assert error.retryable is False

    @pytest.mark.parametrize("status", range(500, 600))
    def test_every_5xx_is_retryable_server_error(self, status: int) -> None:
        error = classify(status)
        assert isinstance(error, ServerError)
        assert error.status_code == status
        assert error.retryable is True
        assert error.exit_code == EXIT_SERVER_ERROR

    @pytest.mark.parametrize("status", [301, 400, 405, 409, 418, 429, 499, 600])
    def test_other_statuses_are_invalid_request(self, status: int) -> None:
        error = classify(status)
        assert isinstance(error, InvalidRequestError)
        assert error.status_code == status
        assert error.exit_code == EXIT_INVALID_REQUEST
        assert error.user_message == f"Request failed with status {status}"


class TestValidationBody:
    def test_field_errors_parsed(self) -> None:
        body = json.dumps(
            {"errors": [{"field": "email", "message": "is invalid"}, {"field": "name", "message": "required"}]}
        ).encode()
        error = classify(422, body)
        assert [fe.field for fe in error.field_errors] == ["email", "name"]
        assert error.user_message == "is invalid"

    @pytest.mark.parametrize("body", [b"", b"<html>", b'{"errors": "nope"}', b'{"detail": 1}'])
    def test_malformed_body_still_validation_failed(self, body: bytes) -> None:
        error = classify(422, body)
        assert isinstance(error, ValidationFailedError)
        assert error.user_message == "Validation failed"

    def test_parse_field_errors_empty(self) -> None:
        assert parse_field_errors(b"") == []


class TestTransport:
    def test_transport_error(self) -> None:
        cause = httpx.ConnectError("refused")
        error = classify(transport_error=cause)
        assert isinstance(error, TransportFailureError)
        assert error.cause is cause
        assert error.retryable is True
        assert error.exit_code == EXIT_TRANSPORT_FAILURE

    def test_cancellation_is_reraised(self) -> None:
        with pytest.raises(asyncio.CancelledError):
            classify(transport_error=asyncio.CancelledError())

    def test_needs_an_outcome(self) -> None:
        with pytest.raises(ValueError):
            classify()


class TestDecodeFailure:
    def test_wraps_cause(self) -> None:
        cause = ValueError("bad json")
        error = classify_decode_failure(cause)
        assert isinstance(error, DecodeFailureError)
        assert error.cause is cause
        assert error.retryable is False

    def test_passes_through_existing(self) -> None:
        existing = DecodeFailureError(ValueError("x"))
        assert classify_decode_failure(existing) is existing


class TestUserMessages:
    def test_messages_are_stable(self) -> None:
        assert UnauthorizedError().user_message == "Please sign in to continue"
        assert ForbiddenError().user_message == "You don't have permission to access this"
        assert NotFoundError().user_message == "The requested resource was not found"
        assert ServerError(503).user_message == "Server error. Please try again later."
        assert TransportFailureError(OSError()).user_message == "Network connection error"
        assert DecodeFailureError(ValueError()).user_message == "Failed to process server response"
        assert InvalidRequestError().user_message == "Invalid request"
