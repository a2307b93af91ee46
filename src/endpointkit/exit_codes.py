"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to one error category and is referenced by the
corresponding :class:`~endpointkit.exceptions.EndpointKitError` subclass.
Shell scripts wrapping the ``endpointkit`` CLI can inspect the exit code to
determine the failure class without parsing stderr.

Example::

    $ endpointkit request GET /users/42
    $ echo $?
    4   # EXIT_NOT_FOUND -- the API answered 404
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred (including configuration problems)."""

EXIT_INVALID_REQUEST = 2
"""The request could not be built, or the API rejected it as malformed."""

EXIT_AUTH_FAILURE = 3
"""Authentication or authorisation failed (HTTP 401 / 403)."""

EXIT_NOT_FOUND = 4
"""The requested resource was not found (HTTP 404)."""

EXIT_SERVER_ERROR = 5
"""The remote API returned an HTTP 5xx server error."""

EXIT_TRANSPORT_FAILURE = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_DECODE_FAILURE = 7
"""A successful response body did not match the expected shape."""

EXIT_VALIDATION_FAILED = 8
"""The API rejected the payload with field-level validation errors (HTTP 422)."""
