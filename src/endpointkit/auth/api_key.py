"""API key authentication, sent as a header or a query parameter."""

from __future__ import annotations

from endpointkit.auth.base import AuthPlugin, AuthResult
from endpointkit.config import resolve_credential
from endpointkit.models import AuthConfig


class APIKeyAuthPlugin(AuthPlugin):
    """Authenticate via an API key.

    The key name is taken from ``auth_config.header`` and defaults to
    ``X-API-Key`` for headers and ``api_key`` for query parameters.
    """

    @property
    def auth_type(self) -> str:
        return "api_key"

    def authenticate(self, auth_config: AuthConfig) -> AuthResult:
        credential = resolve_credential(auth_config.source)
        if auth_config.location == "query":
            return AuthResult(params={auth_config.header or "api_key": credential})
        return AuthResult(headers={auth_config.header or "X-API-Key": credential})

    def validate_config(self, auth_config: AuthConfig) -> list[str]:
        errors: list[str] = []
        if not auth_config.source:
            errors.append("API key auth requires a 'source' for the credential")
        return errors
