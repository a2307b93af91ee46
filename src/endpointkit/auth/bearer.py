"""Bearer token authentication.

A pre-existing token is resolved from the configured ``source`` (e.g.
``env:API_TOKEN``, ``file:~/.token``) and sent as an
``Authorization: Bearer <token>`` header.
"""

from __future__ import annotations

from endpointkit.auth.base import AuthPlugin, AuthResult
from endpointkit.config import resolve_credential
from endpointkit.models import AuthConfig


class BearerAuthPlugin(AuthPlugin):
    """Authenticate via Bearer token in the Authorization header."""

    @property
    def auth_type(self) -> str:
        return "bearer"

    def authenticate(self, auth_config: AuthConfig) -> AuthResult:
        token = resolve_credential(auth_config.source)
        return AuthResult(headers={"Authorization": f"Bearer {token}"})

    def validate_config(self, auth_config: AuthConfig) -> list[str]:
        errors: list[str] = []
        if not auth_config.source:
            errors.append("Bearer auth requires a 'source' for the token")
        return errors
