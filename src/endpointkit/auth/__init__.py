"""Ambient authentication for endpointkit.

Auth plugins turn an :class:`~endpointkit.models.AuthConfig` into an
:class:`AuthResult` whose headers the request builder merges into every
request.
"""

from endpointkit.auth.api_key import APIKeyAuthPlugin
from endpointkit.auth.base import AuthPlugin, AuthResult
from endpointkit.auth.bearer import BearerAuthPlugin
from endpointkit.auth.manager import AuthManager, create_default_manager

__all__ = [
    "APIKeyAuthPlugin",
    "AuthManager",
    "AuthPlugin",
    "AuthResult",
    "BearerAuthPlugin",
    "create_default_manager",
]
