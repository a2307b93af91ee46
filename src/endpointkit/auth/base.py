"""Abstract base class for authentication plugins.

This module defines the two foundational types of the auth collaborator:

- :class:`AuthResult` -- the ambient headers and query parameters an auth
  plugin contributes to every request.
- :class:`AuthPlugin` -- the abstract base class every authentication
  strategy extends.

The API client merges :attr:`AuthResult.headers` between the configured
default headers and an endpoint's own header overrides.  Token refresh is
out of scope: on HTTP 401 the client calls its ``on_unauthorized`` hook and
lets the caller re-authenticate.

See Also:
    :mod:`endpointkit.auth.manager` for plugin registration and dispatch.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from endpointkit.models import AuthConfig


class AuthResult:
    """Container for authentication artifacts to inject into HTTP requests.

    Args:
        headers: HTTP headers to add (e.g. ``{"Authorization": "Bearer ..."}``).
        params: Query-string parameters to append (e.g. ``{"api_key": "..."}``).

    Example::

        result = AuthResult(headers={"Authorization": "Bearer tok123"})
        assert result.headers["Authorization"] == "Bearer tok123"
    """

    def __init__(
        self,
        headers: dict[str, str] | None = None,
        params: dict[str, str] | None = None,
    ):
        self.headers = headers or {}
        self.params = params or {}


class AuthPlugin(ABC):
    """Abstract base class for authentication plugins.

    Subclasses provide an :attr:`auth_type` identifier and an
    :meth:`authenticate` implementation; they are registered with
    :class:`~endpointkit.auth.manager.AuthManager`.
    """

    @property
    @abstractmethod
    def auth_type(self) -> str:
        """Return the unique auth type identifier this plugin handles."""
        ...

    @abstractmethod
    def authenticate(self, auth_config: AuthConfig) -> AuthResult:
        """Resolve credentials and return auth artifacts for HTTP requests.

        Raises:
            AuthError: If credentials cannot be resolved.
        """
        ...

    def validate_config(self, auth_config: AuthConfig) -> list[str]:
        """Return human-readable configuration problems; empty when valid."""
        return []
