"""Auth manager -- registry and dispatcher for auth plugins.

The :class:`AuthManager` maps auth-type strings (``"bearer"``,
``"api_key"``) to :class:`~endpointkit.auth.base.AuthPlugin` instances and
exposes :meth:`~AuthManager.authenticate`, which the API client calls once
per client lifetime to obtain its ambient headers.

For most use cases, call :func:`create_default_manager`.
"""

from __future__ import annotations

from endpointkit.auth.base import AuthPlugin, AuthResult
from endpointkit.exceptions import AuthError, ConfigError
from endpointkit.models import AuthConfig


class AuthManager:
    """Registry and dispatcher for authentication plugins.

    Example::

        manager = AuthManager()
        manager.register(BearerAuthPlugin())
        result = manager.authenticate(AuthConfig(type="bearer", source="env:TOKEN"))
    """

    def __init__(self) -> None:
        self._plugins: dict[str, AuthPlugin] = {}

    def register(self, plugin: AuthPlugin) -> None:
        """Register *plugin* by its auth type, replacing any previous one."""
        self._plugins[plugin.auth_type] = plugin

    def get_plugin(self, auth_type: str) -> AuthPlugin:
        """Retrieve a registered plugin.

        Raises:
            AuthError: If no plugin is registered for *auth_type*.
        """
        plugin = self._plugins.get(auth_type)
        if plugin is None:
            available = ", ".join(sorted(self._plugins)) or "(none)"
            raise AuthError(
                f"No auth plugin registered for type '{auth_type}'. "
                f"Available types: {available}"
            )
        return plugin

    @property
    def registered_types(self) -> list[str]:
        return sorted(self._plugins)

    def authenticate(self, auth_config: AuthConfig) -> AuthResult:
        """Validate *auth_config* and delegate to the matching plugin.

        Raises:
            AuthError: If the plugin is unknown, the configuration is invalid,
                or the credential cannot be resolved.
        """
        plugin = self.get_plugin(auth_config.type)
        errors = plugin.validate_config(auth_config)
        if errors:
            raise AuthError(f"Invalid {auth_config.type} auth config: " + "; ".join(errors))
        try:
            return plugin.authenticate(auth_config)
        except ConfigError as exc:
            raise AuthError(str(exc)) from exc


def create_default_manager() -> AuthManager:
    """Return an :class:`AuthManager` with the built-in plugins registered."""
    from endpointkit.auth.api_key import APIKeyAuthPlugin
    from endpointkit.auth.bearer import BearerAuthPlugin

    manager = AuthManager()
    manager.register(BearerAuthPlugin())
    manager.register(APIKeyAuthPlugin())
    return manager
