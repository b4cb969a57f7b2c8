"""Auth manager -- picks the authentication strategy for a configuration.

The :class:`AuthManager` holds an ordered list of
:class:`~staffomatic.auth.base.AuthStrategy` instances. The first strategy
whose :meth:`~staffomatic.auth.base.AuthStrategy.is_configured` returns
``True`` wins, so registration order is precedence order.

:func:`create_default_manager` registers the built-in strategies as
token, then basic, then application.
"""

from __future__ import annotations

from typing import Optional

from staffomatic.auth.base import AuthResult, AuthStrategy
from staffomatic.exceptions import ConfigError
from staffomatic.models import ClientConfig


class AuthManager:
    """Ordered registry of authentication strategies.

    Example::

        manager = create_default_manager()
        result = manager.authenticate(ClientConfig(access_token="abc"))
        assert result.headers["Authorization"] == "token abc"
    """

    def __init__(self) -> None:
        self._strategies: dict[str, AuthStrategy] = {}

    def register(self, strategy: AuthStrategy) -> None:
        """Register *strategy*, replacing any strategy with the same type.

        A replaced strategy keeps its original precedence.
        """
        self._strategies[strategy.auth_type] = strategy

    def get_strategy(self, auth_type: str) -> AuthStrategy:
        """Retrieve a registered strategy by type.

        Raises:
            ConfigError: If no strategy is registered for *auth_type*.
        """
        strategy = self._strategies.get(auth_type)
        if strategy is None:
            available = ", ".join(self._strategies) or "(none)"
            raise ConfigError(
                f"No auth strategy registered for type '{auth_type}'. "
                f"Available types: {available}"
            )
        return strategy

    def select(self, config: ClientConfig) -> Optional[AuthStrategy]:
        """Return the first configured strategy, or ``None`` for anonymous access."""
        for strategy in self._strategies.values():
            if strategy.is_configured(config):
                return strategy
        return None

    def authenticate(self, config: ClientConfig) -> AuthResult:
        """Build the auth artifacts for *config* using the selected strategy.

        Returns an empty :class:`~staffomatic.auth.base.AuthResult` when no
        strategy is configured.
        """
        strategy = self.select(config)
        if strategy is None:
            return AuthResult()
        return strategy.authenticate(config)

    def list_types(self) -> list[str]:
        """Registered auth types in precedence order."""
        return list(self._strategies)


def create_default_manager() -> AuthManager:
    """Create an :class:`AuthManager` with the built-in strategies.

    - ``token`` -- OAuth access token.
    - ``basic`` -- email and password.
    - ``application`` -- client id and secret as query parameters.
    """
    from staffomatic.auth.application import ApplicationAuth
    from staffomatic.auth.basic import BasicAuth
    from staffomatic.auth.token import TokenAuth

    manager = AuthManager()
    manager.register(TokenAuth())
    manager.register(BasicAuth())
    manager.register(ApplicationAuth())
    return manager
