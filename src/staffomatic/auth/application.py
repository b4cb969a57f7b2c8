"""Application authentication with OAuth client credentials.

Identifies the registered application rather than a user, by sending
``client_id`` and ``client_secret`` as query parameters. Used for
unauthenticated endpoints where app identification raises rate limits.
"""

from __future__ import annotations

from staffomatic.auth.base import AuthResult, AuthStrategy
from staffomatic.exceptions import ConfigError
from staffomatic.models import ClientConfig


class ApplicationAuth(AuthStrategy):
    @property
    def auth_type(self) -> str:
        return "application"

    @property
    def user_auth(self) -> bool:
        return False

    def is_configured(self, config: ClientConfig) -> bool:
        return bool(config.client_id and config.client_secret)

    def authenticate(self, config: ClientConfig) -> AuthResult:
        if not self.is_configured(config):
            raise ConfigError(
                "Application auth requires both 'client_id' and 'client_secret'"
            )
        return AuthResult(
            params={
                "client_id": config.client_id or "",
                "client_secret": config.client_secret or "",
            }
        )
