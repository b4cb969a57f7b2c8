"""OAuth access token authentication."""

from __future__ import annotations

from staffomatic.auth.base import AuthResult, AuthStrategy
from staffomatic.exceptions import ConfigError
from staffomatic.models import ClientConfig


class TokenAuth(AuthStrategy):
    """Send ``Authorization: token <access_token>``.

    The token is usually obtained with
    :meth:`~staffomatic.client.users.Users.exchange_code_for_token`. No
    refresh is attempted; an expired token surfaces as
    :class:`~staffomatic.exceptions.Unauthorized`.
    """

    @property
    def auth_type(self) -> str:
        return "token"

    def is_configured(self, config: ClientConfig) -> bool:
        return bool(config.access_token)

    def authenticate(self, config: ClientConfig) -> AuthResult:
        if not self.is_configured(config):
            raise ConfigError("Token auth requires an 'access_token'")
        return AuthResult(headers={"Authorization": f"token {config.access_token}"})
