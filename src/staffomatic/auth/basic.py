"""HTTP Basic authentication with the account email and password."""

from __future__ import annotations

import base64

from staffomatic.auth.base import AuthResult, AuthStrategy
from staffomatic.exceptions import ConfigError
from staffomatic.models import ClientConfig


class BasicAuth(AuthStrategy):
    """Send ``Authorization: Basic <base64(email:password)>`` per :rfc:`7617`."""

    @property
    def auth_type(self) -> str:
        return "basic"

    def is_configured(self, config: ClientConfig) -> bool:
        return bool(config.email and config.password)

    def authenticate(self, config: ClientConfig) -> AuthResult:
        if not self.is_configured(config):
            raise ConfigError("Basic auth requires both 'email' and 'password'")
        raw = f"{config.email}:{config.password}"
        encoded = base64.b64encode(raw.encode("utf-8")).decode("ascii")
        return AuthResult(headers={"Authorization": f"Basic {encoded}"})
