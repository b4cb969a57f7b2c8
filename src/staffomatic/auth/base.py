"""Base types for authentication strategies.

- :class:`AuthResult` -- the HTTP headers and query parameters a strategy
  contributes to every request.
- :class:`AuthStrategy` -- the abstract base each strategy extends.

Strategies are selected by :class:`~staffomatic.auth.manager.AuthManager`
from a :class:`~staffomatic.models.ClientConfig`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from staffomatic.models import ClientConfig


class AuthResult:
    """Container for authentication artifacts to inject into HTTP requests.

    Args:
        headers: HTTP headers to add (e.g. ``{"Authorization": "token ..."}``).
        params: Query-string parameters to add (e.g. ``{"client_id": "..."}``).
    """

    def __init__(
        self,
        headers: dict[str, str] | None = None,
        params: dict[str, str] | None = None,
    ):
        self.headers = headers or {}
        self.params = params or {}

    def __bool__(self) -> bool:
        return bool(self.headers or self.params)


class AuthStrategy(ABC):
    """Abstract base class for authentication strategies.

    Subclasses provide an :attr:`auth_type` identifier, a
    :meth:`is_configured` check and an :meth:`authenticate` implementation.
    """

    @property
    @abstractmethod
    def auth_type(self) -> str:
        """Unique identifier, e.g. ``"basic"`` or ``"token"``."""
        ...

    @property
    def user_auth(self) -> bool:
        """Whether this strategy authenticates as a user (not just an app)."""
        return True

    @abstractmethod
    def is_configured(self, config: ClientConfig) -> bool:
        """Return ``True`` if *config* carries what this strategy needs."""
        ...

    @abstractmethod
    def authenticate(self, config: ClientConfig) -> AuthResult:
        """Build the auth artifacts for *config*.

        Raises:
            ConfigError: If the strategy is not configured.
        """
        ...
