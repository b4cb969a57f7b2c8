"""Authentication strategies for the Staffomatic API.

- :class:`AuthStrategy` -- abstract base for a way of authenticating.
- :class:`AuthManager` -- picks the first configured strategy for a
  :class:`~staffomatic.models.ClientConfig`.
- :func:`create_default_manager` -- manager with the token, basic and
  application strategies, in that order of precedence.

Typical usage::

    from staffomatic.auth import create_default_manager

    result = create_default_manager().authenticate(config)
    # result.headers / result.params are merged into every request.
"""

from staffomatic.auth.application import ApplicationAuth
from staffomatic.auth.base import AuthResult, AuthStrategy
from staffomatic.auth.basic import BasicAuth
from staffomatic.auth.manager import AuthManager, create_default_manager
from staffomatic.auth.token import TokenAuth

__all__ = [
    "ApplicationAuth",
    "AuthManager",
    "AuthResult",
    "AuthStrategy",
    "BasicAuth",
    "TokenAuth",
    "create_default_manager",
]
