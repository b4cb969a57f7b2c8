"""Client for the Staffomatic REST API.

:class:`Client` combines the HTTP :class:`~staffomatic.client.connection.Connection`
with the API mixins (currently :class:`~staffomatic.client.users.Users`).

Example::

    from staffomatic.client import Client

    with Client(email="jane@example.com", password="s3cret") as client:
        me = client.user()
        for user in client.all_users(since=100):
            print(user["id"])
"""

from __future__ import annotations

from typing import Any, Optional

import httpx

from staffomatic.auth import AuthManager
from staffomatic.client.connection import Connection, PaginatedResource, decode_response
from staffomatic.client.users import Users, UsersHost


class Client(Users, Connection):
    """Staffomatic API client. See :class:`Connection` for the constructor."""

    @classmethod
    def from_config(
        cls,
        *,
        auth_manager: Optional[AuthManager] = None,
        transport: Optional[httpx.BaseTransport] = None,
        **cli_overrides: Any,
    ) -> Client:
        """Build a client from the config file, ``STAFFOMATIC_*`` env vars and *cli_overrides*.

        See :func:`staffomatic.config.resolve_config` for the precedence.
        """
        from staffomatic.config import resolve_config

        return cls(
            resolve_config(**cli_overrides),
            auth_manager=auth_manager,
            transport=transport,
        )


__all__ = [
    "Client",
    "Connection",
    "PaginatedResource",
    "Users",
    "UsersHost",
    "decode_response",
]
