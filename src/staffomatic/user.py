"""Path rule for user resources."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Union

UserRef = Union[int, str, Mapping[str, Any], None]


class User:
    """Helpers for addressing a user in API paths."""

    @staticmethod
    def path(user: UserRef) -> str:
        """Return the API path of *user*.

        ``None`` addresses the authenticated user (``user``). An id or login
        addresses ``users/{id}``. A decoded user record is addressed by its
        ``id``, falling back to its ``login``.

        Example::

            >>> User.path(42)
            'users/42'
            >>> User.path(None)
            'user'
        """
        if user is None:
            return "user"
        if isinstance(user, Mapping):
            ident = user.get("id", user.get("login"))
            if ident is None:
                raise ValueError("User record has neither 'id' nor 'login'")
            return f"users/{ident}"
        return f"users/{user}"
