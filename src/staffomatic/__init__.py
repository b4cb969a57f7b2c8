"""staffomatic -- Python client and CLI for the Staffomatic REST API.

The :class:`~staffomatic.client.Client` exposes the Users API on top of a
small :mod:`httpx` connection that handles authentication (access token,
email/password, or application credentials), error mapping, and
``Link``-header pagination.

Typical usage::

    from staffomatic import Client

    client = Client(access_token="...")
    me = client.user()
    client.update_user(location="Berlin")

Modules:
    client: :class:`Client`, the HTTP connection, and the Users API.
    auth: Authentication strategies.
    models: Pydantic configuration and option models.
    config: XDG-aware configuration and ``STAFFOMATIC_*`` env resolution.
    exceptions: Error hierarchy with :class:`~staffomatic.exceptions.ErrorKind`.
    app: Typer CLI entry point.
"""

__version__ = "0.3.0"

from staffomatic.client import Client  # noqa: E402
from staffomatic.exceptions import (  # noqa: E402
    ErrorKind,
    NotFound,
    ServerError,
    StaffomaticError,
    Unauthorized,
)

__all__ = [
    "Client",
    "ErrorKind",
    "NotFound",
    "ServerError",
    "StaffomaticError",
    "Unauthorized",
    "__version__",
]
