"""Built-in CLI command groups for the ``staffomatic`` application.

Each sub-module exposes a :class:`typer.Typer` instance that is registered
on the root app in :mod:`staffomatic.app`:

- :mod:`~staffomatic.commands.users` -- ``staffomatic users ...``
- :mod:`~staffomatic.commands.auth` -- ``staffomatic auth ...``
- :mod:`~staffomatic.commands.config` -- ``staffomatic config ...``
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

import typer

from staffomatic.client import Client
from staffomatic.exceptions import StaffomaticError
from staffomatic.output import error


def get_client(ctx: typer.Context) -> Client:
    """Build a :class:`~staffomatic.client.Client` from the root options in ``ctx.obj``."""
    obj = ctx.obj or {}
    return Client.from_config(
        transport=obj.get("transport"),
        api_endpoint=obj.get("api_endpoint"),
        access_token=obj.get("access_token"),
    )


@contextmanager
def handle_errors() -> Iterator[None]:
    """Report a :class:`~staffomatic.exceptions.StaffomaticError` and exit with its code."""
    try:
        yield
    except StaffomaticError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
