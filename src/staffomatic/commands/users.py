"""Users commands -- list, show, update and check users.

Typical workflow::

    staffomatic users list --since 100 --limit 20
    staffomatic users get 42
    staffomatic users update --location Berlin
    staffomatic users validate --email jane@example.com
"""

from __future__ import annotations

import itertools
from typing import Any, Optional

import typer

from staffomatic.commands import get_client, handle_errors
from staffomatic.exit_codes import EXIT_AUTH_FAILURE
from staffomatic.output import error, format_response, success

users_app = typer.Typer(no_args_is_help=True)


@users_app.command("list")
def users_list(
    ctx: typer.Context,
    since: Optional[int] = typer.Option(
        None, "--since", help="Only users with an id greater than this."
    ),
    per_page: Optional[int] = typer.Option(None, "--per-page", min=1, help="Page size."),
    limit: Optional[int] = typer.Option(
        None, "--limit", "-l", min=1, help="Stop after this many users."
    ),
) -> None:
    """List all users, following pagination.

    Example::

        staffomatic users list --since 100 --limit 20
    """
    with handle_errors(), get_client(ctx) as client:
        users = client.all_users(since=since, per_page=per_page)
        format_response(list(itertools.islice(users, limit)))


@users_app.command("get")
def users_get(
    ctx: typer.Context,
    user: Optional[str] = typer.Argument(
        None, help="User id or login. Omit for the authenticated user."
    ),
) -> None:
    """Show a single user, or the authenticated user."""
    with handle_errors(), get_client(ctx) as client:
        format_response(client.user(user))


@users_app.command("update")
def users_update(
    ctx: typer.Context,
    name: Optional[str] = typer.Option(None, "--name"),
    email: Optional[str] = typer.Option(None, "--email", help="Publicly visible email."),
    blog: Optional[str] = typer.Option(None, "--blog"),
    company: Optional[str] = typer.Option(None, "--company"),
    location: Optional[str] = typer.Option(None, "--location"),
    hireable: Optional[bool] = typer.Option(None, "--hireable/--not-hireable"),
    bio: Optional[str] = typer.Option(None, "--bio"),
) -> None:
    """Update the authenticated user.

    Only the options given are sent.

    Example::

        staffomatic users update --name "Erik" --not-hireable
    """
    fields: dict[str, Any] = {
        "name": name,
        "email": email,
        "blog": blog,
        "company": company,
        "location": location,
        "hireable": hireable,
        "bio": bio,
    }
    fields = {k: v for k, v in fields.items() if v is not None}
    if not fields:
        error("Nothing to update; pass at least one option.")
        raise typer.Exit(code=2)

    with handle_errors(), get_client(ctx) as client:
        format_response(client.update_user(fields))


@users_app.command("validate")
def users_validate(
    ctx: typer.Context,
    email: str = typer.Option(..., "--email", help="Account email."),
    password_source: str = typer.Option(
        "prompt",
        "--password-source",
        help="Where to read the password: env:VAR, file:/path, or 'prompt'.",
    ),
) -> None:
    """Check an email and password against the API.

    Exits with status 3 when the credentials are rejected.
    """
    from staffomatic.config import resolve_credential

    with handle_errors():
        password = resolve_credential(password_source)
        with get_client(ctx) as client:
            valid = client.validate_credentials(email=email, password=password)

    if not valid:
        error(f"Credentials for {email} were rejected.")
        raise typer.Exit(code=EXIT_AUTH_FAILURE)
    success(f"Credentials for {email} are valid.")
