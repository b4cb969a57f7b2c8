"""Auth commands -- OAuth web application flow.

After the user authorises the application in the browser, Staffomatic
redirects back with a ``code``; ``staffomatic auth token`` exchanges it for
an access token and can store the token in the config file::

    staffomatic auth token 1a2b3c --client-id ID --client-secret SECRET --save
"""

from __future__ import annotations

from typing import Optional

import typer

from staffomatic.commands import get_client, handle_errors
from staffomatic.output import error, format_response, success, warning

auth_app = typer.Typer(no_args_is_help=True)


@auth_app.command("token")
def auth_token(
    ctx: typer.Context,
    code: str = typer.Argument(help="Authorization code from the OAuth redirect."),
    client_id: Optional[str] = typer.Option(
        None, "--client-id", help="Application client id (defaults to config)."
    ),
    client_secret: Optional[str] = typer.Option(
        None, "--client-secret", help="Application client secret (defaults to config)."
    ),
    save: bool = typer.Option(
        False, "--save", help="Store the access token in the config file."
    ),
) -> None:
    """Exchange an authorization code for an access token."""
    from staffomatic.config import set_config_value

    with handle_errors():
        with get_client(ctx) as client:
            if not (client_id or client.client_id) or not (client_secret or client.client_secret):
                warning("No client id/secret configured; the exchange will likely fail.")
            token = client.exchange_code_for_token(code, client_id, client_secret)

        if not save:
            format_response(token)
            return

        access_token = token.get("access_token") if isinstance(token, dict) else None
        if not access_token:
            error("Token response has no 'access_token'; nothing saved.")
            format_response(token)
            raise typer.Exit(code=1)
        set_config_value("access_token", access_token)
        success("Access token saved.")
