"""Config commands -- view and modify the configuration file.

Settings are persisted as :class:`~staffomatic.models.ClientConfig` JSON in
the staffomatic config directory. Environment variables still override them
at runtime.
"""

from __future__ import annotations

import typer

from staffomatic.commands import handle_errors
from staffomatic.output import format_response, info, print_table, success

config_app = typer.Typer(no_args_is_help=True)

_SECRET_KEYS = ("password", "access_token", "client_secret")


@config_app.command("show")
def config_show() -> None:
    """Show the effective configuration, with secrets masked.

    Example::

        staffomatic config show --json
    """
    from staffomatic.config import config_path, resolve_config

    with handle_errors():
        config = resolve_config()
    data = config.model_dump(mode="json")
    for key in _SECRET_KEYS:
        if data.get(key):
            data[key] = "********"
    info(f"Config file: {config_path()}")
    format_response(data)


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Config key, e.g. 'api_endpoint' or 'per_page'."),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    Example::

        staffomatic config set api_endpoint https://api.staffomaticapp.com/v3/demo/
    """
    from staffomatic.config import set_config_value

    with handle_errors():
        set_config_value(key, value)
    success(f"Set {key}.")


@config_app.command("env")
def config_env() -> None:
    """List the environment variables that override the config file."""
    from staffomatic.config import ENV_VARS

    print_table(["variable", "setting"], [[var, field] for var, field in ENV_VARS.items()])
