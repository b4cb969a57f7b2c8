"""The ``staffomatic`` command line.

:func:`main` is the console-script entry point declared in
``pyproject.toml``. A :class:`~staffomatic.exceptions.StaffomaticError`
reaching it exits with that error's ``exit_code``; anything else is written
to a crash log in the data directory and exits with status 1.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from staffomatic import __version__
from staffomatic.commands.auth import auth_app
from staffomatic.commands.config import config_app
from staffomatic.commands.users import users_app
from staffomatic.exceptions import StaffomaticError
from staffomatic.exit_codes import EXIT_GENERIC_FAILURE
from staffomatic.output import OutputFormat, OutputManager, error, set_output

EXIT_INTERRUPTED = 130

app = typer.Typer(
    name="staffomatic",
    help="Command-line client for the Staffomatic API.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
app.add_typer(users_app, name="users", help="List, show, update and check users.")
app.add_typer(auth_app, name="auth", help="Exchange OAuth codes for access tokens.")
app.add_typer(config_app, name="config", help="Show and edit the config file.")


def _print_version(value: bool) -> None:
    if value:
        typer.echo(f"staffomatic {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", callback=_print_version, is_eager=True, help="Show version and exit."
    ),
    api_endpoint: Optional[str] = typer.Option(
        None, "--api-endpoint", help="API base URL, e.g. a tenant-scoped endpoint."
    ),
    access_token: Optional[str] = typer.Option(
        None, "--token", help="OAuth access token; wins over config and env."
    ),
    json_output: bool = typer.Option(False, "--json", help="Print records as JSON."),
    plain_output: bool = typer.Option(False, "--plain", help="Print records as TSV."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colour."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Hide informational messages."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log each HTTP request."),
) -> None:
    """Talk to the Staffomatic API from the shell."""
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN
    else:
        fmt = OutputFormat.AUTO
    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))

    # ctx.obj may already carry a transport.
    obj = ctx.ensure_object(dict)
    obj.update(api_endpoint=api_endpoint, access_token=access_token)


def _on_sigint(signum: int, frame: Any) -> None:
    sys.stderr.write("\nCancelled.\n")
    sys.exit(EXIT_INTERRUPTED)


def _write_crash_log(exc: Exception) -> str:
    from staffomatic.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    path = logs_dir / f"crash-{datetime.now():%Y%m%d-%H%M%S}.log"
    path.write_text(f"{type(exc).__name__}: {exc}\n\n{traceback.format_exc()}")
    return str(path)


def main() -> None:
    """Console-script entry point."""
    signal.signal(signal.SIGINT, _on_sigint)
    try:
        app()
    except StaffomaticError as exc:
        error(str(exc))
        sys.exit(exc.exit_code)
    except Exception as exc:
        error(f"Unexpected error. Debug log: {_write_crash_log(exc)}")
        sys.exit(EXIT_GENERIC_FAILURE)
