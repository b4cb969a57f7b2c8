"""Terminal output for the CLI and debug logging for the library.

Decoded API records go to stdout; everything else (request logging,
warnings, errors) goes to stderr, so ``staffomatic --json users list | jq``
always receives clean JSON.

Library code logs through the module-level :func:`debug` helper. Nothing is
shown unless a verbose :class:`OutputManager` has been installed with
:func:`set_output`, which the CLI does for ``--verbose``.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table


class OutputFormat(str, Enum):
    """How :meth:`OutputManager.format_response` renders data.

    ``AUTO`` becomes ``RICH`` on a colour-capable TTY and ``PLAIN`` otherwise.
    """

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


def _to_json(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


class OutputManager:
    """Writes records to stdout and diagnostics to stderr.

    Args:
        format: Rendering for records. ``AUTO`` is resolved once, here.
        no_color: Drop colour and markup. Also implied by ``NO_COLOR`` and
            ``TERM=dumb``.
        quiet: Hide :meth:`info` and :meth:`success` messages.
        verbose: Show :meth:`debug` messages.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose
        if format == OutputFormat.AUTO:
            rich_ok = _is_tty() and not self._no_color
            format = OutputFormat.RICH if rich_ok else OutputFormat.PLAIN
        self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=format == OutputFormat.RICH,
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    @property
    def is_quiet(self) -> bool:
        return self._quiet

    @property
    def is_verbose(self) -> bool:
        return self._verbose

    # -- stdout ------------------------------------------------------------

    def print_data(self, text: str) -> None:
        print(text, file=sys.stdout, flush=True)

    def format_response(self, data: Any) -> None:
        """Render a decoded API response (record, list of records, or scalar)."""
        if self._format == OutputFormat.JSON:
            self.print_data(_to_json(data))
        elif self._format == OutputFormat.RICH:
            if isinstance(data, (dict, list)):
                self._stdout.print(
                    Syntax(_to_json(data), "json", theme="monokai", word_wrap=True)
                )
            else:
                self._stdout.print(escape(str(data)))
        else:
            for line in _plain_lines(data):
                self.print_data(line)

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Print rows as a rich table, a JSON array of objects, or TSV."""
        if self._format == OutputFormat.JSON:
            self.print_data(_to_json([dict(zip(headers, row)) for row in rows]))
            return
        if self._format == OutputFormat.PLAIN:
            for row in [headers, *rows]:
                self.print_data("\t".join(row))
            return
        table = Table(title=title, header_style="bold cyan")
        for header in headers:
            table.add_column(header)
        for row in rows:
            table.add_row(*row)
        self._stdout.print(table)

    # -- stderr ------------------------------------------------------------

    def _emit(self, message: str, label: str = "", style: str = "") -> None:
        if self._no_color:
            print(f"{label}{message}", file=sys.stderr, flush=True)
            return
        text = escape(message)
        if label:
            text = f"[{style}]{escape(label)}[/{style}]{text}"
        elif style:
            text = f"[{style}]{text}[/{style}]"
        self._stderr.print(text)

    def info(self, message: str) -> None:
        if not self._quiet:
            self._emit(message)

    def success(self, message: str) -> None:
        if not self._quiet:
            self._emit(message, style="green")

    def warning(self, message: str) -> None:
        """Shown even with ``--quiet``."""
        self._emit(message, label="Warning: ", style="yellow")

    def error(self, message: str) -> None:
        """Shown even with ``--quiet``."""
        self._emit(message, label="Error: ", style="bold red")

    def debug(self, message: str) -> None:
        if self._verbose:
            self._emit(message, label="[debug] ", style="dim")


def _plain_lines(data: Any) -> list[str]:
    """Tab-separated rendering: ``key<TAB>value`` for a record, one row per list item."""
    if isinstance(data, dict):
        return [f"{key}\t{value}" for key, value in data.items()]
    if isinstance(data, list):
        return [
            "\t".join(str(v) for v in item.values()) if isinstance(item, dict) else str(item)
            for item in data
        ]
    return [str(data)]


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    # NO_COLOR disables colour whatever its value, even empty.
    return "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb"


# -- global instance -------------------------------------------------------

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed :class:`OutputManager`, creating a default one on first use."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    global _output
    _output = None


def format_response(data: Any) -> None:
    get_output().format_response(data)


def print_table(headers: list[str], rows: list[list[str]], title: Optional[str] = None) -> None:
    get_output().print_table(headers, rows, title)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def warning(message: str) -> None:
    get_output().warning(message)


def error(message: str) -> None:
    get_output().error(message)


def debug(message: str) -> None:
    get_output().debug(message)
