"""Shared test fixtures for staffomatic.

Provides a recording mock transport for the HTTP client, an isolated config
environment, and output-state management. Fixtures are discovered by pytest
and available to every test module.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

from staffomatic.client import Client
from staffomatic.output import OutputFormat, OutputManager, reset_output, set_output

API = "https://api.example.com/v3/"
WEB = "https://web.example.com/"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time; CliRunner swaps those streams, so a fresh manager is
    needed for the next test.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------


class RecordingTransport(httpx.MockTransport):
    """A MockTransport that keeps every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content)



@pytest.fixture
def make_client() -> Callable[..., tuple[Client, RecordingTransport]]:
    """Factory building a Client wired to a RecordingTransport.

    Usage::

        client, transport = make_client(handler, email="e@x.com", password="p")
    """
    clients: list[Client] = []

    def _make(
        handler: Callable[[httpx.Request], httpx.Response], **config: Any
    ) -> tuple[Client, RecordingTransport]:
        transport = RecordingTransport(handler)
        config.setdefault("api_endpoint", API)
        config.setdefault("web_endpoint", WEB)
        client = Client(transport=transport, **config)
        clients.append(client)
        return client, transport

    yield _make
    for client in clients:
        client.close()


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points XDG_CONFIG_HOME and XDG_DATA_HOME into tmp_path, forces the XDG
    layout, clears every STAFFOMATIC_* variable and changes the working
    directory to tmp_path.
    """
    from staffomatic.config import ENV_VARS

    monkeypatch.setattr("staffomatic.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def verbose_output() -> OutputManager:
    """Install a plain, verbose, colourless OutputManager."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True, verbose=True)
    set_output(output)
    yield output
    reset_output()

