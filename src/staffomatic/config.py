"""Configuration: the config file, ``STAFFOMATIC_*`` overrides, credential sources.

The config file is a :class:`~staffomatic.models.ClientConfig` serialised as
JSON. It lives under ``$XDG_CONFIG_HOME/staffomatic/`` on Linux and BSD, and
under ``~/.staffomatic/`` elsewhere. Writes go through a temp file and an
atomic rename, so a crash never leaves a half-written config behind.
"""

from __future__ import annotations

import getpass
import json
import os
import platform
import sys
import tempfile
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from staffomatic.exceptions import ConfigError
from staffomatic.models import ClientConfig

_APP_NAME = "staffomatic"
_CONFIG_FILENAME = "config.json"

# Environment variable -> ClientConfig field.
ENV_VARS: dict[str, str] = {
    "STAFFOMATIC_API_ENDPOINT": "api_endpoint",
    "STAFFOMATIC_WEB_ENDPOINT": "web_endpoint",
    "STAFFOMATIC_LOGIN": "login",
    "STAFFOMATIC_EMAIL": "email",
    "STAFFOMATIC_PASSWORD": "password",
    "STAFFOMATIC_ACCESS_TOKEN": "access_token",
    "STAFFOMATIC_CLIENT_ID": "client_id",
    "STAFFOMATIC_SECRET": "client_secret",
    "STAFFOMATIC_PER_PAGE": "per_page",
}


# --- Directories ---


def _is_xdg_platform() -> bool:
    system = platform.system()
    return system == "Linux" or system.endswith("BSD")


def _app_dir(xdg_var: str, xdg_default: Path, fallback: Path) -> Path:
    if _is_xdg_platform():
        path = Path(os.environ.get(xdg_var) or xdg_default) / _APP_NAME
    else:
        path = fallback
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_config_dir() -> Path:
    """``$XDG_CONFIG_HOME/staffomatic`` (default ``~/.config/staffomatic``), else ``~/.staffomatic``."""
    home = Path.home()
    return _app_dir("XDG_CONFIG_HOME", home / ".config", home / f".{_APP_NAME}")


def get_data_dir() -> Path:
    """Where crash logs go.

    ``$XDG_DATA_HOME/staffomatic`` (default ``~/.local/share/staffomatic``),
    else ``~/.staffomatic``.
    """
    home = Path.home()
    return _app_dir("XDG_DATA_HOME", home / ".local" / "share", home / f".{_APP_NAME}")


def config_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


def _atomic_write(path: Path, data: str) -> None:
    """Replace *path* with *data* via a sibling temp file and ``os.replace``."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(
        "w",
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
        delete=False,
        encoding="utf-8",
    ) as tmp:
        try:
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
        except BaseException:
            tmp.close()
            os.unlink(tmp.name)
            raise
    os.replace(tmp.name, path)


# --- Config file ---


def _read_config_file() -> dict[str, Any]:
    path = config_path()
    if not path.is_file():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid config at {path}: expected a JSON object")
    return data


def load_config() -> ClientConfig:
    """Load the configuration file.

    Returns:
        The deserialised :class:`~staffomatic.models.ClientConfig`, or a
        default instance if the file does not exist.

    Raises:
        ConfigError: If the file contains invalid JSON or fails validation.
    """
    data = _read_config_file()
    try:
        return ClientConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config at {config_path()}: {exc}") from exc


def save_config(config: ClientConfig) -> None:
    """Persist *config* atomically to disk.

    Unset fields are left out so that defaults keep tracking new releases.
    """
    data = config.model_dump(mode="json", exclude_none=True, exclude_defaults=True)
    _atomic_write(config_path(), json.dumps(data, indent=2) + "\n")


def set_config_value(key: str, value: str) -> ClientConfig:
    """Set a single top-level field in the config file and save it.

    Args:
        key: A :class:`~staffomatic.models.ClientConfig` field name.
        value: The raw string value; pydantic coerces it to the field type.

    Returns:
        The updated, validated configuration.

    Raises:
        ConfigError: If *key* is unknown or *value* does not validate.
    """
    if key not in ClientConfig.model_fields or key == "request":
        raise ConfigError(f"Unknown config key: {key}")
    data = _read_config_file()
    data[key] = value
    try:
        config = ClientConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid value for {key}: {exc}") from exc
    save_config(config)
    return config


# --- Precedence resolution ---


def _env_overrides() -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    for var, field in ENV_VARS.items():
        value = os.environ.get(var)
        if value:
            overrides[field] = value
    return overrides


def resolve_config(**cli_overrides: Any) -> ClientConfig:
    """Resolve the effective client configuration.

    Precedence (high to low):
        1. CLI flags (``cli_overrides``; ``None`` values are ignored)
        2. Environment variables (``STAFFOMATIC_*``, see :data:`ENV_VARS`)
        3. Config file (``~/.config/staffomatic/config.json``)
        4. Defaults

    Raises:
        ConfigError: If the merged settings fail validation.
    """
    data = _read_config_file()
    data.update(_env_overrides())
    data.update({k: v for k, v in cli_overrides.items() if v is not None})
    try:
        return ClientConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


# --- Credential sources ---


def resolve_credential(source: str) -> str:
    """Read a password from *source*.

    ``env:NAME`` reads an environment variable, ``file:PATH`` reads a file
    (surrounding whitespace stripped, ``~`` expanded), and ``prompt`` asks
    on the terminal. Any other value is the password itself.

    Raises:
        ConfigError: If the variable is unset, the file is missing or
            unreadable, or ``prompt`` is used without a TTY.
    """
    scheme, _, target = source.partition(":")
    if scheme == "env" and target:
        if target not in os.environ:
            raise ConfigError(f"Environment variable '{target}' is not set")
        return os.environ[target]
    if scheme == "file" and target:
        path = Path(target).expanduser()
        if not path.is_file():
            raise ConfigError(f"Password file not found: {path}")
        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise ConfigError(f"Cannot read password file {path}: {exc}") from exc
    if source == "prompt":
        if not sys.stdin.isatty():
            raise ConfigError("Cannot prompt for a password: stdin is not a TTY")
        return getpass.getpass("Password: ")
    return source
