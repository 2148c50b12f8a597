"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles the persistent configuration of the ``mineskin`` CLI:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.mineskin/`` on macOS and Windows. See :func:`get_config_dir`.
* **Options file** -- a single :class:`~mineskin.models.ClientOptions`
  JSON file (``config.json``) managed via :func:`load_options`,
  :func:`save_options` and :func:`reset_options`.
* **Precedence resolution** -- :func:`resolve_options` merges CLI flags,
  environment variables and the options file into the effective
  :class:`~mineskin.models.ClientOptions`.

File writes use an atomic temp-file-then-rename strategy
(:func:`_atomic_write`) to prevent data loss on crash or power failure.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from mineskin.exceptions import ConfigError
from mineskin.models import ClientOptions

_APP_NAME = "mineskin"
_CONFIG_FILENAME = "config.json"

ENV_API_KEY = "MINESKIN_API_KEY"
ENV_API_BASE = "MINESKIN_API_BASE"
ENV_USER_AGENT = "MINESKIN_USER_AGENT"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/mineskin/`` (default ``~/.config/mineskin/``).
    On macOS/Windows: ``~/.mineskin/``.
    """
    if _is_xdg_platform():
        env_value = os.environ.get("XDG_CONFIG_HOME", "")
        base = Path(env_value) if env_value else Path.home() / ".config"
        path = base / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
    path.mkdir(parents=True, exist_ok=True)
    return path


def config_path() -> Path:
    """Path to the options file."""
    return get_config_dir() / _CONFIG_FILENAME


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems.  On any failure
    the temp file is cleaned up.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close below
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Options file ---


def load_options() -> ClientOptions:
    """Load client options from the config directory.

    Returns:
        The deserialised :class:`~mineskin.models.ClientOptions`. If the
        file does not exist, a default instance is returned.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = config_path()
    if not path.is_file():
        return ClientOptions()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return ClientOptions.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc


def save_options(options: ClientOptions) -> None:
    """Persist *options* atomically to the config directory."""
    data = options.model_dump(mode="json")
    _atomic_write(config_path(), json.dumps(data, indent=2) + "\n")


def reset_options() -> None:
    """Delete the options file so defaults apply again."""
    path = config_path()
    if path.is_file():
        path.unlink()


# --- Precedence resolution ---


def resolve_options(
    cli_api_key: Optional[str] = None,
    cli_api_base: Optional[str] = None,
    cli_user_agent: Optional[str] = None,
) -> ClientOptions:
    """Resolve client options with the full precedence chain.

    Precedence (high to low):
        1. CLI flags (``cli_api_key``, ``cli_api_base``, ``cli_user_agent``)
        2. Environment variables (``MINESKIN_API_KEY``, ``MINESKIN_API_BASE``,
           ``MINESKIN_USER_AGENT``)
        3. Options file (``~/.config/mineskin/config.json``)
        4. Defaults
    """
    options = load_options()

    overrides = {
        "api_key": (cli_api_key, ENV_API_KEY),
        "api_base": (cli_api_base, ENV_API_BASE),
        "user_agent": (cli_user_agent, ENV_USER_AGENT),
    }
    for field_name, (cli_value, env_var) in overrides.items():
        if cli_value is not None:
            setattr(options, field_name, cli_value)
            continue
        env_value = os.environ.get(env_var)
        if env_value:
            setattr(options, field_name, env_value)

    return options
