"""Tests for mineskin.config -- XDG paths, atomic writes, precedence."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from mineskin.config import (
    _atomic_write,
    config_path,
    get_config_dir,
    load_options,
    reset_options,
    resolve_options,
    save_options,
)
from mineskin.exceptions import ConfigError
from mineskin.models import CacheConfig, ClientOptions


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write_json(path: Path, data: Any) -> None:
    """Write a dict as JSON to *path*, creating parent dirs."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------


class TestPaths:
    def test_config_dir_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("mineskin.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        result = get_config_dir()
        assert result == tmp_path / ".config" / "mineskin"
        assert result.is_dir()

    def test_config_dir_xdg_custom(self, isolated_config: Path) -> None:
        assert get_config_dir() == isolated_config
        assert isolated_config.is_dir()

    def test_config_dir_non_xdg(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("mineskin.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
        assert get_config_dir() == tmp_path / ".mineskin"

    def test_config_path(self, isolated_config: Path) -> None:
        assert config_path() == isolated_config / "config.json"


# ---------------------------------------------------------------------------
# Atomic writes
# ---------------------------------------------------------------------------


class TestAtomicWrite:
    def test_writes_content(self, tmp_path: Path) -> None:
        target = tmp_path / "sub" / "file.json"
        _atomic_write(target, '{"a": 1}')
        assert target.read_text(encoding="utf-8") == '{"a": 1}'

    def test_no_temp_files_left(self, tmp_path: Path) -> None:
        target = tmp_path / "file.json"
        _atomic_write(target, "one")
        _atomic_write(target, "two")
        assert target.read_text(encoding="utf-8") == "two"
        assert [p.name for p in tmp_path.iterdir()] == ["file.json"]

    def test_failure_keeps_original(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        target = tmp_path / "file.json"
        target.write_text("original", encoding="utf-8")

        def _boom(*args: Any) -> None:
            raise OSError("disk full")

        monkeypatch.setattr("mineskin.config.os.replace", _boom)
        with pytest.raises(OSError):
            _atomic_write(target, "new")
        assert target.read_text(encoding="utf-8") == "original"
        assert [p.name for p in tmp_path.iterdir()] == ["file.json"]


# ---------------------------------------------------------------------------
# Options file
# ---------------------------------------------------------------------------


class TestOptionsFile:
    def test_missing_file_gives_defaults(self, isolated_config: Path) -> None:
        assert load_options() == ClientOptions()

    def test_save_and_load(self, isolated_config: Path) -> None:
        options = ClientOptions(
            user_agent="MyApp/1.0",
            api_key="s3cret",
            max_tries=2,
            cache=CacheConfig(skin_expire_after_access=60),
        )
        save_options(options)

        assert (isolated_config / "config.json").is_file()
        assert load_options() == options

    def test_partial_file_fills_defaults(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "config.json", {"get_interval": 2})
        options = load_options()
        assert options.get_interval == 2
        assert options.generate_interval == 15
        assert options.cache.user_expire_after_write == 300

    def test_invalid_json_raises(self, isolated_config: Path) -> None:
        path = isolated_config / "config.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid config"):
            load_options()

    def test_invalid_values_raise(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "config.json", {"max_tries": -1})
        with pytest.raises(ConfigError):
            load_options()

    def test_reset_removes_file(self, isolated_config: Path) -> None:
        save_options(ClientOptions(max_tries=1))
        reset_options()
        assert not (isolated_config / "config.json").exists()
        assert load_options() == ClientOptions()

    def test_reset_without_file_is_noop(self, isolated_config: Path) -> None:
        reset_options()
        assert not (isolated_config / "config.json").exists()


# ---------------------------------------------------------------------------
# Precedence resolution
# ---------------------------------------------------------------------------


class TestResolveOptions:
    def test_defaults(self, isolated_config: Path) -> None:
        options = resolve_options()
        assert options.api_key is None
        assert options.api_base == "https://api.mineskin.org"

    def test_file_values_apply(self, isolated_config: Path) -> None:
        save_options(ClientOptions(api_key="from-file", user_agent="File/1.0"))
        options = resolve_options()
        assert options.api_key == "from-file"
        assert options.user_agent == "File/1.0"

    def test_env_overrides_file(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        save_options(ClientOptions(api_key="from-file"))
        monkeypatch.setenv("MINESKIN_API_KEY", "from-env")
        monkeypatch.setenv("MINESKIN_API_BASE", "https://env.example")
        options = resolve_options()
        assert options.api_key == "from-env"
        assert options.api_base == "https://env.example"

    def test_cli_overrides_env(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MINESKIN_API_KEY", "from-env")
        monkeypatch.setenv("MINESKIN_USER_AGENT", "Env/1.0")
        options = resolve_options(cli_api_key="from-cli", cli_user_agent="Cli/1.0")
        assert options.api_key == "from-cli"
        assert options.user_agent == "Cli/1.0"

    def test_empty_env_is_ignored(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        save_options(ClientOptions(api_key="from-file"))
        monkeypatch.setenv("MINESKIN_API_KEY", "")
        assert resolve_options().api_key == "from-file"

    def test_other_file_settings_survive_overrides(self, isolated_config: Path) -> None:
        save_options(ClientOptions(max_tries=1, get_interval=3))
        options = resolve_options(cli_api_key="k")
        assert options.max_tries == 1
        assert options.get_interval == 3
