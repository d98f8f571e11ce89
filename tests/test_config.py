"""Tests for configuration functionality."""

from datetime import datetime
from pathlib import Path

import pytest

from gitfixup.config import DEFAULT_CONFIG_FILENAME, Config
from gitfixup.models import FixupKind, UpdateMode


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in [
        "GIT_FIXUP_KIND",
        "GIT_FIXUP_UPDATE_MODE",
        "GIT_FIXUP_NO_VERIFY",
        "GIT_FIXUP_ALWAYS_LOG",
        "GIT_FIXUP_LOG_FILE",
    ]:
        monkeypatch.delenv(name, raising=False)


def test_default_config():
    """Test default configuration values."""
    config = Config()
    assert config.kind == FixupKind.FIXUP
    assert config.update_mode == UpdateMode.SYNCHRONOUS_CANCELLABLE
    assert config.no_verify is False
    assert config.always_log is False
    assert config.log_file is None


def test_config_load_nonexistent(tmp_path):
    """Test loading configuration when file doesn't exist."""
    config = Config.load(tmp_path)
    assert config.kind == FixupKind.FIXUP


def test_config_load_and_save(tmp_path):
    """Test saving and loading configuration."""
    config = Config(
        kind="squash",
        update_mode=UpdateMode.SILENT_CALLBACK_POOLED,
        no_verify=True,
        always_log=True,
        log_file="custom.log",
    )

    config.save(tmp_path)
    loaded_config = Config.load(tmp_path)

    assert loaded_config.kind == FixupKind.SQUASH
    assert loaded_config.update_mode == UpdateMode.SILENT_CALLBACK_POOLED
    assert loaded_config.no_verify is True
    assert loaded_config.always_log is True
    assert loaded_config.log_file == "custom.log"
    assert "[gitfixup]" in (tmp_path / DEFAULT_CONFIG_FILENAME).read_text()


def test_config_kind_accepts_marker():
    assert Config(kind="amend! ").kind == FixupKind.AMEND
    assert Config(kind="AMEND").kind == FixupKind.AMEND


def test_config_load_invalid(tmp_path):
    """Test loading invalid configuration file."""
    (tmp_path / DEFAULT_CONFIG_FILENAME).write_text("invalid [ toml")

    config = Config.load(tmp_path)
    assert config.kind == FixupKind.FIXUP


def test_config_load_unknown_kind_falls_back(tmp_path):
    (tmp_path / DEFAULT_CONFIG_FILENAME).write_text('[gitfixup]\nkind = "reword"\n')
    assert Config.load(tmp_path).kind == FixupKind.FIXUP


def test_config_load_unsafe_log_file(tmp_path):
    (tmp_path / DEFAULT_CONFIG_FILENAME).write_text('[gitfixup]\nlog_file = "../../etc/passwd"\n')
    assert Config.load(tmp_path).log_file is None


def test_environment_overrides_defaults(monkeypatch):
    monkeypatch.setenv("GIT_FIXUP_KIND", "squash")
    monkeypatch.setenv("GIT_FIXUP_NO_VERIFY", "yes")
    monkeypatch.setenv("GIT_FIXUP_UPDATE_MODE", "synchronous_not_cancellable")

    config = Config()

    assert config.kind == FixupKind.SQUASH
    assert config.no_verify is True
    assert config.update_mode == UpdateMode.SYNCHRONOUS_NOT_CANCELLABLE


def test_environment_overrides_config_file(tmp_path, monkeypatch):
    (tmp_path / DEFAULT_CONFIG_FILENAME).write_text(
        '[gitfixup]\nkind = "fixup"\nno_verify = true\n'
    )
    monkeypatch.setenv("GIT_FIXUP_KIND", "squash")

    config = Config.load(tmp_path)

    assert config.kind == FixupKind.SQUASH
    # settings the environment leaves alone still come from the file
    assert config.no_verify is True


def test_config_ignores_unknown_settings(tmp_path):
    (tmp_path / DEFAULT_CONFIG_FILENAME).write_text(
        '[gitfixup]\nkind = "amend"\ninclude_submodules = true\n'
    )
    assert Config.load(tmp_path).kind == FixupKind.AMEND


def test_get_log_file_disabled():
    """Test get_log_file when logging is disabled."""
    config = Config(always_log=False, log_file=None)
    assert config.get_log_file() is None


def test_get_log_file_custom():
    """Test get_log_file with custom log file."""
    config = Config(always_log=False, log_file="custom.log")
    assert config.get_log_file() == Path("custom.log")


def test_get_log_file_always():
    """Test get_log_file with always_log enabled."""
    config = Config(always_log=True)
    log_file = config.get_log_file()

    assert log_file is not None
    assert log_file.name.startswith("gitfixup_log-")
    timestamp = log_file.stem.replace("gitfixup_log-", "")
    datetime.strptime(timestamp, "%Y-%m-%d_%H-%M-%S")
