import logging
import sys
from pathlib import Path

import pytest

from worklog.config import load_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch) -> None:
    for name in ("WORKLOG_DIR", "WORKLOG_LOG_LEVEL", "WORKLOG_NOTIFY", "WORKLOG_REFRESH_SECONDS"):
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    config = load_config()

    assert config.log_level == logging.WARNING
    assert config.notify is False
    assert config.refresh_seconds == 1.0
    assert config.log_file.name == "log.json"
    assert "worklog" in str(config.data_dir).lower()


def test_environment_overrides(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("WORKLOG_DIR", str(tmp_path))
    monkeypatch.setenv("WORKLOG_LOG_LEVEL", "debug")
    monkeypatch.setenv("WORKLOG_NOTIFY", "yes")
    monkeypatch.setenv("WORKLOG_REFRESH_SECONDS", "0.5")

    config = load_config()

    assert config.log_file == Path(tmp_path) / "log.json"
    assert config.log_level == logging.DEBUG
    assert config.notify is True
    assert config.refresh_seconds == 0.5


@pytest.mark.parametrize("name, value", [
    ("WORKLOG_LOG_LEVEL", "loud"),
    ("WORKLOG_REFRESH_SECONDS", "soon"),
    ("WORKLOG_REFRESH_SECONDS", "0"),
])
def test_invalid_values(monkeypatch, name, value) -> None:
    monkeypatch.setenv(name, value)
    with pytest.raises(ValueError, match=name):
        load_config()


@pytest.mark.skipif(not sys.platform.startswith("linux"), reason="XDG layout is Linux only")
def test_default_log_lives_in_local_data_dir(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("XDG_DATA_HOME", raising=False)

    config = load_config()

    assert config.log_file == tmp_path / ".local" / "share" / "worklog" / "log.json"
