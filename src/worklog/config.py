# config.py
import logging
import os
from dataclasses import dataclass
from pathlib import Path

import platformdirs

APP_NAME = "worklog"
LOG_FILE_NAME = "log.json"
DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_REFRESH_SECONDS = 1.0

TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Config:
    data_dir: Path
    log_level: int
    notify: bool
    refresh_seconds: float

    @property
    def log_file(self) -> Path:
        return self.data_dir / LOG_FILE_NAME


def default_data_dir() -> Path:
    # ~/.local/share/worklog on Linux, ~/Library/Application Support/worklog on macOS,
    # %LOCALAPPDATA%\worklog on Windows
    return Path(platformdirs.user_data_dir(APP_NAME, appauthor=False))


def _log_level_from_env(name: str) -> int:
    raw = os.getenv(name, DEFAULT_LOG_LEVEL).strip().upper()
    level = logging.getLevelName(raw)
    if not isinstance(level, int):
        raise ValueError(f"Environment variable {name} must be a logging level name, got '{raw}'")
    return level


def _positive_float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValueError(f"Environment variable {name} must be a number") from exc
    if value <= 0:
        raise ValueError(f"Environment variable {name} must be positive")
    return value


def load_config() -> Config:
    data_dir = os.getenv("WORKLOG_DIR", "").strip()
    return Config(
        data_dir=Path(data_dir).expanduser() if data_dir else default_data_dir(),
        log_level=_log_level_from_env("WORKLOG_LOG_LEVEL"),
        notify=os.getenv("WORKLOG_NOTIFY", "").strip().lower() in TRUE_VALUES,
        refresh_seconds=_positive_float_env("WORKLOG_REFRESH_SECONDS", DEFAULT_REFRESH_SECONDS),
    )
