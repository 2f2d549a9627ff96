# TIMETRACK/clock.py
from datetime import datetime, timedelta, timezone
from typing import Callable

Clock = Callable[[], datetime]


def local_now() -> datetime:
    """Current local time, timezone-aware, truncated to whole seconds."""
    return datetime.now().astimezone().replace(microsecond=0)


def to_epoch(moment: datetime) -> int:
    return int(moment.timestamp())


def from_epoch(seconds: int) -> datetime:
    return datetime.fromtimestamp(seconds, tz=timezone.utc).astimezone()


def clamp_seconds(delta: timedelta) -> int:
    # Clock rollback can leave end < start; such spans count as nothing.
    return max(0, int(delta.total_seconds()))
