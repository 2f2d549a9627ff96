# TIMETRACK/model.py
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import List, Optional

from worklog.TIMETRACK.clock import clamp_seconds, from_epoch, to_epoch
from worklog.TIMETRACK.errors import CorruptLog


@dataclass
class Session:
    name: str
    start: datetime
    end: Optional[datetime] = None  # None while the session is running

    @property
    def active(self) -> bool:
        return self.end is None

    def seconds(self, now: datetime) -> int:
        """Tracked seconds, counting a running session up to ``now``."""
        return clamp_seconds((self.end or now) - self.start)

    def overlaps(self, start: datetime, end: datetime, now: datetime) -> bool:
        return self.start < end and start < (self.end or now)

    def to_dict(self):
        return {
            "name": self.name,
            "start": to_epoch(self.start),
            "end": to_epoch(self.end) if self.end is not None else None,
        }

    @classmethod
    def from_dict(cls, raw) -> "Session":
        if not isinstance(raw, dict):
            raise CorruptLog(f"Expected a session object, got {type(raw).__name__}.")

        # Logs written before the rename store the name under "tag".
        name = raw.get("name", raw.get("tag"))
        start = raw.get("start")
        end = raw.get("end")

        if not isinstance(name, str) or not name:
            raise CorruptLog(f"Session has no valid name: {raw!r}")
        if not _is_epoch(start):
            raise CorruptLog(f"Session '{name}' has an invalid start: {start!r}")
        if end is not None and not _is_epoch(end):
            raise CorruptLog(f"Session '{name}' has an invalid end: {end!r}")

        try:
            return cls(
                name=name,
                start=from_epoch(start),
                end=from_epoch(end) if end is not None else None,
            )
        except (OverflowError, OSError, ValueError) as exc:
            raise CorruptLog(f"Session '{name}' has a timestamp out of range: {exc}") from exc


def _is_epoch(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class Period(Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Tracking:
    name: str
    start: datetime
    elapsed: timedelta


@dataclass(frozen=True)
class ReportRow:
    name: str
    seconds: int


@dataclass
class Report:
    period: Period
    window_start: datetime
    window_end: datetime
    rows: List[ReportRow] = field(default_factory=list)

    @property
    def total_seconds(self) -> int:
        return sum(row.seconds for row in self.rows)

    @property
    def label(self) -> str:
        if self.period is Period.DAILY:
            return self.window_start.strftime("%a %b %d, %Y")
        if self.period is Period.WEEKLY:
            last_day = self.window_end - timedelta(days=1)
            return f"{self.window_start.strftime('%b %d')} - {last_day.strftime('%b %d, %Y')}"
        return self.window_start.strftime("%B %Y")

    def to_dict(self):
        return {
            "period": self.period.value,
            "label": self.label,
            "start": self.window_start.isoformat(),
            "end": self.window_end.isoformat(),
            "rows": [{"name": row.name, "seconds": row.seconds} for row in self.rows],
            "total_seconds": self.total_seconds,
        }
