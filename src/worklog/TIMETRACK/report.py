# TIMETRACK/report.py
from collections import defaultdict
from datetime import date, datetime, time, timedelta
from typing import Dict, Optional, Tuple

from worklog.TIMETRACK.model import Period, Report, ReportRow
from worklog.TIMETRACK.store import LogStore


def _local_midnight(day: date) -> datetime:
    return datetime.combine(day, time.min).astimezone()


def window(period: Period, reference: datetime) -> Tuple[datetime, datetime]:
    """
    Half-open local-time window [start, end) of ``period`` containing ``reference``.
    Weeks start on Monday.
    """
    day = reference.astimezone().date()

    if period is Period.DAILY:
        first = day
        last = day + timedelta(days=1)
    elif period is Period.WEEKLY:
        first = day - timedelta(days=day.weekday())
        last = first + timedelta(days=7)
    elif period is Period.MONTHLY:
        first = day.replace(day=1)
        if first.month == 12:
            last = first.replace(year=first.year + 1, month=1)
        else:
            last = first.replace(month=first.month + 1)
    else:
        raise ValueError(f"Unknown report period: {period!r}")

    return _local_midnight(first), _local_midnight(last)


def generate(store: LogStore, period: Period, reference_time: datetime,
             now: Optional[datetime] = None) -> Report:
    """
    Total tracked time per activity name for sessions starting inside the
    window. A running session counts up to ``now`` (defaults to the reference
    time). Rows are ordered by total time, longest first, then by name.
    """
    now = now or reference_time
    window_start, window_end = window(period, reference_time)

    totals: Dict[str, int] = defaultdict(int)
    for session in store:
        if window_start <= session.start < window_end:
            totals[session.name] += session.seconds(now)

    rows = [ReportRow(name=name, seconds=seconds) for name, seconds in totals.items()]
    rows.sort(key=lambda row: (-row.seconds, row.name))
    return Report(period=period, window_start=window_start, window_end=window_end, rows=rows)
