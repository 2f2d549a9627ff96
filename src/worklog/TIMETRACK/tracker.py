# TIMETRACK/tracker.py
import logging
import math
from datetime import datetime, timedelta
from typing import Optional, Union

from worklog.TIMETRACK.clock import Clock, local_now
from worklog.TIMETRACK.errors import (
    AlreadyTracking, FutureEnd, InvalidDuration, InvalidName, NoActiveSession,
    OverlappingSession,
)
from worklog.TIMETRACK.model import Idle, Session, Tracking
from worklog.TIMETRACK.store import LogStore

logger = logging.getLogger(__name__)


def clean_name(name: str) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise InvalidName(name)
    return cleaned


class Tracker:
    """
    Start/stop state machine over a ``LogStore``.

    The store is either Idle (no running session) or Tracking (exactly one).
    Every method checks its precondition before touching the store, so a
    rejected call leaves the store exactly as it was.
    """

    def __init__(self, store: LogStore, clock: Clock = local_now):
        self.store = store
        self.clock = clock

    def start(self, name: str) -> Session:
        name = clean_name(name)
        running = self.store.active_session()
        if running:
            raise AlreadyTracking(running.name)

        session = Session(name=name, start=self.clock())
        self.store.append(session)
        logger.info("Started '%s' at %s", name, session.start.isoformat())
        return session

    def stop(self) -> Session:
        running = self.store.active_session()
        if not running:
            raise NoActiveSession()

        end = self.clock()
        if end < running.start:
            logger.warning(
                "Clock skew: '%s' ends at %s, before its start %s; it will count as zero time",
                running.name, end.isoformat(), running.start.isoformat(),
            )
        running.end = end
        logger.info("Stopped '%s' after %ss", running.name, running.seconds(end))
        return running

    def reset(self) -> Optional[Session]:
        """Discard the running session. Returns None when nothing was running."""
        running = self.store.active_session()
        if not running:
            logger.debug("Reset with no running session; nothing to do")
            return None

        self.store.remove(running)
        logger.info("Discarded running session '%s'", running.name)
        return running

    def status(self) -> Union[Idle, Tracking]:
        running = self.store.active_session()
        if not running:
            return Idle()
        now = self.clock()
        return Tracking(
            name=running.name,
            start=running.start,
            elapsed=timedelta(seconds=running.seconds(now)),
        )

    def log(self, name: str, hours: float, end: Optional[datetime] = None) -> Session:
        """Record a finished block of ``hours`` ending at ``end`` (default now)."""
        name = clean_name(name)
        if not math.isfinite(hours) or hours <= 0:
            raise InvalidDuration(hours)

        now = self.clock()
        if end is None:
            end = now
        if end > now:
            raise FutureEnd(end)
        try:
            start = end - timedelta(seconds=int(hours * 3600))
        except OverflowError as exc:
            raise InvalidDuration(hours) from exc

        for existing in self.store:
            if existing.overlaps(start, end, now):
                raise OverlappingSession(existing.name)

        session = Session(name=name, start=start, end=end)
        self.store.insert(session)
        logger.info("Logged %.2fh for '%s' ending %s", hours, name, end.isoformat())
        return session
