# TIMETRACK/store.py
"""
Durable log of sessions.

``LogStore`` is the in-memory session list and its JSON codec. ``LogFile``
owns the bytes on disk: it reads them, replaces them atomically, and holds an
advisory lock around a single load-mutate-save.
"""
import bisect
import json
import logging
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional

from worklog.TIMETRACK.errors import ConcurrentAccess, CorruptLog, PersistenceError
from worklog.TIMETRACK.model import Session

try:
    import fcntl
except ModuleNotFoundError:  # pragma: no cover - Windows has no flock, writes are last-writer-wins
    fcntl = None

logger = logging.getLogger(__name__)


class LogStore:
    def __init__(self, sessions: Optional[List[Session]] = None):
        self.sessions: List[Session] = list(sessions or [])

    def __repr__(self):
        return f"<LogStore(sessions={len(self.sessions)}, active={self.active_session() is not None})>"

    def __len__(self):
        return len(self.sessions)

    def __iter__(self) -> Iterator[Session]:
        return iter(self.sessions)

    def __eq__(self, other):
        if not isinstance(other, LogStore):
            return NotImplemented
        return self.sessions == other.sessions

    # --- Codec ---

    @classmethod
    def load(cls, raw: Optional[bytes]) -> "LogStore":
        """Parse persisted bytes. ``None`` means nothing was saved yet."""
        if raw is None:
            return cls()

        try:
            data = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise CorruptLog(f"Log is not valid JSON: {exc}") from exc

        if not isinstance(data, list):
            raise CorruptLog("Log must contain a list of sessions.")

        store = cls([Session.from_dict(item) for item in data])
        running = [s for s in store.sessions if s.active]
        if len(running) > 1:
            names = ", ".join(s.name for s in running)
            raise CorruptLog(f"Log has {len(running)} running sessions ({names}); expected at most one.")
        return store

    def dump(self) -> bytes:
        return json.dumps([s.to_dict() for s in self.sessions], indent=2).encode("utf-8")

    # --- Queries and mutations ---

    def active_session(self) -> Optional[Session]:
        for session in self.sessions:
            if session.active:
                return session
        return None

    def append(self, session: Session) -> None:
        self.sessions.append(session)

    def insert(self, session: Session) -> None:
        """Insert keeping the list ordered by start time."""
        starts = [s.start for s in self.sessions]
        self.sessions.insert(bisect.bisect_right(starts, session.start), session)

    def remove(self, session: Session) -> None:
        self.sessions.remove(session)


class LogFile:
    def __init__(self, path: Path):
        self.path = Path(path)
        self.lock_path = self.path.with_name(self.path.name + ".lock")

    def __repr__(self):
        return f"<LogFile(path='{self.path}')>"

    def read(self) -> Optional[bytes]:
        try:
            return self.path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise PersistenceError(f"Cannot read log {self.path}: {exc}") from exc

    def write(self, data: bytes) -> None:
        """Replace the log in one step so a failed write leaves the old file intact."""
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=".log-", suffix=".tmp", dir=self.path.parent)
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
            tmp_name = None
        except OSError as exc:
            raise PersistenceError(f"Cannot write log {self.path}: {exc}") from exc
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.remove(tmp_name)

    def load(self) -> LogStore:
        return LogStore.load(self.read())

    def save(self, store: LogStore) -> None:
        self.write(store.dump())
        logger.debug("Saved %d sessions to %s", len(store), self.path)

    @contextmanager
    def locked(self):
        """Hold an exclusive advisory lock for one load-mutate-save."""
        if fcntl is None:
            logger.debug("File locking unavailable on this platform; continuing without a lock")
            yield self
            return

        try:
            self.lock_path.parent.mkdir(parents=True, exist_ok=True)
            lock_file = open(self.lock_path, "a")
        except OSError as exc:
            raise PersistenceError(f"Cannot open lock file {self.lock_path}: {exc}") from exc

        try:
            try:
                fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
            except BlockingIOError as exc:
                raise ConcurrentAccess(self.path) from exc
            logger.debug("Acquired lock %s", self.lock_path)
            try:
                yield self
            finally:
                fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)
        finally:
            lock_file.close()
