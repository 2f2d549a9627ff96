import json
import os

import pytest

from conftest import local
from worklog.TIMETRACK.errors import ConcurrentAccess, CorruptLog, PersistenceError
from worklog.TIMETRACK.model import Session
from worklog.TIMETRACK.store import LogFile, LogStore


def sample_store() -> LogStore:
    return LogStore([
        Session("a", local(2026, 2, 3, 9, 0), local(2026, 2, 3, 10, 30)),
        Session("b", local(2026, 2, 3, 10, 30), local(2026, 2, 3, 11, 0)),
        Session("c", local(2026, 2, 3, 11, 15)),
    ])


def test_missing_log_loads_empty() -> None:
    store = LogStore.load(None)
    assert len(store) == 0
    assert store.active_session() is None


def test_round_trip_is_lossless() -> None:
    raw = sample_store().dump()

    reloaded = LogStore.load(raw)

    assert reloaded == sample_store()
    assert reloaded.dump() == raw


def test_dump_schema() -> None:
    data = json.loads(sample_store().dump())

    assert data[0] == {
        "name": "a",
        "start": int(local(2026, 2, 3, 9, 0).timestamp()),
        "end": int(local(2026, 2, 3, 10, 30).timestamp()),
    }
    assert data[2]["end"] is None


def test_unknown_fields_and_legacy_tag_are_accepted() -> None:
    raw = json.dumps([
        {"tag": "old", "start": 1700000000, "end": 1700003600, "note": "ignored"},
        {"name": "new", "start": 1700004000, "end": None, "color": "red"},
    ]).encode()

    store = LogStore.load(raw)

    assert [s.name for s in store] == ["old", "new"]
    assert store.active_session().name == "new"
    assert "note" not in store.dump().decode()


@pytest.mark.parametrize("raw", [
    b"not json",
    b"{\"name\": \"a\"}",
    b"[{\"start\": 1700000000, \"end\": null}]",
    b"[{\"name\": \"a\", \"start\": \"yesterday\", \"end\": null}]",
    b"[{\"name\": \"a\", \"start\": 1700000000, \"end\": 1.5}]",
    b"[\"a\"]",
    b"\xff\xfe",
    b"[{\"name\": \"a\", \"start\": 100000000000000000000, \"end\": null}]",
    b"[{\"name\": \"a\", \"start\": 1700000000, \"end\": -100000000000000000000}]",
])
def test_malformed_log_is_corrupt(raw) -> None:
    with pytest.raises(CorruptLog):
        LogStore.load(raw)


def test_two_running_sessions_is_corrupt() -> None:
    raw = json.dumps([
        {"name": "a", "start": 1700000000, "end": None},
        {"name": "b", "start": 1700003600, "end": None},
    ]).encode()

    with pytest.raises(CorruptLog, match="2 running sessions"):
        LogStore.load(raw)


def test_log_file_save_and_load(tmp_path) -> None:
    log_file = LogFile(tmp_path / "nested" / "log.json")
    assert log_file.read() is None

    log_file.save(sample_store())

    assert log_file.load() == sample_store()
    assert [p.name for p in log_file.path.parent.iterdir()] == ["log.json"]


def test_lock_rejects_second_holder(tmp_path) -> None:
    pytest.importorskip("fcntl")
    path = tmp_path / "log.json"

    with LogFile(path).locked():
        with pytest.raises(ConcurrentAccess):
            with LogFile(path).locked():
                pass

    # released on exit, so it can be taken again
    with LogFile(path).locked():
        pass


def test_lock_released_when_body_fails(tmp_path) -> None:
    pytest.importorskip("fcntl")
    path = tmp_path / "log.json"

    with pytest.raises(RuntimeError):
        with LogFile(path).locked():
            raise RuntimeError("boom")

    with LogFile(path).locked():
        pass


def test_failed_write_keeps_old_log_and_cleans_up(monkeypatch, tmp_path) -> None:
    log_file = LogFile(tmp_path / "log.json")
    log_file.save(sample_store())
    before = log_file.path.read_bytes()

    def refuse_replace(src, dst):
        raise PermissionError("read-only file system")

    with monkeypatch.context() as m:
        m.setattr(os, "replace", refuse_replace)
        with pytest.raises(PersistenceError, match="Cannot write log"):
            log_file.save(LogStore())

    assert log_file.path.read_bytes() == before
    assert list(tmp_path.glob(".log-*.tmp")) == []


def test_unreadable_log_is_persistence_error(tmp_path) -> None:
    # a directory where the file should be cannot be read as bytes
    (tmp_path / "log.json").mkdir()

    with pytest.raises(PersistenceError, match="Cannot read log"):
        LogFile(tmp_path / "log.json").read()
