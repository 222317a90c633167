from __future__ import annotations

import json
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from src.dayflow.dayflow.core.exceptions import StorageUnavailableError
from src.dayflow.dayflow.storage import record_store
from src.dayflow.dayflow.storage.record_store import JsonRecordStore, next_record_id


def _seed(store: JsonRecordStore, collection: str, records):
    with store.locked(collection) as snapshot:
        for r in records:
            snapshot.append(r)


def test_round_trip_preserves_order_and_values(store):
    records = [
        {"id": str(i), "employeeId": f"EMP{i:03d}", "date": "2024-06-01", "checkIn": "09:00:00", "checkOut": None, "salary": 1.5 * i}
        for i in range(1, 26)
    ]
    _seed(store, "attendance", records)

    assert store.load("attendance") == records
    assert JsonRecordStore(store.data_dir).load("attendance") == records


def test_snapshot_file_is_indented_json_array(store):
    _seed(store, "leaves", [{"id": "1", "status": "pending"}])

    text = store.path_for("leaves").read_text(encoding="utf-8")
    assert text.startswith("[\n  {")
    assert json.loads(text) == [{"id": "1", "status": "pending"}]


def test_missing_collection_loads_empty(store):
    assert store.load("employees") == []


def test_corrupt_collection_loads_empty_but_refuses_locked_write(store):
    store.data_dir.mkdir(parents=True)
    store.path_for("employees").write_text('[{"id": "EMP0', encoding="utf-8")

    assert store.load("employees") == []

    with pytest.raises(StorageUnavailableError):
        with store.locked("employees") as snapshot:
            snapshot.append({"id": "EMP002"})

    assert store.path_for("employees").read_text(encoding="utf-8") == '[{"id": "EMP0'


def test_failed_replace_keeps_previous_snapshot(store, monkeypatch):
    _seed(store, "attendance", [{"id": "1"}])

    def broken_replace(src, dst):
        raise OSError("disk went away")

    monkeypatch.setattr(record_store.os, "replace", broken_replace)

    with pytest.raises(StorageUnavailableError):
        _seed(store, "attendance", [{"id": "2"}])

    monkeypatch.undo()
    assert store.load("attendance") == [{"id": "1"}]
    assert sorted(p.name for p in store.data_dir.iterdir()) == ["attendance.json"]


def test_failure_mid_write_never_exposes_partial_file(store, monkeypatch):
    _seed(store, "leaves", [{"id": "1", "status": "pending"}])

    def half_dump(obj, fh, **kwargs):
        fh.write('[{"id": "1", "sta')
        raise OSError("no space left on device")

    monkeypatch.setattr(record_store.json, "dump", half_dump)

    with pytest.raises(StorageUnavailableError):
        _seed(store, "leaves", [{"id": "2", "status": "pending"}])

    monkeypatch.undo()
    assert store.load("leaves") == [{"id": "1", "status": "pending"}]
    assert not list(store.data_dir.glob("*.tmp"))


def test_exception_inside_locked_section_writes_nothing(store):
    _seed(store, "leaves", [{"id": "1"}])

    with pytest.raises(RuntimeError):
        with store.locked("leaves") as snapshot:
            snapshot.append({"id": "2"})
            raise RuntimeError("abort")

    assert store.load("leaves") == [{"id": "1"}]


def test_unchanged_snapshot_is_not_rewritten(store):
    _seed(store, "leaves", [{"id": "1"}])
    before = store.path_for("leaves").stat().st_mtime_ns

    with store.locked("leaves") as snapshot:
        assert snapshot.records == [{"id": "1"}]

    assert store.path_for("leaves").stat().st_mtime_ns == before


def test_concurrent_appends_are_serialized(store):
    def append(i: int) -> None:
        with store.locked("attendance") as snapshot:
            snapshot.append({"id": next_record_id(snapshot.records), "n": i})

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(append, range(40)))

    records = store.load("attendance")
    assert len(records) == 40
    assert [r["id"] for r in records] == [str(i) for i in range(1, 41)]


def test_lock_wait_is_bounded(tmp_path):
    store = JsonRecordStore(tmp_path, lock_timeout=0.05)
    entered = threading.Event()
    release = threading.Event()

    def hold():
        with store.locked("employees"):
            entered.set()
            release.wait(2)

    holder = threading.Thread(target=hold)
    holder.start()
    try:
        assert entered.wait(2)
        with pytest.raises(StorageUnavailableError):
            with store.locked("employees"):
                pass
    finally:
        release.set()
        holder.join()


def test_nested_locks_must_follow_global_order(store):
    with store.locked("employees"):
        with store.locked("attendance"):
            pass

    with pytest.raises(RuntimeError):
        with store.locked("leaves"):
            with store.locked("employees"):
                pass

    with pytest.raises(RuntimeError):
        with store.locked("attendance"):
            with store.locked("attendance"):
                pass


def test_unknown_collection_is_rejected(store):
    with pytest.raises(ValueError):
        store.load("payroll")
    with pytest.raises(ValueError):
        with store.locked("payroll"):
            pass


def test_bootstrap_creates_empty_collections(store):
    store.bootstrap()

    for name in ("employees", "attendance", "leaves"):
        assert store.path_for(name).exists()
        assert store.load(name) == []


def test_next_record_id_follows_largest_numeric_id():
    assert next_record_id([]) == "1"
    assert next_record_id([{"id": "1717225200000"}, {"id": "7"}, {"id": "x"}]) == "1717225200001"
