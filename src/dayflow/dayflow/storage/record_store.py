from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence

from ..core.constants import COLLECTIONS, DEFAULT_LOCK_TIMEOUT_SECONDS
from ..core.exceptions import StorageUnavailableError

logger = logging.getLogger(__name__)

Record = Dict[str, Any]


@dataclass
class Snapshot:
    """Full contents of one collection inside a locked section.

    Only a snapshot marked as changed is written back when the section exits.
    """

    collection: str
    records: List[Record]
    changed: bool = field(default=False)

    def find_index(self, predicate: Callable[[Record], bool]) -> Optional[int]:
        for index, record in enumerate(self.records):
            if predicate(record):
                return index
        return None

    def append(self, record: Record) -> None:
        self.records.append(record)
        self.changed = True

    def replace(self, index: int, record: Record) -> None:
        self.records[index] = record
        self.changed = True


def next_record_id(records: Sequence[Record]) -> str:
    """Next creation-ordered id: one more than the largest numeric id present."""

    highest = 0
    for record in records:
        try:
            highest = max(highest, int(record.get("id")))
        except (TypeError, ValueError):
            continue
    return str(highest + 1)


class JsonRecordStore:
    """Durable named collections, each stored as one JSON array file.

    Writes go through ``locked()``: one exclusive section per collection,
    the whole collection is read, mutated in memory and replaced atomically
    (temporary file + ``os.replace``) before the lock is released.
    """

    def __init__(
        self,
        data_dir: str | Path,
        *,
        collections: Sequence[str] = COLLECTIONS,
        lock_timeout: float = DEFAULT_LOCK_TIMEOUT_SECONDS,
    ):
        self._data_dir = Path(data_dir)
        self._order = {name: index for index, name in enumerate(collections)}
        self._locks = {name: threading.Lock() for name in collections}
        self._lock_timeout = float(lock_timeout)
        self._held = threading.local()

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    @property
    def collections(self) -> Sequence[str]:
        return tuple(self._order)

    def path_for(self, collection: str) -> Path:
        self._require_known(collection)
        return self._data_dir / f"{collection}.json"

    def exists(self, collection: str) -> bool:
        return self.path_for(collection).exists()

    def bootstrap(self) -> None:
        """Create the data directory and an empty file for every missing collection."""

        self._data_dir.mkdir(parents=True, exist_ok=True)
        for collection in self._order:
            if self.exists(collection):
                continue
            with self.locked(collection) as snapshot:
                # Written even though empty so the file exists afterwards.
                snapshot.changed = True

    def load(self, collection: str) -> List[Record]:
        """Unlocked read of the last persisted snapshot.

        Unreadable storage yields an empty collection rather than an error.
        """

        try:
            return self._read(collection)
        except StorageUnavailableError as exc:
            logger.warning("Reading %s failed, serving empty collection: %s", collection, exc)
            return []

    @contextmanager
    def locked(self, collection: str) -> Iterator[Snapshot]:
        lock = self._locks.get(collection)
        if lock is None:
            raise ValueError(f"Unknown collection: {collection!r}")

        held = self._held_stack()
        for other in held:
            if self._order[other] >= self._order[collection]:
                raise RuntimeError(f"Lock order violation: {collection!r} requested while holding {other!r}")

        if not lock.acquire(timeout=self._lock_timeout):
            raise StorageUnavailableError(f"Timed out waiting for the {collection} collection")
        held.append(collection)
        try:
            snapshot = Snapshot(collection=collection, records=self._read(collection))
            yield snapshot
            if snapshot.changed:
                self._write(collection, snapshot.records)
        finally:
            held.pop()
            lock.release()

    def _held_stack(self) -> List[str]:
        stack = getattr(self._held, "stack", None)
        if stack is None:
            stack = []
            self._held.stack = stack
        return stack

    def _require_known(self, collection: str) -> None:
        if collection not in self._order:
            raise ValueError(f"Unknown collection: {collection!r}")

    def _read(self, collection: str) -> List[Record]:
        path = self.path_for(collection)
        if not path.exists():
            return []
        try:
            with path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError) as exc:
            raise StorageUnavailableError(f"Cannot read {path.name}: {exc}") from exc
        if not isinstance(data, list):
            raise StorageUnavailableError(f"{path.name} does not hold a list of records")
        return data

    def _write(self, collection: str, records: List[Record]) -> None:
        path = self.path_for(collection)
        tmp_path: Optional[str] = None
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix=f".{collection}.", suffix=".tmp", dir=self._data_dir)
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(records, fh, indent=2, ensure_ascii=False)
                fh.write("\n")
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_path, path)
            tmp_path = None
        except (OSError, TypeError, ValueError) as exc:
            logger.error("Persisting %s failed, previous snapshot kept: %s", collection, exc)
            raise StorageUnavailableError(f"Cannot persist {path.name}: {exc}") from exc
        finally:
            if tmp_path is not None:
                _discard(tmp_path)


def _discard(path: str) -> None:
    try:
        os.unlink(path)
    except OSError:
        logger.warning("Could not remove temporary file %s", path)
