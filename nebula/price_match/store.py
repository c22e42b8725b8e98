"""
Record Store - Immutable in-memory snapshot of the price dataset.

The dataset is loaded once per process (lazily, on first query) and
handed out as a read-only snapshot. A refresh builds a brand-new
snapshot and swaps the reference; queries already running keep the
snapshot they started with, so readers never need a lock.
"""

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable, Optional

from .models import PriceRecord
from .record_loader import DatasetUnavailableError, load_records

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecordSnapshot:
    """
    One immutable generation of the dataset.

    Attributes:
        records: All rows in file order (usable or not)
        source: Path the snapshot was loaded from ("" for in-memory)
        loaded_at: When the snapshot was built
        error: Why the dataset is unavailable, None when healthy
        mtime: Source file modification time at load
    """
    records: tuple[PriceRecord, ...] = ()
    source: str = ""
    loaded_at: datetime = field(default_factory=datetime.now)
    error: Optional[str] = None
    mtime: Optional[float] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def record_count(self) -> int:
        return len(self.records)


class RecordStore:
    """
    Owner of the current RecordSnapshot.

    Usage:
        store = RecordStore("data/crop_price.json")
        records = store.load()          # loads on first call, cached after
        store.refresh_if_changed()      # cheap mtime check, reload if needed
    """

    def __init__(self, dataset_path: str | Path | None = None):
        self._path = Path(dataset_path) if dataset_path else None
        self._snapshot: Optional[RecordSnapshot] = None
        self._load_lock = threading.Lock()

    @classmethod
    def from_records(cls, records: Iterable[PriceRecord], source: str = "") -> "RecordStore":
        """Build a store around records already in memory."""
        store = cls()
        store._snapshot = RecordSnapshot(records=tuple(records), source=source)
        return store

    @property
    def path(self) -> Optional[Path]:
        return self._path

    def snapshot(self) -> RecordSnapshot:
        """Current snapshot, loading it on first use."""
        current = self._snapshot
        if current is not None:
            return current
        with self._load_lock:
            if self._snapshot is None:
                self._snapshot = self._build_snapshot()
            return self._snapshot

    def load(self) -> tuple[PriceRecord, ...]:
        """All records of the current snapshot (empty when the dataset is unavailable)."""
        return self.snapshot().records

    def filter(self, predicate: Callable[[PriceRecord], bool]) -> list[PriceRecord]:
        """Records of the current snapshot satisfying predicate."""
        return [record for record in self.load() if predicate(record)]

    def reload(self) -> RecordSnapshot:
        """
        Rebuild the snapshot from disk and swap it in.

        A failed reload keeps the previous snapshot if it was healthy;
        otherwise the failed (empty) snapshot replaces it.
        """
        with self._load_lock:
            fresh = self._build_snapshot()
            previous = self._snapshot
            if not fresh.ok and previous is not None and previous.ok and previous.source:
                logger.warning(
                    f"Reload of {fresh.source} failed ({fresh.error}); "
                    f"keeping previous snapshot with {previous.record_count} records"
                )
                return previous
            self._snapshot = fresh
            return fresh

    def refresh_if_changed(self) -> bool:
        """
        Reload when the dataset file changed since the last load.

        Returns:
            True if a new snapshot was swapped in
        """
        if self._path is None:
            return False
        current = self.snapshot()
        mtime = _file_mtime(self._path)
        if mtime is not None and mtime == current.mtime:
            return False
        if mtime is None and not current.ok:
            return False
        return self.reload() is not current

    def status(self) -> dict:
        """Snapshot summary for health endpoints."""
        snap = self.snapshot()
        usable = sum(1 for r in snap.records if r.is_usable)
        return {
            "source": snap.source,
            "available": snap.ok,
            "error": snap.error,
            "record_count": snap.record_count,
            "usable_record_count": usable,
            "loaded_at": snap.loaded_at.isoformat(),
        }

    def _build_snapshot(self) -> RecordSnapshot:
        if self._path is None:
            return RecordSnapshot(error="No dataset path configured")

        source = str(self._path)
        mtime = _file_mtime(self._path)
        try:
            records = load_records(self._path)
        except DatasetUnavailableError as e:
            logger.error(f"Price dataset unavailable: {e}")
            return RecordSnapshot(source=source, error=str(e), mtime=mtime)
        except Exception as e:
            logger.exception(f"Unexpected error loading price dataset {source}")
            return RecordSnapshot(source=source, error=f"Could not load dataset: {e}", mtime=mtime)

        logger.info(f"Loaded {len(records)} price records from {source}")
        return RecordSnapshot(records=tuple(records), source=source, mtime=mtime)


def _file_mtime(path: Path) -> Optional[float]:
    try:
        return path.stat().st_mtime
    except OSError:
        return None
