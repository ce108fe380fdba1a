"""Process-local TTL cache for news records and derived results.

Records live under ``news:id:<id>`` keys; any other key holds an opaque
JSON-serializable value (query results, cached summaries). The whole map
can be snapshotted to a single JSON file and restored on startup with
each entry's remaining lifetime shortened by the downtime.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime, timedelta, timezone
import json
import logging
import math
import os
from pathlib import Path
import tempfile
import threading
import time
from typing import Any, Callable, Dict, List, Optional, Tuple

from .errors import InvalidInputError, PersistenceError
from .models import NewsRecord

logger = logging.getLogger(__name__)

RECORD_PREFIX = "news:id:"
CAPACITY_EVICTION_SHARE = 0.3


def record_key(record_id: str) -> str:
    return f"{RECORD_PREFIX}{record_id}"


def _json_default(value: Any) -> Any:
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _encoded_size(value: Any) -> int:
    return len(json.dumps(value, default=_json_default, ensure_ascii=False).encode("utf-8"))


@dataclass(slots=True)
class CacheEntry:
    key: str
    value: Any
    expires_at: Optional[float] = None  # None never expires

    def is_live(self, now: float) -> bool:
        return self.expires_at is None or now < self.expires_at


@dataclass(slots=True)
class CacheStats:
    key_count: int
    hits: int
    misses: int
    hit_rate: float
    approximate_size_kb: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class _RepeatingTimer(threading.Thread):
    def __init__(self, interval: float, callback: Callable[[], Any], name: str) -> None:
        super().__init__(name=name, daemon=True)
        self._interval = interval
        self._callback = callback
        self._stopped = threading.Event()

    def run(self) -> None:
        while not self._stopped.wait(self._interval):
            try:
                self._callback()
            except Exception:  # pragma: no cover - keep the timer alive
                logger.exception("Cache timer %s failed", self.name)

    def cancel(self) -> None:
        self._stopped.set()


class RecordStore:
    """TTL key-value store with hit/miss accounting and JSON snapshots."""

    def __init__(
        self,
        default_ttl: float = 3600,
        check_period: float = 600,
        snapshot_path: Optional[os.PathLike | str] = None,
        save_interval: float = 60,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if default_ttl < 0:
            raise InvalidInputError("default_ttl must not be negative")
        self.default_ttl = default_ttl
        self.check_period = check_period
        self.save_interval = save_interval
        self.snapshot_path = Path(snapshot_path) if snapshot_path else None
        self._clock = clock
        self._lock = threading.RLock()
        self._entries: Dict[str, CacheEntry] = {}
        self._hits = 0
        self._misses = 0
        self._timers: List[_RepeatingTimer] = []
        if self.snapshot_path is not None:
            self.load_snapshot()

    # -- lifecycle -------------------------------------------------------

    def start(self) -> None:
        """Schedule the periodic TTL sweep and snapshot timers."""
        if self._timers:
            return
        if self.check_period and self.check_period > 0:
            self._timers.append(_RepeatingTimer(self.check_period, self.purge_expired, "cache-sweep"))
        if self.snapshot_path is not None and self.save_interval and self.save_interval > 0:
            self._timers.append(_RepeatingTimer(self.save_interval, self.save_snapshot, "cache-snapshot"))
        for timer in self._timers:
            timer.start()

    def stop(self) -> None:
        """Cancel timers and write one final snapshot."""
        timers, self._timers = self._timers, []
        for timer in timers:
            timer.cancel()
        for timer in timers:
            timer.join(timeout=5)
        self.save_snapshot()

    shutdown = stop

    def __enter__(self) -> "RecordStore":
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    # -- key/value API ---------------------------------------------------

    def _expiry(self, ttl: Optional[float]) -> Optional[float]:
        if ttl is None:
            ttl = self.default_ttl
        if ttl < 0:
            raise InvalidInputError("ttl must not be negative")
        if ttl == 0:
            return None
        return self._clock() + ttl

    def _live_entry(self, key: str) -> Optional[CacheEntry]:
        # Caller holds the lock.
        entry = self._entries.get(key)
        if entry is not None and not entry.is_live(self._clock()):
            del self._entries[key]
            return None
        return entry

    def get(self, key: str) -> Any:
        with self._lock:
            entry = self._live_entry(key)
            if entry is None:
                self._misses += 1
                return None
            self._hits += 1
            return entry.value

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> bool:
        # get() reports a miss as None, so None cannot be stored.
        if value is None:
            raise InvalidInputError(f"cannot cache None under {key!r}")
        expires_at = self._expiry(ttl)
        with self._lock:
            self._entries[key] = CacheEntry(key=key, value=value, expires_at=expires_at)
        return True

    def delete(self, key: str) -> int:
        with self._lock:
            return 1 if self._entries.pop(key, None) is not None else 0

    def flush_all(self) -> None:
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0

    def keys(self) -> List[str]:
        """Snapshot of known keys; may include expired keys not yet purged."""
        with self._lock:
            return list(self._entries)

    def update_ttl(self, key: str, ttl: float) -> bool:
        expires_at = self._expiry(ttl)
        with self._lock:
            entry = self._live_entry(key)
            if entry is None:
                return False
            entry.expires_at = expires_at
            return True

    def get_ttl(self, key: str) -> Optional[float]:
        """Expiry timestamp of ``key``, ``0`` if it never expires, ``None`` if absent."""
        with self._lock:
            entry = self._live_entry(key)
            if entry is None:
                return None
            return 0 if entry.expires_at is None else entry.expires_at

    def purge_expired(self) -> int:
        now = self._clock()
        with self._lock:
            expired = [key for key, entry in self._entries.items() if not entry.is_live(now)]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.debug("Purged %d expired cache entries", len(expired))
        return len(expired)

    def _live_items(self) -> List[CacheEntry]:
        now = self._clock()
        with self._lock:
            return [entry for entry in self._entries.values() if entry.is_live(now)]

    def stats(self) -> CacheStats:
        entries = self._live_items()
        with self._lock:
            hits, misses = self._hits, self._misses
        accesses = hits + misses
        hit_rate = round(hits / accesses * 100, 2) if accesses else 0.0
        size = sum(_encoded_size(entry.value) for entry in entries)
        return CacheStats(
            key_count=len(entries),
            hits=hits,
            misses=misses,
            hit_rate=hit_rate,
            approximate_size_kb=round(size / 1024),
        )

    # -- record helpers --------------------------------------------------

    def set_record(self, record: NewsRecord, ttl: Optional[float] = None) -> bool:
        return self.set(record_key(record.id), record, ttl)

    def get_record(self, record_id: str) -> Optional[NewsRecord]:
        return self.get(record_key(record_id))

    def all_records(self) -> List[NewsRecord]:
        records = [
            entry.value
            for entry in self._live_items()
            if entry.key.startswith(RECORD_PREFIX) and isinstance(entry.value, NewsRecord)
        ]
        records.sort(key=lambda record: record.published_at, reverse=True)
        return records

    def evict_older_than(self, days: float) -> int:
        if days < 0:
            raise InvalidInputError("days must not be negative")
        cutoff = datetime.fromtimestamp(self._clock(), tz=timezone.utc) - timedelta(days=days)
        removed = 0
        for record in self.all_records():
            if record.published_at < cutoff:
                removed += self.delete(record_key(record.id))
        if removed:
            logger.info("Evicted %d records published before %s", removed, cutoff.isoformat())
        return removed

    def enforce_capacity(self, max_size_kb: float) -> int:
        """Drop the oldest 30% of records when the estimated size exceeds the budget."""
        if self.stats().approximate_size_kb <= max_size_kb:
            return 0
        records = self.all_records()
        count = math.floor(len(records) * CAPACITY_EVICTION_SHARE)
        oldest = records[len(records) - count:] if count else []
        removed = 0
        for record in oldest:
            removed += self.delete(record_key(record.id))
        logger.info("Cache over %s KB budget, removed %d oldest records", max_size_kb, removed)
        return removed

    # -- persistence -----------------------------------------------------

    def save_snapshot(self) -> bool:
        if self.snapshot_path is None:
            return False
        now = self._clock()
        entries = self._live_items()
        payload: Dict[str, Dict[str, Any]] = {}
        for entry in entries:
            remaining = None if entry.expires_at is None else entry.expires_at - now
            payload[entry.key] = {"value": entry.value, "ttl": remaining, "savedAt": now}
        try:
            self._write_snapshot(payload)
        except PersistenceError as exc:
            logger.warning("Cache snapshot save failed: %s", exc)
            return False
        logger.info("Cache snapshot saved (%d keys) to %s", len(payload), self.snapshot_path)
        return True

    def _write_snapshot(self, payload: Dict[str, Dict[str, Any]]) -> None:
        path = self.snapshot_path
        assert path is not None
        tmp_name = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", dir=path.parent, prefix=f".{path.name}.", delete=False
            ) as handle:
                tmp_name = handle.name
                json.dump(payload, handle, default=_json_default, ensure_ascii=False, indent=2)
            os.replace(tmp_name, path)
        except (OSError, TypeError, ValueError) as exc:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise PersistenceError(f"cannot write {path}: {exc}") from exc

    def _read_snapshot(self) -> Dict[str, Any]:
        path = self.snapshot_path
        assert path is not None
        try:
            with path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        except (OSError, ValueError) as exc:
            raise PersistenceError(f"cannot read {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise PersistenceError(f"{path} does not hold a JSON object")
        return data

    def load_snapshot(self) -> int:
        """Re-admit snapshot entries whose remaining TTL survived the downtime."""
        if self.snapshot_path is None or not self.snapshot_path.exists():
            return 0
        try:
            data = self._read_snapshot()
        except PersistenceError as exc:
            logger.warning("Ignoring unreadable cache snapshot: %s", exc)
            return 0

        now = self._clock()
        loaded = 0
        for key, item in data.items():
            restored = self._restore_entry(key, item, now)
            if restored is None:
                continue
            value, expires_at = restored
            with self._lock:
                self._entries[key] = CacheEntry(key=key, value=value, expires_at=expires_at)
            loaded += 1
        logger.info("Cache snapshot loaded (%d keys) from %s", loaded, self.snapshot_path)
        return loaded

    def _restore_entry(self, key: str, item: Any, now: float) -> Optional[Tuple[Any, Optional[float]]]:
        if not isinstance(item, dict) or "value" not in item:
            return None
        ttl = item.get("ttl")
        expires_at = None
        try:
            if ttl is not None:
                remaining = float(ttl) - (now - float(item.get("savedAt", now)))
                if remaining <= 0:
                    return None
                expires_at = now + remaining
            value = item["value"]
            if value is None:
                return None
            if key.startswith(RECORD_PREFIX):
                value = NewsRecord.from_dict(value)
        except (KeyError, TypeError, ValueError) as exc:
            logger.debug("Skipping malformed snapshot entry %s: %s", key, exc)
            return None
        return value, expires_at
