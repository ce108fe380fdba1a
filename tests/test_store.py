import json

import pytest

from news_analytics.errors import InvalidInputError
from news_analytics.models import NewsRecord
from news_analytics.store import RECORD_PREFIX, RecordStore, record_key

from .conftest import make_record


def _reopen(store: RecordStore, clock) -> RecordStore:
    return RecordStore(default_ttl=3600, check_period=0, snapshot_path=store.snapshot_path, save_interval=0, clock=clock)


class TestKeyValue:
    def test_set_get_delete(self, store):
        assert store.set("query:1", {"a": 1})
        assert store.get("query:1") == {"a": 1}
        assert store.delete("query:1") == 1
        assert store.delete("query:1") == 0
        assert store.get("query:1") is None

    def test_none_value_rejected(self, store):
        with pytest.raises(InvalidInputError):
            store.set("k", None)
        assert store.keys() == []

    def test_set_overwrites(self, store):
        store.set("k", "old")
        store.set("k", "new")
        assert store.get("k") == "new"

    def test_ttl_expiry(self, store, clock):
        store.set("k", "v", ttl=1)
        clock.advance(0.9)
        assert store.get("k") == "v"
        clock.advance(0.2)
        assert store.get("k") is None

    def test_default_ttl(self, store, clock):
        store.set("k", "v")
        clock.advance(3599)
        assert store.get("k") == "v"
        clock.advance(2)
        assert store.get("k") is None

    def test_zero_ttl_never_expires(self, store, clock):
        store.set("k", "v", ttl=0)
        clock.advance(10**9)
        assert store.get("k") == "v"
        assert store.get_ttl("k") == 0

    def test_negative_ttl_rejected(self, store):
        with pytest.raises(InvalidInputError):
            store.set("k", "v", ttl=-1)

    def test_update_and_get_ttl(self, store, clock):
        store.set("k", "v", ttl=10)
        assert store.get_ttl("k") == clock.now + 10
        assert store.update_ttl("k", 100)
        clock.advance(50)
        assert store.get("k") == "v"
        assert store.update_ttl("missing", 5) is False
        assert store.get_ttl("missing") is None

    def test_keys_may_include_expired_until_purged(self, store, clock):
        store.set("short", 1, ttl=1)
        store.set("long", 2)
        clock.advance(2)
        assert sorted(store.keys()) == ["long", "short"]
        assert store.purge_expired() == 1
        assert store.keys() == ["long"]

    def test_flush_all_resets_counters(self, store):
        store.set("k", "v")
        store.get("k")
        store.get("missing")
        store.flush_all()
        stats = store.stats()
        assert stats.key_count == 0
        assert stats.hits == 0
        assert stats.misses == 0


class TestStats:
    def test_hit_rate(self, store):
        store.set("k", "v")
        for _ in range(3):
            store.get("k")
        store.get("missing")
        stats = store.stats()
        assert stats.hits == 3
        assert stats.misses == 1
        assert stats.hit_rate == 75.0

    def test_hit_rate_rounding(self, store):
        store.set("k", "v")
        store.get("k")
        store.get("a")
        store.get("b")
        assert store.stats().hit_rate == round(1 / 3 * 100, 2)

    def test_no_accesses(self, store):
        assert store.stats().hit_rate == 0

    def test_expired_access_counts_as_miss(self, store, clock):
        store.set("k", "v", ttl=1)
        clock.advance(5)
        store.get("k")
        assert store.stats().misses == 1

    def test_approximate_size(self, store):
        store.set("big", "x" * 5000)
        assert store.stats().approximate_size_kb == 5
        assert store.stats().key_count == 1


class TestRecords:
    def test_all_records_sorted_and_filtered(self, store, clock):
        old = make_record("Eski haber", hours_ago=5)
        new = make_record("Yeni haber", hours_ago=1)
        expiring = make_record("Geçici haber", hours_ago=0)
        store.set_record(old)
        store.set_record(new)
        store.set_record(expiring, ttl=1)
        store.set("news:query:all::", [new.to_dict()])
        clock.advance(2)
        assert store.all_records() == [new, old]

    def test_get_record(self, store):
        record = make_record("Haber başlığı")
        store.set_record(record)
        assert store.get(record_key(record.id)) is record
        assert store.get_record(record.id) is record
        assert record_key(record.id).startswith(RECORD_PREFIX)

    def test_evict_older_than(self, store):
        recent = make_record("Dünkü haber", hours_ago=24)
        stale = make_record("Geçen ayki haber", hours_ago=24 * 10)
        store.set_record(recent)
        store.set_record(stale)
        store.set("summary:x", {"summary": "keep"})
        assert store.evict_older_than(7) == 1
        assert store.all_records() == [recent]
        assert store.get("summary:x") == {"summary": "keep"}

    def test_enforce_capacity_drops_oldest_share(self, store):
        records = [make_record(f"Haber {i}", hours_ago=i, content="y" * 2048) for i in range(10)]
        for record in records:
            store.set_record(record)
        assert store.enforce_capacity(1) == 3
        assert store.all_records() == records[:7]

    def test_enforce_capacity_within_budget(self, store):
        store.set_record(make_record("Haber"))
        assert store.enforce_capacity(10240) == 0

    def test_empty_store(self, store):
        assert store.all_records() == []
        assert store.evict_older_than(7) == 0
        assert store.enforce_capacity(0) == 0


class TestPersistence:
    def test_round_trip_recomputes_remaining_ttl(self, store, clock):
        record = make_record("Kalıcı haber")
        store.set_record(record, ttl=100)
        store.set("summary:1", {"summary": "özet"}, ttl=10)
        store.set("forever", [1, 2], ttl=0)
        assert store.save_snapshot()

        clock.advance(60)
        restored = _reopen(store, clock)
        assert restored.get_record(record.id) == record
        assert isinstance(restored.get_record(record.id), NewsRecord)
        assert restored.get("summary:1") is None
        assert restored.get("forever") == [1, 2]

        clock.advance(41)
        assert restored.get_record(record.id) is None

    def test_snapshot_format(self, store, clock):
        store.set("k", {"a": 1}, ttl=30)
        store.save_snapshot()
        data = json.loads(store.snapshot_path.read_text(encoding="utf-8"))
        assert data == {"k": {"value": {"a": 1}, "ttl": 30, "savedAt": clock.now}}

    def test_write_is_atomic(self, store):
        store.set("k", "v")
        store.save_snapshot()
        store.save_snapshot()
        assert [path.name for path in store.snapshot_path.parent.iterdir()] == ["persistent-cache.json"]

    def test_expired_entries_not_saved(self, store, clock):
        store.set("k", "v", ttl=1)
        clock.advance(2)
        store.save_snapshot()
        assert json.loads(store.snapshot_path.read_text(encoding="utf-8")) == {}

    def test_unknown_fields_ignored(self, store, clock):
        record = make_record("İleri uyumlu haber")
        value = record.to_dict()
        value["sentiment"] = "neutral"
        store.snapshot_path.parent.mkdir(parents=True)
        store.snapshot_path.write_text(
            json.dumps(
                {
                    record_key(record.id): {"value": value, "ttl": 50, "savedAt": clock.now, "version": 2},
                    "broken": "not an entry",
                }
            ),
            encoding="utf-8",
        )
        restored = _reopen(store, clock)
        assert restored.get_record(record.id) == record
        assert restored.keys() == [record_key(record.id)]

    def test_corrupt_snapshot_is_ignored(self, store, clock):
        store.snapshot_path.parent.mkdir(parents=True)
        store.snapshot_path.write_text("{not json", encoding="utf-8")
        restored = _reopen(store, clock)
        assert restored.keys() == []
        assert restored.set("k", "v")
        assert restored.get("k") == "v"

    def test_write_failure_is_not_fatal(self, tmp_path, clock):
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        store = RecordStore(snapshot_path=blocker / "cache.json", check_period=0, save_interval=0, clock=clock)
        store.set("k", "v")
        assert store.save_snapshot() is False
        assert store.get("k") == "v"

    def test_no_snapshot_path(self, clock):
        store = RecordStore(snapshot_path=None, clock=clock)
        assert store.save_snapshot() is False
        assert store.load_snapshot() == 0


class TestLifecycle:
    def test_stop_writes_final_snapshot(self, store):
        store.start()
        store.set("k", "v", ttl=0)
        store.stop()
        assert json.loads(store.snapshot_path.read_text(encoding="utf-8"))["k"]["value"] == "v"

    def test_context_manager_with_timers(self, tmp_path, clock):
        path = tmp_path / "snap.json"
        with RecordStore(snapshot_path=path, check_period=0.01, save_interval=0.01, clock=clock) as store:
            store.set("k", "v")
        assert path.exists()
        assert store._timers == []
