"""
Storage Backend Tests

In-memory and SQLite backends implement the same interfaces; swapping one
for the other changes durability, not behavior.
"""

import tempfile
from datetime import datetime, timedelta
from pathlib import Path

import pytest

from storage import (
    InMemoryAuditLog,
    InMemoryOrderRepository,
    InMemorySettingsStore,
    OrderRecord,
    SQLiteAuditLog,
    SQLiteOrderRepository,
    SQLiteSettingsStore,
)


@pytest.fixture(params=["memory", "sqlite"])
def backend(request):
    if request.param == "memory":
        yield {
            "settings": InMemorySettingsStore(),
            "audit": InMemoryAuditLog(),
            "orders": InMemoryOrderRepository(),
        }
        return

    with tempfile.TemporaryDirectory() as tmpdir:
        db_path = str(Path(tmpdir) / "test.db")
        stores = {
            "settings": SQLiteSettingsStore(db_path),
            "audit": SQLiteAuditLog(db_path),
            "orders": SQLiteOrderRepository(db_path),
        }
        yield stores
        for store in stores.values():
            store.close()


# ═══════════════════════════════════════════════════════════════════════════════
# SETTINGS
# ═══════════════════════════════════════════════════════════════════════════════


class TestSettingsStore:
    def test_missing_key_returns_default(self, backend):
        assert backend["settings"].get("nope") is None
        assert backend["settings"].get("nope", []) == []

    def test_values_round_trip(self, backend):
        store = backend["settings"]
        store.set("ai_active_models", ["gpt", "stub"])
        store.set("firewall_enabled", True)
        store.set("ai_assistant_order_config", {"allowed_roles": ["admin"]})

        assert store.get("ai_active_models") == ["gpt", "stub"]
        assert store.get("firewall_enabled") is True
        assert store.get("ai_assistant_order_config") == {"allowed_roles": ["admin"]}

    def test_set_replaces(self, backend):
        store = backend["settings"]
        store.set("k", "one")
        store.set("k", "two")
        assert store.get("k") == "two"

    def test_delete(self, backend):
        store = backend["settings"]
        store.set("k", "v")
        store.delete("k")
        store.delete("never-set")
        assert store.get("k") is None

    def test_returned_values_are_copies(self, backend):
        store = backend["settings"]
        store.set("sizes", ["A5"])
        store.get("sizes").append("B5")
        assert store.get("sizes") == ["A5"]


# ═══════════════════════════════════════════════════════════════════════════════
# AUDIT LOG
# ═══════════════════════════════════════════════════════════════════════════════


class TestAuditLog:
    def test_recent_newest_first(self, backend):
        log = backend["audit"]
        log.record("lockdown_activated", "success", "on", actor="a")
        log.record("lockdown_deactivated", "success", "off", actor="b")

        entries = log.recent()
        assert [e.action for e in entries] == ["lockdown_deactivated", "lockdown_activated"]
        assert entries[0].id is not None
        assert entries[0].actor == "b"

    def test_limit(self, backend):
        log = backend["audit"]
        for i in range(60):
            log.record("settings_updated", "success", f"change {i}")

        assert len(log.recent()) == 50
        assert len(log.recent(5)) == 5
        assert log.recent(1)[0].reason == "change 59"


# ═══════════════════════════════════════════════════════════════════════════════
# ORDERS
# ═══════════════════════════════════════════════════════════════════════════════


class TestOrderRepository:
    @pytest.fixture
    def repo(self, backend):
        repo = backend["orders"]
        old = (datetime.now() - timedelta(days=60)).isoformat(timespec="seconds")
        repo.add(OrderRecord(order_number="A", user_id=1, status="pending", total_price=10.0))
        repo.add(OrderRecord(order_number="B", user_id=1, status="shipped", total_price=20.5))
        repo.add(OrderRecord(order_number="C", user_id=2, status="pending", total_price=5.0, created_at=old))
        return repo

    def test_ids_assigned(self, repo):
        assert [o.id for o in repo.list_orders()] == [1, 2, 3]

    def test_add_leaves_caller_record_untouched(self, backend):
        draft = OrderRecord(order_number="D", user_id=3)
        stored = backend["orders"].add(draft)

        assert stored.id == 1
        assert draft.id is None
        assert stored is not draft

    def test_filter_by_user(self, repo):
        assert [o.order_number for o in repo.list_orders(user_id=1)] == ["A", "B"]
        assert repo.list_orders(user_id=99) == []

    def test_aggregates(self, repo):
        assert repo.count_all() == 3
        assert repo.count_by_status() == {"pending": 2, "shipped": 1}
        assert repo.total_revenue() == pytest.approx(35.5)
        assert repo.count_recent(30) == 2
        assert repo.count_for_user(1) == 2

    def test_summary(self, repo):
        summary = repo.get_summary(2)
        assert summary["order_number"] == "B"
        assert summary["status"] == "shipped"
        assert "notes" not in summary
        assert repo.get_summary(404) is None

    def test_empty_repository(self, backend):
        repo = backend["orders"]
        assert repo.count_all() == 0
        assert repo.total_revenue() == 0.0
        assert repo.count_by_status() == {}


class TestSQLiteDurability:
    """Data survives reopening the database file."""

    def test_settings_survive_reopen(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            db_path = str(Path(tmpdir) / "test.db")
            first = SQLiteSettingsStore(db_path)
            first.set("firewall_lockdown_mode", True)
            first.close()

            second = SQLiteSettingsStore(db_path)
            assert second.get("firewall_lockdown_mode") is True
            second.close()

    def test_orders_survive_reopen(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            db_path = str(Path(tmpdir) / "test.db")
            first = SQLiteOrderRepository(db_path)
            first.add(OrderRecord(order_number="X", notes="@WAR# vip"))
            first.close()

            second = SQLiteOrderRepository(db_path)
            assert second.get(1).notes == "@WAR# vip"
            second.close()

    def test_in_memory_database_when_no_path(self):
        store = SQLiteSettingsStore()
        store.set("k", 1)
        assert store.get("k") == 1
        assert store.db_path == ":memory:"
