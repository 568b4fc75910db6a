"""
In-memory storage backends for testing and CI.

Deterministic, no external dependencies. Data lives as long as the object.
"""

import copy
import threading
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from storage.base import AuditLog, OrderRepository, SettingsStore
from storage.types import AuditEntry, OrderRecord


class InMemorySettingsStore(SettingsStore):
    """Dict-backed settings store."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self.storage: Dict[str, Any] = dict(initial or {})

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self.storage:
            return default
        # Callers must not be able to mutate stored values in place
        return copy.deepcopy(self.storage[key])

    def set(self, key: str, value: Any) -> None:
        self.storage[key] = copy.deepcopy(value)

    def delete(self, key: str) -> None:
        self.storage.pop(key, None)


class InMemoryAuditLog(AuditLog):
    """List-backed audit log."""

    def __init__(self):
        self.entries: List[AuditEntry] = []
        self._lock = threading.Lock()

    def record(
        self,
        action: str,
        outcome: str,
        reason: str,
        actor: Optional[str] = None,
    ) -> AuditEntry:
        with self._lock:
            entry = AuditEntry(
                action=action,
                outcome=outcome,  # type: ignore[arg-type]
                reason=reason,
                actor=actor,
                id=len(self.entries) + 1,
            )
            self.entries.append(entry)
        return entry

    def recent(self, limit: int = 50) -> List[AuditEntry]:
        return list(reversed(self.entries))[:limit]


class InMemoryOrderRepository(OrderRepository):
    """List-backed order repository."""

    def __init__(self, orders: Optional[List[OrderRecord]] = None):
        self.orders: List[OrderRecord] = []
        self._lock = threading.Lock()
        for order in orders or []:
            self.add(order)

    def add(self, order: OrderRecord) -> OrderRecord:
        with self._lock:
            stored = copy.copy(order)
            stored.id = len(self.orders) + 1
            self.orders.append(stored)
        return stored

    def list_orders(self, user_id: Optional[int] = None) -> List[OrderRecord]:
        if user_id is None:
            return list(self.orders)
        return [o for o in self.orders if o.user_id == user_id]

    def get(self, order_id: int) -> Optional[OrderRecord]:
        for order in self.orders:
            if order.id == order_id:
                return order
        return None

    def count_all(self) -> int:
        return len(self.orders)

    def count_by_status(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for order in self.orders:
            counts[order.status] = counts.get(order.status, 0) + 1
        return counts

    def total_revenue(self) -> float:
        return float(sum(o.total_price for o in self.orders))

    def count_recent(self, days: int) -> int:
        cutoff = (datetime.now() - timedelta(days=days)).isoformat(timespec="seconds")
        return sum(1 for o in self.orders if o.created_at >= cutoff)

    def count_for_user(self, user_id: int) -> int:
        return len(self.list_orders(user_id))
