"""
Abstract storage boundaries.

Providers, assistants and the confidentiality gate depend ONLY on these
interfaces, never on a concrete backend. Swapping the in-memory backend for
SQLite changes durability, not behavior.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from storage.types import AuditEntry, OrderRecord


class SettingsStore(ABC):
    """
    Process-wide key/value configuration storage.

    Values must be JSON-serializable. Entries have no expiry.
    """

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Return the stored value for key, or default when absent."""
        raise NotImplementedError

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store value under key, replacing any previous value."""
        raise NotImplementedError

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove key. Missing keys are ignored."""
        raise NotImplementedError


class AuditLog(ABC):
    """Append-only log of firewall actions."""

    @abstractmethod
    def record(
        self,
        action: str,
        outcome: str,
        reason: str,
        actor: Optional[str] = None,
    ) -> AuditEntry:
        """Append one entry and return it."""
        raise NotImplementedError

    @abstractmethod
    def recent(self, limit: int = 50) -> List[AuditEntry]:
        """Return up to limit entries, newest first."""
        raise NotImplementedError


class OrderRepository(ABC):
    """Read access to orders plus the aggregates the assistants use."""

    @abstractmethod
    def add(self, order: OrderRecord) -> OrderRecord:
        """Persist a new order and return it with its id assigned."""
        raise NotImplementedError

    @abstractmethod
    def list_orders(self, user_id: Optional[int] = None) -> List[OrderRecord]:
        """All orders, or only those owned by user_id."""
        raise NotImplementedError

    @abstractmethod
    def get(self, order_id: int) -> Optional[OrderRecord]:
        raise NotImplementedError

    @abstractmethod
    def count_all(self) -> int:
        raise NotImplementedError

    @abstractmethod
    def count_by_status(self) -> Dict[str, int]:
        raise NotImplementedError

    @abstractmethod
    def total_revenue(self) -> float:
        raise NotImplementedError

    @abstractmethod
    def count_recent(self, days: int) -> int:
        """Orders created within the last `days` days."""
        raise NotImplementedError

    @abstractmethod
    def count_for_user(self, user_id: int) -> int:
        raise NotImplementedError

    def get_summary(self, order_id: int) -> Optional[Dict[str, Any]]:
        """Summary fields of a single order, or None if it does not exist."""
        order = self.get(order_id)
        return order.summary() if order else None
