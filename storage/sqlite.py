"""
SQLite-backed storage.

Durable implementations of the storage interfaces. SQLite is an
implementation detail: callers only see SettingsStore, AuditLog and
OrderRepository.

Design:
- One connection per store, guarded by a lock (FastAPI runs sync handlers
  in a thread pool)
- WAL mode for file databases
- ':memory:' when no path is given (useful for testing)
- Values in the settings table are JSON-encoded
"""

import copy
import json
import logging
import sqlite3
import threading
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from storage.base import AuditLog, OrderRepository, SettingsStore
from storage.types import AuditEntry, OrderRecord

logger = logging.getLogger(__name__)


class _SQLiteBackend:
    """Connection handling shared by the SQLite stores."""

    _schema: str = ""

    def __init__(self, db_path: Optional[str] = None):
        """
        Args:
            db_path: Path to SQLite database file.
                    If None, uses ':memory:'.
        """
        self.db_path = db_path or ":memory:"
        self._lock = threading.Lock()
        self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._initialize_db()

    def _initialize_db(self) -> None:
        with self._lock:
            cursor = self._conn.cursor()
            if self.db_path != ":memory:":
                cursor.execute("PRAGMA journal_mode=WAL")
                cursor.execute("PRAGMA synchronous=FULL")
            cursor.executescript(self._schema)
            self._conn.commit()
        logger.debug(f"SQLite store initialized: {self.db_path} ({type(self).__name__})")

    def _execute(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        with self._lock:
            cursor = self._conn.execute(sql, params)
            self._conn.commit()
            return cursor

    def _fetchall(self, sql: str, params: tuple = ()) -> List[sqlite3.Row]:
        with self._lock:
            return self._conn.execute(sql, params).fetchall()

    def _fetchone(self, sql: str, params: tuple = ()) -> Optional[sqlite3.Row]:
        with self._lock:
            return self._conn.execute(sql, params).fetchone()

    def close(self) -> None:
        with self._lock:
            self._conn.close()


class SQLiteSettingsStore(_SQLiteBackend, SettingsStore):
    """Settings persisted in a `settings` table."""

    _schema = """
        CREATE TABLE IF NOT EXISTS settings (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );
    """

    def get(self, key: str, default: Any = None) -> Any:
        row = self._fetchone("SELECT value FROM settings WHERE key = ?", (key,))
        if row is None:
            return default
        try:
            return json.loads(row["value"])
        except json.JSONDecodeError as e:
            logger.error(f"Corrupted setting {key}: {e}")
            return default

    def set(self, key: str, value: Any) -> None:
        self._execute(
            """
            INSERT INTO settings (key, value)
            VALUES (?, ?)
            ON CONFLICT(key)
            DO UPDATE SET value = excluded.value, updated_at = CURRENT_TIMESTAMP
            """,
            (key, json.dumps(value)),
        )

    def delete(self, key: str) -> None:
        self._execute("DELETE FROM settings WHERE key = ?", (key,))


class SQLiteAuditLog(_SQLiteBackend, AuditLog):
    """Firewall audit entries in a `firewall_logs` table."""

    _schema = """
        CREATE TABLE IF NOT EXISTS firewall_logs (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            actor TEXT,
            action TEXT NOT NULL,
            outcome TEXT NOT NULL,
            reason TEXT NOT NULL,
            created_at TEXT NOT NULL
        );
    """

    def record(
        self,
        action: str,
        outcome: str,
        reason: str,
        actor: Optional[str] = None,
    ) -> AuditEntry:
        entry = AuditEntry(action=action, outcome=outcome, reason=reason, actor=actor)  # type: ignore[arg-type]
        cursor = self._execute(
            """
            INSERT INTO firewall_logs (actor, action, outcome, reason, created_at)
            VALUES (?, ?, ?, ?, ?)
            """,
            (entry.actor, entry.action, entry.outcome, entry.reason, entry.created_at),
        )
        entry.id = cursor.lastrowid
        return entry

    def recent(self, limit: int = 50) -> List[AuditEntry]:
        rows = self._fetchall(
            "SELECT * FROM firewall_logs ORDER BY id DESC LIMIT ?",
            (limit,),
        )
        return [
            AuditEntry(
                id=row["id"],
                actor=row["actor"],
                action=row["action"],
                outcome=row["outcome"],
                reason=row["reason"],
                created_at=row["created_at"],
            )
            for row in rows
        ]


_ORDER_COLUMNS = (
    "order_number",
    "user_id",
    "status",
    "book_title",
    "book_size",
    "paper_type",
    "binding_type",
    "quantity",
    "total_price",
    "notes",
    "created_at",
)


class SQLiteOrderRepository(_SQLiteBackend, OrderRepository):
    """Orders in an `orders` table."""

    _schema = """
        CREATE TABLE IF NOT EXISTS orders (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            order_number TEXT NOT NULL,
            user_id INTEGER,
            status TEXT NOT NULL DEFAULT 'pending',
            book_title TEXT NOT NULL DEFAULT '',
            book_size TEXT NOT NULL DEFAULT '',
            paper_type TEXT NOT NULL DEFAULT '',
            binding_type TEXT NOT NULL DEFAULT '',
            quantity INTEGER NOT NULL DEFAULT 0,
            total_price REAL NOT NULL DEFAULT 0,
            notes TEXT NOT NULL DEFAULT '',
            created_at TEXT NOT NULL
        );
        CREATE INDEX IF NOT EXISTS idx_orders_user ON orders(user_id);
    """

    @staticmethod
    def _to_record(row: sqlite3.Row) -> OrderRecord:
        return OrderRecord(id=row["id"], **{col: row[col] for col in _ORDER_COLUMNS})

    def add(self, order: OrderRecord) -> OrderRecord:
        stored = copy.copy(order)
        placeholders = ", ".join("?" for _ in _ORDER_COLUMNS)
        cursor = self._execute(
            f"INSERT INTO orders ({', '.join(_ORDER_COLUMNS)}) VALUES ({placeholders})",
            tuple(getattr(stored, col) for col in _ORDER_COLUMNS),
        )
        stored.id = cursor.lastrowid
        return stored

    def list_orders(self, user_id: Optional[int] = None) -> List[OrderRecord]:
        if user_id is None:
            rows = self._fetchall("SELECT * FROM orders ORDER BY id")
        else:
            rows = self._fetchall("SELECT * FROM orders WHERE user_id = ? ORDER BY id", (user_id,))
        return [self._to_record(row) for row in rows]

    def get(self, order_id: int) -> Optional[OrderRecord]:
        row = self._fetchone("SELECT * FROM orders WHERE id = ?", (order_id,))
        return self._to_record(row) if row else None

    def count_all(self) -> int:
        return int(self._fetchone("SELECT COUNT(*) AS n FROM orders")["n"])

    def count_by_status(self) -> Dict[str, int]:
        rows = self._fetchall("SELECT status, COUNT(*) AS n FROM orders GROUP BY status")
        return {row["status"]: int(row["n"]) for row in rows}

    def total_revenue(self) -> float:
        row = self._fetchone("SELECT COALESCE(SUM(total_price), 0) AS total FROM orders")
        return float(row["total"])

    def count_recent(self, days: int) -> int:
        cutoff = (datetime.now() - timedelta(days=days)).isoformat(timespec="seconds")
        row = self._fetchone("SELECT COUNT(*) AS n FROM orders WHERE created_at >= ?", (cutoff,))
        return int(row["n"])

    def count_for_user(self, user_id: int) -> int:
        row = self._fetchone("SELECT COUNT(*) AS n FROM orders WHERE user_id = ?", (user_id,))
        return int(row["n"])
