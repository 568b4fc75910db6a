"""
Storage module exports.

Settings, audit log and order repository interfaces with in-memory and
SQLite implementations.
"""

from storage.base import AuditLog, OrderRepository, SettingsStore
from storage.memory import InMemoryAuditLog, InMemoryOrderRepository, InMemorySettingsStore
from storage.sqlite import SQLiteAuditLog, SQLiteOrderRepository, SQLiteSettingsStore
from storage.types import AuditEntry, AuditOutcome, OrderRecord

__all__ = [
    "SettingsStore",
    "AuditLog",
    "OrderRepository",
    "InMemorySettingsStore",
    "InMemoryAuditLog",
    "InMemoryOrderRepository",
    "SQLiteSettingsStore",
    "SQLiteAuditLog",
    "SQLiteOrderRepository",
    "AuditEntry",
    "AuditOutcome",
    "OrderRecord",
]
