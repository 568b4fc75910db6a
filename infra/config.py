"""
Infrastructure configuration system.

Environment-based backend selection with sensible defaults.
All components default to the in-memory stack.
"""

import os
from typing import List, Literal
from dataclasses import dataclass, field

from storage import (
    AuditLog,
    InMemoryAuditLog,
    InMemoryOrderRepository,
    InMemorySettingsStore,
    OrderRepository,
    SettingsStore,
    SQLiteAuditLog,
    SQLiteOrderRepository,
    SQLiteSettingsStore,
)


StorageBackendType = Literal["memory", "sqlite"]


@dataclass
class InfraConfig:
    """Infrastructure configuration from environment."""

    # Storage
    storage_backend: StorageBackendType = "memory"
    database_path: str = "./printdesk.db"

    # Providers
    active_models: List[str] = field(default_factory=list)
    provider_timeout_s: float = 30.0

    # Firewall
    firewall_secret_seed: str = ""

    @classmethod
    def from_env(cls) -> "InfraConfig":
        """
        Load configuration from environment variables.

        Defaults:
        - Storage: in-memory
        - Providers: none active
        - Provider timeout: 30s
        """
        active = os.getenv("AI_ACTIVE_MODELS", "")
        return cls(
            storage_backend=os.getenv("STORAGE_BACKEND", "memory").lower(),  # type: ignore
            database_path=os.getenv("DATABASE_PATH", "./printdesk.db"),
            active_models=[p.strip() for p in active.split(",") if p.strip()],
            provider_timeout_s=float(os.getenv("PROVIDER_TIMEOUT_S", "30")),
            firewall_secret_seed=os.getenv("FIREWALL_SECRET_KEY", ""),
        )

    def create_settings_store(self) -> SettingsStore:
        """Create settings store based on configuration."""
        if self.storage_backend == "sqlite":
            return SQLiteSettingsStore(self.database_path)
        return InMemorySettingsStore()

    def create_audit_log(self) -> AuditLog:
        """Create firewall audit log based on configuration."""
        if self.storage_backend == "sqlite":
            return SQLiteAuditLog(self.database_path)
        return InMemoryAuditLog()

    def create_order_repository(self) -> OrderRepository:
        """Create order repository based on configuration."""
        if self.storage_backend == "sqlite":
            return SQLiteOrderRepository(self.database_path)
        return InMemoryOrderRepository()


def get_config() -> InfraConfig:
    """Get global infrastructure configuration."""
    return InfraConfig.from_env()
