"""
Infrastructure initialization and bootstrap.

Singleton pattern for creating all service backends from configuration.
"""

import logging
from typing import Optional

from assistants import AssistantRegistry
from errors import ValidationFailed
from firewall.gate import ConfidentialityGate
from firewall.state import FirewallState
from providers import ProviderRegistry

from .config import InfraConfig, get_config

logger = logging.getLogger(__name__)


class InfraBootstrap:
    """
    Bootstrap infrastructure based on configuration.

    Singleton pattern - single instance per process.
    """

    _instance: Optional["InfraBootstrap"] = None

    def __init__(self, config: Optional[InfraConfig] = None):
        """Initialize bootstrap with configuration."""
        self.config = config or get_config()
        self.settings = self.config.create_settings_store()
        self.audit_log = self.config.create_audit_log()
        self.orders = self.config.create_order_repository()

        self.providers = ProviderRegistry(self.settings)
        if self.config.active_models and not self.providers.active_ids():
            self.providers.set_active(self.config.active_models)

        self.firewall_state = FirewallState(self.settings)
        self.gate = ConfidentialityGate(self.firewall_state, self.audit_log)
        if self.config.firewall_secret_seed and not self.firewall_state.secret:
            self._seed_firewall_secret(self.config.firewall_secret_seed)

        self.assistants = AssistantRegistry(
            self.providers,
            self.settings,
            self.orders,
            timeout_s=self.config.provider_timeout_s,
            gate=self.gate,
        )

    def _seed_firewall_secret(self, seed: str) -> None:
        """Store the environment secret, subject to the same validation as admin updates."""
        try:
            self.gate.update_settings(secret=seed, actor="bootstrap")
        except ValidationFailed as e:
            logger.error(f"FIREWALL_SECRET_KEY ignored: {e.message}")
            return
        logger.info("Firewall secret seeded from environment")

    @classmethod
    def get_instance(cls, config: Optional[InfraConfig] = None) -> "InfraBootstrap":
        """
        Get singleton instance.

        Args:
            config: Optional custom configuration (only used first time)

        Returns:
            Singleton InfraBootstrap instance
        """
        if cls._instance is None:
            cls._instance = cls(config)
        return cls._instance

    @classmethod
    def reset(cls):
        """Reset singleton (for testing)."""
        cls._instance = None

    def __repr__(self) -> str:
        """String representation showing configured backends."""
        return (
            f"InfraBootstrap(storage={self.config.storage_backend}, "
            f"active_models={self.providers.active_ids()}, "
            f"firewall={self.firewall_state!r})"
        )


def bootstrap_infrastructure(config: Optional[InfraConfig] = None) -> InfraBootstrap:
    """
    Bootstrap all infrastructure backends.

    Args:
        config: Optional custom configuration

    Returns:
        InfraBootstrap instance with all backends initialized
    """
    return InfraBootstrap.get_instance(config)
