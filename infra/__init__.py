"""
Infrastructure module exports.

Configuration and bootstrap for all service backends.
"""

from .config import InfraConfig, get_config, StorageBackendType
from .bootstrap import InfraBootstrap, bootstrap_infrastructure

__all__ = [
    "InfraConfig",
    "get_config",
    "StorageBackendType",
    "InfraBootstrap",
    "bootstrap_infrastructure",
]
