"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import pytest

# Add project root to sys.path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from firewall import ConfidentialityGate, FirewallState  # noqa: E402
from providers import ProviderRegistry  # noqa: E402
from storage import (  # noqa: E402
    InMemoryAuditLog,
    InMemoryOrderRepository,
    InMemorySettingsStore,
    OrderRecord,
)

SECRET = "0123456789abcdef0123456789abcdef"


@pytest.fixture
def secret():
    return SECRET


@pytest.fixture
def settings():
    return InMemorySettingsStore()


@pytest.fixture
def audit_log():
    return InMemoryAuditLog()


@pytest.fixture
def orders():
    return InMemoryOrderRepository(
        [
            OrderRecord(order_number="ORD-1", user_id=7, status="pending", total_price=120.0),
            OrderRecord(
                order_number="ORD-2",
                user_id=7,
                status="completed",
                total_price=80.0,
                notes="@WAR# confidential",
            ),
            OrderRecord(order_number="ORD-3", user_id=8, status="pending", total_price=50.0),
        ]
    )


@pytest.fixture
def firewall_state(settings):
    return FirewallState(settings)


@pytest.fixture
def gate(firewall_state, audit_log):
    """Enabled gate with a valid secret, not in lockdown."""
    firewall_state.enabled = True
    firewall_state.secret = SECRET
    return ConfidentialityGate(firewall_state, audit_log)


@pytest.fixture
def providers(settings):
    return ProviderRegistry(settings)

