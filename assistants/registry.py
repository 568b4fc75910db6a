"""
Assistant registry.

Maps assistant identifiers to instances sharing one provider registry,
settings store, order repository and confidentiality gate.
"""

from typing import Dict, List, Optional

from assistants.admin_tools import AdminToolsAssistant
from assistants.base import Assistant
from assistants.order import OrderAssistant
from assistants.user_help import UserHelpAssistant
from firewall.gate import ConfidentialityGate
from providers.registry import ProviderRegistry
from storage.base import OrderRepository, SettingsStore


class AssistantRegistry:
    """All assistants known to the application."""

    def __init__(
        self,
        providers: ProviderRegistry,
        settings: SettingsStore,
        orders: OrderRepository,
        timeout_s: Optional[float] = None,
        gate: Optional[ConfidentialityGate] = None,
    ):
        assistants: List[Assistant] = [
            OrderAssistant(providers, settings, orders, gate=gate),
            AdminToolsAssistant(providers, settings, orders),
            UserHelpAssistant(providers, settings),
        ]
        if timeout_s is not None:
            for assistant in assistants:
                assistant.timeout_s = timeout_s
        self._assistants: Dict[str, Assistant] = {a.assistant_id: a for a in assistants}

    def get(self, assistant_id: str) -> Optional[Assistant]:
        return self._assistants.get(assistant_id)

    def all(self) -> List[Assistant]:
        return list(self._assistants.values())

    def available_for(self, role: Optional[str]) -> List[Assistant]:
        return [a for a in self._assistants.values() if a.can_access(role)]
