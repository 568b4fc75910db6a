from typing import Any, Dict, Mapping, Optional

from assistants.base import Assistant
from assistants.types import Caller
from providers.registry import ProviderRegistry
from roles import ADMIN, STAFF
from storage.base import OrderRepository, SettingsStore

RECENT_DAYS = 30

SYSTEM_PROMPT = """You are the assistant for managers of a book-printing system. Your responsibilities:

1. Analyse order data
2. Provide statistical reports
3. Identify patterns and trends
4. Suggest process optimizations
5. Support management decisions
6. Analyse performance and profitability

Answers must be precise, data-driven and actionable.
Ask the user for more data when you need it."""


class AdminToolsAssistant(Assistant):
    """Order statistics and reporting for managers."""

    assistant_id = "admin_tools"
    name = "Admin Assistant"
    description = "Helps managers analyse data and make decisions"
    allowed_roles = (ADMIN, STAFF)
    capabilities = ("data_analysis", "statistics", "reporting", "insights", "optimization")
    system_prompt = SYSTEM_PROMPT
    preferred_provider = "gpt"

    def __init__(self, providers: ProviderRegistry, settings: SettingsStore, orders: OrderRepository):
        super().__init__(providers, settings)
        self.orders = orders

    def _statistics(self) -> Dict[str, Any]:
        return {
            "total_orders": self.orders.count_all(),
            "orders_by_status": self.orders.count_by_status(),
            "total_revenue": self.orders.total_revenue(),
            "recent_orders": self.orders.count_recent(RECENT_DAYS),
        }

    def prepare_context(
        self,
        base_context: Optional[Mapping[str, Any]],
        caller: Optional[Caller] = None,
    ) -> Dict[str, Any]:
        context = dict(base_context or {})
        self._enrich(context, "statistics", self._statistics)
        return context
