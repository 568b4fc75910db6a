import logging
from typing import Any, Dict, Mapping, Optional

from assistants.base import Assistant
from assistants.types import Caller
from firewall.gate import ConfidentialityGate
from providers.registry import ProviderRegistry
from roles import ADMIN, CUSTOMER, STAFF, classify_role
from storage.base import OrderRepository, SettingsStore

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are the assistant of a book-printing order system. You help users with:

1. Information about the order placement process
2. Approximate price estimates from the book parameters
3. Tracking the status of orders
4. Explaining product parameters (book size, paper type, binding, ...)
5. Choosing the best options for printing a book

Answer clearly, precisely and briefly.
If a question is outside this scope, tell the user you can only help with book orders."""


class OrderAssistant(Assistant):
    """Order placement, pricing and tracking help."""

    assistant_id = "order"
    name = "Order Assistant"
    description = "Helps place, track and manage book-printing orders"
    allowed_roles = (ADMIN, STAFF, CUSTOMER)
    capabilities = ("order_information", "price_calculation", "order_status", "product_parameters")
    system_prompt = SYSTEM_PROMPT
    preferred_provider = "gpt"

    def __init__(
        self,
        providers: ProviderRegistry,
        settings: SettingsStore,
        orders: OrderRepository,
        gate: Optional[ConfidentialityGate] = None,
    ):
        super().__init__(providers, settings)
        self.orders = orders
        self.gate = gate

    def _visible_order(self, order_id: Any, caller: Optional[Caller]) -> Optional[Dict[str, Any]]:
        """
        Summary of order_id if the caller may see it, else None.

        Customers only reach their own orders; the gate then applies the
        same confidentiality rules as the order listing.
        """
        order = self.orders.get(int(order_id))
        if order is None or caller is None:
            return None

        if classify_role(caller.role) != "internal":
            if caller.user_id is None or order.user_id != caller.user_id:
                logger.info(
                    f"Order {order_id} withheld from caller",
                    extra={"user_id": caller.user_id, "role": caller.role},
                )
                return None

        if self.gate is not None and not self.gate.filter_for_display([order], caller.role):
            return None
        return order.summary()

    def prepare_context(
        self,
        base_context: Optional[Mapping[str, Any]],
        caller: Optional[Caller] = None,
    ) -> Dict[str, Any]:
        context = dict(base_context or {})

        order_id = context.get("order_id")
        if order_id:
            self._enrich(context, "order_details", lambda: self._visible_order(order_id, caller))

        if caller and caller.user_id:
            self._enrich(context, "user_orders_count", lambda: self.orders.count_for_user(caller.user_id))

        self._enrich(context, "available_book_sizes", lambda: self.settings.get("book_sizes"))
        self._enrich(context, "available_binding_types", lambda: self.settings.get("binding_types"))
        return context
