"""
Order listing, filtered through the confidentiality gate.

Customers only ever see their own orders; the gate then removes whatever
their role may not see. Staff and admins list every order.
"""

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends

from api.deps import get_caller, get_gate, get_orders
from assistants import Caller
from firewall.gate import ConfidentialityGate
from roles import classify_role
from storage.base import OrderRepository

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Orders"])


@router.get("/orders")
def list_orders(
    caller: Caller = Depends(get_caller),
    orders: OrderRepository = Depends(get_orders),
    gate: ConfidentialityGate = Depends(get_gate),
) -> List[Dict[str, Any]]:
    if classify_role(caller.role) == "internal":
        records = orders.list_orders()
    elif caller.user_id is None:
        records = []
    else:
        records = orders.list_orders(user_id=caller.user_id)

    visible = gate.filter_for_display(records, caller.role)
    return [record.to_dict() for record in visible]
