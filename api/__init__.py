"""
API module - FastAPI route handlers.

Includes:
- ai.py: Assistant chat and provider administration
- orders.py: Order listing through the confidentiality gate
- deps.py: Shared dependencies (backends, caller identity)
"""

from api.ai import router as ai_router
from api.orders import router as orders_router

__all__ = ["ai_router", "orders_router"]
