"""
Assistant layer: role-gated, prompt-templated consumers of providers.
"""

from assistants.types import AssistantReply, Caller
from assistants.base import Assistant, NO_PROVIDER_MESSAGE
from assistants.order import OrderAssistant
from assistants.admin_tools import AdminToolsAssistant
from assistants.user_help import UserHelpAssistant
from assistants.registry import AssistantRegistry

__all__ = [
    "AssistantReply",
    "Caller",
    "Assistant",
    "NO_PROVIDER_MESSAGE",
    "OrderAssistant",
    "AdminToolsAssistant",
    "UserHelpAssistant",
    "AssistantRegistry",
]
