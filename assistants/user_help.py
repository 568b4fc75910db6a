from typing import Any, Dict, Mapping, Optional

from assistants.base import Assistant
from assistants.types import Caller
from config import Config
from roles import ADMIN, CUSTOMER, STAFF, SUBSCRIBER

SYSTEM_PROMPT = """You are the support assistant of a book-printing system. Your tasks:

1. Answer general user questions
2. Guide users through the system
3. Resolve common problems
4. Help with account management
5. Give general information about the services

Be friendly, professional and helpful.
If a question is outside your competence, point the user to the right department."""


class UserHelpAssistant(Assistant):
    """General support for every signed-in user."""

    assistant_id = "user_help"
    name = "User Support"
    description = "General guidance and support for users"
    allowed_roles = (ADMIN, STAFF, CUSTOMER, SUBSCRIBER)
    capabilities = ("general_help", "faq", "troubleshooting", "account_help")
    system_prompt = SYSTEM_PROMPT
    preferred_provider = "gemini"

    def prepare_context(
        self,
        base_context: Optional[Mapping[str, Any]],
        caller: Optional[Caller] = None,
    ) -> Dict[str, Any]:
        context = dict(base_context or {})
        if caller:
            self._enrich(context, "user_role", lambda: caller.role or None)
            self._enrich(context, "user_display_name", lambda: caller.display_name)
        context["app_version"] = Config.APP_VERSION
        return context
