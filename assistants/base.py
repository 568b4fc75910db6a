"""
Abstract assistant.

An assistant is a role-gated, prompt-templated consumer of a provider.
It never talks to a vendor directly: it asks the ProviderRegistry for a
provider and delegates to its generate().

Key properties:
- can_access() is a pure set-membership check
- prepare_context() is read-only and best-effort: a failing data source
  leaves its key absent instead of failing the request
- provider failures surface verbatim, with the same error kind
"""

import logging
from abc import ABC
from typing import Any, Callable, Dict, List, Mapping, Optional

from assistants.types import AssistantReply, Caller
from providers.registry import ProviderRegistry
from providers.types import DEFAULT_TIMEOUT_S, GenerationOptions
from roles import normalize_role
from storage.base import SettingsStore

logger = logging.getLogger(__name__)

NO_PROVIDER_MESSAGE = "No active AI provider is configured"

# Keys only an assistant may fill in; callers cannot supply them
RESERVED_CONTEXT_KEYS = frozenset(
    {
        "order_details",
        "user_orders_count",
        "statistics",
        "user_role",
        "user_display_name",
        "app_version",
        "available_book_sizes",
        "available_binding_types",
    }
)


def sanitize_context(context: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Copy of a caller-supplied context without the reserved enrichment keys."""
    return {k: v for k, v in (context or {}).items() if k not in RESERVED_CONTEXT_KEYS}


class Assistant(ABC):
    """
    Base assistant.

    Subclasses set the class attributes and override prepare_context().
    Stored overrides under `ai_assistant_<id>_config` may replace
    allowed_roles, capabilities and system_prompt.
    """

    assistant_id: str = ""
    name: str = ""
    description: str = ""
    allowed_roles: tuple = ()
    capabilities: tuple = ()
    system_prompt: str = ""
    preferred_provider: str = "gpt"
    timeout_s: float = DEFAULT_TIMEOUT_S

    def __init__(self, providers: ProviderRegistry, settings: SettingsStore):
        self.providers = providers
        self.settings = settings

    # ── Configuration overrides ───────────────────────────────────────────────

    def _override(self) -> Dict[str, Any]:
        config = self.settings.get(f"ai_assistant_{self.assistant_id}_config", {})
        return config if isinstance(config, dict) else {}

    def get_allowed_roles(self) -> List[str]:
        roles = self._override().get("allowed_roles")
        if roles and isinstance(roles, list):
            return [normalize_role(r) for r in roles]
        return list(self.allowed_roles)

    def get_capabilities(self) -> List[str]:
        capabilities = self._override().get("capabilities")
        if capabilities and isinstance(capabilities, list):
            return list(capabilities)
        return list(self.capabilities)

    def get_system_prompt(self) -> str:
        prompt = self._override().get("system_prompt")
        if prompt and isinstance(prompt, str):
            return prompt
        return self.system_prompt

    def describe(self) -> Dict[str, Any]:
        return {
            "id": self.assistant_id,
            "name": self.name,
            "description": self.description,
            "capabilities": self.get_capabilities(),
            "preferred_provider": self.preferred_provider,
        }

    # ── Access ────────────────────────────────────────────────────────────────

    def can_access(self, role: Optional[str]) -> bool:
        return normalize_role(role) in self.get_allowed_roles()

    # ── Request processing ────────────────────────────────────────────────────

    def prepare_context(
        self,
        base_context: Optional[Mapping[str, Any]],
        caller: Optional[Caller] = None,
    ) -> Dict[str, Any]:
        """Return an enriched copy of base_context. The default adds nothing."""
        return dict(base_context or {})

    def _enrich(self, context: Dict[str, Any], key: str, loader: Callable[[], Any]) -> None:
        """Set context[key] from loader(), leaving it absent on None or failure."""
        try:
            value = loader()
        except Exception as e:
            logger.warning(
                f"Context source unavailable for {self.assistant_id}.{key}: {e}",
                extra={"assistant_id": self.assistant_id, "context_key": key},
            )
            return
        if value is not None:
            context[key] = value

    def process_request(
        self,
        user_text: str,
        context: Optional[Mapping[str, Any]] = None,
        caller: Optional[Caller] = None,
    ) -> AssistantReply:
        """
        Answer user_text with the selected provider.

        Args:
            user_text: The user's request
            context: Caller-supplied context
            caller: Identity used for context enrichment

        Returns:
            AssistantReply carrying the generated text or the provider error
        """
        provider = self.providers.select(self.preferred_provider)
        if provider is None:
            logger.warning(f"No provider available for assistant {self.assistant_id}")
            return AssistantReply(success=False, message=NO_PROVIDER_MESSAGE, error_kind="not_configured")

        enriched = self.prepare_context(sanitize_context(context), caller)
        response = provider.generate(
            user_text,
            enriched,
            GenerationOptions(system_prompt=self.get_system_prompt(), timeout_s=self.timeout_s),
        )

        if not response.success:
            return AssistantReply(
                success=False,
                message=response.error or "",
                provider=provider.provider_id,
                error_kind=response.error_kind,
            )

        logger.info(
            f"Assistant {self.assistant_id} answered",
            extra={"provider": provider.provider_id, "tokens": response.tokens},
        )
        return AssistantReply(
            success=True,
            message=response.text or "",
            model=response.model,
            tokens_used=response.tokens,
            provider=provider.provider_id,
        )
