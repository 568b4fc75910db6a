"""
Provider registry.

Providers are selected by identifier through a table lookup. Which
providers are active is configuration (setting `ai_active_models`), not code.
"""

import logging
from typing import Dict, List, Optional, Type

from providers.base import ModelProvider
from providers.chat_completions import DeepSeekProvider, GPTProvider, GrokProvider
from providers.gemini import GeminiProvider
from providers.stub import StubProvider
from storage.base import SettingsStore

logger = logging.getLogger(__name__)

ACTIVE_MODELS_SETTING = "ai_active_models"

PROVIDER_CLASSES: Dict[str, Type[ModelProvider]] = {
    GPTProvider.provider_id: GPTProvider,
    GeminiProvider.provider_id: GeminiProvider,
    GrokProvider.provider_id: GrokProvider,
    DeepSeekProvider.provider_id: DeepSeekProvider,
    StubProvider.provider_id: StubProvider,
}


def create_provider(provider_id: str, settings: SettingsStore) -> ModelProvider:
    provider_cls = PROVIDER_CLASSES.get(provider_id)
    if provider_cls is None:
        raise ValueError(f"unknown_provider:{provider_id}")
    return provider_cls(settings)


class ProviderRegistry:
    """One instance of every known provider, sharing a settings store."""

    def __init__(self, settings: SettingsStore):
        self.settings = settings
        self._providers: Dict[str, ModelProvider] = {
            provider_id: create_provider(provider_id, settings) for provider_id in PROVIDER_CLASSES
        }

    def get(self, provider_id: str) -> Optional[ModelProvider]:
        return self._providers.get(provider_id)

    def all(self) -> List[ModelProvider]:
        return list(self._providers.values())

    def active_ids(self) -> List[str]:
        active = self.settings.get(ACTIVE_MODELS_SETTING, [])
        if not isinstance(active, list):
            return []
        return [pid for pid in active if pid in self._providers]

    def set_active(self, provider_ids: List[str]) -> None:
        unknown = [pid for pid in provider_ids if pid not in self._providers]
        if unknown:
            raise ValueError(f"unknown_provider:{','.join(unknown)}")
        self.settings.set(ACTIVE_MODELS_SETTING, list(provider_ids))

    def select(self, preferred: Optional[str] = None) -> Optional[ModelProvider]:
        """
        Pick the provider to serve a request.

        The preferred provider wins when it is active and configured;
        otherwise the first active configured provider; otherwise None.
        """
        active = self.active_ids()

        if preferred in active:
            provider = self._providers[preferred]
            if provider.is_configured():
                return provider

        for provider_id in active:
            provider = self._providers[provider_id]
            if provider.is_configured():
                if preferred and provider_id != preferred:
                    logger.info(f"Preferred provider {preferred} unavailable, using {provider_id}")
                return provider

        return None
