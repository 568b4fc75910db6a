"""
Provider boundary layer for AI text generation.

Callers select a provider by identifier and stay agnostic of the
vendor-specific request and reply shapes.

Supported providers:
- GPTProvider: OpenAI chat completions
- GeminiProvider: Google Gemini generateContent
- GrokProvider: xAI chat completions
- DeepSeekProvider: DeepSeek chat completions
- StubProvider: Deterministic fake provider (default for CI/tests)

Example usage:
    from providers import ProviderRegistry, GenerationOptions
    from storage import InMemorySettingsStore

    registry = ProviderRegistry(InMemorySettingsStore())
    response = registry.get("stub").generate("Hello", options=GenerationOptions())
"""

from .types import ConfigField, GenerationOptions, GenerationResponse
from .base import ModelProvider, PreparedCall, format_prompt
from .chat_completions import ChatCompletionsProvider, DeepSeekProvider, GPTProvider, GrokProvider
from .gemini import GeminiProvider
from .stub import StubProvider
from .registry import ACTIVE_MODELS_SETTING, PROVIDER_CLASSES, ProviderRegistry, create_provider

__all__ = [
    "ConfigField",
    "GenerationOptions",
    "GenerationResponse",
    "ModelProvider",
    "PreparedCall",
    "format_prompt",
    "ChatCompletionsProvider",
    "GPTProvider",
    "GrokProvider",
    "DeepSeekProvider",
    "GeminiProvider",
    "StubProvider",
    "ACTIVE_MODELS_SETTING",
    "PROVIDER_CLASSES",
    "ProviderRegistry",
    "create_provider",
]
