"""
Chat-completions providers: OpenAI GPT, xAI Grok and DeepSeek.

All three speak the same protocol:
  POST <endpoint>
  Authorization: Bearer <api_key>
  {model, messages: [{role, content}], temperature, max_tokens}
Reply text at choices[0].message.content, tokens at usage.total_tokens.
"""

from typing import Any, Dict, Mapping, Tuple

from errors import GenerationFailed
from providers.base import ModelProvider, PreparedCall
from providers.types import ConfigField, GenerationOptions


def api_key_field(source: str) -> ConfigField:
    return ConfigField(
        key="api_key",
        label="API Key",
        type="password",
        required=True,
        description=f"API key issued by {source}",
    )


def model_field(default: str, options: Dict[str, str], family: str) -> ConfigField:
    return ConfigField(
        key="model",
        label="Model",
        type="select",
        required=True,
        default=default,
        options=options,
        description=f"{family} model to use",
    )


class ChatCompletionsProvider(ModelProvider):
    """Bearer-token chat-completions protocol shared by several vendors."""

    def build_request(
        self,
        prompt: str,
        config: Mapping[str, str],
        options: GenerationOptions,
    ) -> PreparedCall:
        messages = [{"role": "user", "content": prompt}]
        if options.system_prompt:
            messages.insert(0, {"role": "system", "content": options.system_prompt})

        return PreparedCall(
            url=self.endpoint,
            headers={"Authorization": f"Bearer {config.get('api_key', '')}"},
            body={
                "model": self.model_for(config),
                "messages": messages,
                "temperature": options.temperature,
                "max_tokens": options.max_tokens,
            },
        )

    def parse_reply(self, data: Dict[str, Any]) -> Tuple[str, int]:
        try:
            text = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            raise GenerationFailed(f"Invalid response from {self.display_name} server")
        if not isinstance(text, str):
            raise GenerationFailed(f"Invalid response from {self.display_name} server")

        usage = data.get("usage") or {}
        tokens = usage.get("total_tokens", 0) if isinstance(usage, dict) else 0
        return text, int(tokens or 0)


class GPTProvider(ChatCompletionsProvider):
    provider_id = "gpt"
    display_name = "OpenAI GPT"
    endpoint = "https://api.openai.com/v1/chat/completions"
    max_tokens = 4096
    default_model = "gpt-3.5-turbo"
    config_fields = (
        api_key_field("OpenAI"),
        model_field(
            "gpt-3.5-turbo",
            {"gpt-3.5-turbo": "GPT-3.5 Turbo", "gpt-4": "GPT-4", "gpt-4-turbo": "GPT-4 Turbo"},
            "GPT",
        ),
    )


class GrokProvider(ChatCompletionsProvider):
    provider_id = "grok"
    display_name = "xAI Grok"
    endpoint = "https://api.x.ai/v1/chat/completions"
    max_tokens = 8192
    default_model = "grok-beta"
    config_fields = (
        api_key_field("xAI"),
        model_field("grok-beta", {"grok-beta": "Grok Beta", "grok-1": "Grok 1"}, "Grok"),
    )


class DeepSeekProvider(ChatCompletionsProvider):
    provider_id = "deepseek"
    display_name = "DeepSeek"
    endpoint = "https://api.deepseek.com/v1/chat/completions"
    max_tokens = 4096
    default_model = "deepseek-chat"
    config_fields = (
        api_key_field("DeepSeek"),
        model_field(
            "deepseek-chat",
            {"deepseek-chat": "DeepSeek Chat", "deepseek-coder": "DeepSeek Coder"},
            "DeepSeek",
        ),
    )
