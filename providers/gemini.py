from typing import Any, Dict, Mapping, Tuple

from errors import GenerationFailed
from providers.base import ModelProvider, PreparedCall
from providers.chat_completions import api_key_field, model_field
from providers.types import ConfigField, GenerationOptions


class GeminiProvider(ModelProvider):
    """
    Google Gemini generateContent API.

    Auth is a `key` query parameter rather than a bearer header, the system
    prompt travels as systemInstruction, and no token count is reported.
    """

    provider_id = "gemini"
    display_name = "Google Gemini"
    endpoint = "https://generativelanguage.googleapis.com/v1/models/"
    max_tokens = 8192
    default_model = "gemini-pro"
    config_fields: Tuple[ConfigField, ...] = (
        api_key_field("Google AI Studio"),
        model_field(
            "gemini-pro",
            {"gemini-pro": "Gemini Pro", "gemini-pro-vision": "Gemini Pro Vision"},
            "Gemini",
        ),
    )

    def build_request(
        self,
        prompt: str,
        config: Mapping[str, str],
        options: GenerationOptions,
    ) -> PreparedCall:
        body: Dict[str, Any] = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": options.temperature,
                "maxOutputTokens": options.max_tokens,
            },
        }
        if options.system_prompt:
            body["systemInstruction"] = {"parts": [{"text": options.system_prompt}]}

        return PreparedCall(
            url=f"{self.endpoint}{self.model_for(config)}:generateContent",
            params={"key": config.get("api_key", "")},
            body=body,
        )

    def parse_reply(self, data: Dict[str, Any]) -> Tuple[str, int]:
        try:
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            raise GenerationFailed(f"Invalid response from {self.display_name} server")
        if not isinstance(text, str):
            raise GenerationFailed(f"Invalid response from {self.display_name} server")
        return text, 0
