from typing import Any, Dict, Mapping, Optional, Tuple

from errors import GenerationFailed
from providers.base import ModelProvider, PreparedCall
from providers.types import GenerationOptions

STUB_REPLY = "This is a stubbed response."
FAIL_TRIGGER = "[fail]"


class StubProvider(ModelProvider):
    """
    Deterministic fake provider for testing and CI.

    Never touches the network and needs no configuration. A prompt
    containing "[fail]" produces a generation_failed response.
    """

    provider_id = "stub"
    display_name = "Stub"
    endpoint = "stub://local"
    max_tokens = 4096
    default_model = "stub-echo"
    config_fields = ()

    def build_request(
        self,
        prompt: str,
        config: Mapping[str, str],
        options: GenerationOptions,
    ) -> PreparedCall:
        return PreparedCall(
            url=self.endpoint,
            body={"prompt": prompt, "system_prompt": options.system_prompt},
        )

    def _post(self, call: PreparedCall, timeout_s: Optional[float]) -> Dict[str, Any]:
        prompt = call.body["prompt"]
        if FAIL_TRIGGER in prompt:
            raise GenerationFailed("Stub provider asked to fail")
        return {"text": STUB_REPLY, "tokens": len(prompt.split())}

    def parse_reply(self, data: Dict[str, Any]) -> Tuple[str, int]:
        return data["text"], data["tokens"]
