"""
Abstract provider boundary.

Assistants and HTTP handlers depend ONLY on ModelProvider. Each vendor
differs in endpoint shape, auth and JSON field names; all of that stays
inside build_request() / parse_reply().

Key properties:
- generate() returns a GenerationResponse, it never raises
- an unconfigured provider fails fast without touching the network
- exactly one outbound POST per call, no retries
"""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

import requests

from errors import GenerationFailed, NotConfigured, PrintDeskError
from providers.types import ConfigField, GenerationOptions, GenerationResponse
from storage.base import SettingsStore

logger = logging.getLogger(__name__)

SETTING_PREFIX = "ai_model_"
TEST_PROMPT = "Test"
TEST_MAX_TOKENS = 5

_SCALARS = (str, int, float, bool)


def format_prompt(prompt: str, context: Optional[Mapping[str, Any]] = None) -> str:
    """
    Merge context into the prompt text.

    Appends a "Context:" block with one `key: value` line per entry.
    Nested mappings and lists are rendered as compact JSON; None values
    are skipped.
    """
    if not context:
        return prompt

    lines = []
    for key, value in context.items():
        if value is None:
            continue
        if isinstance(value, _SCALARS):
            rendered = str(value)
        else:
            try:
                rendered = json.dumps(value, ensure_ascii=False, sort_keys=True, default=str)
            except (TypeError, ValueError):
                continue
        lines.append(f"{key}: {rendered}")

    if not lines:
        return prompt
    return prompt + "\n\nContext:\n" + "\n".join(lines) + "\n"


@dataclass
class PreparedCall:
    """One outbound vendor request."""

    url: str
    body: Dict[str, Any]
    headers: Dict[str, str] = field(default_factory=dict)
    params: Dict[str, str] = field(default_factory=dict)


class ModelProvider(ABC):
    """
    Abstract text-generation provider.

    Subclasses declare their metadata as class attributes and implement
    build_request() and parse_reply().
    """

    provider_id: str = ""
    display_name: str = ""
    endpoint: str = ""
    max_tokens: int = 4096
    default_model: str = ""
    config_fields: Tuple[ConfigField, ...] = ()

    def __init__(self, settings: SettingsStore):
        self.settings = settings

    # ── Metadata ──────────────────────────────────────────────────────────────

    def get_config_fields(self) -> Tuple[ConfigField, ...]:
        return self.config_fields

    def get_max_tokens(self) -> int:
        return self.max_tokens

    def describe(self) -> Dict[str, Any]:
        return {
            "id": self.provider_id,
            "name": self.display_name,
            "configured": self.is_configured(),
            "max_tokens": self.max_tokens,
            "fields": [f.to_dict() for f in self.config_fields],
        }

    # ── Configuration ─────────────────────────────────────────────────────────

    def setting_key(self, field_key: str) -> str:
        return f"{SETTING_PREFIX}{self.provider_id}_{field_key}"

    def _stored_values(self) -> Dict[str, str]:
        return {f.key: self.settings.get(self.setting_key(f.key), "") or "" for f in self.config_fields}

    def is_configured(self) -> bool:
        """True iff every required field has a non-empty stored value."""
        stored = self._stored_values()
        return all(stored[f.key] for f in self.config_fields if f.required)

    def get_configuration(self) -> Dict[str, str]:
        """Stored values, with declared defaults filling empty fields."""
        stored = self._stored_values()
        return {f.key: stored[f.key] or (f.default or "") for f in self.config_fields}

    def save_configuration(self, values: Mapping[str, Any]) -> None:
        """
        Persist recognized field values.

        Fields with a declared default that are neither supplied nor stored
        get their default written, the way the admin form submits them.
        """
        stored = self._stored_values()
        for f in self.config_fields:
            if f.key in values:
                self.settings.set(self.setting_key(f.key), str(values[f.key] or ""))
            elif not stored[f.key] and f.default:
                self.settings.set(self.setting_key(f.key), f.default)
        logger.info(f"Provider configuration saved: {self.provider_id}")

    def model_for(self, config: Mapping[str, str]) -> str:
        return config.get("model") or self.default_model

    # ── Vendor protocol ───────────────────────────────────────────────────────

    @abstractmethod
    def build_request(
        self,
        prompt: str,
        config: Mapping[str, str],
        options: GenerationOptions,
    ) -> PreparedCall:
        """Build the vendor request body, auth headers and query params."""
        raise NotImplementedError

    @abstractmethod
    def parse_reply(self, data: Dict[str, Any]) -> Tuple[str, int]:
        """
        Extract (text, total_tokens) from the vendor JSON reply.

        Raises:
            GenerationFailed: expected fields are missing
        """
        raise NotImplementedError

    def _post(self, call: PreparedCall, timeout_s: Optional[float]) -> Dict[str, Any]:
        """
        Issue the single outbound POST.

        Raises:
            GenerationFailed: transport error, non-200 status or non-JSON body
        """
        try:
            resp = requests.post(
                call.url,
                json=call.body,
                headers={"Content-Type": "application/json", **call.headers},
                params=call.params or None,
                timeout=timeout_s,
            )
        except requests.Timeout:
            raise GenerationFailed(f"{self.display_name} request timed out")
        except requests.RequestException as e:
            raise GenerationFailed(f"{self.display_name} request failed: {e}")

        try:
            data = resp.json()
        except ValueError:
            data = None

        if resp.status_code != 200:
            raise GenerationFailed(
                f"{self.display_name} returned HTTP {resp.status_code}: {_vendor_error(data)}"
            )
        if not isinstance(data, dict):
            raise GenerationFailed(f"Invalid response from {self.display_name} server")
        return data

    # ── Contract ──────────────────────────────────────────────────────────────

    def generate(
        self,
        prompt: str,
        context: Optional[Mapping[str, Any]] = None,
        options: Optional[GenerationOptions] = None,
    ) -> GenerationResponse:
        """
        Generate text for prompt.

        Args:
            prompt: Free-text user prompt
            context: Optional structured context merged into the prompt
            options: Temperature, max tokens, system prompt, timeout

        Returns:
            GenerationResponse, successful or tagged with an error kind.
        """
        options = options or GenerationOptions()

        if not self.is_configured():
            error = NotConfigured(f"{self.display_name} is not configured")
            logger.warning(f"Generation refused, provider not configured: {self.provider_id}")
            return GenerationResponse.failure(error.message, error.kind, provider=self.provider_id)

        config = self.get_configuration()
        model = self.model_for(config)

        try:
            call = self.build_request(format_prompt(prompt, context), config, options)
            data = self._post(call, options.timeout_s)
            text, tokens = self.parse_reply(data)
        except PrintDeskError as e:
            logger.warning(
                f"Generation failed: {e.message}",
                extra={"provider": self.provider_id, "model": model, "error_kind": e.kind},
            )
            return GenerationResponse.failure(e.message, e.kind, provider=self.provider_id)
        except Exception as e:
            logger.error(f"Unexpected error from {self.provider_id}: {e}", exc_info=True)
            return GenerationResponse.failure(
                f"{self.display_name} request failed: {e}",
                "generation_failed",
                provider=self.provider_id,
            )

        logger.info(
            "Generation succeeded",
            extra={"provider": self.provider_id, "model": model, "tokens": tokens},
        )
        return GenerationResponse.ok(text=text, model=model, tokens=tokens, provider=self.provider_id)

    def validate_credentials(self, candidate: Mapping[str, Any]) -> bool:
        """
        Test candidate credentials with one minimal call.

        The candidate is never persisted.
        """
        for f in self.config_fields:
            if f.required and f.default is None and not candidate.get(f.key):
                return False

        config = {f.key: str(candidate.get(f.key) or f.default or "") for f in self.config_fields}
        options = GenerationOptions(max_tokens=TEST_MAX_TOKENS)

        try:
            call = self.build_request(TEST_PROMPT, config, options)
            data = self._post(call, options.timeout_s)
            self.parse_reply(data)
        except PrintDeskError as e:
            logger.info(f"Credential check failed for {self.provider_id}: {e.message}")
            return False

        logger.info(f"Credential check passed for {self.provider_id}")
        return True


def _vendor_error(data: Any) -> str:
    """Pull a human-readable message out of a vendor error body."""
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str) and error:
            return error
    return "unknown error from server"
