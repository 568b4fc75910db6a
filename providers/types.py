from dataclasses import dataclass, field
from typing import Optional, Dict, Any, Literal

from errors import ErrorKind

FieldType = Literal["text", "password", "select"]

DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 1000
DEFAULT_TIMEOUT_S = 30


@dataclass(frozen=True)
class ConfigField:
    key: str                   # e.g. "api_key", "model"
    label: str
    type: FieldType = "text"
    required: bool = False
    default: Optional[str] = None
    options: Dict[str, str] = field(default_factory=dict)   # value -> display label, for "select"
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "label": self.label,
            "type": self.type,
            "required": self.required,
            "default": self.default,
            "options": dict(self.options),
            "description": self.description,
        }


@dataclass
class GenerationOptions:
    temperature: float = DEFAULT_TEMPERATURE
    max_tokens: int = DEFAULT_MAX_TOKENS
    system_prompt: Optional[str] = None
    timeout_s: Optional[float] = DEFAULT_TIMEOUT_S


@dataclass
class GenerationResponse:
    """
    Normalized provider reply.

    Exactly one of `text` / `error` is populated, decided by `success`.
    Use the `ok()` and `failure()` constructors.
    """

    success: bool
    text: Optional[str] = None
    model: Optional[str] = None
    tokens: int = 0
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    provider: Optional[str] = None

    def __post_init__(self):
        if self.success and (self.text is None or self.error is not None):
            raise ValueError("successful response must carry text and no error")
        if not self.success and (self.error is None or self.text is not None):
            raise ValueError("failed response must carry an error and no text")

    @classmethod
    def ok(cls, text: str, model: str, tokens: int = 0, provider: Optional[str] = None) -> "GenerationResponse":
        return cls(success=True, text=text, model=model, tokens=tokens, provider=provider)

    @classmethod
    def failure(cls, error: str, kind: ErrorKind, provider: Optional[str] = None) -> "GenerationResponse":
        return cls(success=False, error=error, error_kind=kind, provider=provider)
