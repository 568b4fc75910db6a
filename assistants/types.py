from dataclasses import dataclass
from typing import Optional, Dict, Any

from errors import ErrorKind


@dataclass
class Caller:
    """Identity of the party invoking an assistant."""

    role: str
    user_id: Optional[int] = None
    display_name: Optional[str] = None


@dataclass
class AssistantReply:
    success: bool
    message: str                          # generated text, or the provider's error verbatim
    model: Optional[str] = None
    tokens_used: int = 0
    provider: Optional[str] = None
    error_kind: Optional[ErrorKind] = None

    def to_dict(self) -> Dict[str, Any]:
        if self.success:
            return {
                "success": True,
                "message": self.message,
                "data": {
                    "model": self.model,
                    "tokens_used": self.tokens_used,
                    "provider": self.provider,
                },
            }
        return {"success": False, "message": self.message, "error_kind": self.error_kind}
