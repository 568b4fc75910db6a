"""
Storage layer types.

Order records are the rows the confidentiality gate filters and the
assistants summarize. Audit entries record every firewall transition attempt.
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Optional, Dict, Any, Literal

AuditOutcome = Literal["success", "failure"]


def _now_iso() -> str:
    return datetime.now().isoformat(timespec="seconds")


@dataclass
class OrderRecord:
    """A book-printing order as stored by the order repository."""

    order_number: str
    user_id: Optional[int] = None
    status: str = "pending"
    book_title: str = ""
    book_size: str = ""
    paper_type: str = ""
    binding_type: str = ""
    quantity: int = 0
    total_price: float = 0.0
    notes: str = ""                   # free-text annotation, scanned for the confidentiality marker
    created_at: str = field(default_factory=_now_iso)
    id: Optional[int] = None

    def summary(self) -> Dict[str, Any]:
        """Fields an assistant may see for a single order."""
        return {
            "order_number": self.order_number,
            "status": self.status,
            "book_title": self.book_title,
            "book_size": self.book_size,
            "paper_type": self.paper_type,
            "binding_type": self.binding_type,
            "quantity": self.quantity,
            "total_price": self.total_price,
            "created_at": self.created_at,
        }

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class AuditEntry:
    """One firewall audit log row."""

    action: str
    outcome: AuditOutcome
    reason: str
    actor: Optional[str] = None
    created_at: str = field(default_factory=_now_iso)
    id: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
