"""
Confidentiality gate ("firewall") for order records.

The HTTP surface lives in firewall.router and is mounted by main.py.
"""

from firewall.state import ENABLED_SETTING, LOCKDOWN_SETTING, SECRET_SETTING, FirewallState
from firewall.gate import (
    ANNOTATION_FIELD,
    MARKER,
    MIN_SECRET_LENGTH,
    ConfidentialityGate,
    annotation_of,
    generate_secret_key,
)

__all__ = [
    "ENABLED_SETTING",
    "LOCKDOWN_SETTING",
    "SECRET_SETTING",
    "FirewallState",
    "ANNOTATION_FIELD",
    "MARKER",
    "MIN_SECRET_LENGTH",
    "ConfidentialityGate",
    "annotation_of",
    "generate_secret_key",
]
