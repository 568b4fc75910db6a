"""
Requester roles.

Role strings arrive from request headers and stored assistant overrides, so
they are normalized before any membership check.
"""

from typing import Literal, Optional

ADMIN = "admin"
STAFF = "staff"
CUSTOMER = "customer"
SUBSCRIBER = "subscriber"

ROLE_ALIASES = {
    "administrator": ADMIN,
    "shop_manager": STAFF,
    "internal": STAFF,
    "external": CUSTOMER,
}

INTERNAL_ROLES = frozenset({ADMIN, STAFF})
EXTERNAL_ROLES = frozenset({CUSTOMER})

RoleClass = Literal["internal", "external", "unknown"]


def normalize_role(role: Optional[str]) -> str:
    value = (role or "").strip().lower()
    return ROLE_ALIASES.get(value, value)


def classify_role(role: Optional[str]) -> RoleClass:
    normalized = normalize_role(role)
    if normalized in INTERNAL_ROLES:
        return "internal"
    if normalized in EXTERNAL_ROLES:
        return "external"
    return "unknown"
