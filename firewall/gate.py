"""
Confidentiality gate.

SECURITY BOUNDARY - decides which order records a requester may see.

Records whose annotation contains the marker are restricted while the gate
is enabled. Customers never see restricted records; staff and admins see
them unless lockdown is active. Lockdown transitions require the stored
secret, compared in constant time, and every attempt is audited.

State machine:
  disabled --enable--> enabled/unlocked --lockdown(secret)--> enabled/locked
  enabled/locked --unlock(secret)--> enabled/unlocked
"""

import hmac
import logging
import secrets
from typing import Any, Dict, Iterable, List, Optional

from errors import Unauthorized, ValidationFailed
from firewall.state import FirewallState
from roles import classify_role
from storage.base import AuditLog

logger = logging.getLogger(__name__)

MARKER = "@WAR#"
ANNOTATION_FIELD = "notes"
MIN_SECRET_LENGTH = 32


def annotation_of(record: Any, field: str = ANNOTATION_FIELD) -> str:
    """Read the free-text annotation from a mapping or an object."""
    if record is None:
        return ""
    if isinstance(record, dict):
        value = record.get(field)
    else:
        value = getattr(record, field, None)
    return value if isinstance(value, str) else ""


def generate_secret_key() -> str:
    """A random 32-character hex secret."""
    return secrets.token_hex(MIN_SECRET_LENGTH // 2)


class ConfidentialityGate:
    """
    Tagging-and-gating over order records.

    Args:
        state: Injected FirewallState (enabled / lockdown / secret)
        audit_log: Where transition attempts are recorded
    """

    def __init__(self, state: FirewallState, audit_log: AuditLog):
        self.state = state
        self.audit_log = audit_log

    # ── Tagging ───────────────────────────────────────────────────────────────

    @staticmethod
    def _has_marker(record: Any) -> bool:
        return MARKER.lower() in annotation_of(record).lower()

    def is_restricted(self, record: Any) -> bool:
        if not self.state.enabled:
            return False
        return self._has_marker(record)

    def should_notify(self, record: Any) -> bool:
        """Notifications are suppressed only for restricted records."""
        return not self.is_restricted(record)

    # ── Filtering ─────────────────────────────────────────────────────────────

    def filter_for_display(self, records: Iterable[Any], requester_role: Optional[str]) -> List[Any]:
        """
        Drop the records the requester may not see.

        Customers lose every restricted record. Staff and admins lose them
        only in lockdown. Any other role is treated like a customer.
        """
        records = list(records)
        if not self.state.enabled:
            return records

        role_class = classify_role(requester_role)
        if role_class == "internal" and not self.state.lockdown:
            return records

        visible = [r for r in records if not self._has_marker(r)]
        if len(visible) != len(records):
            logger.debug(
                f"Hid {len(records) - len(visible)} restricted records",
                extra={"role": requester_role, "role_class": role_class},
            )
        return visible

    # ── Lockdown ──────────────────────────────────────────────────────────────

    def _authorize(self, supplied_secret: Optional[str]) -> None:
        """
        Raises:
            Unauthorized: gate disabled, no stored secret, or mismatch
        """
        if not self.state.enabled:
            raise Unauthorized("Firewall is disabled")

        stored = self.state.secret
        if not stored:
            raise Unauthorized("No secret key configured")

        # Compare (constant-time to prevent timing attacks)
        if not hmac.compare_digest(stored.encode("utf-8"), (supplied_secret or "").encode("utf-8")):
            raise Unauthorized("Invalid secret key")

    def set_lockdown(self, target_state: bool, supplied_secret: Optional[str], actor: Optional[str] = None) -> bool:
        """
        Switch lockdown on or off.

        Returns:
            True if the secret matched and the state was written
        """
        action = "lockdown_activation" if target_state else "lockdown_deactivation"
        try:
            self._authorize(supplied_secret)
        except Unauthorized as e:
            logger.warning(f"Firewall {action} denied: {e.message}", extra={"actor": actor})
            self.audit_log.record(f"{action}_failed", "failure", e.message, actor=actor)
            return False

        self.state.lockdown = target_state
        reason = "Emergency lockdown mode activated" if target_state else "Emergency lockdown mode deactivated"
        logger.warning(f"Firewall {action} succeeded", extra={"actor": actor})
        self.audit_log.record(
            "lockdown_activated" if target_state else "lockdown_deactivated",
            "success",
            reason,
            actor=actor,
        )
        return True

    def activate_lockdown(self, supplied_secret: Optional[str], actor: Optional[str] = None) -> bool:
        return self.set_lockdown(True, supplied_secret, actor)

    def deactivate_lockdown(self, supplied_secret: Optional[str], actor: Optional[str] = None) -> bool:
        return self.set_lockdown(False, supplied_secret, actor)

    # ── Settings ──────────────────────────────────────────────────────────────

    def update_settings(
        self,
        enabled: Optional[bool] = None,
        secret: Optional[str] = None,
        actor: Optional[str] = None,
    ) -> None:
        """
        Apply new settings, validating everything before writing anything.

        Raises:
            ValidationFailed: secret is non-empty and shorter than 32 characters
        """
        if secret is not None:
            secret = secret.strip()
            if secret and len(secret) < MIN_SECRET_LENGTH:
                self.audit_log.record(
                    "settings_update_failed",
                    "failure",
                    f"Secret key shorter than {MIN_SECRET_LENGTH} characters",
                    actor=actor,
                )
                raise ValidationFailed(f"Secret key must be at least {MIN_SECRET_LENGTH} characters")

        if enabled is not None:
            self.state.enabled = enabled
            self.audit_log.record(
                "settings_updated",
                "success",
                "Firewall enabled" if enabled else "Firewall disabled",
                actor=actor,
            )

        if secret is not None:
            self.state.secret = secret
            self.audit_log.record(
                "settings_updated",
                "success",
                "Secret key updated" if secret else "Secret key cleared",
                actor=actor,
            )

    def save_settings(
        self,
        enabled: Optional[bool] = None,
        secret: Optional[str] = None,
        actor: Optional[str] = None,
    ) -> bool:
        try:
            self.update_settings(enabled=enabled, secret=secret, actor=actor)
        except ValidationFailed as e:
            logger.warning(f"Firewall settings rejected: {e.message}", extra={"actor": actor})
            return False
        return True

    def get_settings(self) -> Dict[str, bool]:
        return {
            "enabled": self.state.enabled,
            "lockdown": self.state.lockdown,
            "secret_configured": bool(self.state.secret),
        }

    def recent_logs(self, limit: int = 50) -> List[Dict[str, Any]]:
        return [entry.to_dict() for entry in self.audit_log.recent(limit)]
