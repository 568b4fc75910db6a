"""
Firewall state.

The three process-wide values the confidentiality gate depends on, read
from and written to an injected SettingsStore. Nothing here is ambient
global state; tests build a state over an in-memory store.
"""

from storage.base import SettingsStore

ENABLED_SETTING = "firewall_enabled"
LOCKDOWN_SETTING = "firewall_lockdown_mode"
SECRET_SETTING = "firewall_secret_key"


class FirewallState:
    """Typed view over the firewall settings."""

    def __init__(self, settings: SettingsStore):
        self.settings = settings

    @property
    def enabled(self) -> bool:
        return bool(self.settings.get(ENABLED_SETTING, False))

    @enabled.setter
    def enabled(self, value: bool) -> None:
        self.settings.set(ENABLED_SETTING, bool(value))

    @property
    def lockdown(self) -> bool:
        return bool(self.settings.get(LOCKDOWN_SETTING, False))

    @lockdown.setter
    def lockdown(self, value: bool) -> None:
        self.settings.set(LOCKDOWN_SETTING, bool(value))

    @property
    def secret(self) -> str:
        return str(self.settings.get(SECRET_SETTING, "") or "")

    @secret.setter
    def secret(self, value: str) -> None:
        self.settings.set(SECRET_SETTING, value or "")

    def __repr__(self) -> str:
        # Never include the secret itself
        return (
            f"FirewallState(enabled={self.enabled}, lockdown={self.lockdown}, "
            f"secret_configured={bool(self.secret)})"
        )
