"""
Firewall HTTP surface.

- GET /firewall/emergency: query-string lockdown/unlock for cron-style
  callers, authenticated solely by the `key` parameter
- GET/POST /firewall/settings, GET /firewall/logs: administrator only
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from api.deps import get_gate, require_admin
from assistants import Caller
from errors import ValidationFailed
from firewall.gate import ConfidentialityGate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/firewall", tags=["Firewall"])

SUCCESS_TEXT = "Firewall action completed successfully"
FAILURE_TEXT = "Firewall action failed - Invalid key or error"


class FirewallSettingsUpdate(BaseModel):
    enabled: Optional[bool] = None
    secret_key: Optional[str] = None


class FirewallSettingsView(BaseModel):
    enabled: bool
    lockdown: bool
    secret_configured: bool


# ============================================================================
# EMERGENCY ACTIONS (unauthenticated except for the secret)
# ============================================================================

@router.get("/emergency", response_class=PlainTextResponse)
def emergency_action(
    request: Request,
    action: str,
    key: str,
    gate: ConfidentialityGate = Depends(get_gate),
) -> PlainTextResponse:
    """
    Trigger lockdown or unlock with the stored secret.

    Returns:
        200 with a fixed success text, or 401 with a fixed failure text
    """
    actor = f"emergency:{request.client.host if request.client else 'unknown'}"

    if action == "lockdown":
        result = gate.activate_lockdown(key, actor=actor)
    elif action == "unlock":
        result = gate.deactivate_lockdown(key, actor=actor)
    else:
        logger.warning(f"Unknown firewall emergency action: {action}", extra={"actor": actor})
        result = False

    if result:
        return PlainTextResponse(SUCCESS_TEXT, status_code=status.HTTP_200_OK)
    return PlainTextResponse(FAILURE_TEXT, status_code=status.HTTP_401_UNAUTHORIZED)


# ============================================================================
# ADMINISTRATION
# ============================================================================

@router.get("/settings", response_model=FirewallSettingsView)
def read_settings(
    _: Caller = Depends(require_admin),
    gate: ConfidentialityGate = Depends(get_gate),
) -> Dict[str, bool]:
    return gate.get_settings()


@router.post("/settings", response_model=FirewallSettingsView)
def update_settings(
    body: FirewallSettingsUpdate,
    caller: Caller = Depends(require_admin),
    gate: ConfidentialityGate = Depends(get_gate),
) -> Dict[str, bool]:
    actor = f"user:{caller.user_id}" if caller.user_id is not None else "admin"
    try:
        gate.update_settings(enabled=body.enabled, secret=body.secret_key, actor=actor)
    except ValidationFailed as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=e.message,
        )
    return gate.get_settings()


@router.get("/logs")
def read_logs(
    limit: int = 50,
    _: Caller = Depends(require_admin),
    gate: ConfidentialityGate = Depends(get_gate),
) -> List[Dict[str, Any]]:
    return gate.recent_logs(max(1, min(limit, 500)))
