"""
FastAPI dependencies.

Handlers receive their backends through these functions so tests can swap
them with app.dependency_overrides.
"""

from typing import Optional

from fastapi import Depends, Header, HTTPException, status

from assistants import AssistantRegistry, Caller
from firewall.gate import ConfidentialityGate
from infra.bootstrap import InfraBootstrap
from providers import ProviderRegistry
from roles import ADMIN, normalize_role
from storage.base import OrderRepository


def get_infra() -> InfraBootstrap:
    return InfraBootstrap.get_instance()


def get_gate(infra: InfraBootstrap = Depends(get_infra)) -> ConfidentialityGate:
    return infra.gate


def get_providers(infra: InfraBootstrap = Depends(get_infra)) -> ProviderRegistry:
    return infra.providers


def get_assistants(infra: InfraBootstrap = Depends(get_infra)) -> AssistantRegistry:
    return infra.assistants


def get_orders(infra: InfraBootstrap = Depends(get_infra)) -> OrderRepository:
    return infra.orders


def get_caller(
    x_user_role: str = Header(default=""),
    x_user_id: Optional[int] = Header(default=None),
    x_user_name: Optional[str] = Header(default=None),
) -> Caller:
    """Identity forwarded by the authenticating front end."""
    return Caller(role=normalize_role(x_user_role), user_id=x_user_id, display_name=x_user_name)


def require_admin(caller: Caller = Depends(get_caller)) -> Caller:
    if caller.role != ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Administrator role required",
        )
    return caller
