"""
AI assistant endpoints.

Chat requests are routed to an assistant by id; the assistant checks the
caller's role, enriches the context and delegates to the selected provider.
Provider failures come back as a 200 with `success: false` and an error
kind, the same tagged result the assistant layer returns.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from api.deps import get_assistants, get_caller, get_providers, require_admin
from assistants import AssistantRegistry, Caller
from providers import ProviderRegistry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ai", tags=["AI"])


class ChatRequest(BaseModel):
    message: str = Field(..., min_length=1)
    assistant_id: str = "order"
    context: Dict[str, Any] = Field(default_factory=dict)


class ChatReplyData(BaseModel):
    model: Optional[str] = None
    tokens_used: int = 0
    provider: Optional[str] = None


class ChatResponse(BaseModel):
    success: bool
    message: str
    data: Optional[ChatReplyData] = None
    error_kind: Optional[str] = None


class ProviderConfigRequest(BaseModel):
    values: Dict[str, str] = Field(default_factory=dict)


class ActiveProvidersRequest(BaseModel):
    provider_ids: List[str]


@router.post("/chat", response_model=ChatResponse, response_model_exclude_none=True)
def chat(
    request: ChatRequest,
    caller: Caller = Depends(get_caller),
    assistants: AssistantRegistry = Depends(get_assistants),
) -> Dict[str, Any]:
    assistant = assistants.get(request.assistant_id)
    if assistant is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown assistant: {request.assistant_id}",
        )

    if not assistant.can_access(caller.role):
        logger.info(
            f"Assistant {assistant.assistant_id} denied role {caller.role or '<none>'}",
            extra={"user_id": caller.user_id},
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not have access to this assistant",
        )

    reply = assistant.process_request(request.message, request.context, caller)
    return reply.to_dict()


@router.get("/assistants")
def list_assistants(
    caller: Caller = Depends(get_caller),
    assistants: AssistantRegistry = Depends(get_assistants),
) -> List[Dict[str, Any]]:
    return [a.describe() for a in assistants.available_for(caller.role)]


# ============================================================================
# PROVIDER ADMINISTRATION
# ============================================================================

@router.get("/providers")
def list_providers(
    _: Caller = Depends(require_admin),
    providers: ProviderRegistry = Depends(get_providers),
) -> Dict[str, Any]:
    active = providers.active_ids()
    return {
        "active": active,
        "providers": [dict(p.describe(), active=p.provider_id in active) for p in providers.all()],
    }


@router.put("/providers/active")
def set_active_providers(
    request: ActiveProvidersRequest,
    _: Caller = Depends(require_admin),
    providers: ProviderRegistry = Depends(get_providers),
) -> Dict[str, List[str]]:
    try:
        providers.set_active(request.provider_ids)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    return {"active": providers.active_ids()}


@router.put("/providers/{provider_id}")
def configure_provider(
    provider_id: str,
    request: ProviderConfigRequest,
    _: Caller = Depends(require_admin),
    providers: ProviderRegistry = Depends(get_providers),
) -> Dict[str, Any]:
    provider = providers.get(provider_id)
    if provider is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown provider: {provider_id}")

    provider.save_configuration(request.values)
    return provider.describe()


@router.post("/providers/{provider_id}/validate")
def validate_provider(
    provider_id: str,
    request: ProviderConfigRequest,
    _: Caller = Depends(require_admin),
    providers: ProviderRegistry = Depends(get_providers),
) -> Dict[str, bool]:
    """Test candidate credentials with a minimal live call. Nothing is stored."""
    provider = providers.get(provider_id)
    if provider is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown provider: {provider_id}")

    return {"valid": provider.validate_credentials(request.values)}
