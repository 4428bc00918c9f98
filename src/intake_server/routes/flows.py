"""Flow lifecycle endpoints: create, inspect, list and abandon flows.

All endpoints require the ``X-User-ID`` header.  A flow is identified by
the (user_id, flow_id) pair.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from intake_flow.models.step import FlowInfo

from intake_server.dependencies import get_registry, get_user_id
from intake_server.registry import FlowRegistry

router = APIRouter(tags=["flows"])


class CreateFlowRequest(BaseModel):
    """Body for POST /flows."""
    flow_id: str


@router.post("/flows", status_code=201)
async def create_flow(
    body: CreateFlowRequest,
    user_id: str = Depends(get_user_id),
    registry: FlowRegistry = Depends(get_registry),
) -> FlowInfo:
    """Start a new onboarding flow at the first screen.

    Returns 409 if the user already has a flow with this id.
    """
    return registry.create(user_id=user_id, flow_id=body.flow_id).info()


@router.get("/flows")
async def list_flows(
    user_id: str = Depends(get_user_id),
    registry: FlowRegistry = Depends(get_registry),
) -> list[FlowInfo]:
    """List the caller's live flows."""
    return [f.info() for f in registry.list_for_user(user_id)]


@router.get("/flows/{flow_id}")
async def get_flow(
    flow_id: str,
    user_id: str = Depends(get_user_id),
    registry: FlowRegistry = Depends(get_registry),
) -> FlowInfo:
    return registry.get(user_id=user_id, flow_id=flow_id).info()


@router.delete("/flows/{flow_id}", status_code=204)
async def abandon_flow(
    flow_id: str,
    user_id: str = Depends(get_user_id),
    registry: FlowRegistry = Depends(get_registry),
) -> None:
    """Abandon a flow; collected answers are discarded, nothing is stored."""
    registry.discard(user_id=user_id, flow_id=flow_id)
