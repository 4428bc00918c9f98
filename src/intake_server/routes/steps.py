"""Step endpoints: read the current step, send input, navigate.

``advance`` is the only endpoint that can reach storage: from the final
screen it completes the flow.  A storage failure answers 503 and leaves the
flow exactly where it was, so the client repeats the same request.
"""

from fastapi import APIRouter, Body, Depends

from intake_flow.models.step import StepResult

from intake_server.dependencies import get_registry, get_user_id
from intake_server.events import InputEvent, apply_event
from intake_server.registry import FlowRegistry

router = APIRouter(tags=["steps"])


@router.get("/flows/{flow_id}/step")
async def get_current_step(
    flow_id: str,
    user_id: str = Depends(get_user_id),
    registry: FlowRegistry = Depends(get_registry),
) -> StepResult:
    """Return what the client should render right now."""
    return registry.get(user_id=user_id, flow_id=flow_id).current_step()


@router.post("/flows/{flow_id}/events")
async def submit_event(
    flow_id: str,
    event: InputEvent = Body(...),
    user_id: str = Depends(get_user_id),
    registry: FlowRegistry = Depends(get_registry),
) -> StepResult:
    """Apply one input event to the current screen and return the refreshed step.

    Returns 400 if the event does not belong to the screen being shown.
    """
    flow = registry.get(user_id=user_id, flow_id=flow_id)
    apply_event(flow, event)
    return flow.current_step()


@router.post("/flows/{flow_id}/advance")
async def advance(
    flow_id: str,
    user_id: str = Depends(get_user_id),
    registry: FlowRegistry = Depends(get_registry),
) -> StepResult:
    """Move forward; a closed gate returns the same screen with ``blocked``."""
    flow = registry.get(user_id=user_id, flow_id=flow_id)
    return await flow.advance()


@router.post("/flows/{flow_id}/retreat")
async def retreat(
    flow_id: str,
    user_id: str = Depends(get_user_id),
    registry: FlowRegistry = Depends(get_registry),
) -> StepResult:
    """Move back one screen (or close the quick tour)."""
    flow = registry.get(user_id=user_id, flow_id=flow_id)
    return flow.retreat()
