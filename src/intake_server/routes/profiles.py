"""Profile endpoint: the caller's most recently stored intake profile."""

from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from intake_db.repository import ProfileRepository

from intake_server.dependencies import get_db, get_user_id

router = APIRouter(tags=["profiles"])

_repo = ProfileRepository()


class StoredProfile(BaseModel):
    """Response for GET /profile."""
    flow_id: str
    answers: dict[str, Any]
    onboarding_completed: bool
    completed_at: datetime | None


@router.get("/profile")
async def get_profile(
    user_id: str = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
) -> StoredProfile:
    """Return the latest completed profile; 404 if the user never finished."""
    row = await _repo.get_latest_completed(db, user_id)
    if row is None:
        raise ValueError(f"Profile not found: user_id={user_id}")
    return StoredProfile(
        flow_id=row.flow_id,
        answers=row.answers,
        onboarding_completed=True,
        completed_at=row.completed_at,
    )
