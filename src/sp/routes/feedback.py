"""Plan feedback endpoints."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from sp.auth import get_current_user
from sp.db.base import get_db
from sp.schemas.feedback import Feedback, FeedbackCreate
from sp.services.feedback import FeedbackService

router = APIRouter()


@router.post("", response_model=Feedback)
async def submit_feedback(
    payload: FeedbackCreate,
    db: AsyncSession = Depends(get_db),
    user_id: UUID = Depends(get_current_user),
) -> Feedback:
    """Submit feedback for a plan, replacing any earlier submission."""
    service = FeedbackService(db)
    feedback = await service.submit_feedback(user_id, payload)
    return Feedback.model_validate(feedback)


@router.get("", response_model=Optional[Feedback])
async def get_feedback(
    study_plan_id: UUID = Query(...),
    db: AsyncSession = Depends(get_db),
    user_id: UUID = Depends(get_current_user),
) -> Optional[Feedback]:
    """Get the user's feedback for a plan, or null if none was left."""
    service = FeedbackService(db)
    feedback = await service.get_feedback(user_id, study_plan_id)
    if feedback is None:
        return None
    return Feedback.model_validate(feedback)
