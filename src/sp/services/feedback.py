"""Feedback service."""

from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from sp.errors import ConflictError, NotFoundError
from sp.models import Feedback, StudyPlan
from sp.schemas.feedback import FeedbackCreate


class FeedbackService:
    """Create, overwrite and read plan feedback."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_feedback(self, user_id: UUID, plan_id: UUID) -> Optional[Feedback]:
        """Get the user's feedback for a plan, if any."""
        result = await self.db.execute(
            select(Feedback).where(
                Feedback.user_id == user_id, Feedback.plan_id == plan_id
            )
        )
        return result.scalar_one_or_none()

    async def submit_feedback(self, user_id: UUID, data: FeedbackCreate) -> Feedback:
        """Store feedback, overwriting any earlier submission for the plan."""
        plan = await self.db.get(StudyPlan, data.study_plan_id)
        if not plan or plan.user_id != user_id:
            raise NotFoundError("Study plan not found")

        helpful = data.helpful if data.helpful is not None else True

        feedback = await self.get_feedback(user_id, data.study_plan_id)
        if feedback:
            feedback.rating = data.rating
            feedback.feedback = data.feedback
            feedback.helpful = helpful
            feedback.suggestions = data.suggestions
        else:
            feedback = Feedback(
                user_id=user_id,
                plan_id=data.study_plan_id,
                rating=data.rating,
                feedback=data.feedback,
                helpful=helpful,
                suggestions=data.suggestions,
            )
            self.db.add(feedback)

        try:
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            raise ConflictError("Feedback already exists for this plan") from exc

        await self.db.refresh(feedback)
        return feedback
