"""Service for generating, reading and updating study plans."""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from sp.errors import NotFoundError
from sp.models import Feedback, StudyPlan
from sp.schemas.study_plans import PlanGenerateRequest, ProgressSnapshot, StepUpdate
from sp.services.plan_synthesizer import PlanRequest, PlanSynthesizer
from sp.services.progress import (
    apply_step_update,
    initialize_step_progress,
    recalculate_progress,
)

logger = logging.getLogger(__name__)


class StudyPlanService:
    """Operations related to study plans."""

    def __init__(self, db: AsyncSession, synthesizer: Optional[PlanSynthesizer] = None):
        self.db = db
        self.synthesizer = synthesizer or PlanSynthesizer.from_settings()

    async def create_plan(
        self, user_id: UUID, payload: PlanGenerateRequest
    ) -> StudyPlan:
        """Generate plan content for the request and persist it."""
        request = PlanRequest.from_payload(payload)
        result = await self.synthesizer.generate(request)
        content = result.content

        plan = StudyPlan(
            user_id=user_id,
            topic=request.topic,
            title=content.title,
            duration=content.duration,
            description=content.description,
            estimated_hours=content.estimated_hours,
            steps=list(content.steps),
            difficulty=request.difficulty,
            daily_hours=request.daily_hours,
            source=result.source,
            completed_at=None,
        )
        initialize_step_progress(plan)
        recalculate_progress(plan)

        self.db.add(plan)
        await self.db.commit()

        logger.info(
            "Created study plan %s for user %s (source=%s, steps=%d)",
            plan.id,
            user_id,
            result.source.value,
            plan.total_steps,
        )
        return plan

    async def list_plans(self, user_id: UUID) -> list[StudyPlan]:
        """List a user's study plans, newest first."""
        result = await self.db.execute(
            select(StudyPlan)
            .where(StudyPlan.user_id == user_id)
            .order_by(StudyPlan.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_plan(self, user_id: UUID, plan_id: UUID) -> StudyPlan:
        """Get a plan owned by ``user_id``."""
        result = await self.db.execute(
            select(StudyPlan).where(
                StudyPlan.id == plan_id, StudyPlan.user_id == user_id
            )
        )
        plan = result.scalar_one_or_none()
        if not plan:
            raise NotFoundError("Study plan not found")
        return plan

    async def update_step(
        self, user_id: UUID, plan_id: UUID, update: StepUpdate
    ) -> ProgressSnapshot:
        """Toggle one step and recompute the plan's progress before saving."""
        plan = await self.get_plan(user_id, plan_id)
        snapshot = apply_step_update(plan, update)
        await self.db.commit()
        return snapshot

    async def delete_plan(self, user_id: UUID, plan_id: UUID) -> None:
        """Delete a plan together with its progress and feedback."""
        plan = await self.get_plan(user_id, plan_id)
        await self.db.execute(delete(Feedback).where(Feedback.plan_id == plan.id))
        await self.db.delete(plan)
        await self.db.commit()
        logger.info("Deleted study plan %s for user %s", plan_id, user_id)
