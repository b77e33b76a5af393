"""Endpoints for generating and tracking study plans."""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from sp.auth import get_current_user
from sp.db.base import get_db
from sp.schemas.common import MessageResponse
from sp.schemas.study_plans import (
    PlanGenerateRequest,
    ProgressSnapshot,
    StepUpdate,
    StudyPlan,
    StudyPlanList,
    StudyPlanSummary,
)
from sp.services.study_plans import StudyPlanService

generate_router = APIRouter()
router = APIRouter()


@generate_router.post("", response_model=StudyPlan, status_code=201)
async def generate_plan(
    payload: PlanGenerateRequest,
    db: AsyncSession = Depends(get_db),
    user_id: UUID = Depends(get_current_user),
) -> StudyPlan:
    """Generate a study plan for a topic and save it."""
    service = StudyPlanService(db)
    plan = await service.create_plan(user_id, payload)
    return StudyPlan.model_validate(plan)


@router.get("", response_model=StudyPlanList)
async def list_plans(
    db: AsyncSession = Depends(get_db),
    user_id: UUID = Depends(get_current_user),
) -> StudyPlanList:
    """List the user's study plans, newest first."""
    service = StudyPlanService(db)
    plans = await service.list_plans(user_id)
    return StudyPlanList(items=[StudyPlanSummary.model_validate(p) for p in plans])


@router.get("/{plan_id}", response_model=StudyPlan)
async def get_plan(
    plan_id: UUID,
    db: AsyncSession = Depends(get_db),
    user_id: UUID = Depends(get_current_user),
) -> StudyPlan:
    """Get a study plan with its step progress."""
    service = StudyPlanService(db)
    plan = await service.get_plan(user_id, plan_id)
    return StudyPlan.model_validate(plan)


@router.patch("/{plan_id}", response_model=ProgressSnapshot)
async def update_step(
    plan_id: UUID,
    update: StepUpdate,
    db: AsyncSession = Depends(get_db),
    user_id: UUID = Depends(get_current_user),
) -> ProgressSnapshot:
    """Mark a step complete or incomplete, or edit its notes."""
    service = StudyPlanService(db)
    return await service.update_step(user_id, plan_id, update)


@router.delete("/{plan_id}", response_model=MessageResponse)
async def delete_plan(
    plan_id: UUID,
    db: AsyncSession = Depends(get_db),
    user_id: UUID = Depends(get_current_user),
) -> MessageResponse:
    """Delete a study plan."""
    service = StudyPlanService(db)
    await service.delete_plan(user_id, plan_id)
    return MessageResponse(message="Study plan deleted successfully")
