"""Pydantic schemas for study plans and step progress."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, StrictBool, StrictInt

from sp.models import Difficulty, PlanSource


class PlanGenerateRequest(BaseModel):
    """Request payload for generating a study plan.

    Only ``topic`` is required; missing or unknown values for the other
    fields fall back to defaults during synthesis.
    """

    topic: str
    daily_hours: Optional[float] = Field(default=None, ge=1, le=12)
    difficulty: Optional[str] = None
    duration: Optional[int] = Field(default=None, ge=1, le=104)


class PlanContent(BaseModel):
    """Plan content produced by the synthesizer."""

    title: str
    duration: str
    description: Optional[str] = None
    estimated_hours: Optional[float] = None
    steps: List[str] = []


class StepProgress(BaseModel):
    """Completion state of one step."""

    step_index: int
    completed: bool
    completed_at: Optional[datetime] = None
    notes: str = ""

    class Config:
        from_attributes = True


class StepUpdate(BaseModel):
    """Single-step toggle.

    ``completed`` and ``notes`` are optional fields: a field left out of the
    payload (or sent as null) leaves the stored value unchanged.
    """

    step_index: StrictInt
    completed: Optional[StrictBool] = None
    notes: Optional[str] = Field(default=None, max_length=2000)

    def provided(self, field: str) -> bool:
        """Whether the caller supplied a non-null value for ``field``."""
        return field in self.model_fields_set and getattr(self, field) is not None


class ProgressSnapshot(BaseModel):
    """Derived progress fields plus the full step progress set."""

    id: Optional[UUID] = None
    progress_percentage: int
    completed_steps: int
    total_steps: int
    is_completed: bool
    completed_at: Optional[datetime] = None
    step_progress: List[StepProgress] = []

    class Config:
        from_attributes = True


class StudyPlanSummary(BaseModel):
    """Study plan as shown in listings."""

    id: UUID
    topic: str
    title: str
    duration: str
    steps: List[str]
    difficulty: Difficulty
    source: PlanSource
    progress_percentage: int
    is_completed: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class StudyPlan(StudyPlanSummary):
    """Full study plan representation."""

    description: Optional[str] = None
    estimated_hours: Optional[float] = None
    daily_hours: float
    step_progress: List[StepProgress] = []
    completed_steps: int
    total_steps: int
    completed_at: Optional[datetime] = None


class StudyPlanList(BaseModel):
    """List of study plans."""

    items: List[StudyPlanSummary]
