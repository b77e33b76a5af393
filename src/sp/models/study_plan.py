"""Study plan and step progress models."""

import enum
from datetime import datetime
from uuid import uuid4

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import relationship
from sqlalchemy.types import JSON

from sp.db.base import Base

# JSONB for Postgres with JSON fallback
JSONType = JSON().with_variant(JSONB, "postgresql")


def _enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    return [member.value for member in enum_cls]


class Difficulty(enum.Enum):
    """Requested plan difficulty."""

    beginner = "beginner"
    intermediate = "intermediate"
    advanced = "advanced"


class PlanSource(enum.Enum):
    """Which generation strategy produced the plan content."""

    openai = "openai"
    smart_mock = "smart-mock"
    # Plans written before the source was split by strategy
    ai = "ai"


class StudyPlan(Base):
    """A topic-scoped, ordered list of study steps owned by one user.

    ``total_steps``, ``completed_steps``, ``progress_percentage``,
    ``is_completed`` and ``completed_at`` are derived from
    ``step_progress`` by :mod:`sp.services.progress` and are never
    written anywhere else.
    """

    __tablename__ = "study_plans"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    topic = Column(Text, nullable=False)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    duration = Column(String(50), nullable=False)
    difficulty = Column(
        Enum(Difficulty, name="plan_difficulty", values_callable=_enum_values),
        nullable=False,
        default=Difficulty.intermediate,
    )
    daily_hours = Column(Float, nullable=False, default=2)
    source = Column(
        Enum(PlanSource, name="plan_source", values_callable=_enum_values),
        nullable=False,
        default=PlanSource.smart_mock,
    )
    steps = Column(JSONType, nullable=False, default=list)
    estimated_hours = Column(Float, nullable=True)

    # Derived progress fields
    total_steps = Column(Integer, nullable=False, default=0)
    completed_steps = Column(Integer, nullable=False, default=0)
    progress_percentage = Column(Integer, nullable=False, default=0)
    is_completed = Column(Boolean, nullable=False, default=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(
        DateTime(timezone=True), nullable=False, default=datetime.utcnow
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    # Relationships
    step_progress = relationship(
        "StepProgress",
        back_populates="plan",
        cascade="all, delete-orphan",
        order_by="StepProgress.step_index",
        lazy="selectin",
    )

    __table_args__ = (
        CheckConstraint(
            "daily_hours >= 1 AND daily_hours <= 12", name="check_daily_hours"
        ),
        CheckConstraint(
            "progress_percentage >= 0 AND progress_percentage <= 100",
            name="check_progress_range",
        ),
        Index("idx_study_plans_user", "user_id", "created_at"),
    )


class StepProgress(Base):
    """Completion state of one step of a plan."""

    __tablename__ = "step_progress"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    plan_id = Column(
        UUID(as_uuid=True),
        ForeignKey("study_plans.id", ondelete="CASCADE"),
        nullable=False,
    )
    step_index = Column(Integer, nullable=False)
    completed = Column(Boolean, nullable=False, default=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    notes = Column(Text, nullable=False, default="")

    plan = relationship("StudyPlan", back_populates="step_progress")

    __table_args__ = (
        UniqueConstraint("plan_id", "step_index", name="unique_plan_step"),
        CheckConstraint("step_index >= 0", name="check_step_index"),
    )
