"""Feedback schemas."""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator


class FeedbackCreate(BaseModel):
    """Submit (or overwrite) feedback for a study plan."""

    study_plan_id: UUID
    rating: int = Field(ge=1, le=5)
    feedback: str = Field(max_length=1000)
    helpful: Optional[bool] = None
    suggestions: Optional[str] = Field(default=None, max_length=500)

    # Trim before the length limits apply
    @field_validator("feedback", mode="before")
    @classmethod
    def feedback_not_blank(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip()
            if not value:
                raise ValueError("Feedback is required")
        return value

    @field_validator("suggestions", mode="before")
    @classmethod
    def strip_suggestions(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip() or None
        return value


class Feedback(BaseModel):
    """Feedback response."""

    id: UUID
    plan_id: UUID
    rating: int
    feedback: str
    helpful: bool
    suggestions: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
