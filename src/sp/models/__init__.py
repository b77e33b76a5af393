"""SQLAlchemy models for users, study plans and feedback."""

from .feedback import Feedback
from .study_plan import Difficulty, PlanSource, StepProgress, StudyPlan
from .user import User

__all__ = [
    "Difficulty",
    "Feedback",
    "PlanSource",
    "StepProgress",
    "StudyPlan",
    "User",
]
