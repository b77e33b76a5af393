"""Analytics rollup schemas."""

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class Overview(BaseModel):
    total_plans: int = 0
    completed_plans: int = 0
    in_progress_plans: int = 0
    total_steps: int = 0
    completed_steps: int = 0
    average_progress: int = 0
    total_estimated_hours: float = 0
    average_hours_per_plan: int = 0


class DifficultyStats(BaseModel):
    beginner: int = 0
    intermediate: int = 0
    advanced: int = 0


class SourceStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    openai: int = 0
    smart_mock: int = Field(default=0, alias="smart-mock")


class FeedbackStats(BaseModel):
    total_feedbacks: int = 0
    average_rating: float = 0
    helpful_count: int = 0
    helpful_percentage: int = 0


class WeeklyProgress(BaseModel):
    week: str
    plans_created: int
    plans_completed: int


class Activity(BaseModel):
    recent_plans: int = 0
    recent_completions: int = 0
    weekly_progress: List[WeeklyProgress] = []


class TopicCount(BaseModel):
    topic: str
    count: int


class Analytics(BaseModel):
    """Per-user analytics rollup."""

    overview: Overview
    difficulty: DifficultyStats
    source: SourceStats
    feedback: FeedbackStats
    activity: Activity
    top_topics: List[TopicCount] = []
