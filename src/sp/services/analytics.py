"""Per-user analytics over study plans and feedback."""

from collections import Counter
from datetime import datetime, timedelta
from typing import Any, Optional, Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from sp.models import Difficulty, Feedback, PlanSource, StudyPlan
from sp.schemas.analytics import (
    Activity,
    Analytics,
    DifficultyStats,
    FeedbackStats,
    Overview,
    SourceStats,
    TopicCount,
    WeeklyProgress,
)

RECENT_DAYS = 30
WEEKS_TRACKED = 4
TOP_TOPICS = 5


def _round_half_up(value: float) -> int:
    return int(value + 0.5)


def _in_window(moment: Optional[datetime], start: datetime, end: datetime) -> bool:
    if moment is None:
        return False
    # SQLite hands back naive datetimes; compare everything as naive UTC
    if moment.tzinfo is not None:
        moment = moment.replace(tzinfo=None) - moment.utcoffset()
    return start <= moment < end


def summarize_analytics(
    plans: Sequence[Any],
    feedbacks: Sequence[Any],
    now: Optional[datetime] = None,
) -> Analytics:
    """Roll up plan and feedback records into the analytics response.

    Pure function over the given records; ``now`` anchors the activity
    windows (last 30 days, and four 7-day buckets ending at ``now``).
    """
    now = now or datetime.utcnow()
    total_plans = len(plans)

    completed_plans = sum(1 for p in plans if p.is_completed)
    total_estimated_hours = sum(p.estimated_hours or 0 for p in plans)
    average_progress = average_hours = 0
    if total_plans:
        average_progress = _round_half_up(
            sum(p.progress_percentage or 0 for p in plans) / total_plans
        )
        average_hours = _round_half_up(total_estimated_hours / total_plans)

    overview = Overview(
        total_plans=total_plans,
        completed_plans=completed_plans,
        in_progress_plans=total_plans - completed_plans,
        total_steps=sum(p.total_steps or 0 for p in plans),
        completed_steps=sum(p.completed_steps or 0 for p in plans),
        average_progress=average_progress,
        total_estimated_hours=total_estimated_hours,
        average_hours_per_plan=average_hours,
    )

    difficulty_counts = Counter(p.difficulty for p in plans)
    difficulty = DifficultyStats(
        beginner=difficulty_counts[Difficulty.beginner],
        intermediate=difficulty_counts[Difficulty.intermediate],
        advanced=difficulty_counts[Difficulty.advanced],
    )

    source_counts = Counter(p.source for p in plans)
    source = SourceStats(
        openai=source_counts[PlanSource.openai],
        smart_mock=source_counts[PlanSource.smart_mock],
    )

    total_feedbacks = len(feedbacks)
    helpful_count = sum(1 for f in feedbacks if f.helpful)
    average_rating = 0.0
    helpful_percentage = 0
    if total_feedbacks:
        average_rating = (
            _round_half_up(sum(f.rating for f in feedbacks) / total_feedbacks * 10)
            / 10
        )
        helpful_percentage = _round_half_up(helpful_count / total_feedbacks * 100)
    feedback = FeedbackStats(
        total_feedbacks=total_feedbacks,
        average_rating=average_rating,
        helpful_count=helpful_count,
        helpful_percentage=helpful_percentage,
    )

    recent_start = now - timedelta(days=RECENT_DAYS)
    weekly_progress = []
    for i in range(WEEKS_TRACKED - 1, -1, -1):
        week_start = now - timedelta(days=(i + 1) * 7)
        week_end = now - timedelta(days=i * 7)
        weekly_progress.append(
            WeeklyProgress(
                week=f"Week {WEEKS_TRACKED - i}",
                plans_created=sum(
                    1 for p in plans if _in_window(p.created_at, week_start, week_end)
                ),
                plans_completed=sum(
                    1
                    for p in plans
                    if _in_window(p.completed_at, week_start, week_end)
                ),
            )
        )

    # Upper bound is exclusive, so nudge it past "now"
    recent_end = now + timedelta(microseconds=1)
    activity = Activity(
        recent_plans=sum(
            1 for p in plans if _in_window(p.created_at, recent_start, recent_end)
        ),
        recent_completions=sum(
            1 for p in plans if _in_window(p.completed_at, recent_start, recent_end)
        ),
        weekly_progress=weekly_progress,
    )

    # Counter.most_common keeps first-seen order among equal counts
    topic_counts = Counter(p.topic for p in plans)
    top_topics = [
        TopicCount(topic=topic, count=count)
        for topic, count in topic_counts.most_common(TOP_TOPICS)
    ]

    return Analytics(
        overview=overview,
        difficulty=difficulty,
        source=source,
        feedback=feedback,
        activity=activity,
        top_topics=top_topics,
    )


class AnalyticsService:
    """Load a user's records and roll them up."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user_analytics(self, user_id: UUID) -> Analytics:
        plans = await self.db.execute(
            select(StudyPlan).where(StudyPlan.user_id == user_id)
        )
        feedbacks = await self.db.execute(
            select(Feedback).where(Feedback.user_id == user_id)
        )
        return summarize_analytics(
            list(plans.scalars().all()), list(feedbacks.scalars().all())
        )
