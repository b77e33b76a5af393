"""Derive a study plan's progress fields from its step progress records.

These functions mutate the plan passed in and perform no I/O. The study
plan service calls :func:`apply_step_update` (or :func:`recalculate_progress`
directly) immediately before persisting, so the derived columns on
``StudyPlan`` are never written from anywhere else.
"""

from datetime import datetime
from typing import Any, Optional

from sp.errors import ValidationError
from sp.models import StepProgress
from sp.schemas.study_plans import ProgressSnapshot, StepUpdate
from sp.schemas.study_plans import StepProgress as StepProgressSchema


def _percentage(completed: int, total: int) -> int:
    """Round completed/total * 100 half-up; 0 when there are no steps."""
    if total <= 0:
        return 0
    return (completed * 200 + total) // (total * 2)


def _validate_step_index(step_index: Any, total: int) -> int:
    if isinstance(step_index, bool) or not isinstance(step_index, int):
        raise ValidationError(
            "Valid step_index is required",
            details={"step_index": step_index},
        )
    if step_index < 0 or step_index >= total:
        raise ValidationError(
            f"step_index must be between 0 and {max(total - 1, 0)}",
            details={"step_index": step_index, "total_steps": total},
        )
    return step_index


def initialize_step_progress(plan: Any) -> bool:
    """Create one incomplete record per step when the plan has none.

    Returns True if records were created.
    """
    steps = plan.steps or []
    if plan.step_progress or not steps:
        return False

    for index in range(len(steps)):
        plan.step_progress.append(
            StepProgress(step_index=index, completed=False, notes="")
        )
    return True


def recalculate_progress(
    plan: Any, now: Optional[datetime] = None
) -> ProgressSnapshot:
    """Recompute the derived progress fields of ``plan``.

    The plan-level ``completed_at`` is stamped the first time the plan
    becomes complete and is left alone afterwards, including when a step is
    later un-marked.
    """
    now = now or datetime.utcnow()

    total = len(plan.steps or [])
    completed = sum(1 for record in plan.step_progress if record.completed)

    plan.total_steps = total
    plan.completed_steps = completed
    plan.progress_percentage = _percentage(completed, total)
    plan.is_completed = total > 0 and completed == total

    if plan.is_completed and plan.completed_at is None:
        plan.completed_at = now

    return ProgressSnapshot(
        id=plan.id,
        progress_percentage=plan.progress_percentage,
        completed_steps=plan.completed_steps,
        total_steps=plan.total_steps,
        is_completed=plan.is_completed,
        completed_at=plan.completed_at,
        step_progress=[
            StepProgressSchema.model_validate(record)
            for record in sorted(plan.step_progress, key=lambda r: r.step_index)
        ],
    )


def apply_step_update(
    plan: Any, update: StepUpdate, now: Optional[datetime] = None
) -> ProgressSnapshot:
    """Apply a single-step toggle to ``plan`` and recompute its progress."""
    now = now or datetime.utcnow()
    step_index = _validate_step_index(update.step_index, len(plan.steps or []))

    initialize_step_progress(plan)

    record = next(
        (r for r in plan.step_progress if r.step_index == step_index), None
    )

    if record is not None:
        if update.provided("completed"):
            record.completed = update.completed
            record.completed_at = now if update.completed else None
        if update.provided("notes"):
            record.notes = update.notes
    else:
        completed = bool(update.completed) if update.provided("completed") else False
        plan.step_progress.append(
            StepProgress(
                step_index=step_index,
                completed=completed,
                completed_at=now if completed else None,
                notes=update.notes if update.provided("notes") else "",
            )
        )

    return recalculate_progress(plan, now=now)
