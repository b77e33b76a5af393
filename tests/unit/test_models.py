from sp.models import Difficulty, PlanSource, StepProgress, StudyPlan


def test_study_plan_creation() -> None:
    plan = StudyPlan(
        topic="Rust",
        title="Study Plan for Rust",
        duration="12 Weeks",
        difficulty=Difficulty.advanced,
        daily_hours=3,
        source=PlanSource.smart_mock,
        steps=["one", "two"],
    )
    assert plan.topic == "Rust"
    assert plan.step_progress == []


def test_step_progress_links_to_plan() -> None:
    plan = StudyPlan(topic="Rust", title="T", duration="1 Weeks", steps=["one"])
    record = StepProgress(step_index=0, completed=False, notes="")
    plan.step_progress.append(record)
    assert record.plan is plan


def test_source_values_match_wire_format() -> None:
    assert PlanSource.smart_mock.value == "smart-mock"
    assert PlanSource("openai") is PlanSource.openai


def test_engine_options_per_backend() -> None:
    from sp.config import Settings
    from sp.db.base import engine_options

    memory = engine_options(Settings(db_url="sqlite+aiosqlite:///:memory:"))
    assert memory["connect_args"] == {"check_same_thread": False}
    assert "pool_size" not in memory

    postgres = engine_options(
        Settings(db_url="postgresql+asyncpg://localhost/db", db_pool_size=3)
    )
    assert postgres["pool_size"] == 3
    assert "poolclass" not in postgres
