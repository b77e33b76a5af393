"""Initial schema: users, study plans, step progress and feedback

Revision ID: 001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "001"
down_revision = None
branch_labels = None
depends_on = None

# Enumerations

plan_difficulty_enum = sa.Enum(
    "beginner", "intermediate", "advanced", name="plan_difficulty"
)

plan_source_enum = sa.Enum("openai", "smart-mock", "ai", name="plan_source")


def upgrade() -> None:
    """Create users, study plan and feedback tables."""
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    op.create_index("idx_users_created", "users", ["created_at"])

    op.create_table(
        "study_plans",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("topic", sa.Text(), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("duration", sa.String(length=50), nullable=False),
        sa.Column(
            "difficulty",
            plan_difficulty_enum,
            server_default="intermediate",
            nullable=False,
        ),
        sa.Column("daily_hours", sa.Float(), server_default="2", nullable=False),
        sa.Column(
            "source", plan_source_enum, server_default="smart-mock", nullable=False
        ),
        sa.Column(
            "steps",
            postgresql.JSONB(),
            server_default=sa.text("'[]'::jsonb"),
            nullable=False,
        ),
        sa.Column("estimated_hours", sa.Float(), nullable=True),
        sa.Column("total_steps", sa.Integer(), server_default="0", nullable=False),
        sa.Column("completed_steps", sa.Integer(), server_default="0", nullable=False),
        sa.Column(
            "progress_percentage", sa.Integer(), server_default="0", nullable=False
        ),
        sa.Column(
            "is_completed", sa.Boolean(), server_default="false", nullable=False
        ),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.CheckConstraint(
            "daily_hours >= 1 AND daily_hours <= 12", name="check_daily_hours"
        ),
        sa.CheckConstraint(
            "progress_percentage >= 0 AND progress_percentage <= 100",
            name="check_progress_range",
        ),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_study_plans_user", "study_plans", ["user_id", "created_at"])

    op.create_table(
        "step_progress",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("plan_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("step_index", sa.Integer(), nullable=False),
        sa.Column("completed", sa.Boolean(), server_default="false", nullable=False),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("notes", sa.Text(), server_default="", nullable=False),
        sa.CheckConstraint("step_index >= 0", name="check_step_index"),
        sa.ForeignKeyConstraint(
            ["plan_id"], ["study_plans.id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("plan_id", "step_index", name="unique_plan_step"),
    )

    op.create_table(
        "feedback",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("plan_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("feedback", sa.String(length=1000), nullable=False),
        sa.Column("helpful", sa.Boolean(), server_default="true", nullable=False),
        sa.Column("suggestions", sa.String(length=500), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.CheckConstraint("rating >= 1 AND rating <= 5", name="check_rating"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(
            ["plan_id"], ["study_plans.id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "plan_id", name="unique_user_plan_feedback"),
    )
    op.create_index("idx_feedback_user", "feedback", ["user_id"])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_index("idx_feedback_user", table_name="feedback")
    op.drop_table("feedback")
    op.drop_table("step_progress")
    op.drop_index("idx_study_plans_user", table_name="study_plans")
    op.drop_table("study_plans")
    op.drop_index("idx_users_created", table_name="users")
    op.drop_table("users")
    plan_source_enum.drop(op.get_bind(), checkfirst=True)
    plan_difficulty_enum.drop(op.get_bind(), checkfirst=True)
