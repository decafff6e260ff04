"""Session engine schema: exercises, workouts, entries, personal records, templates.

Revision ID: 0001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

EXERCISE_CATEGORIES = ("CHEST", "BACK", "SHOULDERS", "ARMS", "LEGS", "CORE", "CARDIO", "OTHER")


def upgrade() -> None:
    op.create_table(
        "exercises",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("category", sa.Enum(*EXERCISE_CATEGORIES, name="exercisecategory"), nullable=False),
        sa.Column("is_custom", sa.Boolean(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("instructions_data", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_exercises_name"), "exercises", ["name"], unique=False)

    op.create_table(
        "workouts",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("effort_rating", sa.Integer(), nullable=True),
        sa.Column("total_rest_seconds", sa.Float(), nullable=True),
        sa.Column("total_volume", sa.Float(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_workouts_started_at", "workouts", ["started_at"], unique=False)
    op.create_index("ix_workouts_completed_at", "workouts", ["completed_at"], unique=False)

    op.create_table(
        "workout_entries",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("workout_id", sa.Uuid(), nullable=False),
        sa.Column("exercise_id", sa.Uuid(), nullable=True),
        sa.Column("order", sa.Integer(), nullable=False),
        sa.Column("sets_data", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(["workout_id"], ["workouts.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["exercise_id"], ["exercises.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_workout_entries_workout_id", "workout_entries", ["workout_id"], unique=False)
    op.create_index(op.f("ix_workout_entries_exercise_id"), "workout_entries", ["exercise_id"], unique=False)

    op.create_table(
        "personal_records",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("exercise_id", sa.Uuid(), nullable=True),
        sa.Column("workout_id", sa.Uuid(), nullable=True),
        sa.Column("weight", sa.Float(), nullable=False),
        sa.Column("reps", sa.Integer(), nullable=False),
        sa.Column("achieved_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["exercise_id"], ["exercises.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["workout_id"], ["workouts.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_personal_records_exercise_weight", "personal_records", ["exercise_id", "weight"], unique=False
    )
    op.create_index(op.f("ix_personal_records_achieved_at"), "personal_records", ["achieved_at"], unique=False)

    op.create_table(
        "workout_templates",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_used_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_workout_templates_name"), "workout_templates", ["name"], unique=False)

    op.create_table(
        "template_exercises",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("template_id", sa.Uuid(), nullable=False),
        sa.Column("exercise_id", sa.Uuid(), nullable=True),
        sa.Column("order", sa.Integer(), nullable=True),
        sa.Column("default_sets", sa.Integer(), nullable=True),
        sa.Column("default_reps", sa.Integer(), nullable=True),
        sa.Column("default_weight", sa.Float(), nullable=True),
        sa.ForeignKeyConstraint(["template_id"], ["workout_templates.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["exercise_id"], ["exercises.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    op.drop_table("template_exercises")
    op.drop_index(op.f("ix_workout_templates_name"), table_name="workout_templates")
    op.drop_table("workout_templates")
    op.drop_index(op.f("ix_personal_records_achieved_at"), table_name="personal_records")
    op.drop_index("ix_personal_records_exercise_weight", table_name="personal_records")
    op.drop_table("personal_records")
    op.drop_index(op.f("ix_workout_entries_exercise_id"), table_name="workout_entries")
    op.drop_index("ix_workout_entries_workout_id", table_name="workout_entries")
    op.drop_table("workout_entries")
    op.drop_index("ix_workouts_completed_at", table_name="workouts")
    op.drop_index("ix_workouts_started_at", table_name="workouts")
    op.drop_table("workouts")
    op.drop_index(op.f("ix_exercises_name"), table_name="exercises")
    op.drop_table("exercises")
    sa.Enum(name="exercisecategory").drop(op.get_bind(), checkfirst=True)
