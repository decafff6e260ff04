"""Workout, entry and PR read schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from workout_engine.models.workout import Workout, WorkoutEntry
from workout_engine.schemas.set_record import SetRecord


class ExerciseRef(BaseModel):
    """Minimal exercise info for embedding in entry responses (id + name only)."""

    id: UUID
    name: str

    model_config = ConfigDict(from_attributes=True)


class WorkoutEntryRead(BaseModel):
    id: UUID
    order: int
    exercise_id: UUID | None = None
    exercise: ExerciseRef | None = None
    notes: str | None = None
    sets: list[SetRecord] = []

    @classmethod
    def from_entry(cls, entry: WorkoutEntry) -> "WorkoutEntryRead":
        return cls(
            id=entry.id,
            order=entry.order,
            exercise_id=entry.exercise_id,
            exercise=ExerciseRef.model_validate(entry.exercise) if entry.exercise else None,
            notes=entry.notes,
            sets=entry.get_sets(),
        )


class WorkoutRead(BaseModel):
    id: UUID
    name: str | None = None
    started_at: datetime
    completed_at: datetime | None = None
    notes: str | None = None
    effort_rating: int | None = None
    total_rest_seconds: float | None = None
    total_volume: float | None = None
    entries: list[WorkoutEntryRead] = []

    @classmethod
    def from_workout(cls, workout: Workout) -> "WorkoutRead":
        return cls(
            id=workout.id,
            name=workout.name,
            started_at=workout.started_at,
            completed_at=workout.completed_at,
            notes=workout.notes,
            effort_rating=workout.effort_rating,
            total_rest_seconds=workout.total_rest_seconds,
            total_volume=workout.total_volume,
            entries=[WorkoutEntryRead.from_entry(e) for e in sorted(workout.entries, key=lambda e: e.order)],
        )


class PersonalRecordRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    exercise_id: UUID | None = None
    workout_id: UUID | None = None
    weight: float
    reps: int
    achieved_at: datetime


class CurrentPRRead(BaseModel):
    """Current PR for an exercise and whether the PR table agrees with the logged sets."""

    exercise_id: UUID
    personal_record: PersonalRecordRead | None = None
    consistent: bool
