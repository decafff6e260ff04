"""Workout template schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from workout_engine.schemas.workout import ExerciseRef


class TemplateExerciseBase(BaseModel):
    exercise_id: UUID
    default_sets: int = Field(3, ge=0, le=20)
    default_reps: int = Field(10, ge=0)
    default_weight: float | None = None


class TemplateExerciseCreate(TemplateExerciseBase):
    pass


class TemplateExerciseRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    exercise_id: UUID | None = None
    order: int
    default_sets: int
    default_reps: int
    default_weight: float | None = None
    exercise: ExerciseRef | None = None


class WorkoutTemplateCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    exercises: list[TemplateExerciseCreate] = []


class WorkoutTemplateRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    name: str
    created_at: datetime
    last_used_at: datetime | None = None
    exercises: list[TemplateExerciseRead] = []
