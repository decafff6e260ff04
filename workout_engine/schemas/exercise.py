"""Exercise schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from workout_engine.core.enums import ExerciseCategory
from workout_engine.schemas.set_record import ExerciseInstructions, SetRecord


class ExerciseBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    category: ExerciseCategory = ExerciseCategory.OTHER
    is_custom: bool = True
    notes: str | None = None
    instructions: ExerciseInstructions = Field(default_factory=ExerciseInstructions)


class ExerciseCreate(ExerciseBase):
    pass


class ExerciseRead(ExerciseBase):
    model_config = ConfigDict(from_attributes=True)
    id: UUID


class ExerciseSessionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    workout_id: UUID
    date: datetime
    max_weight: float
    sets: list[SetRecord] = []


class ProgressionPoint(BaseModel):
    date: datetime
    weight: float
