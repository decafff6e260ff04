"""Value objects embedded in entity blob columns."""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from workout_engine.core.enums import SetLabel


class SetRecord(BaseModel):
    """One set inside a workout entry. Weight is always stored in one canonical unit."""

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    set_number: int = Field(..., ge=1)
    reps: int | None = Field(None, ge=0)
    weight: float | None = None
    duration: float | None = None  # seconds
    distance: float | None = None
    equipment: str | None = None
    label: SetLabel = SetLabel.NONE
    is_completed: bool = False
    completed_at: datetime | None = None


class ExerciseInstructions(BaseModel):
    """How-to text for an exercise."""

    setup: str = ""
    execution: str = ""
    tips: str = ""

    @property
    def is_empty(self) -> bool:
        return not (self.setup or self.execution or self.tips)
