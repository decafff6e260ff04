"""Request/response schemas for the active session API."""

from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from workout_engine.core.constants import REST_ADJUST_STEP_SECONDS
from workout_engine.core.enums import SetLabel
from workout_engine.schemas.set_record import SetRecord
from workout_engine.schemas.workout import PersonalRecordRead, WorkoutRead
from workout_engine.services.rest_timer import RestTimer


class StartSessionRequest(BaseModel):
    template_id: UUID | None = None
    name: str | None = Field(None, max_length=255)
    discard_existing: bool = False


class FinishSessionRequest(BaseModel):
    effort_rating: int | None = Field(None, ge=1, le=10)
    notes: str | None = None


class AddExerciseRequest(BaseModel):
    exercise_id: UUID


class EntryNotesUpdate(BaseModel):
    notes: str | None = None


class SetUpdate(BaseModel):
    """Fields to change on a set (only the ones sent are applied)."""

    reps: int | None = Field(None, ge=0)
    weight: float | None = None
    duration: float | None = None
    distance: float | None = None
    equipment: str | None = None
    label: SetLabel = SetLabel.NONE
    is_completed: bool = False
    start_rest: bool = False
    rest_duration: float | None = Field(None, gt=0)

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True, exclude={"start_rest", "rest_duration"})


class SetUpdateResponse(BaseModel):
    set: SetRecord
    completed_now: bool = False
    personal_record: PersonalRecordRead | None = None
    next_set_id: UUID | None = None


class ReorderSetsRequest(BaseModel):
    """Either an explicit id order, or one source -> destination move."""

    set_ids: list[UUID] | None = None
    source: int | None = Field(None, ge=0)
    destination: int | None = Field(None, ge=0)

    @model_validator(mode="after")
    def one_form(self) -> "ReorderSetsRequest":
        has_move = self.source is not None and self.destination is not None
        if (self.set_ids is None) == (not has_move):
            raise ValueError("Send either set_ids or source and destination")
        return self


class RestStartRequest(BaseModel):
    duration: float | None = Field(None, gt=0)


class RestDefaultUpdate(BaseModel):
    seconds: float = Field(..., gt=0)


class RestAdjustRequest(BaseModel):
    delta: float = REST_ADJUST_STEP_SECONDS  # negative subtracts


class RestTimerRead(BaseModel):
    is_running: bool
    is_complete: bool
    total_duration: float
    remaining_seconds: int
    default_duration: float

    @classmethod
    def from_timer(cls, timer: RestTimer) -> "RestTimerRead":
        return cls(
            is_running=timer.is_running,
            is_complete=timer.is_complete,
            total_duration=timer.total_duration,
            remaining_seconds=timer.remaining_seconds,
            default_duration=timer.default_duration,
        )


class ActiveSessionRead(BaseModel):
    workout: WorkoutRead | None = None
    elapsed_seconds: float = 0
    rest_timer: RestTimerRead
    rest_accumulated_seconds: float = 0
    detected_pr: PersonalRecordRead | None = None
