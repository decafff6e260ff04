"""Personal records: current PR per exercise and recently broken records."""

import uuid

from fastapi import APIRouter, Depends

from workout_engine.api.deps import get_store
from workout_engine.core.constants import RECENT_PR_DAYS
from workout_engine.db.store import WorkoutStore
from workout_engine.schemas.workout import CurrentPRRead, PersonalRecordRead
from workout_engine.services.history import recent_prs
from workout_engine.services.pr_detection import PRDetector

router = APIRouter()


@router.get("/recent", response_model=list[PersonalRecordRead])
async def recent_personal_records(days: int = RECENT_PR_DAYS, store: WorkoutStore = Depends(get_store)):
    """PRs achieved in the last `days` days, newest first."""
    return await recent_prs(store, days)


@router.get("/{exercise_id}", response_model=CurrentPRRead)
async def current_personal_record(exercise_id: uuid.UUID, store: WorkoutStore = Depends(get_store)):
    """
    Current PR (heaviest weight, ties to the most recent) plus a consistency flag
    comparing the PR table with a rescan of logged sets.
    """
    detector = PRDetector(store)
    current = await detector.current_pr(exercise_id)
    return CurrentPRRead(
        exercise_id=exercise_id,
        personal_record=PersonalRecordRead.model_validate(current) if current else None,
        consistent=await detector.verify_current_pr(exercise_id),
    )
