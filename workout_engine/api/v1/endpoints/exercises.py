"""Exercise library (minimal) and per-exercise history."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException

from workout_engine.api.deps import get_store
from workout_engine.core.constants import EXERCISE_HISTORY_LIMIT
from workout_engine.db.store import WorkoutStore
from workout_engine.models.exercise import Exercise
from workout_engine.schemas.exercise import ExerciseCreate, ExerciseRead, ExerciseSessionRead, ProgressionPoint
from workout_engine.schemas.set_record import SetRecord
from workout_engine.services import history

router = APIRouter()


def _read(exercise: Exercise) -> ExerciseRead:
    return ExerciseRead(
        id=exercise.id,
        name=exercise.name,
        category=exercise.category,
        is_custom=exercise.is_custom,
        notes=exercise.notes,
        instructions=exercise.instructions,
    )


async def _get_exercise(store: WorkoutStore, exercise_id: uuid.UUID) -> Exercise:
    exercise = await store.get(Exercise, exercise_id)
    if exercise is None:
        raise HTTPException(status_code=404, detail="Exercise not found")
    return exercise


@router.get("", response_model=list[ExerciseRead])
async def list_exercises(store: WorkoutStore = Depends(get_store)):
    """List all exercises by name."""
    exercises = await store.fetch(Exercise, order_by=[Exercise.name])
    return [_read(e) for e in exercises]


@router.post("", response_model=ExerciseRead, status_code=201)
async def create_exercise(payload: ExerciseCreate, store: WorkoutStore = Depends(get_store)):
    exercise = Exercise(
        name=payload.name,
        category=payload.category,
        is_custom=payload.is_custom,
        notes=payload.notes,
    )
    exercise.instructions = payload.instructions
    store.create(exercise)
    await store.save()
    return _read(exercise)


@router.get("/{exercise_id}/history", response_model=list[ExerciseSessionRead])
async def exercise_history(
    exercise_id: uuid.UUID,
    limit: int = EXERCISE_HISTORY_LIMIT,
    store: WorkoutStore = Depends(get_store),
):
    """Last N completed workouts containing this exercise, most recent first."""
    await _get_exercise(store, exercise_id)
    return await history.exercise_history(store, exercise_id, limit=limit)


@router.get("/{exercise_id}/progression", response_model=list[ProgressionPoint])
async def weight_progression(exercise_id: uuid.UUID, store: WorkoutStore = Depends(get_store)):
    await _get_exercise(store, exercise_id)
    points = await history.weight_progression(store, exercise_id)
    return [ProgressionPoint(date=d, weight=w) for d, w in points]


@router.get("/{exercise_id}/last-session", response_model=list[SetRecord])
async def last_session(exercise_id: uuid.UUID, store: WorkoutStore = Depends(get_store)):
    """Completed sets from the most recent finished workout with this exercise."""
    await _get_exercise(store, exercise_id)
    return await history.last_session_sets(store, exercise_id)
