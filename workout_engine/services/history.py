"""Read-only history queries over completed workouts."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from workout_engine.core.constants import EXERCISE_HISTORY_LIMIT, PROGRESSION_HISTORY_LIMIT, RECENT_PR_DAYS
from workout_engine.core.timeutils import Clock, as_utc, utc_now
from workout_engine.db.store import WorkoutStore
from workout_engine.models.personal_record import PersonalRecord
from workout_engine.models.workout import Workout
from workout_engine.schemas.set_record import SetRecord
from workout_engine.services import set_ledger


@dataclass(slots=True)
class ExerciseSession:
    """One completed workout's worth of an exercise."""

    workout_id: uuid.UUID
    date: datetime
    max_weight: float
    sets: list[SetRecord] = field(default_factory=list)


async def _completed_workouts(store: WorkoutStore) -> list[Workout]:
    """Completed workouts, most recently completed first."""
    return list(
        await store.fetch(
            Workout, Workout.completed_at.isnot(None), order_by=[Workout.completed_at.desc()]
        )
    )


async def last_session_sets(store: WorkoutStore, exercise_id: uuid.UUID) -> list[SetRecord]:
    """Completed sets of the exercise from the latest completed workout that has it."""
    for workout in await _completed_workouts(store):
        matching = sorted(
            (e for e in workout.entries if e.exercise_id == exercise_id), key=lambda e: e.order
        )
        if not matching:
            continue
        sets = [s for entry in matching for s in entry.get_sets() if s.is_completed]
        return set_ledger.ordered(sets)
    return []


async def exercise_history(
    store: WorkoutStore, exercise_id: uuid.UUID, limit: int = EXERCISE_HISTORY_LIMIT
) -> list[ExerciseSession]:
    """Most recent first; one item per workout (its first entry for the exercise)."""
    history: list[ExerciseSession] = []
    for workout in await _completed_workouts(store):
        entry = next((e for e in workout.entries if e.exercise_id == exercise_id), None)
        if entry is None:
            continue
        sets = [s for s in entry.get_sets() if s.is_completed]
        if not sets:
            continue
        weights = [s.weight for s in sets if s.weight is not None]
        history.append(
            ExerciseSession(
                workout_id=workout.id,
                date=as_utc(workout.completed_at or workout.started_at),
                max_weight=max(weights, default=0.0),
                sets=sets,
            )
        )
        if len(history) >= limit:
            break
    return history


async def weight_progression(store: WorkoutStore, exercise_id: uuid.UUID) -> list[tuple[datetime, float]]:
    """(date, max weight) per session, oldest first, for charting."""
    history = await exercise_history(store, exercise_id, limit=PROGRESSION_HISTORY_LIMIT)
    return sorted(((h.date, h.max_weight) for h in history), key=lambda point: point[0])


async def recent_prs(
    store: WorkoutStore, days: int = RECENT_PR_DAYS, *, clock: Clock = utc_now
) -> list[PersonalRecord]:
    cutoff = clock() - timedelta(days=days)
    return list(
        await store.fetch(
            PersonalRecord,
            PersonalRecord.achieved_at >= cutoff,
            order_by=[PersonalRecord.achieved_at.desc()],
        )
    )
