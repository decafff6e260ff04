"""PR detection: heaviest completed weight (at >= 1 rep) per exercise.

The PersonalRecord table is the single source of truth. `current_pr` is one query over the
exercise's PR rows (linear in their count; PR history per exercise stays small).
`pr_from_sets` rescans logged sets and is only used as a consistency check.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime

from workout_engine.core.exceptions import StoreError
from workout_engine.core.timeutils import Clock, as_utc, utc_now
from workout_engine.db.store import WorkoutStore
from workout_engine.models.personal_record import PersonalRecord
from workout_engine.models.workout import Workout

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class SetBest:
    weight: float
    reps: int
    achieved_at: datetime


def qualifies(weight: float | None, reps: int | None) -> bool:
    """A set can only be a PR with a positive weight and at least one rep."""
    return weight is not None and reps is not None and weight > 0 and reps >= 1


class PRDetector:
    def __init__(self, store: WorkoutStore, *, clock: Clock = utc_now):
        self.store = store
        self._clock = clock

    async def current_pr(self, exercise_id: uuid.UUID) -> PersonalRecord | None:
        """Max-weight PR row for the exercise; ties go to the most recent."""
        rows = await self.store.fetch(
            PersonalRecord,
            PersonalRecord.exercise_id == exercise_id,
            order_by=[PersonalRecord.weight.desc(), PersonalRecord.achieved_at.desc()],
            limit=1,
        )
        return rows[0] if rows else None

    async def detect_new_pr(
        self,
        exercise_id: uuid.UUID,
        weight: float | None,
        reps: int | None,
        workout_id: uuid.UUID | None = None,
    ) -> PersonalRecord | None:
        """
        Record and return a new PR if `weight` strictly beats the current one (or none
        exists yet). Prior PR rows are never touched.
        """
        if not qualifies(weight, reps):
            return None
        try:
            current = await self.current_pr(exercise_id)
        except StoreError:
            return None
        if current is not None and float(weight) <= float(current.weight):
            return None

        record = self.store.create(
            PersonalRecord(
                exercise_id=exercise_id,
                workout_id=workout_id,
                weight=float(weight),
                reps=int(reps),
                achieved_at=self._clock(),
            )
        )
        try:
            await self.store.save()
        except StoreError:
            return None
        logger.info(
            "New PR for exercise %s: %s x %s (previous %s)",
            exercise_id,
            weight,
            reps,
            current.weight if current else None,
        )
        return record

    async def pr_from_sets(self, exercise_id: uuid.UUID) -> SetBest | None:
        """Heaviest qualifying completed set across all logged workouts."""
        workouts = await self.store.fetch(Workout)
        best: SetBest | None = None
        for workout in workouts:
            for entry in workout.entries:
                if entry.exercise_id != exercise_id:
                    continue
                for s in entry.get_sets():
                    if not s.is_completed or not qualifies(s.weight, s.reps):
                        continue
                    if best is None or s.weight > best.weight:
                        achieved = s.completed_at or workout.completed_at or workout.started_at
                        best = SetBest(weight=s.weight, reps=s.reps, achieved_at=as_utc(achieved))
        return best

    async def verify_current_pr(self, exercise_id: uuid.UUID) -> bool:
        """True when the stored PR weight matches a rescan of the logged sets."""
        stored = await self.current_pr(exercise_id)
        scanned = await self.pr_from_sets(exercise_id)
        stored_weight = float(stored.weight) if stored else None
        scanned_weight = scanned.weight if scanned else None
        if stored_weight != scanned_weight:
            logger.warning(
                "PR mismatch for exercise %s: table=%s sets=%s", exercise_id, stored_weight, scanned_weight
            )
            return False
        return True
