"""Set and entry edits on the active workout, with PR detection on completion."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Awaitable, Callable, Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from pydantic import ValidationError

from workout_engine.core.enums import SetLabel
from workout_engine.core.exceptions import Outcome, OutcomeStatus, StoreError
from workout_engine.core.timeutils import Clock, utc_now
from workout_engine.db.store import WorkoutStore
from workout_engine.models.exercise import Exercise
from workout_engine.models.personal_record import PersonalRecord
from workout_engine.models.workout import Workout, WorkoutEntry
from workout_engine.schemas.set_record import SetRecord
from workout_engine.services import set_ledger
from workout_engine.services.feedback import FeedbackHooks, LoggingFeedback, notify_personal_record
from workout_engine.services.pr_detection import PRDetector

logger = logging.getLogger(__name__)

SetCompletedHook = Callable[[SetRecord], Awaitable[None]]


@dataclass(slots=True)
class SetUpdateResult:
    set: SetRecord
    completed_now: bool = False
    personal_record: PersonalRecord | None = None


class SetMutationService:
    """Drives the set ledger for one entry at a time and persists every change."""

    def __init__(
        self,
        store: WorkoutStore,
        pr_detector: PRDetector,
        *,
        clock: Clock = utc_now,
        feedback: FeedbackHooks | None = None,
        pr_banner_seconds: float = 3.0,
    ):
        self.store = store
        self.pr_detector = pr_detector
        self.pr_banner_seconds = pr_banner_seconds
        self._clock = clock
        self._feedback = feedback or LoggingFeedback()
        self._detected_pr: PersonalRecord | None = None
        self._detected_pr_at: datetime | None = None

    # PR banner: visible for pr_banner_seconds after detection

    @property
    def detected_pr(self) -> PersonalRecord | None:
        self.expire_banner()
        return self._detected_pr

    def expire_banner(self) -> None:
        if self._detected_pr_at is None:
            return
        if (self._clock() - self._detected_pr_at).total_seconds() >= self.pr_banner_seconds:
            self.clear_banner()

    def clear_banner(self) -> None:
        self._detected_pr = None
        self._detected_pr_at = None

    async def _save(self, action: str) -> bool:
        try:
            await self.store.save()
        except StoreError:
            logger.error("Could not %s; keeping in-memory state for the next attempt", action)
            return False
        return True

    # Entries

    async def add_entry(self, workout: Workout, exercise: Exercise) -> Outcome[WorkoutEntry]:
        next_order = max((e.order for e in workout.entries), default=-1) + 1
        entry = WorkoutEntry(exercise=exercise, order=next_order)
        entry.set_sets([])
        workout.entries.append(entry)
        if not await self._save("add exercise"):
            return Outcome.refused(OutcomeStatus.STORE_FAILED)
        return Outcome.success(entry)

    async def delete_entry(self, workout: Workout, entry: WorkoutEntry) -> Outcome[None]:
        workout.entries.remove(entry)
        for i, remaining in enumerate(sorted(workout.entries, key=lambda e: e.order)):
            remaining.order = i
        if not await self._save("delete exercise"):
            return Outcome.refused(OutcomeStatus.STORE_FAILED)
        return Outcome.success()

    async def update_entry_notes(self, entry: WorkoutEntry, notes: str | None) -> Outcome[WorkoutEntry]:
        entry.notes = notes
        if not await self._save("update exercise notes"):
            return Outcome.refused(OutcomeStatus.STORE_FAILED)
        return Outcome.success(entry)

    # Sets

    async def _write_sets(self, entry: WorkoutEntry, sets: list[SetRecord], action: str) -> bool:
        entry.set_sets(sets)
        return await self._save(action)

    async def add_set(self, entry: WorkoutEntry) -> Outcome[SetRecord]:
        sets = set_ledger.append_set(entry.get_sets())
        if not await self._write_sets(entry, sets, "add set"):
            return Outcome.refused(OutcomeStatus.STORE_FAILED)
        return Outcome.success(sets[-1])

    async def update_set(
        self,
        entry: WorkoutEntry,
        set_id: uuid.UUID,
        changes: Mapping[str, Any],
        *,
        on_set_completed: SetCompletedHook | None = None,
    ) -> Outcome[SetUpdateResult]:
        """
        Apply field changes to one set. On a not-completed -> completed transition the set
        is stamped, PR detection runs, and `on_set_completed` is awaited.
        """
        sets = entry.get_sets()
        previous = set_ledger.find_set(sets, set_id)
        if previous is None:
            return Outcome.refused(OutcomeStatus.NOT_FOUND, "Set not found")

        changes = dict(changes)
        was_completed = previous.is_completed
        is_completed = changes.get("is_completed", was_completed)
        completed_now = not was_completed and is_completed
        if completed_now:
            changes["completed_at"] = self._clock()
        elif was_completed and not is_completed:
            changes["completed_at"] = None

        try:
            sets = set_ledger.update_set(sets, set_id, **changes)
        except ValidationError as e:
            logger.info("Rejected update of set %s: %d invalid field(s)", set_id, e.error_count())
            return Outcome.refused(OutcomeStatus.INVALID, str(e))
        except ValueError as e:
            return Outcome.refused(OutcomeStatus.INVALID, str(e))
        if not await self._write_sets(entry, sets, "update set"):
            return Outcome.refused(OutcomeStatus.STORE_FAILED)

        updated = set_ledger.find_set(sets, set_id)
        result = SetUpdateResult(set=updated, completed_now=completed_now)
        if completed_now:
            if entry.exercise_id is not None:
                result.personal_record = await self.pr_detector.detect_new_pr(
                    entry.exercise_id, updated.weight, updated.reps, entry.workout_id
                )
            if result.personal_record is not None:
                self._detected_pr = result.personal_record
                self._detected_pr_at = self._clock()
                notify_personal_record(self._feedback)
            if on_set_completed is not None:
                await on_set_completed(updated)
        return Outcome.success(result)

    async def update_set_label(self, entry: WorkoutEntry, set_id: uuid.UUID, label: SetLabel) -> Outcome[SetUpdateResult]:
        return await self.update_set(entry, set_id, {"label": label})

    async def delete_set(
        self,
        workout: Workout,
        entry: WorkoutEntry,
        set_id: uuid.UUID,
        *,
        confirm_delete_exercise: bool = False,
    ) -> Outcome[list[SetRecord]]:
        """
        Remove a set. Removing the only set is refused with CONFIRM_DELETE_EXERCISE unless
        the caller confirmed, in which case the whole entry is deleted.
        """
        sets = entry.get_sets()
        if set_ledger.find_set(sets, set_id) is None:
            return Outcome.refused(OutcomeStatus.NOT_FOUND, "Set not found")
        if len(sets) == 1:
            if not confirm_delete_exercise:
                logger.info("Deleting the last set of entry %s needs confirmation", entry.id)
                return Outcome.refused(
                    OutcomeStatus.CONFIRM_DELETE_EXERCISE,
                    "This is the only set; delete the exercise instead?",
                )
            outcome = await self.delete_entry(workout, entry)
            if not outcome.ok:
                return Outcome.refused(outcome.status)
            return Outcome.success([])

        sets = set_ledger.delete_set(sets, set_id)
        if not await self._write_sets(entry, sets, "delete set"):
            return Outcome.refused(OutcomeStatus.STORE_FAILED)
        return Outcome.success(sets)

    async def move_set(self, entry: WorkoutEntry, source: int, destination: int) -> Outcome[list[SetRecord]]:
        try:
            sets = set_ledger.move_set(entry.get_sets(), source, destination)
        except set_ledger.LedgerError as e:
            return Outcome.refused(OutcomeStatus.INVALID, str(e))
        if not await self._write_sets(entry, sets, "move set"):
            return Outcome.refused(OutcomeStatus.STORE_FAILED)
        return Outcome.success(sets)

    async def apply_set_order(self, entry: WorkoutEntry, ordered_ids: Iterable[uuid.UUID]) -> Outcome[list[SetRecord]]:
        current = entry.get_sets()
        if not current:
            return Outcome.success([])
        sets = set_ledger.apply_order(current, ordered_ids)
        if not await self._write_sets(entry, sets, "reorder sets"):
            return Outcome.refused(OutcomeStatus.STORE_FAILED)
        return Outcome.success(sets)
