"""
Session lifecycle: the single active workout, its rest timer, and rest-time accounting.

The manager holds the one nullable active-workout id; "at most one workout without
completed_at" is enforced here rather than re-derived from the store on every check.
All methods run on the event loop and must not be interleaved by callers.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from workout_engine.core.constants import MAX_EFFORT_RATING, MIN_EFFORT_RATING
from workout_engine.core.enums import SetLabel
from workout_engine.core.exceptions import Outcome, OutcomeStatus, StoreError
from workout_engine.core.timeutils import Clock, as_utc, utc_now
from workout_engine.db.store import WorkoutStore
from workout_engine.models.exercise import Exercise
from workout_engine.models.template import WorkoutTemplate
from workout_engine.models.workout import Workout, WorkoutEntry
from workout_engine.schemas.set_record import SetRecord
from workout_engine.services import set_ledger
from workout_engine.services.feedback import FeedbackHooks, LoggingFeedback
from workout_engine.services.pr_detection import PRDetector
from workout_engine.services.rest_timer import RestTimer
from workout_engine.services.set_mutation import SetMutationService, SetUpdateResult
from workout_engine.services.ticker import Ticker

logger = logging.getLogger(__name__)


def total_volume(workout: Workout) -> float | None:
    """Sum of weight x reps over completed sets with a positive weight; None when zero."""
    volume = 0.0
    for entry in workout.entries:
        for s in entry.get_sets():
            if s.is_completed and s.weight is not None and s.weight > 0 and s.reps is not None:
                volume += s.weight * s.reps
    return volume if volume > 0 else None


def template_sets(default_sets: int, default_reps: int | None, default_weight: float | None) -> list[SetRecord]:
    sets: list[SetRecord] = []
    for _ in range(max(default_sets, 0)):
        sets = set_ledger.append_set(sets, reps=default_reps, weight=default_weight)
    return sets


def next_incomplete_set(workout: Workout, entry_id: uuid.UUID, completed_set_number: int) -> uuid.UUID | None:
    """Id of the set to focus after completing one: later in the same entry, else the next entry."""
    entries = sorted(workout.entries, key=lambda e: e.order)
    for index, entry in enumerate(entries):
        if entry.id != entry_id:
            continue
        sets = set_ledger.ordered(entry.get_sets())
        following = next((s for s in sets if not s.is_completed and s.set_number > completed_set_number), None)
        if following is not None:
            return following.id
        if index + 1 < len(entries):
            next_sets = set_ledger.ordered(entries[index + 1].get_sets())
            first = next((s for s in next_sets if not s.is_completed), None)
            return first.id if first else None
        return None
    return None


class SessionManager:
    def __init__(
        self,
        store: WorkoutStore,
        *,
        default_rest_seconds: float = 90,
        tick_interval: float = 1.0,
        pr_banner_seconds: float = 3.0,
        clock: Clock = utc_now,
        feedback: FeedbackHooks | None = None,
    ):
        self.store = store
        self._clock = clock
        feedback = feedback or LoggingFeedback()

        self.active_workout_id: uuid.UUID | None = None
        self._active_started_at: datetime | None = None
        self.rest_accumulator: float = 0.0
        # Start instant of the rest run not yet folded into the accumulator
        self._rest_started_at: datetime | None = None

        self.rest_timer = RestTimer(default_rest_seconds, clock=clock, feedback=feedback)
        self.rest_timer.add_completion_listener(self._on_rest_complete)
        self.pr_detector = PRDetector(store, clock=clock)
        self.sets = SetMutationService(
            store, self.pr_detector, clock=clock, feedback=feedback, pr_banner_seconds=pr_banner_seconds
        )
        self._ticker = Ticker(tick_interval, self.tick)

    # State

    @property
    def has_active_workout(self) -> bool:
        return self.active_workout_id is not None

    @property
    def elapsed_time(self) -> float:
        """Seconds since the active workout started, from the wall clock."""
        if self._active_started_at is None:
            return 0.0
        return max(0.0, (self._clock() - self._active_started_at).total_seconds())

    def tick(self) -> None:
        """One 1 Hz step: rest timer recomputation and PR banner expiry."""
        self.rest_timer.tick()
        self.sets.expire_banner()

    async def active_workout(self) -> Workout | None:
        if self.active_workout_id is None:
            return None
        try:
            return await self.store.get(Workout, self.active_workout_id)
        except StoreError:
            return None

    def _adopt(self, workout: Workout) -> None:
        self.active_workout_id = workout.id
        self._active_started_at = as_utc(workout.started_at)
        self.rest_accumulator = 0.0
        self._rest_started_at = None
        self.rest_timer.stop()
        self._ticker.start()

    def _clear(self) -> None:
        self.active_workout_id = None
        self._active_started_at = None
        self.rest_accumulator = 0.0
        self._rest_started_at = None
        self.rest_timer.stop()
        self._ticker.stop()

    # Lifecycle

    async def load(self) -> Workout | None:
        """Pick up a workout left in progress (e.g. after a restart) and resume it."""
        try:
            in_progress = await self.store.fetch(
                Workout, Workout.completed_at.is_(None), order_by=[Workout.started_at.desc()]
            )
        except StoreError:
            return None
        if not in_progress:
            return None
        if len(in_progress) > 1:
            logger.warning("Found %d unfinished workouts; resuming the most recent", len(in_progress))
        outcome = await self.resume(in_progress[0].id)
        return outcome.value

    async def start(
        self,
        template_id: uuid.UUID | None = None,
        *,
        name: str | None = None,
        discard_existing: bool = False,
    ) -> Outcome[Workout]:
        """
        Start a workout, empty or cloned from a template. Refused while another workout is
        active unless `discard_existing`, in which case the old one is deleted first.
        """
        if self.active_workout_id is not None and not discard_existing:
            logger.info("Start refused: workout %s is still active", self.active_workout_id)
            return Outcome.refused(OutcomeStatus.REFUSED_ACTIVE_EXISTS, "A workout is already in progress")

        template: WorkoutTemplate | None = None
        if template_id is not None:
            try:
                template = await self.store.get(WorkoutTemplate, template_id)
            except StoreError:
                return Outcome.refused(OutcomeStatus.STORE_FAILED)
            if template is None:
                return Outcome.refused(OutcomeStatus.NOT_FOUND, "Template not found")

        if discard_existing:
            discarded = await self._discard_unfinished()
            if not discarded.ok:
                return Outcome.refused(discarded.status)

        now = self._clock()
        workout = Workout(name=template.name if template else name, started_at=now, completed_at=None, entries=[])
        if template is not None:
            order = 0
            for te in sorted(template.exercises, key=lambda t: t.order):
                if te.exercise is None:
                    continue
                entry = WorkoutEntry(exercise=te.exercise, order=order)
                entry.set_sets(template_sets(te.default_sets, te.default_reps, te.default_weight))
                workout.entries.append(entry)
                order += 1
            template.last_used_at = now
        self.store.create(workout)
        try:
            await self.store.save()
        except StoreError:
            return Outcome.refused(OutcomeStatus.STORE_FAILED)

        self._adopt(workout)
        logger.info("Workout %s started (%s)", workout.id, workout.name or "unnamed")
        return Outcome.success(workout)

    async def _discard_unfinished(self) -> Outcome[None]:
        try:
            unfinished = await self.store.fetch(Workout, Workout.completed_at.is_(None))
            for workout in unfinished:
                await self.store.delete(workout)
            await self.store.save()
        except StoreError:
            return Outcome.refused(OutcomeStatus.STORE_FAILED)
        if unfinished:
            logger.info("Discarded %d unfinished workout(s)", len(unfinished))
        self._clear()
        return Outcome.success()

    async def resume(self, workout_id: uuid.UUID) -> Outcome[Workout]:
        """Adopt an existing unfinished workout as the active one; rest accounting restarts at 0."""
        if self.active_workout_id is not None and self.active_workout_id != workout_id:
            return Outcome.refused(OutcomeStatus.REFUSED_ACTIVE_EXISTS, "Another workout is in progress")
        try:
            workout = await self.store.get(Workout, workout_id)
        except StoreError:
            return Outcome.refused(OutcomeStatus.STORE_FAILED)
        if workout is None:
            return Outcome.refused(OutcomeStatus.NOT_FOUND, "Workout not found")
        if not workout.is_active:
            return Outcome.refused(OutcomeStatus.INVALID, "Workout is already finished")
        self._adopt(workout)
        logger.info("Workout %s resumed", workout.id)
        return Outcome.success(workout)

    async def finish(self, effort_rating: int | None = None, notes: str | None = None) -> Outcome[Workout]:
        workout = await self.active_workout()
        if workout is None:
            return Outcome.refused(OutcomeStatus.NO_ACTIVE_WORKOUT)

        # A countdown that ran out while nobody was ticking completes (and folds) here
        self.rest_timer.tick()
        if self.rest_timer.is_running:
            self._fold(self.rest_timer.elapsed)
            self.rest_timer.stop()

        if effort_rating is not None and not MIN_EFFORT_RATING <= effort_rating <= MAX_EFFORT_RATING:
            effort_rating = None
        workout.completed_at = self._clock()
        workout.effort_rating = effort_rating
        workout.notes = notes
        workout.total_volume = total_volume(workout)
        workout.total_rest_seconds = self.rest_accumulator if self.rest_accumulator > 0 else None
        try:
            await self.store.save()
        except StoreError:
            return Outcome.refused(OutcomeStatus.STORE_FAILED)

        self._clear()
        logger.info("Workout %s finished (rest %ss)", workout.id, workout.total_rest_seconds)
        return Outcome.success(workout)

    async def cancel(self) -> Outcome[None]:
        workout = await self.active_workout()
        if workout is None:
            return Outcome.refused(OutcomeStatus.NO_ACTIVE_WORKOUT)
        try:
            await self.store.delete(workout)
            await self.store.save()
        except StoreError:
            return Outcome.refused(OutcomeStatus.STORE_FAILED)
        logger.info("Workout %s cancelled", workout.id)
        self._clear()
        return Outcome.success()

    # Rest timer

    def _fold(self, amount: float) -> None:
        """Move rest time into the accumulator, at most once per timer run."""
        if self._rest_started_at is None:
            return
        self.rest_accumulator += max(0.0, amount)
        self._rest_started_at = None

    def _on_rest_complete(self, timer: RestTimer) -> None:
        self._fold(timer.total_duration)

    def start_rest_timer(self, duration: float | None = None) -> Outcome[RestTimer]:
        if self.active_workout_id is None:
            return Outcome.refused(OutcomeStatus.NO_ACTIVE_WORKOUT)
        if duration is not None and duration <= 0:
            return Outcome.refused(OutcomeStatus.INVALID, "Rest duration must be positive")
        if self.rest_timer.is_running:
            self._fold(self.rest_timer.elapsed)
        self._rest_started_at = self._clock()
        self.rest_timer.start(duration)
        return Outcome.success(self.rest_timer)

    def stop_rest_timer(self) -> Outcome[RestTimer]:
        """User skip: only the elapsed part of the run counts as rest."""
        if self.rest_timer.is_running:
            self._fold(self.rest_timer.elapsed)
        self.rest_timer.stop()
        return Outcome.success(self.rest_timer)

    def adjust_rest_timer(self, delta: float) -> Outcome[RestTimer]:
        if delta >= 0:
            self.rest_timer.add(delta)
        else:
            self.rest_timer.subtract(-delta)
        return Outcome.success(self.rest_timer)

    def set_default_rest(self, seconds: float) -> Outcome[RestTimer]:
        if seconds <= 0:
            return Outcome.refused(OutcomeStatus.INVALID, "Rest duration must be positive")
        self.rest_timer.set_default_duration(seconds)
        return Outcome.success(self.rest_timer)

    # Entries and sets on the active workout

    async def _resolve_entry(self, entry_id: uuid.UUID) -> tuple[Workout | None, WorkoutEntry | None, Outcome | None]:
        workout = await self.active_workout()
        if workout is None:
            return None, None, Outcome.refused(OutcomeStatus.NO_ACTIVE_WORKOUT)
        entry = next((e for e in workout.entries if e.id == entry_id), None)
        if entry is None:
            return workout, None, Outcome.refused(OutcomeStatus.NOT_FOUND, "Entry not found")
        return workout, entry, None

    async def add_exercise(self, exercise_id: uuid.UUID) -> Outcome[WorkoutEntry]:
        workout = await self.active_workout()
        if workout is None:
            return Outcome.refused(OutcomeStatus.NO_ACTIVE_WORKOUT)
        try:
            exercise = await self.store.get(Exercise, exercise_id)
        except StoreError:
            return Outcome.refused(OutcomeStatus.STORE_FAILED)
        if exercise is None:
            return Outcome.refused(OutcomeStatus.NOT_FOUND, "Exercise not found")
        return await self.sets.add_entry(workout, exercise)

    async def delete_exercise(self, entry_id: uuid.UUID) -> Outcome[None]:
        workout, entry, refusal = await self._resolve_entry(entry_id)
        if refusal:
            return refusal
        return await self.sets.delete_entry(workout, entry)

    async def update_entry_notes(self, entry_id: uuid.UUID, notes: str | None) -> Outcome[WorkoutEntry]:
        _, entry, refusal = await self._resolve_entry(entry_id)
        if refusal:
            return refusal
        return await self.sets.update_entry_notes(entry, notes)

    async def add_set(self, entry_id: uuid.UUID) -> Outcome[SetRecord]:
        _, entry, refusal = await self._resolve_entry(entry_id)
        if refusal:
            return refusal
        return await self.sets.add_set(entry)

    async def update_set(
        self,
        entry_id: uuid.UUID,
        set_id: uuid.UUID,
        changes: Mapping[str, Any],
        *,
        start_rest: bool = False,
        rest_duration: float | None = None,
    ) -> Outcome[SetUpdateResult]:
        """Edit a set; with `start_rest`, completing it starts the rest timer."""
        _, entry, refusal = await self._resolve_entry(entry_id)
        if refusal:
            return refusal

        async def start_rest_after(_completed: SetRecord) -> None:
            self.start_rest_timer(rest_duration)

        return await self.sets.update_set(
            entry, set_id, changes, on_set_completed=start_rest_after if start_rest else None
        )

    async def update_set_label(self, entry_id: uuid.UUID, set_id: uuid.UUID, label: SetLabel) -> Outcome[SetUpdateResult]:
        _, entry, refusal = await self._resolve_entry(entry_id)
        if refusal:
            return refusal
        return await self.sets.update_set_label(entry, set_id, label)

    async def delete_set(
        self, entry_id: uuid.UUID, set_id: uuid.UUID, *, confirm_delete_exercise: bool = False
    ) -> Outcome[list[SetRecord]]:
        workout, entry, refusal = await self._resolve_entry(entry_id)
        if refusal:
            return refusal
        return await self.sets.delete_set(workout, entry, set_id, confirm_delete_exercise=confirm_delete_exercise)

    async def move_set(self, entry_id: uuid.UUID, source: int, destination: int) -> Outcome[list[SetRecord]]:
        _, entry, refusal = await self._resolve_entry(entry_id)
        if refusal:
            return refusal
        return await self.sets.move_set(entry, source, destination)

    async def apply_set_order(self, entry_id: uuid.UUID, ordered_ids: list[uuid.UUID]) -> Outcome[list[SetRecord]]:
        _, entry, refusal = await self._resolve_entry(entry_id)
        if refusal:
            return refusal
        return await self.sets.apply_set_order(entry, ordered_ids)

    async def next_set_after(self, entry_id: uuid.UUID, set_id: uuid.UUID) -> uuid.UUID | None:
        workout, entry, refusal = await self._resolve_entry(entry_id)
        if refusal:
            return None
        completed = set_ledger.find_set(entry.get_sets(), set_id)
        if completed is None:
            return None
        return next_incomplete_set(workout, entry_id, completed.set_number)

    async def shutdown(self) -> None:
        """Stop ticking; the active workout stays unfinished in the store for the next load()."""
        await self._ticker.aclose()
