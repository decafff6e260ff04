import uuid

import pytest

from workout_engine.core.exceptions import OutcomeStatus, StoreError
from workout_engine.models import Workout, WorkoutEntry, WorkoutTemplate
from workout_engine.schemas.set_record import SetRecord
from workout_engine.services.session_manager import SessionManager, template_sets, total_volume


async def _unfinished_count(store):
    return await store.fetch_count(Workout, Workout.completed_at.is_(None))


async def test_start_empty_workout(manager, store, clock):
    outcome = await manager.start(name="Morning")
    assert outcome.ok
    workout = outcome.value
    assert manager.active_workout_id == workout.id
    assert workout.name == "Morning"
    assert workout.completed_at is None
    assert workout.entries == []
    clock.advance(125)
    assert manager.elapsed_time == 125


async def test_second_start_is_refused_without_discard(manager, store):
    first = (await manager.start()).value
    outcome = await manager.start()
    assert outcome.status is OutcomeStatus.REFUSED_ACTIVE_EXISTS
    assert manager.active_workout_id == first.id
    assert await _unfinished_count(store) == 1


async def test_start_with_discard_replaces_active_workout(manager, store):
    first = (await manager.start()).value
    outcome = await manager.start(discard_existing=True)
    assert outcome.ok
    assert outcome.value.id != first.id
    assert manager.active_workout_id == outcome.value.id
    assert await store.get(Workout, first.id) is None
    assert await _unfinished_count(store) == 1


async def test_start_from_template_clones_exercises(manager, store, push_day, bench, squat):
    outcome = await manager.start(push_day.id)
    assert outcome.ok
    workout = outcome.value
    assert workout.name == "Push Day"
    entries = sorted(workout.entries, key=lambda e: e.order)
    assert [e.exercise_id for e in entries] == [bench.id, squat.id]
    assert [e.order for e in entries] == [0, 1]

    bench_sets = entries[0].get_sets()
    assert [s.set_number for s in bench_sets] == [1, 2, 3]
    assert all(s.reps == 5 and s.weight == 135.0 and not s.is_completed for s in bench_sets)
    assert [s.reps for s in entries[1].get_sets()] == [8, 8]

    template = await store.get(WorkoutTemplate, push_day.id)
    assert template.last_used_at is not None


async def test_start_from_missing_template(manager, bench):
    outcome = await manager.start(bench.id)
    assert outcome.status is OutcomeStatus.NOT_FOUND
    assert not manager.has_active_workout


def test_template_sets_seed_values():
    sets = template_sets(2, 10, None)
    assert [(s.set_number, s.reps, s.weight) for s in sets] == [(1, 10, None), (2, 10, None)]
    assert template_sets(0, 10, 50.0) == []


async def test_resume_unfinished_workout(manager, store, clock):
    workout = store.create(Workout(started_at=clock(), completed_at=None))
    await store.save()
    clock.advance(600)
    outcome = await manager.resume(workout.id)
    assert outcome.ok
    assert manager.active_workout_id == workout.id
    assert manager.elapsed_time == 600
    assert manager.rest_accumulator == 0


async def test_resume_refusals(manager, store, clock):
    done = store.create(Workout(started_at=clock(), completed_at=clock()))
    await store.save()
    assert (await manager.resume(done.id)).status is OutcomeStatus.INVALID

    active = (await manager.start()).value
    other = store.create(Workout(started_at=clock(), completed_at=None))
    await store.save()
    assert (await manager.resume(other.id)).status is OutcomeStatus.REFUSED_ACTIVE_EXISTS
    assert (await manager.resume(active.id)).ok


async def test_load_picks_up_unfinished_workout(store, clock, feedback):
    workout = store.create(Workout(started_at=clock(), completed_at=None))
    await store.save()
    manager = SessionManager(store, clock=clock, feedback=feedback, tick_interval=60)
    try:
        resumed = await manager.load()
        assert resumed.id == workout.id
        assert manager.active_workout_id == workout.id
    finally:
        await manager.shutdown()


async def test_load_with_nothing_to_resume(manager):
    assert await manager.load() is None
    assert not manager.has_active_workout


async def test_finish_records_summary(manager, bench, clock):
    await manager.start()
    entry = (await manager.add_exercise(bench.id)).value
    first = (await manager.add_set(entry.id)).value
    second = (await manager.add_set(entry.id)).value
    await manager.add_set(entry.id)
    await manager.update_set(entry.id, first.id, {"reps": 5, "weight": 135.0, "is_completed": True})
    await manager.update_set(entry.id, second.id, {"reps": 1, "weight": 140.0, "is_completed": True})
    clock.advance(1800)

    outcome = await manager.finish(effort_rating=7, notes="Felt strong")
    assert outcome.ok
    workout = outcome.value
    assert workout.completed_at == clock()
    assert workout.effort_rating == 7
    assert workout.notes == "Felt strong"
    assert workout.total_volume == 815.0
    assert workout.total_rest_seconds is None
    assert not manager.has_active_workout
    assert manager.elapsed_time == 0


async def test_finish_ignores_out_of_range_effort(manager):
    await manager.start()
    workout = (await manager.finish(effort_rating=11)).value
    assert workout.effort_rating is None


async def test_finish_without_active_workout(manager):
    assert (await manager.finish()).status is OutcomeStatus.NO_ACTIVE_WORKOUT


async def test_cancel_deletes_workout(manager, store, bench):
    workout = (await manager.start()).value
    await manager.add_exercise(bench.id)
    assert (await manager.cancel()).ok
    assert not manager.has_active_workout
    assert await store.fetch_count(Workout) == 0
    assert await store.fetch_count(WorkoutEntry) == 0
    assert await store.get(Workout, workout.id) is None
    assert (await manager.cancel()).status is OutcomeStatus.NO_ACTIVE_WORKOUT


async def test_at_most_one_unfinished_workout(manager, store):
    for discard in (False, True, False, True):
        await manager.start(discard_existing=discard)
        assert await _unfinished_count(store) == 1
    await manager.finish()
    assert await _unfinished_count(store) == 0
    await manager.start()
    assert await _unfinished_count(store) == 1


async def test_failed_save_keeps_workout_active(manager, store, monkeypatch):
    await manager.start()

    async def failing_save():
        raise StoreError("disk full")

    monkeypatch.setattr(store, "save", failing_save)
    assert (await manager.finish()).status is OutcomeStatus.STORE_FAILED
    assert manager.has_active_workout

    monkeypatch.undo()
    assert (await manager.finish()).ok
    assert not manager.has_active_workout


# Rest accounting


async def test_skipped_rest_counts_elapsed_only(manager, clock):
    await manager.start()
    manager.start_rest_timer(60)
    clock.advance(20)
    manager.stop_rest_timer()
    assert manager.rest_accumulator == 20
    workout = (await manager.finish()).value
    assert workout.total_rest_seconds == 20


async def test_completed_rest_counts_full_duration(manager, clock, feedback):
    await manager.start()
    manager.start_rest_timer(60)
    clock.advance(60)
    manager.tick()
    assert manager.rest_timer.is_complete
    assert feedback.sounds == ["rest_complete"]
    # a late skip after completion adds nothing
    manager.stop_rest_timer()
    workout = (await manager.finish()).value
    assert workout.total_rest_seconds == 60


async def test_restart_folds_previous_run(manager, clock):
    await manager.start()
    manager.start_rest_timer(60)
    clock.advance(15)
    manager.start_rest_timer(60)
    assert manager.rest_accumulator == 15
    clock.advance(60)
    manager.tick()
    assert manager.rest_accumulator == 75


async def test_finish_while_resting_counts_elapsed(manager, clock):
    await manager.start()
    manager.start_rest_timer(60)
    clock.advance(25)
    workout = (await manager.finish()).value
    assert workout.total_rest_seconds == 25
    assert not manager.rest_timer.is_running


async def test_finish_after_unticked_expiry_counts_full_duration(manager, clock):
    await manager.start()
    manager.start_rest_timer(60)
    clock.advance(400)
    workout = (await manager.finish()).value
    assert workout.total_rest_seconds == 60


async def test_adjustments_change_counted_rest(manager, clock):
    await manager.start()
    manager.start_rest_timer(60)
    clock.advance(10)
    manager.adjust_rest_timer(30)
    clock.advance(80)
    manager.tick()
    assert manager.rest_accumulator == 90

    manager.start_rest_timer(90)
    clock.advance(20)
    manager.adjust_rest_timer(-90)
    assert manager.rest_timer.is_complete
    assert manager.rest_accumulator == 110


async def test_rest_timer_requires_active_workout(manager):
    assert manager.start_rest_timer().status is OutcomeStatus.NO_ACTIVE_WORKOUT
    await manager.start()
    assert manager.start_rest_timer(0).status is OutcomeStatus.INVALID
    assert manager.start_rest_timer().ok
    assert manager.rest_timer.total_duration == 90


async def test_default_rest_change(manager):
    assert manager.set_default_rest(0).status is OutcomeStatus.INVALID
    assert manager.set_default_rest(150).ok
    await manager.start()
    manager.start_rest_timer()
    assert manager.rest_timer.remaining_seconds == 150


async def test_rest_accounting_resets_per_workout(manager, clock):
    await manager.start()
    manager.start_rest_timer(30)
    clock.advance(30)
    manager.tick()
    await manager.finish()
    await manager.start()
    assert manager.rest_accumulator == 0
    workout = (await manager.finish()).value
    assert workout.total_rest_seconds is None


def test_total_volume_skips_incomplete_and_bodyweight():
    workout = Workout()
    entry = WorkoutEntry(order=0)
    entry.set_sets(
        [
            SetRecord(set_number=1, reps=10, weight=50.0, is_completed=True),
            SetRecord(set_number=2, reps=10, weight=60.0, is_completed=False),
            SetRecord(set_number=3, reps=15, weight=None, is_completed=True),
        ]
    )
    workout.entries.append(entry)
    assert total_volume(workout) == 500.0
    assert total_volume(Workout()) is None


async def test_rejected_commit_rolls_back_and_next_call_succeeds(manager, store, bench, clock):
    workout = (await manager.start()).value
    entry = (await manager.add_exercise(bench.id)).value
    # Entry pointing at a workout that does not exist: the commit fails on the foreign key
    store.create(WorkoutEntry(workout_id=uuid.uuid4(), order=0))

    clock.advance(60)
    outcome = await manager.finish(effort_rating=6)
    assert outcome.status is OutcomeStatus.STORE_FAILED
    assert manager.active_workout_id == workout.id

    # Session is usable again and holds the stored state, not the rejected edits
    reloaded = await manager.active_workout()
    assert reloaded.completed_at is None
    assert reloaded.effort_rating is None
    assert [e.id for e in reloaded.entries] == [entry.id]
    assert await store.fetch_count(WorkoutEntry) == 1

    assert (await manager.add_set(entry.id)).ok
    finished = await manager.finish(effort_rating=6)
    assert finished.ok
    assert finished.value.effort_rating == 6
    assert await _unfinished_count(store) == 0


async def test_store_wraps_database_errors(store):
    store.create(WorkoutEntry(workout_id=uuid.uuid4(), order=0))
    with pytest.raises(StoreError):
        await store.save()
    assert await store.fetch_count(WorkoutEntry) == 0
