"""Active workout session endpoints."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends

from workout_engine.api.deps import locked_manager, unwrap
from workout_engine.schemas.session import (
    ActiveSessionRead,
    AddExerciseRequest,
    EntryNotesUpdate,
    FinishSessionRequest,
    ReorderSetsRequest,
    RestAdjustRequest,
    RestDefaultUpdate,
    RestStartRequest,
    RestTimerRead,
    SetUpdate,
    SetUpdateResponse,
    StartSessionRequest,
)
from workout_engine.schemas.set_record import SetRecord
from workout_engine.schemas.workout import PersonalRecordRead, WorkoutEntryRead, WorkoutRead
from workout_engine.services.session_manager import SessionManager

router = APIRouter()


async def _snapshot(manager: SessionManager) -> ActiveSessionRead:
    manager.tick()
    workout = await manager.active_workout()
    detected = manager.sets.detected_pr
    return ActiveSessionRead(
        workout=WorkoutRead.from_workout(workout) if workout else None,
        elapsed_seconds=manager.elapsed_time,
        rest_timer=RestTimerRead.from_timer(manager.rest_timer),
        rest_accumulated_seconds=manager.rest_accumulator,
        detected_pr=PersonalRecordRead.model_validate(detected) if detected else None,
    )


@router.get("", response_model=ActiveSessionRead)
async def get_session(manager: SessionManager = Depends(locked_manager)):
    """Active workout with decoded sets, elapsed time, rest timer and PR banner."""
    return await _snapshot(manager)


@router.post("/start", response_model=ActiveSessionRead, status_code=201)
async def start_session(payload: StartSessionRequest, manager: SessionManager = Depends(locked_manager)):
    """Start an empty or template-based workout. 409 while another workout is active."""
    unwrap(
        await manager.start(
            payload.template_id, name=payload.name, discard_existing=payload.discard_existing
        )
    )
    return await _snapshot(manager)


@router.post("/resume/{workout_id}", response_model=ActiveSessionRead)
async def resume_session(workout_id: uuid.UUID, manager: SessionManager = Depends(locked_manager)):
    unwrap(await manager.resume(workout_id))
    return await _snapshot(manager)


@router.post("/finish", response_model=WorkoutRead)
async def finish_session(payload: FinishSessionRequest, manager: SessionManager = Depends(locked_manager)):
    workout = unwrap(await manager.finish(payload.effort_rating, payload.notes))
    return WorkoutRead.from_workout(workout)


@router.post("/cancel", status_code=204)
async def cancel_session(manager: SessionManager = Depends(locked_manager)):
    """Discard the active workout and everything logged in it."""
    unwrap(await manager.cancel())
    return None


@router.post("/entries", response_model=WorkoutEntryRead, status_code=201)
async def add_exercise(payload: AddExerciseRequest, manager: SessionManager = Depends(locked_manager)):
    entry = unwrap(await manager.add_exercise(payload.exercise_id))
    return WorkoutEntryRead.from_entry(entry)


@router.patch("/entries/{entry_id}", response_model=WorkoutEntryRead)
async def update_entry_notes(
    entry_id: uuid.UUID, payload: EntryNotesUpdate, manager: SessionManager = Depends(locked_manager)
):
    entry = unwrap(await manager.update_entry_notes(entry_id, payload.notes))
    return WorkoutEntryRead.from_entry(entry)


@router.delete("/entries/{entry_id}", status_code=204)
async def delete_exercise(entry_id: uuid.UUID, manager: SessionManager = Depends(locked_manager)):
    unwrap(await manager.delete_exercise(entry_id))
    return None


@router.post("/entries/{entry_id}/sets", response_model=SetRecord, status_code=201)
async def add_set(entry_id: uuid.UUID, manager: SessionManager = Depends(locked_manager)):
    return unwrap(await manager.add_set(entry_id))


@router.patch("/entries/{entry_id}/sets/{set_id}", response_model=SetUpdateResponse)
async def update_set(
    entry_id: uuid.UUID,
    set_id: uuid.UUID,
    payload: SetUpdate,
    manager: SessionManager = Depends(locked_manager),
):
    """Update a set. Completing it runs PR detection and, with start_rest, starts the rest timer."""
    result = unwrap(
        await manager.update_set(
            entry_id,
            set_id,
            payload.changes(),
            start_rest=payload.start_rest,
            rest_duration=payload.rest_duration,
        )
    )
    next_set_id = await manager.next_set_after(entry_id, set_id) if result.completed_now else None
    return SetUpdateResponse(
        set=result.set,
        completed_now=result.completed_now,
        personal_record=PersonalRecordRead.model_validate(result.personal_record)
        if result.personal_record
        else None,
        next_set_id=next_set_id,
    )


@router.delete("/entries/{entry_id}/sets/{set_id}", response_model=list[SetRecord])
async def delete_set(
    entry_id: uuid.UUID,
    set_id: uuid.UUID,
    confirm_delete_exercise: bool = False,
    manager: SessionManager = Depends(locked_manager),
):
    """Delete a set. The only set of an exercise needs confirm_delete_exercise=true."""
    return unwrap(
        await manager.delete_set(entry_id, set_id, confirm_delete_exercise=confirm_delete_exercise)
    )


@router.post("/entries/{entry_id}/sets/reorder", response_model=list[SetRecord])
async def reorder_sets(
    entry_id: uuid.UUID, payload: ReorderSetsRequest, manager: SessionManager = Depends(locked_manager)
):
    if payload.set_ids is not None:
        return unwrap(await manager.apply_set_order(entry_id, payload.set_ids))
    return unwrap(await manager.move_set(entry_id, payload.source, payload.destination))


@router.post("/rest/start", response_model=RestTimerRead)
async def start_rest(payload: RestStartRequest, manager: SessionManager = Depends(locked_manager)):
    timer = unwrap(manager.start_rest_timer(payload.duration))
    return RestTimerRead.from_timer(timer)


@router.post("/rest/stop", response_model=RestTimerRead)
async def stop_rest(manager: SessionManager = Depends(locked_manager)):
    timer = unwrap(manager.stop_rest_timer())
    return RestTimerRead.from_timer(timer)


@router.post("/rest/adjust", response_model=RestTimerRead)
async def adjust_rest(payload: RestAdjustRequest, manager: SessionManager = Depends(locked_manager)):
    """Shift the running countdown, e.g. +/-30 s."""
    timer = unwrap(manager.adjust_rest_timer(payload.delta))
    return RestTimerRead.from_timer(timer)


@router.put("/rest/default", response_model=RestTimerRead)
async def set_default_rest(payload: RestDefaultUpdate, manager: SessionManager = Depends(locked_manager)):
    """Change the default rest duration; a countdown already running keeps its length."""
    timer = unwrap(manager.set_default_rest(payload.seconds))
    return RestTimerRead.from_timer(timer)
