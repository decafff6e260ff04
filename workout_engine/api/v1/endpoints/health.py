"""Health check endpoints for load balancers and monitoring."""

import os

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from workout_engine.api.deps import get_store
from workout_engine.core.exceptions import StoreError
from workout_engine.db.store import WorkoutStore
from workout_engine.models.workout import Workout

router = APIRouter()


@router.get("")
async def health():
    """Simple liveness check. Optionally includes built_at if BACKEND_BUILT_AT env is set."""
    payload: dict = {"status": "ok"}
    built_at = os.environ.get("BACKEND_BUILT_AT")
    if built_at:
        payload["built_at"] = built_at
    return payload


@router.get("/ready")
async def readiness(request: Request, store: WorkoutStore = Depends(get_store)):
    """Readiness: store reachable, plus whether a workout is in progress."""
    try:
        unfinished = await store.fetch_count(Workout, Workout.completed_at.is_(None))
    except StoreError as e:
        return JSONResponse(status_code=503, content={"status": "error", "database": str(e)})
    manager = request.app.state.session_manager
    return {
        "status": "ok",
        "database": "connected",
        "active_workout_id": str(manager.active_workout_id) if manager.active_workout_id else None,
        "unfinished_workouts": unfinished,
    }
