"""Shared FastAPI dependencies."""

from collections.abc import AsyncGenerator

from fastapi import HTTPException, Request

from workout_engine.core.exceptions import Outcome, OutcomeStatus
from workout_engine.db.store import WorkoutStore
from workout_engine.services.session_manager import SessionManager

_STATUS_CODES = {
    OutcomeStatus.NO_ACTIVE_WORKOUT: (409, "No active workout"),
    OutcomeStatus.REFUSED_ACTIVE_EXISTS: (409, "A workout is already in progress"),
    OutcomeStatus.CONFIRM_DELETE_EXERCISE: (409, "Deleting the only set requires confirm_delete_exercise"),
    OutcomeStatus.NOT_FOUND: (404, "Not found"),
    OutcomeStatus.INVALID: (400, "Invalid request"),
    OutcomeStatus.STORE_FAILED: (503, "Could not save changes"),
}


async def get_store(request: Request) -> AsyncGenerator[WorkoutStore, None]:
    """Per-request store on its own session, for read-only endpoints."""
    async with request.app.state.session_maker() as session:
        yield WorkoutStore(session)


async def locked_manager(request: Request) -> AsyncGenerator[SessionManager, None]:
    """The session manager, held exclusively for the duration of the request."""
    async with request.app.state.session_lock:
        yield request.app.state.session_manager


def unwrap(outcome: Outcome):
    """Return the outcome value or raise the matching HTTP error."""
    if outcome.ok:
        return outcome.value
    status_code, default_detail = _STATUS_CODES[outcome.status]
    raise HTTPException(
        status_code=status_code,
        detail={"code": outcome.status.value, "message": outcome.detail or default_detail},
    )
