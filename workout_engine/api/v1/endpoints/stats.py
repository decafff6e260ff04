"""Dashboard statistics endpoint."""

from dataclasses import asdict

from fastapi import APIRouter, Depends

from workout_engine.api.deps import get_store
from workout_engine.core.enums import StatsPeriod
from workout_engine.db.store import WorkoutStore
from workout_engine.services.stats import compute_home_stats

router = APIRouter()


@router.get("")
async def get_stats(period: StatsPeriod = StatsPeriod.LAST_7_DAYS, store: WorkoutStore = Depends(get_store)):
    """
    Completed workouts and time trained in the period (and the period before it),
    current streak, and a 7-day activity strip (oldest first).
    """
    stats = await compute_home_stats(store, period)
    return asdict(stats)
