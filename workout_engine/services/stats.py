"""
Dashboard statistics: counts, time trained, streak and recent activity.

Read-only; meant to run on its own database session so it never touches the active
session's state. The caller receives the finished HomeStats value.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, timezone

from workout_engine.core.constants import ACTIVITY_DAYS
from workout_engine.core.enums import StatsPeriod
from workout_engine.core.timeutils import Clock, as_utc, utc_now
from workout_engine.db.store import WorkoutStore
from workout_engine.models.workout import Workout

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class HomeStats:
    period: StatsPeriod
    workouts_count: int = 0
    total_seconds: float = 0.0
    previous_workouts_count: int = 0
    previous_total_seconds: float = 0.0
    current_streak: int = 0
    activity: list[bool] = field(default_factory=lambda: [False] * ACTIVITY_DAYS)  # oldest -> today


def period_range(period: StatsPeriod, now: datetime) -> tuple[datetime, datetime]:
    """From midnight `period.days` days ago up to now."""
    midnight = datetime.combine(now.date(), time.min, tzinfo=timezone.utc)
    return midnight - timedelta(days=period.days), now


def previous_period_range(period: StatsPeriod, now: datetime) -> tuple[datetime, datetime]:
    """The equally long window right before period_range."""
    start, _ = period_range(period, now)
    return start - timedelta(days=period.days), start - timedelta(seconds=1)


def current_streak(workout_dates: set[date], today: date) -> int:
    """Consecutive days with a workout, counted back from today (or yesterday)."""
    day = today
    if day not in workout_dates:
        day = today - timedelta(days=1)
        if day not in workout_dates:
            return 0
    streak = 0
    while day in workout_dates:
        streak += 1
        day -= timedelta(days=1)
    return streak


def activity(workout_dates: set[date], today: date, days: int = ACTIVITY_DAYS) -> list[bool]:
    return [(today - timedelta(days=i)) in workout_dates for i in range(days - 1, -1, -1)]


def _totals(workouts: list[Workout], start: datetime, end: datetime) -> tuple[int, float]:
    count = 0
    seconds = 0.0
    for w in workouts:
        completed = as_utc(w.completed_at)
        if start <= completed <= end:
            count += 1
            seconds += max(0.0, (completed - as_utc(w.started_at)).total_seconds())
    return count, seconds


async def compute_home_stats(
    store: WorkoutStore, period: StatsPeriod = StatsPeriod.LAST_7_DAYS, *, clock: Clock = utc_now
) -> HomeStats:
    now = clock()
    workouts = list(await store.fetch(Workout, Workout.completed_at.isnot(None)))
    workout_dates = {as_utc(w.completed_at).date() for w in workouts}

    stats = HomeStats(period=period)
    stats.workouts_count, stats.total_seconds = _totals(workouts, *period_range(period, now))
    stats.previous_workouts_count, stats.previous_total_seconds = _totals(
        workouts, *previous_period_range(period, now)
    )
    stats.current_streak = current_streak(workout_dates, now.date())
    stats.activity = activity(workout_dates, now.date())
    logger.debug("Stats for %s: %d workouts, %d min", period.value, stats.workouts_count, stats.total_seconds // 60)
    return stats
