"""
Rest timer anchored to the wall clock.

Remaining time is always `target_completion_time - now`, recomputed on every tick and on
every read; nothing is decremented per tick. A suspended process therefore shows the right
value on the first recomputation after it resumes.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from datetime import datetime, timedelta

from workout_engine.core.constants import MAX_REST_SECONDS
from workout_engine.core.timeutils import Clock, utc_now
from workout_engine.services.feedback import FeedbackHooks, LoggingFeedback, notify_rest_complete

logger = logging.getLogger(__name__)


class RestTimer:
    """Countdown between sets.

    `total_duration` tracks start duration plus adjustments, so while running
    `total_duration - remaining` is the time actually spent resting.
    """

    def __init__(
        self,
        default_duration: float = 90,
        *,
        clock: Clock = utc_now,
        feedback: FeedbackHooks | None = None,
        max_remaining: float = MAX_REST_SECONDS,
    ):
        self.default_duration = default_duration
        self.total_duration: float = default_duration
        self.is_running = False
        self.is_complete = False
        self.target_completion_time: datetime | None = None
        self.max_remaining = max_remaining
        self._clock = clock
        self._feedback = feedback or LoggingFeedback()
        self._completion_listeners: list[Callable[["RestTimer"], None]] = []

    def add_completion_listener(self, listener: Callable[["RestTimer"], None]) -> None:
        self._completion_listeners.append(listener)

    @property
    def remaining(self) -> float:
        """Seconds left; 0 when not running."""
        if not self.is_running or self.target_completion_time is None:
            return 0.0
        return max(0.0, (self.target_completion_time - self._clock()).total_seconds())

    @property
    def remaining_seconds(self) -> int:
        return math.ceil(self.remaining)

    @property
    def elapsed(self) -> float:
        """Rest time used by the current (or just finished) run."""
        if self.is_running:
            return max(0.0, self.total_duration - self.remaining)
        if self.is_complete:
            return self.total_duration
        return 0.0

    def start(self, duration: float | None = None) -> None:
        duration = self.default_duration if duration is None else duration
        self.total_duration = duration
        self.target_completion_time = self._clock() + timedelta(seconds=duration)
        self.is_running = True
        self.is_complete = False
        logger.debug("Rest timer started for %ss", duration)
        self.tick()

    def tick(self) -> None:
        """Recompute from the wall clock; completes the timer once the target has passed."""
        if not self.is_running or self.target_completion_time is None:
            return
        if self._clock() >= self.target_completion_time:
            self._complete()

    def add(self, delta: float) -> None:
        if not self.is_running or self.target_completion_time is None:
            return
        delta = min(delta, max(0.0, self.max_remaining - self.remaining))
        self.target_completion_time += timedelta(seconds=delta)
        self.total_duration += delta

    def subtract(self, delta: float) -> None:
        if not self.is_running or self.target_completion_time is None:
            return
        remaining = self.remaining
        if delta >= remaining:
            # Rest ends now; everything spent so far counts as the full duration
            self.total_duration -= remaining
            self._complete()
            return
        self.target_completion_time -= timedelta(seconds=delta)
        self.total_duration -= delta

    def stop(self) -> None:
        """User skip: stop without marking the timer complete."""
        self.is_running = False
        self.is_complete = False
        self.target_completion_time = None
        logger.debug("Rest timer stopped")

    def set_default_duration(self, seconds: float) -> None:
        self.default_duration = seconds
        if not self.is_running:
            self.total_duration = seconds

    def _complete(self) -> None:
        self.is_running = False
        self.is_complete = True
        self.target_completion_time = None
        logger.info("Rest timer complete after %ss", self.total_duration)
        notify_rest_complete(self._feedback)
        for listener in self._completion_listeners:
            listener(self)
