"""Shared enums for models and API."""

from enum import Enum


class SetLabel(str, Enum):
    """Optional tag on a logged set."""

    NONE = "none"
    WARMUP = "warmup"
    FAILURE = "failure"
    DROP_SET = "drop_set"
    PR_ATTEMPT = "pr_attempt"


class ExerciseCategory(str, Enum):
    """Body area an exercise belongs to."""

    CHEST = "chest"
    BACK = "back"
    SHOULDERS = "shoulders"
    ARMS = "arms"
    LEGS = "legs"
    CORE = "core"
    CARDIO = "cardio"
    OTHER = "other"


class StatsPeriod(str, Enum):
    """Dashboard window."""

    LAST_7_DAYS = "last_7_days"
    LAST_30_DAYS = "last_30_days"

    @property
    def days(self) -> int:
        return 7 if self is StatsPeriod.LAST_7_DAYS else 30
