"""Error and outcome types shared by the store and the session services."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class StoreError(Exception):
    """A save or fetch against the persistent store failed."""


class OutcomeStatus(str, Enum):
    OK = "ok"
    # No workout is active (or the given id does not belong to it)
    NO_ACTIVE_WORKOUT = "no_active_workout"
    # A workout is already in progress and discard was not confirmed
    REFUSED_ACTIVE_EXISTS = "refused_active_exists"
    # Deleting the only remaining set; caller must confirm deleting the exercise instead
    CONFIRM_DELETE_EXERCISE = "confirm_delete_exercise"
    NOT_FOUND = "not_found"
    INVALID = "invalid"
    STORE_FAILED = "store_failed"


@dataclass(slots=True)
class Outcome(Generic[T]):
    """Result of a session operation. Refusals are values, not exceptions."""

    status: OutcomeStatus
    value: T | None = None
    detail: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is OutcomeStatus.OK

    @classmethod
    def success(cls, value: T | None = None) -> "Outcome[T]":
        return cls(OutcomeStatus.OK, value)

    @classmethod
    def refused(cls, status: OutcomeStatus, detail: str | None = None) -> "Outcome[T]":
        return cls(status, None, detail)
