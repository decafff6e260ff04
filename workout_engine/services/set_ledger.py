"""
Set ledger: ordered-list operations over an entry's sets.

Every operation returns a new list whose set_number values are exactly 1..count in list
(display) order. Inputs are never mutated.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable
from typing import Any

from workout_engine.core.enums import SetLabel
from workout_engine.schemas.set_record import SetRecord

UPDATABLE_FIELDS = frozenset(
    {"reps", "weight", "duration", "distance", "equipment", "label", "is_completed", "completed_at"}
)


class LedgerError(LookupError):
    """Unknown set id or out-of-range index."""


def ordered(sets: Iterable[SetRecord]) -> list[SetRecord]:
    """Display order (stable on set_number)."""
    return sorted(sets, key=lambda s: s.set_number)


def renumber(sets: Iterable[SetRecord]) -> list[SetRecord]:
    return [s.model_copy(update={"set_number": i}) for i, s in enumerate(sets, start=1)]


def append_set(
    sets: list[SetRecord],
    *,
    reps: int | None = None,
    weight: float | None = None,
    label: SetLabel = SetLabel.NONE,
) -> list[SetRecord]:
    """Add an empty (or template-seeded) set at the end."""
    new_set = SetRecord(set_number=len(sets) + 1, reps=reps, weight=weight, label=label)
    return renumber([*ordered(sets), new_set])


def update_set(sets: list[SetRecord], set_id: uuid.UUID, **changes: Any) -> list[SetRecord]:
    """
    Replace fields on one set; ordering is untouched. The updated set is re-validated, so a
    bad value raises pydantic.ValidationError instead of reaching the stored blob.
    """
    unknown = set(changes) - UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"Cannot update set fields: {sorted(unknown)}")
    result = []
    found = False
    for s in ordered(sets):
        if s.id == set_id:
            s = SetRecord.model_validate({**s.model_dump(), **changes})
            found = True
        result.append(s)
    if not found:
        raise LedgerError(f"Set {set_id} not found")
    return renumber(result)


def delete_set(sets: list[SetRecord], set_id: uuid.UUID) -> list[SetRecord]:
    """Remove one set and close the gap. An empty result is allowed here."""
    current = ordered(sets)
    remaining = [s for s in current if s.id != set_id]
    if len(remaining) == len(current):
        raise LedgerError(f"Set {set_id} not found")
    return renumber(remaining)


def move_set(sets: list[SetRecord], source: int, destination: int) -> list[SetRecord]:
    """
    Move the set at index `source` so it lands before the element currently at
    `destination`. destination == count means "after the last set".
    """
    current = ordered(sets)
    count = len(current)
    if not 0 <= source < count:
        raise LedgerError(f"Source index {source} out of range for {count} sets")
    if not 0 <= destination <= count:
        raise LedgerError(f"Destination index {destination} out of range for {count} sets")
    moving = current.pop(source)
    if destination > source:
        destination -= 1
    current.insert(destination, moving)
    return renumber(current)


def apply_order(sets: list[SetRecord], ordered_ids: Iterable[uuid.UUID]) -> list[SetRecord]:
    """
    Reorder by explicit id sequence. Unknown ids are ignored; sets missing from
    `ordered_ids` keep their relative order and go to the end.
    """
    current = ordered(sets)
    by_id = {s.id: s for s in current}
    result: list[SetRecord] = []
    seen: set[uuid.UUID] = set()
    for set_id in ordered_ids:
        s = by_id.get(set_id)
        if s is not None and set_id not in seen:
            result.append(s)
            seen.add(set_id)
    result.extend(s for s in current if s.id not in seen)
    return renumber(result)


def find_set(sets: Iterable[SetRecord], set_id: uuid.UUID) -> SetRecord | None:
    return next((s for s in sets if s.id == set_id), None)
