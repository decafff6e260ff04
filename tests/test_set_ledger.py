import random
import uuid

import pytest
from pydantic import ValidationError

from workout_engine.core.enums import SetLabel
from workout_engine.services import set_ledger
from workout_engine.services.set_ledger import LedgerError


def _numbers(sets):
    return [s.set_number for s in sets]


def _ledger(count):
    sets = []
    for i in range(count):
        sets = set_ledger.append_set(sets, reps=10, weight=100.0 + i)
    return sets


def test_append_numbers_sequentially():
    sets = _ledger(3)
    assert _numbers(sets) == [1, 2, 3]
    assert [s.weight for s in sets] == [100.0, 101.0, 102.0]
    assert all(not s.is_completed for s in sets)


def test_append_carries_label():
    sets = set_ledger.append_set([], label=SetLabel.WARMUP)
    assert sets[0].label == SetLabel.WARMUP


def test_delete_closes_gap():
    sets = _ledger(4)
    result = set_ledger.delete_set(sets, sets[1].id)
    assert _numbers(result) == [1, 2, 3]
    assert [s.weight for s in result] == [100.0, 102.0, 103.0]
    # input untouched
    assert len(sets) == 4


def test_delete_unknown_raises():
    with pytest.raises(LedgerError):
        set_ledger.delete_set(_ledger(2), uuid.uuid4())


def test_delete_last_set_allowed_in_ledger():
    sets = _ledger(1)
    assert set_ledger.delete_set(sets, sets[0].id) == []


def test_move_forward():
    sets = _ledger(4)
    result = set_ledger.move_set(sets, 0, 2)
    assert [s.weight for s in result] == [101.0, 100.0, 102.0, 103.0]
    assert _numbers(result) == [1, 2, 3, 4]


def test_move_backward():
    sets = _ledger(4)
    result = set_ledger.move_set(sets, 3, 0)
    assert [s.weight for s in result] == [103.0, 100.0, 101.0, 102.0]


def test_move_to_end_uses_count_as_destination():
    sets = _ledger(3)
    result = set_ledger.move_set(sets, 0, 3)
    assert [s.weight for s in result] == [101.0, 102.0, 100.0]
    assert _numbers(result) == [1, 2, 3]


def test_move_onto_itself_is_noop():
    sets = _ledger(3)
    assert [s.id for s in set_ledger.move_set(sets, 1, 1)] == [s.id for s in sets]
    assert [s.id for s in set_ledger.move_set(sets, 1, 2)] == [s.id for s in sets]


@pytest.mark.parametrize("source,destination", [(-1, 0), (3, 0), (0, 4)])
def test_move_out_of_range(source, destination):
    with pytest.raises(LedgerError):
        set_ledger.move_set(_ledger(3), source, destination)


def test_apply_order_ignores_unknown_and_appends_missing():
    a, b, c = _ledger(3)
    result = set_ledger.apply_order([a, b, c], [c.id, uuid.uuid4(), a.id])
    assert [s.id for s in result] == [c.id, a.id, b.id]
    assert _numbers(result) == [1, 2, 3]


def test_apply_order_duplicate_ids_count_once():
    a, b = _ledger(2)
    result = set_ledger.apply_order([a, b], [b.id, b.id, a.id])
    assert [s.id for s in result] == [b.id, a.id]


def test_update_changes_fields_not_order():
    sets = _ledger(3)
    result = set_ledger.update_set(sets, sets[1].id, reps=5, weight=135.0, is_completed=True)
    assert _numbers(result) == [1, 2, 3]
    assert result[1].reps == 5
    assert result[1].weight == 135.0
    assert result[1].is_completed
    assert result[1].id == sets[1].id


def test_update_rejects_unknown_field():
    sets = _ledger(1)
    with pytest.raises(ValueError):
        set_ledger.update_set(sets, sets[0].id, set_number=7)


def test_update_unknown_set_raises():
    with pytest.raises(LedgerError):
        set_ledger.update_set(_ledger(1), uuid.uuid4(), reps=1)


def test_ordered_sorts_by_set_number():
    a, b, c = _ledger(3)
    assert [s.id for s in set_ledger.ordered([c, a, b])] == [a.id, b.id, c.id]


def test_numbering_stays_dense_under_random_edits():
    rng = random.Random(7)
    sets = []
    for _ in range(200):
        op = rng.choice(["append", "delete", "move", "order", "update"])
        if op == "append" or not sets:
            sets = set_ledger.append_set(sets)
        elif op == "delete":
            sets = set_ledger.delete_set(sets, rng.choice(sets).id)
        elif op == "move":
            sets = set_ledger.move_set(sets, rng.randrange(len(sets)), rng.randrange(len(sets) + 1))
        elif op == "order":
            ids = [s.id for s in sets]
            rng.shuffle(ids)
            sets = set_ledger.apply_order(sets, ids[: rng.randrange(len(ids) + 1)])
        else:
            sets = set_ledger.update_set(sets, rng.choice(sets).id, reps=rng.randrange(20))
        assert _numbers(sets) == list(range(1, len(sets) + 1))
        assert len({s.id for s in sets}) == len(sets)


@pytest.mark.parametrize("changes", [{"reps": -1}, {"label": "superset"}, {"weight": "heavy"}])
def test_update_validates_new_values(changes):
    sets = _ledger(2)
    with pytest.raises(ValidationError):
        set_ledger.update_set(sets, sets[0].id, **changes)


def test_update_coerces_valid_values():
    sets = _ledger(1)
    result = set_ledger.update_set(sets, sets[0].id, label="warmup", weight="82.5")
    assert result[0].label is SetLabel.WARMUP
    assert result[0].weight == 82.5
