import pytest
from prodtrack.core.errors import InvalidQuantityError, InvalidStepError
from prodtrack.core.steps import (
    StepLedger,
    aggregate_step_stats,
    compute_fully_done,
    is_order_complete,
    validate_step,
)


def test_fully_done_is_min_across_steps():
    assert compute_fully_done(3, {1: 7, 2: 5, 3: 9}) == 5
    assert compute_fully_done(1, {1: 4}) == 4


def test_fully_done_zero_when_a_step_is_unrecorded():
    assert compute_fully_done(3, {1: 7, 3: 9}) == 0


def test_fully_done_zero_for_untracked_steps():
    assert compute_fully_done(0, {1: 50}) == 0
    assert compute_fully_done(-1, {1: 50}, previous=3) == 0


def test_fully_done_accepts_string_keys_from_json():
    assert compute_fully_done(2, {"1": 6, "2": 4}) == 4


def test_fully_done_never_regresses():
    assert compute_fully_done(2, {1: 3, 2: 3}, previous=5) == 5


def test_is_order_complete():
    assert is_order_complete(10, 10)
    assert is_order_complete(12, 10)
    assert not is_order_complete(9, 10)
    # zero requested never auto-completes
    assert not is_order_complete(0, 0)
    assert not is_order_complete(5, None)


def test_record_step_accumulates_pieces_and_time():
    ledger = StepLedger(2)
    ledger.record_step(1, 6, 120)
    ledger.record_step(1, 4, 30)
    ledger.record_step(2, 3, 10)
    assert ledger.step_progress == {1: 10, 2: 3}
    assert ledger.step_time == {1: 150, 2: 10}
    assert ledger.compute_fully_done() == 3
    assert ledger.as_patch() == {"step_progress": {"1": 10, "2": 3}, "step_time": {"1": 150, "2": 10}}


def test_record_step_rejects_out_of_range_step():
    ledger = StepLedger(2)
    with pytest.raises(InvalidStepError):
        ledger.record_step(3, 1, 0)
    with pytest.raises(InvalidStepError):
        ledger.record_step(0, 1, 0)
    assert ledger.step_progress == {}


def test_record_step_rejects_non_positive_pieces():
    ledger = StepLedger(2)
    with pytest.raises(InvalidQuantityError):
        ledger.record_step(1, 0, 10)
    with pytest.raises(InvalidQuantityError):
        ledger.record_step(1, -2, 10)
    assert ledger.step_progress == {}


def test_validate_step_legacy_mode_allows_up_to_ten():
    validate_step(10, 0)
    with pytest.raises(InvalidStepError):
        validate_step(11, 0)


def test_aggregate_step_stats_sorted_and_merged():
    stats = aggregate_step_stats({"2": 5, "1": 3}, {"1": 60, "3": 15})
    assert stats == [
        {"step": 1, "pieces": 3, "time_sec": 60},
        {"step": 2, "pieces": 5, "time_sec": 0},
        {"step": 3, "pieces": 0, "time_sec": 15},
    ]
