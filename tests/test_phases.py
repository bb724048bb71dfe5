from datetime import timedelta

import pytest
from prodtrack.core import phases
from prodtrack.core.errors import InvalidPhaseError, PackingIncompleteError


def _state(status="partial", **extra):
    state = {"status": status, "status_changed_at": None}
    state.update(phases.empty_packing())
    state.update(extra)
    return state


def test_any_phase_can_move_to_any_other(t0):
    state, effects = phases.transition(_state("packing"), {"target": "drying", "at": t0})
    assert state["status"] == "drying"
    assert state["status_changed_at"] == t0
    assert effects == [phases.STATUS_CHANGED]

    state, _ = phases.transition(state, {"target": "partial", "at": t0})
    assert state["status"] == "partial"


def test_ready_requires_packed_quantity(t0):
    with pytest.raises(PackingIncompleteError):
        phases.transition(_state("packing"), {"target": "ready_for_delivery", "at": t0})
    with pytest.raises(PackingIncompleteError):
        phases.transition(_state("packing"), {"target": "ready_for_delivery", "packed_qty": 0, "at": t0})


def test_ready_records_packing_metadata(t0):
    state, effects = phases.transition(
        _state("packing"),
        {"target": "ready_for_delivery", "packed_qty": 5, "boxes": 2, "size": "60x40", "weight": 12.5, "at": t0},
    )
    assert state["status"] == "ready_for_delivery"
    assert state["packed_qty"] == 5
    assert state["boxes"] == 2
    assert state["size"] == "60x40"
    assert state["weight"] == 12.5
    assert phases.PACKING_RECORDED in effects


def test_leaving_ready_clears_packing(t0):
    ready = _state("ready_for_delivery", packed_qty=5, boxes=2, size="60x40", weight=3.0, notes="fragile")
    state, effects = phases.transition(ready, {"target": "drying", "at": t0})
    assert state["status"] == "drying"
    assert state["packed_qty"] == 0
    assert state["boxes"] is None
    assert state["size"] is None
    assert state["weight"] is None
    assert state["notes"] is None
    assert phases.PACKING_CLEARED in effects


def test_transition_does_not_mutate_input(t0):
    ready = _state("ready_for_delivery", packed_qty=5)
    phases.transition(ready, {"target": "packing", "at": t0})
    assert ready["packed_qty"] == 5
    assert ready["status"] == "ready_for_delivery"


def test_unknown_phase_rejected(t0):
    with pytest.raises(InvalidPhaseError):
        phases.transition(_state(), {"target": "shipped", "at": t0})


def test_retention_hides_old_ready_items(t0):
    assert not phases.is_active_completion("ready_for_delivery", t0 - timedelta(days=8), t0)
    assert phases.is_active_completion("ready_for_delivery", t0 - timedelta(days=6), t0)
    assert phases.is_active_completion("ready_for_delivery", (t0 - timedelta(days=6)).isoformat(), t0)
    # other phases are never filtered
    assert phases.is_active_completion("drying", t0 - timedelta(days=30), t0)
    assert phases.is_active_completion("ready_for_delivery", None, t0)


def test_retention_days_configurable(t0):
    assert not phases.is_active_completion("ready_for_delivery", t0 - timedelta(days=2), t0, retention_days=1)
