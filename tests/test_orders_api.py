from datetime import timedelta

from fastapi.testclient import TestClient
from prodtrack.main import app
from prodtrack.db import SessionLocal
from prodtrack import crud
from prodtrack.core import utcnow
import pytest

client = TestClient(app)

ORDER_ID = "100__ABC"


@pytest.fixture(autouse=True)
def setup_env():
    r = client.post("/api/v1/operators/", json={"name": "Mario"})
    assert r.status_code == 200
    r = client.post("/api/v1/orders/", json={
        "order_number": "100",
        "customer": "ACME",
        "product_code": "ABC",
        "requested_qty": 10,
        "step_count": 2,
    })
    assert r.status_code == 200
    yield


def do_stop(step, pieces, operator="Mario", notes=None):
    return client.post(f"/api/v1/orders/{ORDER_ID}/stop", json={
        "step": step, "pieces": pieces, "operator": operator, "notes": notes,
    })


def test_create_order_defaults():
    r = client.get(f"/api/v1/orders/{ORDER_ID}")
    assert r.status_code == 200
    data = r.json()
    assert data["id"] == ORDER_ID
    assert data["status"] == "not_started"
    assert data["fully_done_qty"] == 0
    assert data["step_progress"] == {}
    assert data["effective_batches"] == []
    assert data["remaining_qty"] == 10


def test_unknown_order_returns_404():
    r = client.post("/api/v1/orders/nope__X/start")
    assert r.status_code == 404
    assert r.json()["error"] == "OrderNotFoundError"


def test_timer_flow():
    r = client.post(f"/api/v1/orders/{ORDER_ID}/start")
    assert r.status_code == 200
    assert r.json()["patch"]["status"] == "running"
    assert r.json()["order"]["timer_started_at"] is not None

    r = client.post(f"/api/v1/orders/{ORDER_ID}/start")
    assert r.status_code == 409
    assert r.json()["error"] == "InvalidTransitionError"

    r = client.post(f"/api/v1/orders/{ORDER_ID}/pause")
    assert r.status_code == 200
    assert r.json()["order"]["status"] == "paused"
    assert r.json()["order"]["timer_started_at"] is None

    r = client.post(f"/api/v1/orders/{ORDER_ID}/resume")
    assert r.status_code == 200
    assert r.json()["order"]["status"] == "running"


def test_stop_scenario_creates_batches():
    r = do_stop(1, 6)
    assert r.status_code == 200
    assert r.json()["order"]["fully_done_qty"] == 0
    assert r.json()["batch"] is None

    r = do_stop(2, 6)
    data = r.json()
    assert data["order"]["fully_done_qty"] == 6
    assert data["order"]["status"] == "not_started"
    assert data["batch"]["qty"] == 6

    do_stop(1, 4)
    r = do_stop(2, 4, notes="RAL 9010")
    data = r.json()
    assert data["order"]["fully_done_qty"] == 10
    assert data["order"]["status"] == "done"
    assert [b["qty"] for b in data["order"]["batches"]] == [6, 4]
    assert data["order"]["step_progress"] == {"1": 10, "2": 10}
    assert data["order"]["last_stop"]["notes"] == "RAL 9010"
    assert data["order"]["notes"][-1]["text"] == "RAL 9010"


def test_stop_validation_leaves_order_untouched():
    before = client.get(f"/api/v1/orders/{ORDER_ID}").json()

    r = do_stop(1, 0)
    assert r.status_code == 422
    assert r.json()["error"] == "InvalidQuantityError"

    r = do_stop(3, 1)
    assert r.status_code == 422
    assert r.json()["error"] == "InvalidStepError"

    r = do_stop(1, 1, operator="Nobody")
    assert r.status_code == 422
    assert r.json()["error"] == "MissingOperatorError"

    after = client.get(f"/api/v1/orders/{ORDER_ID}").json()
    assert after["step_progress"] == before["step_progress"]
    assert after["last_stop"] is None
    assert client.get(f"/api/v1/orders/{ORDER_ID}/logs").json() == []


def test_inactive_operator_is_rejected():
    op = client.get("/api/v1/operators/").json()[0]
    client.patch(f"/api/v1/operators/{op['id']}", json={"active": False})
    r = do_stop(1, 1)
    assert r.status_code == 422
    assert r.json()["error"] == "MissingOperatorError"


def test_stop_appends_activity_log():
    do_stop(1, 3)
    do_stop(2, 2)
    logs = client.get(f"/api/v1/orders/{ORDER_ID}/logs").json()
    assert len(logs) == 2
    assert {log["step_number"] for log in logs} == {1, 2}
    assert all(log["operator_name"] == "Mario" for log in logs)


def test_order_phase_flow():
    r = client.post(f"/api/v1/orders/{ORDER_ID}/phase", json={"phase": "drying"})
    assert r.status_code == 409

    client.post(f"/api/v1/orders/{ORDER_ID}/force-complete", json={})

    r = client.post(f"/api/v1/orders/{ORDER_ID}/phase", json={"phase": "ready_for_delivery"})
    assert r.status_code == 422
    assert r.json()["error"] == "PackingIncompleteError"

    r = client.post(f"/api/v1/orders/{ORDER_ID}/phase", json={"phase": "ready_for_delivery", "packed_qty": 5, "boxes": 2, "weight": 4.5})
    assert r.status_code == 200
    order = r.json()["order"]
    assert order["status"] == "ready_for_delivery"
    assert order["packed_qty"] == 5
    assert order["boxes"] == 2

    r = client.post(f"/api/v1/orders/{ORDER_ID}/phase", json={"phase": "drying"})
    order = r.json()["order"]
    assert order["status"] == "drying"
    assert order["packed_qty"] == 0
    assert order["boxes"] is None
    assert order["weight"] is None


def test_batches_advance_independently():
    do_stop(1, 6)
    do_stop(2, 6)
    do_stop(1, 4)
    do_stop(2, 4)
    batches = client.get(f"/api/v1/orders/{ORDER_ID}/batches/").json()
    assert len(batches) == 2
    first, second = batches

    r = client.post(f"/api/v1/orders/{ORDER_ID}/batches/{first['id']}/phase", json={"phase": "ready_for_delivery", "packed_qty": 6})
    assert r.status_code == 200
    r = client.post(f"/api/v1/orders/{ORDER_ID}/batches/{second['id']}/phase", json={"phase": "drying"})
    assert r.status_code == 200

    statuses = [b["status"] for b in r.json()["order"]["batches"]]
    assert statuses == ["ready_for_delivery", "drying"]

    r = client.post(f"/api/v1/orders/{ORDER_ID}/batches/missing/phase", json={"phase": "drying"})
    assert r.status_code == 404


def test_force_complete_and_virtual_batch():
    r = client.post(f"/api/v1/orders/{ORDER_ID}/force-complete", json={"qty": 7})
    assert r.status_code == 200
    order = r.json()["order"]
    assert order["fully_done_qty"] == 7
    assert order["status"] == "done"
    assert order["forced_completed"] is True
    assert order["batches"] == []
    assert order["effective_batches"][0]["virtual"] is True
    assert order["effective_batches"][0]["qty"] == 7

    r = client.post(f"/api/v1/orders/{ORDER_ID}/batches/virtual/phase", json={"phase": "packing"})
    assert r.status_code == 200
    batches = r.json()["order"]["batches"]
    assert len(batches) == 1
    assert batches[0]["id"] != "virtual"
    assert batches[0]["status"] == "packing"


def test_reset_order():
    do_stop(1, 6)
    do_stop(2, 6)
    r = client.post(f"/api/v1/orders/{ORDER_ID}/reset")
    assert r.status_code == 200
    order = r.json()["order"]
    assert order["status"] == "not_started"
    assert order["fully_done_qty"] == 0
    assert order["step_progress"] == {}
    assert order["batches"] == []
    assert order["last_stop"] is None


def test_hide_and_restore():
    client.post(f"/api/v1/orders/{ORDER_ID}/hide")
    assert client.get("/api/v1/orders/").json() == []
    hidden = client.get("/api/v1/orders/", params={"include_hidden": True}).json()
    assert [o["id"] for o in hidden] == [ORDER_ID]

    client.post(f"/api/v1/orders/{ORDER_ID}/restore")
    assert [o["id"] for o in client.get("/api/v1/orders/").json()] == [ORDER_ID]


def test_kpi():
    client.post("/api/v1/orders/", json={"order_number": "101", "product_code": "XYZ", "requested_qty": 3, "step_count": 1})
    client.post("/api/v1/orders/101__XYZ/start")
    do_stop(1, 5)
    do_stop(2, 5)
    kpi = client.get("/api/v1/orders/kpi").json()
    assert kpi == {"not_started": 1, "running": 1, "paused": 0, "done": 0, "fully_done_pieces": 5}


def test_completions_view_drops_old_ready_batches():
    client.post(f"/api/v1/orders/{ORDER_ID}/force-complete", json={})
    client.post(f"/api/v1/orders/{ORDER_ID}/phase", json={"phase": "ready_for_delivery", "packed_qty": 10})

    items = client.get("/api/v1/orders/completions").json()
    assert len(items) == 1
    assert items[0]["batch"]["status"] == "ready_for_delivery"

    with SessionLocal() as db:
        crud.apply_order_patch(db, ORDER_ID, {"status_changed_at": utcnow() - timedelta(days=8)})

    assert client.get("/api/v1/orders/completions").json() == []
    # still stored
    assert client.get(f"/api/v1/orders/{ORDER_ID}").json()["status"] == "ready_for_delivery"


def test_order_with_batches_moves_through_batch_phases():
    do_stop(1, 10)
    do_stop(2, 10)
    r = client.post(f"/api/v1/orders/{ORDER_ID}/phase", json={"phase": "ready_for_delivery", "packed_qty": 10})
    assert r.status_code == 409
    assert r.json()["error"] == "InvalidTransitionError"
    assert client.get(f"/api/v1/orders/{ORDER_ID}").json()["status"] == "done"

    batch = client.get(f"/api/v1/orders/{ORDER_ID}/batches/").json()[0]
    client.post(f"/api/v1/orders/{ORDER_ID}/batches/{batch['id']}/phase", json={"phase": "ready_for_delivery", "packed_qty": 10})
    assert client.get("/api/v1/orders/completions").json()[0]["batch"]["status"] == "ready_for_delivery"

    with SessionLocal() as db:
        doc = crud.order_to_document(crud.get_order(db, ORDER_ID))
        batches = [dict(b, status_changed_at=(utcnow() - timedelta(days=20)).isoformat()) for b in doc["batches"]]
        crud.apply_order_patch(db, ORDER_ID, {"batches": batches})

    assert client.get("/api/v1/orders/completions").json() == []


def test_duplicate_operator_conflict():
    r = client.post("/api/v1/operators/", json={"name": "Mario"})
    assert r.status_code == 409


def test_health_and_root():
    assert client.get("/health/db").json()["status"] == "healthy"
    assert client.get("/").json()["status"] == "running"
