from sqlalchemy.exc import OperationalError

from prodtrack import crud, schemas
from prodtrack.core.errors import PersistenceError
from prodtrack.core.states import OrderStatus
from prodtrack.db import SessionLocal
import pytest


@pytest.fixture
def db():
    session = SessionLocal()
    crud.create_order(session, schemas.OrderCreate(order_number="100", product_code="ABC", requested_qty=10, step_count=2))
    yield session
    session.close()


def test_document_defaults(db):
    doc = crud.order_to_document(crud.get_order(db, "100__ABC"))
    assert doc["status"] == OrderStatus.not_started
    assert doc["step_progress"] == {}
    assert doc["batches"] == []
    assert doc["notes"] == []
    assert doc["fully_done_qty"] == 0
    assert doc["hidden"] is False


def test_patches_on_disjoint_fields_both_survive(db):
    crud.apply_order_patch(db, "100__ABC", {"step_progress": {"1": 4}})
    with SessionLocal() as other:
        crud.apply_order_patch(other, "100__ABC", {"hidden": True})

    db.expire_all()
    doc = crud.order_to_document(crud.get_order(db, "100__ABC"))
    assert doc["step_progress"] == {1: 4}
    assert doc["hidden"] is True


def test_same_field_last_write_wins(db):
    crud.apply_order_patch(db, "100__ABC", {"step_progress": {"1": 4}})
    with SessionLocal() as other:
        crud.apply_order_patch(other, "100__ABC", {"step_progress": {"1": 2}})
    db.expire_all()
    assert crud.order_to_document(crud.get_order(db, "100__ABC"))["step_progress"] == {1: 2}


def test_patch_unknown_order_returns_none(db):
    assert crud.apply_order_patch(db, "missing", {"hidden": True}) is None


def test_patch_rejects_unknown_fields(db):
    with pytest.raises(ValueError):
        crud.apply_order_patch(db, "100__ABC", {"order_number": "999"})


def test_write_failure_raises_persistence_error(db, monkeypatch):
    def fail():
        raise OperationalError("UPDATE order_items", {}, Exception("disk I/O error"))

    monkeypatch.setattr(db, "commit", fail)
    with pytest.raises(PersistenceError):
        crud.apply_order_patch(db, "100__ABC", {"hidden": True})


def test_upsert_keeps_progress(db):
    crud.apply_order_patch(db, "100__ABC", {"step_progress": {"1": 4}, "fully_done_qty": 0})
    crud.upsert_order(db, {"order_number": "100", "product_code": "ABC", "requested_qty": 30, "step_count": None})
    doc = crud.order_to_document(crud.get_order(db, "100__ABC"))
    assert doc["requested_qty"] == 30
    assert doc["step_count"] == 2
    assert doc["step_progress"] == {1: 4}


def test_list_orders_excludes_hidden(db):
    crud.create_order(db, schemas.OrderCreate(order_number="101", product_code="X"))
    crud.apply_order_patch(db, "101__X", {"hidden": True})
    assert [o.id for o in crud.list_orders(db)] == ["100__ABC"]
    assert {o.id for o in crud.list_orders(db, include_hidden=True)} == {"100__ABC", "101__X"}
