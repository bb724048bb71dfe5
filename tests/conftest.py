import os
import sys
from datetime import datetime
from pathlib import Path
import pytest

# Ensure project root is on sys.path so tests can import 'prodtrack' package
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Tests always run against a throwaway sqlite file, never the dev database
os.environ["DATABASE_URL"] = "sqlite:///./test_prodtrack.db"
os.environ["ACCESS_PIN"] = ""

from prodtrack.db import Base, engine


@pytest.fixture(autouse=True)
def reset_db():
    # Drop all and re-create so the test DB matches the current models exactly
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def t0():
    return datetime(2025, 3, 10, 8, 0, 0)


@pytest.fixture
def make_doc():
    """Build an order document the way crud.order_to_document returns it"""
    def _make(**overrides):
        doc = {
            "id": "100__ABC",
            "order_number": "100",
            "customer": "ACME",
            "product_code": "ABC",
            "requested_qty": 10,
            "step_count": 2,
            "step_progress": {},
            "step_time": {},
            "fully_done_qty": 0,
            "status": "not_started",
            "status_changed_at": None,
            "elapsed_sec": 0,
            "timer_started_at": None,
            "last_stop": None,
            "batches": [],
            "notes": [],
            "packed_qty": 0,
            "boxes": None,
            "size": None,
            "weight": None,
            "packing_notes": None,
            "hidden": False,
            "forced_completed": False,
            "created_at": datetime(2025, 3, 1, 7, 0, 0),
        }
        doc.update(overrides)
        return doc
    return _make
