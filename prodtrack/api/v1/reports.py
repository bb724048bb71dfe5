from datetime import date

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.orm import Session

from ... import crud
from ...database.connection import get_db
from ...utils import exporter

router = APIRouter(prefix="/reports", tags=["reports"])


def _documents(db: Session, include_hidden: bool):
    return [crud.order_to_document(o) for o in crud.list_orders(db, include_hidden=include_hidden)]


def _csv_response(content: str, name: str) -> Response:
    filename = f"{name}-{date.today().isoformat()}.csv"
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/orders.csv")
def orders_report(include_hidden: bool = False, db: Session = Depends(get_db)):
    return _csv_response(exporter.orders_csv(_documents(db, include_hidden)), "orders")


@router.get("/steps.csv")
def steps_report(include_hidden: bool = False, db: Session = Depends(get_db)):
    """每个工序的件数与耗时"""
    return _csv_response(exporter.steps_csv(_documents(db, include_hidden)), "steps")


@router.get("/batches.csv")
def batches_report(include_hidden: bool = False, db: Session = Depends(get_db)):
    return _csv_response(exporter.batches_csv(_documents(db, include_hidden)), "batches")
