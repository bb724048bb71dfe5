from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.orm import Session

from ... import schemas
from ...core import OrderTrackingEngine
from ...core import batches as batch_ledger
from ...core.phases import READY
from ...database.connection import get_db
from ...utils.notifier import notify_packing_complete
from .orders import get_engine, load_document, persist

router = APIRouter(prefix="/orders/{order_id}/batches", tags=["batches"])


@router.get("/", response_model=List[schemas.BatchRead])
def list_batches(order_id: str, db: Session = Depends(get_db)):
    """订单的有效批次（旧订单返回虚拟批次）"""
    return batch_ledger.effective_batches(load_document(db, order_id))


@router.post("/{batch_id}/phase", response_model=schemas.ActionResponse)
def batch_phase(
    order_id: str,
    batch_id: str,
    body: schemas.BatchPhaseRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    engine: OrderTrackingEngine = Depends(get_engine),
):
    """单个批次切换阶段；进入待交付时发送包装完成通知"""
    doc = load_document(db, order_id)
    packing = body.model_dump(exclude={"phase", "operator"})
    response = persist(db, engine, order_id, engine.advance_batch(doc, batch_id, body.phase, **packing))
    if body.phase == READY:
        background_tasks.add_task(notify_packing_complete, doc, body.packed_qty, body.operator)
    return response
