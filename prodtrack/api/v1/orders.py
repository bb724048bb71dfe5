"""订单接口

每个动作：读取订单文档 -> 引擎计算补丁 -> 合并写入 -> 返回补丁和最新订单。
引擎抛出的 TrackingError 由 main.py 中注册的异常处理器统一转换为 HTTP 响应。
"""

from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends, File, HTTPException, UploadFile
from sqlalchemy.orm import Session

from ... import crud, schemas
from ...auth import require_admin
from ...config.settings import settings
from ...core import OrderTrackingEngine, utcnow
from ...core import batches as batch_ledger
from ...core.errors import OrderNotFoundError
from ...core.phases import READY, is_active_completion
from ...core.states import OrderStatus
from ...database.connection import get_db
from ...utils.importer import parse_orders_csv
from ...utils.notifier import notify_packing_complete

router = APIRouter(prefix="/orders", tags=["orders"])


def get_engine() -> OrderTrackingEngine:
    return OrderTrackingEngine(legacy_max_step=settings.LEGACY_MAX_STEP)


def load_document(db: Session, order_id: str) -> dict:
    db_order = crud.get_order(db, order_id)
    if db_order is None:
        raise OrderNotFoundError(f"Order '{order_id}' not found")
    return crud.order_to_document(db_order)


def order_view(engine: OrderTrackingEngine, db_order) -> schemas.OrderView:
    return schemas.OrderView.model_validate(engine.snapshot(crud.order_to_document(db_order)))


def persist(db: Session, engine: OrderTrackingEngine, order_id: str, patch: dict, log: dict = None) -> dict:
    db_order = crud.apply_order_patch(db, order_id, patch, log=log)
    if db_order is None:
        raise OrderNotFoundError(f"Order '{order_id}' not found")
    return {"order_id": order_id, "patch": patch, "order": order_view(engine, db_order)}


@router.get("/", response_model=List[schemas.OrderView])
def list_orders_endpoint(include_hidden: bool = False, db: Session = Depends(get_db), engine: OrderTrackingEngine = Depends(get_engine)):
    """订单列表，按创建时间倒序"""
    return [order_view(engine, o) for o in crud.list_orders(db, include_hidden=include_hidden)]


@router.post("/", response_model=schemas.OrderView)
def create_order_endpoint(order: schemas.OrderCreate, db: Session = Depends(get_db), engine: OrderTrackingEngine = Depends(get_engine)):
    """手工新增订单（已存在时只更新基础字段）"""
    return order_view(engine, crud.create_order(db, order))


@router.post("/import", response_model=schemas.ImportResult)
async def import_orders_endpoint(file: UploadFile = File(...), db: Session = Depends(get_db)):
    """导入CSV文件"""
    content = await file.read()
    try:
        records, skipped = parse_orders_csv(content.decode("utf-8-sig", errors="replace"))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    for record in records:
        crud.upsert_order(db, record)
    return {"imported": len(records), "skipped": skipped}


@router.get("/completions", response_model=List[schemas.CompletionItem])
def completions_endpoint(db: Session = Depends(get_db)):
    """进行中的完成列表：待交付超过保留天数的批次不显示"""
    now = utcnow()
    items = []
    for db_order in crud.list_orders(db):
        doc = crud.order_to_document(db_order)
        for batch in batch_ledger.effective_batches(doc):
            if not is_active_completion(batch["status"], batch.get("status_changed_at"), now, settings.READY_RETENTION_DAYS):
                continue
            items.append({
                "order_id": doc["id"],
                "order_number": doc["order_number"],
                "customer": doc["customer"],
                "product_code": doc["product_code"],
                "requested_qty": doc["requested_qty"],
                "fully_done_qty": doc["fully_done_qty"],
                "batch": batch,
            })
    return items


@router.get("/kpi", response_model=schemas.KpiRead)
def kpi_endpoint(db: Session = Depends(get_db)):
    """按状态统计订单数，以及完全完成的总件数"""
    orders = crud.list_orders(db)

    def count(status):
        return sum(1 for o in orders if o.status == status)

    return {
        "not_started": count(OrderStatus.not_started),
        "running": count(OrderStatus.running),
        "paused": count(OrderStatus.paused),
        "done": count(OrderStatus.done),
        "fully_done_pieces": sum(o.fully_done_qty or 0 for o in orders),
    }


@router.get("/{order_id}", response_model=schemas.OrderView)
def get_order_endpoint(order_id: str, db: Session = Depends(get_db), engine: OrderTrackingEngine = Depends(get_engine)):
    return engine.snapshot(load_document(db, order_id))


@router.get("/{order_id}/logs", response_model=List[schemas.OrderLogRead])
def order_logs_endpoint(order_id: str, db: Session = Depends(get_db)):
    load_document(db, order_id)
    return crud.list_order_logs(db, order_id)


# ---- 计时 ----

@router.post("/{order_id}/start", response_model=schemas.ActionResponse)
def start_endpoint(order_id: str, db: Session = Depends(get_db), engine: OrderTrackingEngine = Depends(get_engine)):
    doc = load_document(db, order_id)
    return persist(db, engine, order_id, engine.start(doc))


@router.post("/{order_id}/pause", response_model=schemas.ActionResponse)
def pause_endpoint(order_id: str, db: Session = Depends(get_db), engine: OrderTrackingEngine = Depends(get_engine)):
    doc = load_document(db, order_id)
    return persist(db, engine, order_id, engine.pause(doc))


@router.post("/{order_id}/resume", response_model=schemas.ActionResponse)
def resume_endpoint(order_id: str, db: Session = Depends(get_db), engine: OrderTrackingEngine = Depends(get_engine)):
    doc = load_document(db, order_id)
    return persist(db, engine, order_id, engine.resume(doc))


@router.post("/{order_id}/stop", response_model=schemas.StopResponse)
def stop_endpoint(order_id: str, body: schemas.StopRequest, db: Session = Depends(get_db), engine: OrderTrackingEngine = Depends(get_engine)):
    """停止事件：记录工序件数与耗时，重新计算完成数量，可能生成新批次"""
    doc = load_document(db, order_id)
    result = engine.stop(
        doc,
        step=body.step,
        pieces=body.pieces,
        operator=body.operator,
        notes=body.notes,
        operators=crud.active_operator_names(db),
    )
    response = persist(db, engine, order_id, result["patch"], log=result["log"])
    response["batch"] = result["batch"]
    return response


# ---- 阶段 ----

@router.post("/{order_id}/phase", response_model=schemas.ActionResponse)
def phase_endpoint(
    order_id: str,
    body: schemas.PhaseRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    engine: OrderTrackingEngine = Depends(get_engine),
):
    """订单级阶段切换；进入待交付时发送包装完成通知"""
    doc = load_document(db, order_id)
    packing = body.model_dump(exclude={"phase", "operator"})
    response = persist(db, engine, order_id, engine.set_phase(doc, body.phase, **packing))
    if body.phase == READY:
        background_tasks.add_task(notify_packing_complete, doc, body.packed_qty, body.operator)
    return response


# ---- 管理员操作 ----

@router.post("/{order_id}/force-complete", response_model=schemas.ActionResponse, dependencies=[Depends(require_admin)])
def force_complete_endpoint(order_id: str, body: schemas.ForceCompleteRequest = None, db: Session = Depends(get_db), engine: OrderTrackingEngine = Depends(get_engine)):
    doc = load_document(db, order_id)
    qty = body.qty if body is not None else None
    return persist(db, engine, order_id, engine.force_complete(doc, qty_override=qty))


@router.post("/{order_id}/reset", response_model=schemas.ActionResponse, dependencies=[Depends(require_admin)])
def reset_endpoint(order_id: str, db: Session = Depends(get_db), engine: OrderTrackingEngine = Depends(get_engine)):
    doc = load_document(db, order_id)
    return persist(db, engine, order_id, engine.reset(doc))


@router.post("/{order_id}/hide", response_model=schemas.ActionResponse, dependencies=[Depends(require_admin)])
def hide_endpoint(order_id: str, db: Session = Depends(get_db), engine: OrderTrackingEngine = Depends(get_engine)):
    doc = load_document(db, order_id)
    return persist(db, engine, order_id, engine.hide(doc))


@router.post("/{order_id}/restore", response_model=schemas.ActionResponse, dependencies=[Depends(require_admin)])
def restore_endpoint(order_id: str, db: Session = Depends(get_db), engine: OrderTrackingEngine = Depends(get_engine)):
    doc = load_document(db, order_id)
    return persist(db, engine, order_id, engine.restore(doc))
