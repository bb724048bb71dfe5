"""数据库操作（CRUD）- 订单相关

订单表作为"文档存储"使用：
- get_order / list_orders 读取
- upsert_order 导入时创建或合并基础字段（保留已有进度）
- apply_order_patch 按字段合并写入引擎生成的补丁，只更新补丁中出现的列
"""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import flag_modified

from .. import models, schemas
from ..core.errors import PersistenceError
from ..core.states import OrderStatus
from ..core.steps import normalize_step_map
from ..utils.helpers import make_order_id

logger = logging.getLogger(__name__)

JSON_FIELDS = ("step_progress", "step_time", "batches", "notes", "last_stop")

# 导入/手工新增时可以覆盖的基础字段
BASE_FIELDS = ("customer", "ml", "requested_qty", "qty_in_oven", "step_count")

PATCHABLE_FIELDS = {
    "status", "status_changed_at", "elapsed_sec", "timer_started_at",
    "step_progress", "step_time", "fully_done_qty", "last_stop", "batches", "notes",
    "packed_qty", "boxes", "size", "weight", "packing_notes",
    "hidden", "forced_completed",
}


def order_to_document(order: models.OrderItem) -> dict:
    """ORM 对象转为引擎使用的文档（dict），缺失的可选字段给默认值"""
    return {
        "id": order.id,
        "order_number": order.order_number,
        "customer": order.customer,
        "product_code": order.product_code,
        "ml": order.ml,
        "qty_in_oven": order.qty_in_oven,
        "requested_qty": order.requested_qty or 0,
        "step_count": order.step_count or 0,
        "step_progress": normalize_step_map(order.step_progress),
        "step_time": normalize_step_map(order.step_time),
        "fully_done_qty": order.fully_done_qty or 0,
        "status": order.status or OrderStatus.not_started,
        "status_changed_at": order.status_changed_at,
        "elapsed_sec": order.elapsed_sec or 0,
        "timer_started_at": order.timer_started_at,
        "last_stop": order.last_stop,
        "batches": list(order.batches or []),
        "notes": list(order.notes or []),
        "packed_qty": order.packed_qty or 0,
        "boxes": order.boxes,
        "size": order.size,
        "weight": order.weight,
        "packing_notes": order.packing_notes,
        "hidden": bool(order.hidden),
        "forced_completed": bool(order.forced_completed),
        "created_at": order.created_at,
        "updated_at": order.updated_at,
    }


def get_order(db: Session, order_id: str):
    """根据ID获取订单"""
    return db.query(models.OrderItem).filter(models.OrderItem.id == order_id).first()


def list_orders(db: Session, include_hidden: bool = False):
    """获取所有订单，按创建时间倒序"""
    query = db.query(models.OrderItem)
    if not include_hidden:
        query = query.filter(models.OrderItem.hidden.is_(False))
    return query.order_by(models.OrderItem.created_at.desc(), models.OrderItem.id).all()


def _commit(db: Session, action: str, order_id: str):
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Failed to %s order %s", action, order_id, exc_info=True)
        raise PersistenceError(f"Could not {action} order '{order_id}'") from exc


def upsert_order(db: Session, record: dict):
    """创建订单，或合并已有订单的基础字段；进度、计时等字段不受影响"""
    order_id = make_order_id(record["order_number"], record["product_code"])
    db_order = get_order(db, order_id)
    if db_order is None:
        db_order = models.OrderItem(
            id=order_id,
            order_number=str(record["order_number"]).strip(),
            product_code=str(record["product_code"]).strip(),
            customer=record.get("customer") or "",
            ml=record.get("ml"),
            requested_qty=int(record.get("requested_qty") or 0),
            qty_in_oven=record.get("qty_in_oven"),
            step_count=int(record.get("step_count") or 0),
            step_progress={},
            step_time={},
            fully_done_qty=0,
            status=OrderStatus.not_started,
            elapsed_sec=0,
            batches=[],
            notes=[],
            packed_qty=0,
        )
        db.add(db_order)
    else:
        for field in BASE_FIELDS:
            if record.get(field) is not None:
                setattr(db_order, field, record[field])
    _commit(db, "save", order_id)
    db.refresh(db_order)
    return db_order


def create_order(db: Session, order: schemas.OrderCreate):
    """手工新增订单"""
    return upsert_order(db, order.model_dump())


def apply_order_patch(db: Session, order_id: str, patch: dict, log: Optional[dict] = None):
    """把补丁合并写入订单（单次提交）；log 不为空时同时追加一条操作日志"""
    db_order = get_order(db, order_id)
    if db_order is None:
        return None

    unknown = set(patch) - PATCHABLE_FIELDS
    if unknown:
        raise ValueError(f"Fields not patchable: {', '.join(sorted(unknown))}")

    for field, value in patch.items():
        setattr(db_order, field, value)
        if field in JSON_FIELDS:
            flag_modified(db_order, field)
    if log is not None:
        db.add(models.OrderLog(**log))

    _commit(db, "update", order_id)
    db.refresh(db_order)
    return db_order
