"""批次账本

每次停止事件使"完全完成"数量增加时，增量生成一个新批次（status=partial）。
批次不合并、不拆分，各自独立推进阶段；批次数量之和不超过订单的 fully_done_qty。

旧数据兼容：订单 fully_done_qty > 0 但没有批次时，推导出一个虚拟批次用于显示和推进，
虚拟批次本身不会被写回，直到发生真正的推进写入。
"""

import uuid
from datetime import datetime
from typing import List, Optional, Tuple

from . import phases
from .errors import BatchNotFoundError
from .states import POST_PRODUCTION_PHASES, BatchStatus

VIRTUAL_BATCH_ID = "virtual"


def _iso(value) -> Optional[str]:
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def new_batch(qty: int, now: datetime, status: str = BatchStatus.partial.value, batch_id: Optional[str] = None) -> dict:
    stamp = _iso(now)
    batch = {
        "id": batch_id or uuid.uuid4().hex,
        "qty": int(qty),
        "status": status,
        "created_at": stamp,
        "status_changed_at": stamp,
        "virtual": False,
    }
    batch.update(phases.empty_packing())
    return batch


def virtual_batch(doc: dict) -> Optional[dict]:
    """旧订单（无批次列表）推导出的虚拟批次；不满足条件时返回 None"""
    if doc.get("batches"):
        return None
    qty = int(doc.get("fully_done_qty") or 0)
    if qty <= 0:
        return None

    order_status = getattr(doc.get("status"), "value", doc.get("status"))
    post_production = [p.value for p in POST_PRODUCTION_PHASES]
    status = order_status if order_status in post_production else BatchStatus.partial.value

    batch = new_batch(qty, doc.get("created_at"), status=status, batch_id=VIRTUAL_BATCH_ID)
    batch["status_changed_at"] = _iso(doc.get("status_changed_at")) or batch["created_at"]
    batch["virtual"] = True
    if status == BatchStatus.ready_for_delivery.value:
        batch.update({
            "packed_qty": doc.get("packed_qty") or 0,
            "boxes": doc.get("boxes"),
            "size": doc.get("size"),
            "weight": doc.get("weight"),
            "notes": doc.get("packing_notes"),
        })
    return batch


def effective_batches(doc: dict) -> List[dict]:
    """持久化的批次；没有批次时返回虚拟批次（纯推导，不写库）"""
    batches = [dict(b) for b in (doc.get("batches") or [])]
    if batches:
        return batches
    virtual = virtual_batch(doc)
    return [virtual] if virtual else []


def materialize(batch: dict) -> dict:
    """虚拟批次转为真实批次"""
    if not batch.get("virtual"):
        return batch
    real = dict(batch)
    real["id"] = uuid.uuid4().hex
    real["virtual"] = False
    return real


def record_completion(doc: dict, new_fully_done: int, now: datetime) -> Tuple[List[dict], Optional[dict]]:
    """根据完成数量的增量返回新的批次列表以及新建的批次（无增量时为 None）"""
    previous = int(doc.get("fully_done_qty") or 0)
    delta = max(0, int(new_fully_done) - previous)
    current = effective_batches(doc)
    if delta <= 0:
        return [dict(b) for b in (doc.get("batches") or [])], None

    batches = [materialize(b) for b in current]
    created = new_batch(delta, now)
    batches.append(created)
    return batches, created


def advance_batch(doc: dict, batch_id: str, event: dict) -> Tuple[List[dict], dict, List[str]]:
    """推进单个批次的阶段；虚拟批次在这里被物化"""
    batches = effective_batches(doc)
    index = next((i for i, b in enumerate(batches) if b["id"] == batch_id), None)
    if index is None:
        raise BatchNotFoundError(f"Batch '{batch_id}' not found")

    batch = batches[index]
    event = dict(event)
    event["at"] = _iso(event.get("at"))
    updated, effects = phases.transition(batch, event, allowed=phases.BATCH_PHASES)
    updated = materialize(updated)
    batches = [materialize(b) for b in batches]
    batches[index] = updated
    return batches, updated, effects


def total_qty(batches: List[dict]) -> int:
    return sum(int(b.get("qty") or 0) for b in batches)
