"""生产后阶段状态机

阶段：partial → drying → packing → ready_for_delivery（批次另有 done）。
任何阶段都可以切换到任何其他阶段（返工），但是：
- 进入 ready_for_delivery 必须有 packed_qty > 0，可附带 boxes/size/weight/notes；
- 离开 ready_for_delivery 回到其他阶段时清空全部包装信息；
- 每次切换都会更新 status_changed_at。

transition() 是纯函数：(state, event) -> (new_state, effects)，不访问数据库。
"""

from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Tuple

from .errors import InvalidPhaseError, PackingIncompleteError
from .states import BatchStatus

READY = BatchStatus.ready_for_delivery.value

PACKING_FIELDS = ("packed_qty", "boxes", "size", "weight", "notes")

BATCH_PHASES = tuple(s.value for s in BatchStatus)

# effects
STATUS_CHANGED = "status_changed"
PACKING_RECORDED = "packing_recorded"
PACKING_CLEARED = "packing_cleared"


def empty_packing() -> dict:
    return {"packed_qty": 0, "boxes": None, "size": None, "weight": None, "notes": None}


def transition(state: dict, event: dict, allowed: Iterable[str] = BATCH_PHASES) -> Tuple[dict, List[str]]:
    """执行一次阶段切换

    state: {"status", "packed_qty", "boxes", "size", "weight", "notes", "status_changed_at"}
    event: {"target", "at", 以及可选的包装字段}
    """
    target = event.get("target")
    target = getattr(target, "value", target)
    allowed = [getattr(a, "value", a) for a in allowed]
    if target not in allowed:
        raise InvalidPhaseError(f"Unknown phase '{target}', expected one of: {', '.join(allowed)}")

    current = getattr(state.get("status"), "value", state.get("status"))
    new_state = dict(state)
    effects: List[str] = []

    if target == READY:
        packed_qty = event.get("packed_qty")
        if packed_qty is None or packed_qty <= 0:
            raise PackingIncompleteError("Packed quantity must be greater than 0 to mark ready for delivery")
        new_state["packed_qty"] = int(packed_qty)
        for field in ("boxes", "size", "weight", "notes"):
            if event.get(field) is not None:
                new_state[field] = event[field]
        effects.append(PACKING_RECORDED)
    elif current == READY:
        new_state.update(empty_packing())
        effects.append(PACKING_CLEARED)

    new_state["status"] = target
    new_state["status_changed_at"] = event.get("at")
    effects.append(STATUS_CHANGED)
    return new_state, effects


def _as_datetime(value) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        return None


def is_active_completion(status, status_changed_at, now: datetime, retention_days: int = 7) -> bool:
    """ready_for_delivery 超过 retention_days 天的条目不再显示在"进行中的完成"列表里

    只是显示规则，不改变状态。
    """
    status = getattr(status, "value", status)
    if status != READY:
        return True
    changed = _as_datetime(status_changed_at)
    if changed is None:
        return True
    return now - changed <= timedelta(days=retention_days)
