"""订单生产跟踪引擎

接收操作员动作（开始/暂停/继续/停止/阶段推进/强制完成/重置/隐藏），
基于当前订单文档在内存中计算，返回需要合并写回的字段补丁（patch）。

引擎本身不访问数据库：调用方读取文档 -> 调用引擎 -> 用 crud.apply_order_patch 一次写入。
所有校验都在构造补丁之前完成，校验失败时文档不会有任何改动。
"""

import copy
import logging
from datetime import datetime, timedelta
from typing import Callable, Iterable, List, Optional

from . import batches as batch_ledger
from . import phases
from .errors import (
    InvalidTransitionError,
    MissingOperatorError,
    ValidationError,
)
from .states import ORDER_PHASES, POST_PRODUCTION_PHASES, OrderStatus
from .steps import StepLedger, is_order_complete, validate_pieces, validate_step
from .timer import TimerAccount, utcnow

logger = logging.getLogger(__name__)


def _status(doc: dict) -> OrderStatus:
    return OrderStatus(getattr(doc.get("status"), "value", doc.get("status")) or OrderStatus.not_started)


def _note(now: datetime, kind: str, text: str, author: Optional[str] = None) -> dict:
    return {"at": now.isoformat(), "kind": kind, "author": author, "text": text}


class OrderTrackingEngine:
    """把各个组件串起来的编排层"""

    def __init__(self, legacy_max_step: int = 10, clock: Callable[[], datetime] = utcnow):
        self.legacy_max_step = legacy_max_step
        self.clock = clock

    def _now(self, now: Optional[datetime]) -> datetime:
        return now if now is not None else self.clock()

    def _reject(self, doc: dict, exc: ValidationError):
        logger.warning("Rejected action on order %s: %s", doc.get("id"), exc.message)
        raise exc

    def _append_notes(self, doc: dict, *notes: dict) -> List[dict]:
        return list(copy.deepcopy(doc.get("notes") or [])) + list(notes)

    # ---- 计时 ----

    def start(self, doc: dict, now: Optional[datetime] = None) -> dict:
        now = self._now(now)
        if _status(doc) != OrderStatus.not_started:
            self._reject(doc, InvalidTransitionError(f"Cannot start an order in status '{_status(doc).value}'"))
        timer = TimerAccount.from_document(doc)
        timer.start(now)
        logger.info("Order %s started", doc.get("id"))
        return timer.as_patch()

    def pause(self, doc: dict, now: Optional[datetime] = None) -> dict:
        now = self._now(now)
        if _status(doc) != OrderStatus.running:
            self._reject(doc, InvalidTransitionError(f"Cannot pause an order in status '{_status(doc).value}'"))
        timer = TimerAccount.from_document(doc)
        timer.pause(now)
        logger.info("Order %s paused, elapsed=%ss", doc.get("id"), timer.elapsed_sec)
        return timer.as_patch()

    def resume(self, doc: dict, now: Optional[datetime] = None) -> dict:
        now = self._now(now)
        if _status(doc) != OrderStatus.paused:
            self._reject(doc, InvalidTransitionError(f"Cannot resume an order in status '{_status(doc).value}'"))
        timer = TimerAccount.from_document(doc)
        timer.resume(now)
        logger.info("Order %s resumed", doc.get("id"))
        return timer.as_patch()

    def current_elapsed(self, doc: dict, now: Optional[datetime] = None) -> int:
        return TimerAccount.from_document(doc).current_elapsed(self._now(now))

    # ---- 停止事件 ----

    def stop(
        self,
        doc: dict,
        step: int,
        pieces: int,
        operator: str,
        notes: Optional[str] = None,
        operators: Iterable[str] = (),
        now: Optional[datetime] = None,
    ) -> dict:
        """记录一次停止事件

        返回 {"patch": 订单补丁, "log": 操作日志记录, "batch": 新批次或 None}
        """
        now = self._now(now)
        status = _status(doc)
        step_count = int(doc.get("step_count") or 0)

        try:
            if status in POST_PRODUCTION_PHASES:
                raise InvalidTransitionError(f"Cannot record work on an order in phase '{status.value}'")
            validate_step(step, step_count, self.legacy_max_step)
            validate_pieces(pieces)
            operator = (operator or "").strip()
            if not operator:
                raise MissingOperatorError("Operator is required")
            if operator not in set(operators):
                raise MissingOperatorError(f"Unknown operator '{operator}'")
        except ValidationError as exc:
            self._reject(doc, exc)

        timer = TimerAccount.from_document(doc)
        spent_sec = timer.current_elapsed(now)

        ledger = StepLedger.from_document(doc)
        ledger.record_step(step, pieces, spent_sec)

        previous = int(doc.get("fully_done_qty") or 0)
        # 未设置工序数的订单只能强制完成，停止事件不能让已有完成数量回退
        fully_done = max(previous, ledger.compute_fully_done(previous))
        batches, created = batch_ledger.record_completion(doc, fully_done, now)
        complete = is_order_complete(fully_done, doc.get("requested_qty"))
        if status == OrderStatus.done and doc.get("forced_completed"):
            complete = True

        timer.reset()
        timer.status = OrderStatus.done if complete else OrderStatus.not_started

        notes = (notes or "").strip() or None
        last_stop = {
            "operator": operator,
            "step": step,
            "pieces": pieces,
            "duration_sec": spent_sec,
            "notes": notes,
            "at": now.isoformat(),
        }

        patch = timer.as_patch()
        patch.update(ledger.as_patch())
        patch["fully_done_qty"] = fully_done
        patch["last_stop"] = last_stop
        if created is not None:
            patch["batches"] = batches
        if timer.status != status:
            patch["status_changed_at"] = now
        if notes:
            patch["notes"] = self._append_notes(doc, _note(now, "operator", notes, operator))

        log = {
            "order_item_id": doc.get("id"),
            "operator_name": operator,
            "step_number": step,
            "pieces_done": pieces,
            "notes": notes,
            "started_at": now - timedelta(seconds=spent_sec),
            "stopped_at": now,
            "duration_seconds": spent_sec,
        }

        logger.info(
            "Order %s stop: operator=%s step=%s pieces=%s spent=%ss fully_done=%s->%s",
            doc.get("id"), operator, step, pieces, spent_sec, previous, fully_done,
        )
        return {"patch": patch, "log": log, "batch": created}

    # ---- 阶段 ----

    def set_phase(self, doc: dict, target: str, now: Optional[datetime] = None, **packing) -> dict:
        """订单级阶段切换

        仅在订单已完成或已处于生产后阶段、且还没有真实批次时允许；
        有批次的订单通过 advance_batch 逐个批次推进。
        """
        now = self._now(now)
        status = _status(doc)
        if status not in ORDER_PHASES:
            self._reject(doc, InvalidTransitionError(f"Order in status '{status.value}' is not completed yet"))
        if doc.get("batches"):
            self._reject(doc, InvalidTransitionError(
                f"Order '{doc.get('id')}' has batches, set the phase on each batch instead"
            ))

        state = {
            "status": status.value,
            "packed_qty": doc.get("packed_qty") or 0,
            "boxes": doc.get("boxes"),
            "size": doc.get("size"),
            "weight": doc.get("weight"),
            "notes": doc.get("packing_notes"),
            "status_changed_at": doc.get("status_changed_at"),
        }
        event = dict(packing, target=target, at=now)
        try:
            new_state, effects = phases.transition(state, event, allowed=ORDER_PHASES)
        except ValidationError as exc:
            self._reject(doc, exc)

        logger.info("Order %s phase %s -> %s (%s)", doc.get("id"), status.value, new_state["status"], ", ".join(effects))
        return {
            "status": new_state["status"],
            "status_changed_at": now,
            "packed_qty": new_state["packed_qty"],
            "boxes": new_state["boxes"],
            "size": new_state["size"],
            "weight": new_state["weight"],
            "packing_notes": new_state["notes"],
        }

    def advance_batch(self, doc: dict, batch_id: str, target: str, now: Optional[datetime] = None, **packing) -> dict:
        now = self._now(now)
        event = dict(packing, target=target, at=now)
        try:
            batches, batch, effects = batch_ledger.advance_batch(doc, batch_id, event)
        except ValidationError as exc:
            self._reject(doc, exc)
        logger.info("Order %s batch %s -> %s (%s)", doc.get("id"), batch["id"], batch["status"], ", ".join(effects))
        return {"batches": batches}

    # ---- 管理员操作 ----

    def force_complete(self, doc: dict, qty_override: Optional[int] = None, now: Optional[datetime] = None) -> dict:
        """强制完成：绕过完成数量计算与批次账本，不生成批次，总是成功"""
        now = self._now(now)
        if qty_override is not None:
            qty = qty_override
        elif doc.get("requested_qty") is not None:
            qty = doc.get("requested_qty")
        else:
            qty = doc.get("fully_done_qty") or 0

        logger.info("Order %s force-completed with qty=%s", doc.get("id"), qty)
        return {
            "fully_done_qty": int(qty),
            "status": OrderStatus.done.value,
            "status_changed_at": now,
            "forced_completed": True,
            "elapsed_sec": 0,
            "timer_started_at": None,
            "notes": self._append_notes(doc, _note(now, "system", f"Forced completion (qty={qty})")),
        }

    def reset(self, doc: dict, now: Optional[datetime] = None) -> dict:
        """重置订单的全部进度，不可恢复"""
        now = self._now(now)
        logger.info("Order %s reset", doc.get("id"))
        patch = {
            "status": OrderStatus.not_started.value,
            "status_changed_at": now,
            "elapsed_sec": 0,
            "timer_started_at": None,
            "step_progress": {},
            "step_time": {},
            "fully_done_qty": 0,
            "packed_qty": 0,
            "boxes": None,
            "size": None,
            "weight": None,
            "packing_notes": None,
            "batches": [],
            "last_stop": None,
            "forced_completed": False,
            "notes": self._append_notes(doc, _note(now, "system", "Order reset")),
        }
        return patch

    def hide(self, doc: dict) -> dict:
        logger.info("Order %s hidden", doc.get("id"))
        return {"hidden": True}

    def restore(self, doc: dict) -> dict:
        logger.info("Order %s restored", doc.get("id"))
        return {"hidden": False}

    # ---- 只读视图 ----

    def snapshot(self, doc: dict, now: Optional[datetime] = None) -> dict:
        """在文档上附加实时计时与有效批次（含虚拟批次），不修改 doc"""
        now = self._now(now)
        view = dict(doc)
        requested = int(doc.get("requested_qty") or 0)
        view["current_elapsed"] = self.current_elapsed(doc, now)
        view["effective_batches"] = batch_ledger.effective_batches(doc)
        view["remaining_qty"] = max(0, requested - int(doc.get("fully_done_qty") or 0))
        return view
