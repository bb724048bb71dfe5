"""计时账户

记录单个订单在多次 开始/暂停/继续 之间累计的工作时间。
本类不做状态校验，由 OrderTrackingEngine 在调用前根据 status 判断。
"""

from datetime import datetime, timezone
from typing import Optional

from .states import OrderStatus


def utcnow() -> datetime:
    """当前 UTC 时间（naive，与数据库中的 DateTime 字段保持一致）"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def seconds_between(start: Optional[datetime], end: datetime) -> int:
    """两个时间点之间的秒数，四舍五入且不小于 0"""
    if start is None:
        return 0
    return max(0, int(round((end - start).total_seconds())))


class TimerAccount:
    def __init__(self, status: OrderStatus, elapsed_sec: int = 0, timer_started_at: Optional[datetime] = None):
        self.status = OrderStatus(status)
        self.elapsed_sec = int(elapsed_sec or 0)
        self.timer_started_at = timer_started_at

    @classmethod
    def from_document(cls, doc: dict) -> "TimerAccount":
        return cls(
            status=doc.get("status") or OrderStatus.not_started,
            elapsed_sec=doc.get("elapsed_sec") or 0,
            timer_started_at=doc.get("timer_started_at"),
        )

    @property
    def running(self) -> bool:
        return self.status == OrderStatus.running and self.timer_started_at is not None

    def start(self, now: datetime):
        self.timer_started_at = now
        self.status = OrderStatus.running

    def pause(self, now: datetime):
        self.elapsed_sec += seconds_between(self.timer_started_at, now)
        self.timer_started_at = None
        self.status = OrderStatus.paused

    def resume(self, now: datetime):
        self.timer_started_at = now
        self.status = OrderStatus.running

    def current_elapsed(self, now: datetime) -> int:
        """实时显示用，只读"""
        if self.running:
            return self.elapsed_sec + seconds_between(self.timer_started_at, now)
        return self.elapsed_sec

    def reset(self):
        self.elapsed_sec = 0
        self.timer_started_at = None

    def as_patch(self) -> dict:
        return {
            "status": self.status.value,
            "elapsed_sec": self.elapsed_sec,
            "timer_started_at": self.timer_started_at,
        }
