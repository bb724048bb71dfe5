"""生产跟踪核心逻辑

计时、工序账本、完成数量计算、阶段状态机、批次账本以及编排引擎。
"""

from .engine import OrderTrackingEngine
from .errors import (
    BatchNotFoundError,
    InvalidPhaseError,
    InvalidQuantityError,
    InvalidStepError,
    InvalidTransitionError,
    MissingOperatorError,
    OrderNotFoundError,
    PackingIncompleteError,
    PersistenceError,
    TrackingError,
    ValidationError,
)
from .states import BatchStatus, OrderStatus
from .steps import StepLedger, aggregate_step_stats, compute_fully_done, is_order_complete
from .timer import TimerAccount, utcnow

__all__ = [
    "OrderTrackingEngine",
    "TimerAccount",
    "StepLedger",
    "compute_fully_done",
    "is_order_complete",
    "aggregate_step_stats",
    "OrderStatus",
    "BatchStatus",
    "utcnow",
    "TrackingError",
    "ValidationError",
    "InvalidStepError",
    "InvalidQuantityError",
    "MissingOperatorError",
    "PackingIncompleteError",
    "InvalidPhaseError",
    "InvalidTransitionError",
    "OrderNotFoundError",
    "BatchNotFoundError",
    "PersistenceError",
]
