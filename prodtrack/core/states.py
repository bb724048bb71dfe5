"""订单与批次状态枚举"""

import enum


class OrderStatus(str, enum.Enum):
    not_started = "not_started"
    running = "running"
    paused = "paused"
    done = "done"
    drying = "drying"
    packing = "packing"
    ready_for_delivery = "ready_for_delivery"


class BatchStatus(str, enum.Enum):
    partial = "partial"
    drying = "drying"
    packing = "packing"
    ready_for_delivery = "ready_for_delivery"
    done = "done"


# 生产完成后的阶段（订单级）
POST_PRODUCTION_PHASES = (
    OrderStatus.drying,
    OrderStatus.packing,
    OrderStatus.ready_for_delivery,
)

# 订单级 set_phase 可接受的目标
ORDER_PHASES = (OrderStatus.done,) + POST_PRODUCTION_PHASES
