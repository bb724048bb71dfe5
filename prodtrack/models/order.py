"""订单行模型定义

一条记录对应一个 (订单号, 产品编码)，id 为二者归一化后的字符串。
工序进度、工序耗时、批次和备注用 JSON 列保存，写入时按字段合并。
"""

from sqlalchemy import JSON, Boolean, Column, DateTime, Enum, Float, Integer, String
from sqlalchemy.sql import func

from ..core.states import OrderStatus
from ..database.connection import Base


class OrderItem(Base):
    """订单行"""
    __tablename__ = "order_items"

    id = Column(String(255), primary_key=True, index=True)
    order_number = Column(String(128), nullable=False, index=True)
    customer = Column(String(255), nullable=True)
    product_code = Column(String(128), nullable=False)
    # 可选数据（来自导入文件）
    ml = Column(Float, nullable=True)
    qty_in_oven = Column(Integer, nullable=True)

    # 需求数量与工序数
    requested_qty = Column(Integer, nullable=False, default=0)
    step_count = Column(Integer, nullable=False, default=0)
    # {工序号: 件数} / {工序号: 秒}
    step_progress = Column(JSON, nullable=False, default=dict)
    step_time = Column(JSON, nullable=False, default=dict)
    # 所有工序都完成的件数（推导值）
    fully_done_qty = Column(Integer, nullable=False, default=0)

    status = Column(Enum(OrderStatus, native_enum=False, length=32), nullable=False, default=OrderStatus.not_started)
    status_changed_at = Column(DateTime, nullable=True)

    # 计时
    elapsed_sec = Column(Integer, nullable=False, default=0)
    timer_started_at = Column(DateTime, nullable=True)

    # 最近一次停止事件 {operator, step, pieces, duration_sec, notes, at}
    last_stop = Column(JSON, nullable=True)
    batches = Column(JSON, nullable=False, default=list)
    notes = Column(JSON, nullable=False, default=list)

    # 包装信息
    packed_qty = Column(Integer, nullable=False, default=0)
    boxes = Column(Integer, nullable=True)
    size = Column(String(64), nullable=True)
    weight = Column(Float, nullable=True)
    packing_notes = Column(String(1024), nullable=True)

    # 管理标记
    hidden = Column(Boolean, nullable=False, default=False)
    forced_completed = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
