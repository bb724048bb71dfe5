"""订单数据结构定义

定义订单相关的Pydantic模型
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from ..core.states import BatchStatus, OrderStatus


class OrderBase(BaseModel):
    """订单基础模型"""
    order_number: str
    customer: Optional[str] = None
    product_code: str
    ml: Optional[float] = None
    requested_qty: int = Field(0, ge=0)
    qty_in_oven: Optional[int] = None
    step_count: int = Field(0, ge=0)


class OrderCreate(OrderBase):
    """手工新增订单时的模型"""
    pass


class LastStop(BaseModel):
    operator: str
    step: int
    pieces: int
    duration_sec: int
    notes: Optional[str] = None
    at: datetime


class Note(BaseModel):
    at: datetime
    kind: str  # operator / system
    author: Optional[str] = None
    text: str


class BatchRead(BaseModel):
    id: str
    qty: int
    status: BatchStatus
    packed_qty: Optional[int] = 0
    boxes: Optional[int] = None
    size: Optional[str] = None
    weight: Optional[float] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    status_changed_at: Optional[datetime] = None
    virtual: bool = False


class OrderRead(OrderBase):
    """读取订单时的模型"""
    id: str
    step_progress: Dict[int, int] = {}
    step_time: Dict[int, int] = {}
    fully_done_qty: int = 0
    status: OrderStatus
    status_changed_at: Optional[datetime] = None
    elapsed_sec: int = 0
    timer_started_at: Optional[datetime] = None
    last_stop: Optional[LastStop] = None
    batches: List[BatchRead] = []
    notes: List[Note] = []
    packed_qty: Optional[int] = 0
    boxes: Optional[int] = None
    size: Optional[str] = None
    weight: Optional[float] = None
    packing_notes: Optional[str] = None
    hidden: bool = False
    forced_completed: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class OrderView(OrderRead):
    """订单详情：附加实时计时、剩余数量和有效批次（含虚拟批次）"""
    current_elapsed: int = 0
    remaining_qty: int = 0
    effective_batches: List[BatchRead] = []


class ImportResult(BaseModel):
    imported: int
    skipped: int


class KpiRead(BaseModel):
    not_started: int
    running: int
    paused: int
    done: int
    fully_done_pieces: int


class CompletionItem(BaseModel):
    """完成列表中的一个批次"""
    order_id: str
    order_number: str
    customer: Optional[str] = None
    product_code: str
    requested_qty: int
    fully_done_qty: int
    batch: BatchRead
