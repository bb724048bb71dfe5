"""操作请求/响应模型

请求中的数值范围不在这里限制，统一由跟踪引擎校验并返回带类型的错误。
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel

from .order import BatchRead, OrderView


class StopRequest(BaseModel):
    step: int
    pieces: int
    operator: str = ""
    notes: Optional[str] = None


class PackingFields(BaseModel):
    packed_qty: Optional[int] = None
    boxes: Optional[int] = None
    size: Optional[str] = None
    weight: Optional[float] = None
    notes: Optional[str] = None


class PhaseRequest(PackingFields):
    phase: str
    operator: Optional[str] = None  # 仅用于包装完成通知


class BatchPhaseRequest(PhaseRequest):
    pass


class ForceCompleteRequest(BaseModel):
    qty: Optional[int] = None


class ActionResponse(BaseModel):
    order_id: str
    patch: Dict[str, Any]
    order: OrderView


class StopResponse(ActionResponse):
    batch: Optional[BatchRead] = None
