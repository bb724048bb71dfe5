"""操作员与操作日志数据结构"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class OperatorCreate(BaseModel):
    name: str
    active: bool = True


class OperatorUpdate(BaseModel):
    name: Optional[str] = None
    active: Optional[bool] = None


class OperatorRead(OperatorCreate):
    id: int

    class Config:
        from_attributes = True


class OrderLogRead(BaseModel):
    id: int
    order_item_id: str
    operator_name: str
    step_number: int
    pieces_done: int
    notes: Optional[str] = None
    started_at: Optional[datetime] = None
    stopped_at: Optional[datetime] = None
    duration_seconds: Optional[int] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
