"""操作日志模型

每次停止事件追加一条，用于按天汇总操作员产出
"""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.sql import func

from ..database.connection import Base


class OrderLog(Base):
    __tablename__ = "order_logs"

    id = Column(Integer, primary_key=True, index=True)
    order_item_id = Column(String(255), ForeignKey("order_items.id"), nullable=False, index=True)
    operator_name = Column(String(255), nullable=False)
    step_number = Column(Integer, nullable=False)
    pieces_done = Column(Integer, nullable=False)
    notes = Column(String(1024), nullable=True)
    started_at = Column(DateTime, nullable=True)
    stopped_at = Column(DateTime, nullable=True)
    duration_seconds = Column(Integer, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
