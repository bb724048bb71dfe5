"""数据库模型模块

定义所有 SQLAlchemy ORM 模型
"""

from ..database.connection import Base
from .order import OrderItem
from .operator import Operator
from .order_log import OrderLog

__all__ = ["Base", "OrderItem", "Operator", "OrderLog"]
