"""API数据模型模块

定义所有 Pydantic 模型（请求/响应结构体）
"""

from .order import (
    BatchRead,
    LastStop,
    Note,
    OrderCreate,
    OrderRead,
    OrderView,
    ImportResult,
    KpiRead,
    CompletionItem,
)
from .operator import OperatorCreate, OperatorRead, OperatorUpdate, OrderLogRead
from .actions import (
    ActionResponse,
    BatchPhaseRequest,
    ForceCompleteRequest,
    PhaseRequest,
    StopRequest,
    StopResponse,
)
from .auth import PinLogin, Token

__all__ = [
    "BatchRead",
    "LastStop",
    "Note",
    "OrderCreate",
    "OrderRead",
    "OrderView",
    "ImportResult",
    "KpiRead",
    "CompletionItem",
    "OperatorCreate",
    "OperatorRead",
    "OperatorUpdate",
    "OrderLogRead",
    "ActionResponse",
    "BatchPhaseRequest",
    "ForceCompleteRequest",
    "PhaseRequest",
    "StopRequest",
    "StopResponse",
    "PinLogin",
    "Token",
]
