"""生产跟踪服务

提供统一的模块导入接口
"""

from . import (
    auth,
    config,
    core,
    crud,
    db,
    models,
    schemas,
    security,
)

from .config import settings
from .db import get_db, engine, Base
from .core import OrderTrackingEngine

__all__ = [
    "auth",
    "config",
    "core",
    "crud",
    "db",
    "models",
    "schemas",
    "security",
    "settings",
    "get_db",
    "engine",
    "Base",
    "OrderTrackingEngine",
]
