"""FastAPI主应用入口

生产跟踪服务：订单计时、工序进度、完成数量、阶段推进和批次
- 使用依赖注入管理数据库会话
- 跟踪引擎的错误统一转换为带类型的 JSON 响应
"""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .api.v1 import (
    auth_router,
    batches_router,
    operators_router,
    orders_router,
    reports_router,
)
from .config.settings import settings
from .core.errors import TrackingError
from .database.connection import Base, engine, get_db

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting %s %s", settings.APP_TITLE, settings.APP_VERSION)
    try:
        Base.metadata.create_all(bind=engine)
    except SQLAlchemyError:
        logger.error("Could not create tables at startup", exc_info=True)
    yield
    logger.info("Shutting down")


# 创建FastAPI应用实例
app = FastAPI(
    title=settings.APP_TITLE,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    lifespan=lifespan,
)


@app.exception_handler(TrackingError)
def tracking_error_handler(request: Request, exc: TrackingError):
    """校验错误 422/409，未找到 404，持久化失败 503"""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error": type(exc).__name__},
    )


# 挂载API路由
app.include_router(auth_router, prefix="/api/v1")
app.include_router(orders_router, prefix="/api/v1")
app.include_router(batches_router, prefix="/api/v1")
app.include_router(operators_router, prefix="/api/v1")
app.include_router(reports_router, prefix="/api/v1")


# 健康检查端点
@app.get("/health/db")
def health_check(db: Session = Depends(get_db)):
    """检查数据库连接状态"""
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.error("Database health check failed", exc_info=True)
        raise HTTPException(status_code=503, detail="Database connection failed")
    return {"status": "healthy", "database": "reachable"}


# 根路径 - 返回服务状态
@app.get("/")
def read_root():
    """返回服务运行状态"""
    return {"service": settings.APP_TITLE, "version": settings.APP_VERSION, "status": "running"}
