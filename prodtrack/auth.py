"""认证模块

访问 PIN 换取 JWT 令牌；管理员操作（强制完成、重置、隐藏/恢复）依赖 require_admin。
未配置 ACCESS_PIN 时不启用校验。
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from .config.settings import settings

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def pin_gate_enabled() -> bool:
    return bool(settings.ACCESS_PIN)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    """创建JWT访问令牌"""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def verify_token(token: str):
    """验证JWT令牌，返回 subject；无效时返回 None"""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    return payload.get("sub")


def require_admin(credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)):
    """管理员操作依赖"""
    if not pin_gate_enabled():
        return None
    if credentials is None or verify_token(credentials.credentials) is None:
        logger.warning("Rejected administrative request without a valid token")
        raise HTTPException(status_code=401, detail="Access PIN required", headers={"WWW-Authenticate": "Bearer"})
    return credentials.credentials
