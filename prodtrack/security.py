"""安全模块：访问 PIN 校验

- ACCESS_PIN 可以是明文，也可以是 Passlib 生成的哈希（scripts/manage_operators.py --hash-pin）。
- 使用 Passlib 管理哈希，优先采用 pbkdf2_sha256，兼容 bcrypt。
"""

import secrets

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["pbkdf2_sha256", "bcrypt"], deprecated="auto")


def get_pin_hash(pin: str) -> str:
    """对 PIN 进行哈希并返回哈希字符串"""
    return pwd_context.hash(pin)


def verify_pin(plain_pin: str, configured: str) -> bool:
    """校验 PIN；configured 为空表示未启用 PIN，任何输入都不匹配"""
    if not configured or plain_pin is None:
        return False
    if pwd_context.identify(configured):
        try:
            return pwd_context.verify(plain_pin, configured)
        except ValueError:
            return False
    return secrets.compare_digest(plain_pin.encode("utf-8"), configured.encode("utf-8"))
