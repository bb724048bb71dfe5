"""包装完成通知

订单或批次进入 ready_for_delivery 时，通过邮件 HTTP 接口（默认 Resend）发送一封通知。
未配置 NOTIFY_API_KEY 时不发送。发送失败只记录日志，不影响阶段切换本身。
"""

import logging
from typing import Optional

import requests

from ..config.settings import settings

logger = logging.getLogger(__name__)


def build_message(doc: dict, pieces: Optional[int], operator: Optional[str] = None) -> dict:
    recipients = [addr.strip() for addr in settings.NOTIFY_TO.split(",") if addr.strip()]
    html = (
        f"<p>Operator: <b>{operator or '-'}</b></p>"
        f"<p>Customer: <b>{doc.get('customer') or '-'}</b></p>"
        f"<p>Product: <b>{doc.get('product_code') or '-'}</b></p>"
        f"<p>Packed pieces: <b>{pieces or 0}</b></p>"
    )
    return {
        "from": settings.NOTIFY_FROM,
        "to": recipients,
        "subject": f"Packing completed: order {doc.get('order_number')}",
        "html": html,
    }


def notify_packing_complete(doc: dict, pieces: Optional[int], operator: Optional[str] = None) -> bool:
    """发送通知，返回是否已成功发出"""
    if not settings.NOTIFY_API_KEY:
        logger.info("Notification for order %s skipped: NOTIFY_API_KEY not configured", doc.get("id"))
        return False

    try:
        response = requests.post(
            settings.NOTIFY_API_URL,
            json=build_message(doc, pieces, operator),
            headers={"Authorization": f"Bearer {settings.NOTIFY_API_KEY}"},
            timeout=settings.NOTIFY_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
    except requests.RequestException:
        logger.warning("Notification for order %s failed", doc.get("id"), exc_info=True)
        return False

    logger.info("Packing notification sent for order %s (pieces=%s)", doc.get("id"), pieces)
    return True
