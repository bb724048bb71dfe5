"""操作日志数据操作"""

from sqlalchemy.orm import Session

from .. import models


def list_order_logs(db: Session, order_id: str):
    """某订单的操作日志，按停止时间倒序"""
    return (
        db.query(models.OrderLog)
        .filter(models.OrderLog.order_item_id == order_id)
        .order_by(models.OrderLog.stopped_at.desc(), models.OrderLog.id.desc())
        .all()
    )
