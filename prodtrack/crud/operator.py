"""操作员数据操作"""

from typing import List

from sqlalchemy.orm import Session

from .. import models, schemas


def create_operator(db: Session, operator: schemas.OperatorCreate):
    db_operator = models.Operator(name=operator.name.strip(), active=operator.active)
    db.add(db_operator)
    db.commit()
    db.refresh(db_operator)
    return db_operator


def get_operator(db: Session, operator_id: int):
    return db.query(models.Operator).filter(models.Operator.id == operator_id).first()


def get_operator_by_name(db: Session, name: str):
    return db.query(models.Operator).filter(models.Operator.name == name).first()


def list_operators(db: Session, active_only: bool = False):
    """按名称排序列出操作员"""
    query = db.query(models.Operator)
    if active_only:
        query = query.filter(models.Operator.active.is_(True))
    return query.order_by(models.Operator.name).all()


def active_operator_names(db: Session) -> List[str]:
    return [op.name for op in list_operators(db, active_only=True)]


def update_operator(db: Session, operator_id: int, operator_update: schemas.OperatorUpdate):
    db_operator = get_operator(db, operator_id)
    if not db_operator:
        return None

    update_data = operator_update.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(db_operator, field, value)

    db.commit()
    db.refresh(db_operator)
    return db_operator
