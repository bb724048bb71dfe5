"""操作员模型"""

from sqlalchemy import Boolean, Column, Integer, String

from ..database.connection import Base


class Operator(Base):
    __tablename__ = "operators"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, unique=True)
    active = Column(Boolean, nullable=False, default=True)
