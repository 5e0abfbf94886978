from datetime import datetime
from sqlalchemy import Column, Integer, DateTime
from ..db.database import Base


class IntegerBaseModel(Base):
    """Abstract base with a serial primary key and audit timestamps"""
    __abstract__ = True

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
