import uuid

from sqlalchemy import Column, Integer, String, DateTime, UniqueConstraint, func
from app.db.base import Base

class BoardColumn(Base):
    __tablename__ = "columns"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), nullable=False, index=True)
    name = Column(String, nullable=False)
    position = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        UniqueConstraint("user_id", "position", name="uq_user_column_position"),
    )
