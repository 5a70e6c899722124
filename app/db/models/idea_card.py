import uuid

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, func
from app.db.base import Base

class IdeaCard(Base):
    __tablename__ = "idea_cards"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), nullable=False, index=True)
    column_id = Column(String(36), ForeignKey("columns.id"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(String, nullable=False, default="")
    position = Column(Integer, nullable=False)
    cluster_id = Column(String(36), nullable=True)  # shared tag, null = ungrouped
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now())
