import uuid

from sqlalchemy import Column, String, JSON, DateTime, func
from app.db.base import Base

class BoardSummary(Base):
    __tablename__ = "board_summaries"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), nullable=False, index=True)
    summary_text = Column(String, nullable=False)
    key_themes = Column(JSON, nullable=False, default=list)
    top_ideas = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
