import uuid

from sqlalchemy import Column, String, Boolean, ForeignKey, DateTime, func
from app.db.base import Base

class AISuggestion(Base):
    __tablename__ = "ai_suggestions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), nullable=False, index=True)
    parent_card_id = Column(
        String(36), ForeignKey("idea_cards.id", ondelete="SET NULL"), nullable=True
    )
    suggestion_text = Column(String, nullable=False)
    suggestion_type = Column(String, nullable=False, default="related_idea")
    is_accepted = Column(Boolean, nullable=False, default=False, server_default="false")
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
