from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

class SummaryDraft(BaseModel):
    """Generated summary content, before it is stored."""
    summary_text: str
    key_themes: List[str] = Field(default_factory=list)
    top_ideas: List[str] = Field(default_factory=list)

class BoardSummaryRead(SummaryDraft):
    id: str
    user_id: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
