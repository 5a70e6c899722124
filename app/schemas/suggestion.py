from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel

SuggestionType = Literal["related_idea", "cluster", "summary"]

class SuggestionRead(BaseModel):
    id: str
    user_id: str
    parent_card_id: Optional[str] = None
    suggestion_text: str
    suggestion_type: SuggestionType
    is_accepted: bool = False
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
