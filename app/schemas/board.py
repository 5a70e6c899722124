from typing import Any, List, Optional
from pydantic import BaseModel

from app.schemas.card import IdeaCardRead
from app.schemas.column import ColumnRead
from app.schemas.suggestion import SuggestionRead
from app.schemas.summary import BoardSummaryRead

class BoardRead(BaseModel):
    user_id: str
    email: Optional[str] = None
    loading: bool
    is_processing: bool
    columns: List[ColumnRead]
    cards: List[IdeaCardRead]
    suggestions: List[SuggestionRead]
    summary: Optional[BoardSummaryRead] = None

class OperationResponse(BaseModel):
    status: str
    reason: Optional[str] = None
    data: Optional[Any] = None
