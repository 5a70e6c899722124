from datetime import datetime
from typing import Optional
from pydantic import BaseModel

class CardCreate(BaseModel):
    column_id: Optional[str] = None
    title: str = "New idea"
    description: str = ""

class CardUpdate(BaseModel):
    title: str
    description: str = ""

class CardMove(BaseModel):
    column_id: str

class IdeaCardRead(BaseModel):
    id: str
    user_id: str
    column_id: str
    title: str
    description: str = ""
    position: int
    cluster_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
