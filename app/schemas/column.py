from datetime import datetime
from typing import Optional
from pydantic import BaseModel

class ColumnRead(BaseModel):
    id: str
    user_id: str
    name: str
    position: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
