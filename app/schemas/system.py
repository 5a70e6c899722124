from pydantic import BaseModel

class SystemStats(BaseModel):
    columns: int
    cards: int
    clusters: int
    suggestions: int
    accepted_suggestions: int
    has_summary: bool
