from app.db.models.column import BoardColumn
from app.db.models.idea_card import IdeaCard
from app.db.models.suggestion import AISuggestion
from app.db.models.board_summary import BoardSummary

__all__ = ["BoardColumn", "IdeaCard", "AISuggestion", "BoardSummary"]
