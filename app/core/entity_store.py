"""
Per-session in-memory copy of the board.

Holds columns (ordered by position), cards (keyed by id, in insertion order),
suggestions (most recent first) and the latest summary. Records are pydantic
models and are always replaced whole; partial updates go through
`model_copy(update=...)` before `upsert`.
"""
from typing import Dict, List, Optional, Union

from app.schemas.card import IdeaCardRead
from app.schemas.column import ColumnRead
from app.schemas.suggestion import SuggestionRead
from app.schemas.summary import BoardSummaryRead

SUGGESTION_DISPLAY_LIMIT = 10
# Older suggestions fall off the end; the remote table keeps the full history
SUGGESTION_RETENTION = 50

Entity = Union[ColumnRead, IdeaCardRead, SuggestionRead, BoardSummaryRead]


class EntityStore:
    def __init__(self):
        self._columns: Dict[str, ColumnRead] = {}
        self._cards: Dict[str, IdeaCardRead] = {}
        self._suggestions: List[SuggestionRead] = []
        self._summary: Optional[BoardSummaryRead] = None

    # --- Bulk load --- #

    def replace_all(
        self,
        columns: List[ColumnRead],
        cards: List[IdeaCardRead],
        suggestions: List[SuggestionRead],
        summary: Optional[BoardSummaryRead],
    ):
        self._columns = {c.id: c for c in columns}
        self._cards = {c.id: c for c in cards}
        self._suggestions = list(suggestions)
        self._summary = summary

    # --- Writes --- #

    def upsert(self, entity: Entity):
        if isinstance(entity, ColumnRead):
            self._columns[entity.id] = entity
        elif isinstance(entity, IdeaCardRead):
            self._cards[entity.id] = entity
        elif isinstance(entity, SuggestionRead):
            for i, existing in enumerate(self._suggestions):
                if existing.id == entity.id:
                    self._suggestions[i] = entity
                    return
            self._suggestions.insert(0, entity)
            del self._suggestions[SUGGESTION_RETENTION:]
        elif isinstance(entity, BoardSummaryRead):
            self._summary = entity
        else:
            raise TypeError(f"Unsupported entity type: {type(entity).__name__}")

    def prepend_suggestions(self, suggestions: List[SuggestionRead]):
        """Add newly created suggestions ahead of the existing ones, keeping their order."""
        self._suggestions = (list(suggestions) + self._suggestions)[:SUGGESTION_RETENTION]

    def remove(self, entity_id: str) -> bool:
        if self._cards.pop(entity_id, None) is not None:
            self._detach_suggestions(entity_id)
            return True
        if self._columns.pop(entity_id, None) is not None:
            return True
        before = len(self._suggestions)
        self._suggestions = [s for s in self._suggestions if s.id != entity_id]
        if len(self._suggestions) != before:
            return True
        if self._summary is not None and self._summary.id == entity_id:
            self._summary = None
            return True
        return False

    def _detach_suggestions(self, card_id: str):
        self._suggestions = [
            s.model_copy(update={"parent_card_id": None}) if s.parent_card_id == card_id else s
            for s in self._suggestions
        ]

    # --- Reads --- #

    def columns(self) -> List[ColumnRead]:
        return sorted(self._columns.values(), key=lambda c: c.position)

    def first_column(self) -> Optional[ColumnRead]:
        columns = self.columns()
        return columns[0] if columns else None

    def get_column(self, column_id: str) -> Optional[ColumnRead]:
        return self._columns.get(column_id)

    def cards(self) -> List[IdeaCardRead]:
        return list(self._cards.values())

    def get_card(self, card_id: str) -> Optional[IdeaCardRead]:
        return self._cards.get(card_id)

    def list_by_column(self, column_id: str) -> List[IdeaCardRead]:
        return sorted(
            (c for c in self._cards.values() if c.column_id == column_id),
            key=lambda c: c.position,
        )

    def get_suggestion(self, suggestion_id: str) -> Optional[SuggestionRead]:
        for s in self._suggestions:
            if s.id == suggestion_id:
                return s
        return None

    def recent_suggestions(self, limit: Optional[int] = SUGGESTION_DISPLAY_LIMIT) -> List[SuggestionRead]:
        return self._suggestions[:limit]

    def latest_summary(self) -> Optional[BoardSummaryRead]:
        return self._summary
