from typing import Iterable

from app.schemas.card import IdeaCardRead


def next_position(column_cards: Iterable[IdeaCardRead]) -> int:
    """Append-only position: one past the highest position in the column, 0 if empty."""
    return max((card.position for card in column_cards), default=-1) + 1
