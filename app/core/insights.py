"""
Board insight generation.

`InsightGenerator` is the capability the synchronizer depends on. The default
`TemplateInsightGenerator` is deterministic: fixed phrasing for suggestions and
a count-based summary. A model-backed generator can replace it without touching
the synchronizer.
"""
from abc import ABC, abstractmethod
from typing import List, Sequence

from app.schemas.card import IdeaCardRead
from app.schemas.column import ColumnRead
from app.schemas.summary import SummaryDraft

EMPTY_BOARD_MESSAGE = "Your board is empty. Start adding ideas to see insights!"
DEFAULT_THEMES = ["Innovation", "Planning", "Execution"]
TOP_IDEA_COUNT = 3


class InsightGenerator(ABC):
    @abstractmethod
    def generate_suggestions(self, card: IdeaCardRead) -> List[str]:
        """Suggestion texts related to a single card."""

    @abstractmethod
    def summarize(
        self, cards: Sequence[IdeaCardRead], columns: Sequence[ColumnRead]
    ) -> SummaryDraft:
        """Digest of the whole board."""


class TemplateInsightGenerator(InsightGenerator):
    def generate_suggestions(self, card: IdeaCardRead) -> List[str]:
        return [
            f'Explore "{card.title}" from a different angle',
            f'Break down "{card.title}" into smaller steps',
            f'Consider the impact of "{card.title}" on users',
        ]

    def summarize(self, cards, columns) -> SummaryDraft:
        if not cards:
            return SummaryDraft(summary_text=EMPTY_BOARD_MESSAGE)

        return SummaryDraft(
            summary_text=(
                f"Your board contains {len(cards)} ideas across {len(columns)} stages. "
                "Key focus areas include innovation, execution, and completion tracking."
            ),
            key_themes=list(DEFAULT_THEMES) if len(cards) > 2 else [],
            top_ideas=[c.title for c in cards[:TOP_IDEA_COUNT]],
        )
