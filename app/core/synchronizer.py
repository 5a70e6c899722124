"""
Board synchronization: remote write first, local reconciliation second.

Every mutating operation writes to the remote tables and only touches the
EntityStore after the write succeeded. Nothing is written locally ahead of the
remote call, so a failed write needs no rollback. Failures are logged and
returned as SyncResult values; they never propagate as exceptions.

Rapid duplicate intents are not de-duplicated: two `create_card` calls issued
back to back both write and both land in the store.
"""
import asyncio
import logging
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Callable, Optional

from app.core.context import BoardContext
from app.core.insights import InsightGenerator, TemplateInsightGenerator
from app.core.positions import next_position
from app.core.results import SyncResult, SyncStatus
from app.db.remote import RemoteStoreError
from app.schemas.card import IdeaCardRead
from app.schemas.suggestion import SuggestionRead
from app.schemas.summary import BoardSummaryRead

logger = logging.getLogger(__name__)

DEFAULT_CARD_TITLE = "New idea"
CLUSTER_SAMPLE_SIZE = 3


@asynccontextmanager
async def _no_processing_flag():
    yield


def _now() -> datetime:
    return datetime.now(timezone.utc)


class BoardSynchronizer:
    def __init__(
        self,
        insights: Optional[InsightGenerator] = None,
        processing: Optional[Callable] = None,
    ):
        self.insights = insights or TemplateInsightGenerator()
        # Async context manager factory held open while insights are generated
        self.processing = processing or _no_processing_flag

    # --- Cards --- #

    async def create_card(
        self,
        ctx: BoardContext,
        column_id: Optional[str] = None,
        title: str = DEFAULT_CARD_TITLE,
        description: str = "",
        suggest: bool = True,
    ) -> SyncResult:
        """Append a card to `column_id` (or the first column), then suggest related ideas."""
        if column_id:
            column = ctx.store.get_column(column_id)
            if column is None:
                return SyncResult.not_found(f"Column {column_id} not found")
        else:
            column = ctx.store.first_column()
            if column is None:
                return SyncResult.skipped("Board has no columns")

        position = next_position(ctx.store.list_by_column(column.id))
        try:
            rows = await ctx.remote.idea_cards.insert(
                {
                    "id": str(uuid.uuid4()),
                    "column_id": column.id,
                    "title": title,
                    "description": description,
                    "position": position,
                }
            )
        except RemoteStoreError as e:
            logger.error(f"❌ Failed to create card in column {column.id}: {e}", exc_info=True)
            return SyncResult.remote_failure(e)

        card = IdeaCardRead.model_validate(rows[0])
        ctx.store.upsert(card)
        logger.info(f"✅ Created card {card.id} in column {column.id} at position {position}")

        if suggest:
            async with self.processing():
                await self.generate_suggestions(ctx, card)
        return SyncResult.success(card)

    async def update_card(
        self, ctx: BoardContext, card_id: str, title: str, description: str
    ) -> SyncResult:
        card = ctx.store.get_card(card_id)
        if card is None:
            return SyncResult.not_found(f"Card {card_id} not found")
        if not title.strip():
            return SyncResult.skipped("Card title cannot be empty")

        values = {"title": title.strip(), "description": description, "updated_at": _now()}
        try:
            await ctx.remote.idea_cards.update(values, {"id": card_id})
        except RemoteStoreError as e:
            logger.error(f"❌ Failed to update card {card_id}: {e}", exc_info=True)
            return SyncResult.remote_failure(e)

        updated = card.model_copy(update=values)
        ctx.store.upsert(updated)
        return SyncResult.success(updated)

    async def delete_card(self, ctx: BoardContext, card_id: str) -> SyncResult:
        card = ctx.store.get_card(card_id)
        if card is None:
            return SyncResult.not_found(f"Card {card_id} not found")

        try:
            await ctx.remote.idea_cards.delete({"id": card_id})
        except RemoteStoreError as e:
            logger.error(f"❌ Failed to delete card {card_id}: {e}", exc_info=True)
            return SyncResult.remote_failure(e)

        ctx.store.remove(card_id)
        logger.info(f"🗑️ Deleted card {card_id}")
        return SyncResult.success(card)

    async def move_card(
        self, ctx: BoardContext, card_id: str, target_column_id: str
    ) -> SyncResult:
        """Move a card to the end of another column. Same-column drops are a no-op."""
        card = ctx.store.get_card(card_id)
        if card is None:
            return SyncResult.not_found(f"Card {card_id} not found")
        if card.column_id == target_column_id:
            return SyncResult(SyncStatus.SKIPPED, value=card, reason="Card is already in that column")
        if ctx.store.get_column(target_column_id) is None:
            return SyncResult.not_found(f"Column {target_column_id} not found")

        position = next_position(ctx.store.list_by_column(target_column_id))
        try:
            await ctx.remote.idea_cards.update(
                {"column_id": target_column_id, "position": position, "updated_at": _now()},
                {"id": card_id},
            )
        except RemoteStoreError as e:
            logger.error(f"❌ Failed to move card {card_id} to {target_column_id}: {e}", exc_info=True)
            return SyncResult.remote_failure(e)

        moved = card.model_copy(update={"column_id": target_column_id, "position": position})
        ctx.store.upsert(moved)
        return SyncResult.success(moved)

    # --- Insights --- #

    async def generate_suggestions(self, ctx: BoardContext, card: IdeaCardRead) -> SyncResult:
        """Store related-idea suggestions for a card. Each insert succeeds or fails on its own."""
        try:
            texts = self.insights.generate_suggestions(card)
        except Exception as e:
            logger.error(f"❌ Error generating suggestions for card {card.id}: {e}", exc_info=True)
            return SyncResult(SyncStatus.REMOTE_FAILURE, reason=str(e), error=e)

        results = await asyncio.gather(
            *[
                ctx.remote.ai_suggestions.insert(
                    {
                        "id": str(uuid.uuid4()),
                        "parent_card_id": card.id,
                        "suggestion_text": text,
                        "suggestion_type": "related_idea",
                    }
                )
                for text in texts
            ],
            return_exceptions=True,
        )

        created = []
        failures = []
        for result in results:
            if isinstance(result, Exception):
                failures.append(result)
            elif isinstance(result, BaseException):
                # cancellation
                raise result
            else:
                created.append(SuggestionRead.model_validate(result[0]))

        for e in failures:
            logger.warning(f"⚠️ Suggestion insert failed for card {card.id}: {e}")

        ctx.store.prepend_suggestions(created)
        if not failures:
            return SyncResult.success(created)
        if created:
            return SyncResult(
                SyncStatus.PARTIAL_FAILURE,
                value=created,
                reason=f"{len(failures)} of {len(texts)} suggestions failed",
            )
        return SyncResult.remote_failure(failures[0], "No suggestions could be stored")

    async def cluster_sample(self, ctx: BoardContext) -> SyncResult:
        """
        Tag the first few cards on the board with one shared cluster id.

        The per-card writes run concurrently and are reflected independently,
        so some cards can end up tagged while others are not. A `cluster`
        suggestion records how many were grouped.
        """
        sample = ctx.store.cards()[:CLUSTER_SAMPLE_SIZE]
        if not sample:
            return SyncResult.skipped("No cards to cluster")

        cluster_id = str(uuid.uuid4())
        logger.info(f"🧠 Clustering {len(sample)} cards under {cluster_id}")

        results = await asyncio.gather(
            *[
                ctx.remote.idea_cards.update({"cluster_id": cluster_id}, {"id": card.id})
                for card in sample
            ],
            return_exceptions=True,
        )

        tagged = []
        failed = []
        for card, result in zip(sample, results):
            if isinstance(result, Exception):
                logger.warning(f"⚠️ Cluster tag write failed for card {card.id}: {result}")
                failed.append(card.id)
            elif isinstance(result, BaseException):
                # cancellation
                raise result
            else:
                ctx.store.upsert(card.model_copy(update={"cluster_id": cluster_id}))
                tagged.append(card.id)

        if not tagged:
            return SyncResult(
                SyncStatus.REMOTE_FAILURE,
                reason="No cards could be tagged",
                value={"cluster_id": cluster_id, "card_ids": [], "failed_card_ids": failed},
            )

        value = {
            "cluster_id": cluster_id,
            "card_ids": tagged,
            "failed_card_ids": failed,
            "suggestion": None,
        }
        try:
            rows = await ctx.remote.ai_suggestions.insert(
                {
                    "id": str(uuid.uuid4()),
                    "suggestion_text": f"Clustered {len(tagged)} similar ideas together",
                    "suggestion_type": "cluster",
                }
            )
        except RemoteStoreError as e:
            logger.error(f"❌ Failed to record cluster suggestion: {e}", exc_info=True)
            return SyncResult(
                SyncStatus.PARTIAL_FAILURE, value=value, reason=str(e), error=e
            )

        suggestion = SuggestionRead.model_validate(rows[0])
        ctx.store.upsert(suggestion)
        value["suggestion"] = suggestion

        if failed:
            return SyncResult(
                SyncStatus.PARTIAL_FAILURE,
                value=value,
                reason=f"{len(failed)} of {len(sample)} cards were not tagged",
            )
        return SyncResult.success(value)

    async def summarize(self, ctx: BoardContext) -> SyncResult:
        try:
            draft = self.insights.summarize(ctx.store.cards(), ctx.store.columns())
        except Exception as e:
            logger.error(f"❌ Error summarizing board: {e}", exc_info=True)
            return SyncResult(SyncStatus.REMOTE_FAILURE, reason=str(e), error=e)

        try:
            rows = await ctx.remote.board_summaries.insert(
                {"id": str(uuid.uuid4()), **draft.model_dump()}
            )
        except RemoteStoreError as e:
            logger.error(f"❌ Failed to store board summary: {e}", exc_info=True)
            return SyncResult.remote_failure(e)

        summary = BoardSummaryRead.model_validate(rows[0])
        ctx.store.upsert(summary)
        return SyncResult.success(summary)

    # --- Suggestions --- #

    async def accept_suggestion(self, ctx: BoardContext, suggestion_id: str) -> SyncResult:
        """
        Turn a suggestion into a card in the first column and mark it accepted.

        The card insert and the flag write are separate remote calls. If the
        flag write fails the new card is deleted again; if that delete fails
        too, the card stays and the result is INCONSISTENT.
        """
        suggestion = ctx.store.get_suggestion(suggestion_id)
        if suggestion is None:
            return SyncResult.not_found(f"Suggestion {suggestion_id} not found")
        if suggestion.is_accepted:
            return SyncResult(SyncStatus.SKIPPED, value=suggestion, reason="Suggestion already accepted")

        created = await self.create_card(ctx, suggest=False)
        if not created.ok:
            return created
        card = created.value

        try:
            await ctx.remote.ai_suggestions.update({"is_accepted": True}, {"id": suggestion_id})
        except RemoteStoreError as e:
            logger.error(f"❌ Failed to mark suggestion {suggestion_id} accepted: {e}", exc_info=True)
            return await self._discard_card(ctx, card, e)

        accepted = suggestion.model_copy(update={"is_accepted": True})
        ctx.store.upsert(accepted)

        async with self.processing():
            await self.generate_suggestions(ctx, card)
        return SyncResult.success({"card": card, "suggestion": accepted})

    async def _discard_card(
        self, ctx: BoardContext, card: IdeaCardRead, cause: RemoteStoreError
    ) -> SyncResult:
        try:
            await ctx.remote.idea_cards.delete({"id": card.id})
        except RemoteStoreError as e:
            logger.error(f"❌ Could not remove card {card.id} after failed accept: {e}", exc_info=True)
            return SyncResult(
                SyncStatus.INCONSISTENT,
                value=card,
                reason="Card created but suggestion not marked accepted",
                error=cause,
            )

        ctx.store.remove(card.id)
        return SyncResult.remote_failure(cause, "Suggestion could not be accepted")
