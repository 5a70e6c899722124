"""
Board controller: one per signed-in user.

Turns user intents into synchronizer calls and owns the two status flags the
views read: `loading` while the initial bulk fetch runs and `is_processing`
while insights are being generated.
"""
import asyncio
import logging
import uuid
from contextlib import asynccontextmanager
from typing import Dict, Optional

from app.core.context import AuthenticatedUser, BoardContext
from app.core.insights import InsightGenerator
from app.core.results import SyncResult
from app.core.synchronizer import BoardSynchronizer
from app.db.remote import RemoteBoard, RemoteStoreError
from app.schemas.card import IdeaCardRead
from app.schemas.column import ColumnRead
from app.schemas.suggestion import SuggestionRead
from app.schemas.summary import BoardSummaryRead

logger = logging.getLogger(__name__)

DEFAULT_COLUMNS = ["Ideas", "In Progress", "Completed"]
RECENT_SUGGESTIONS = 10


class BoardController:
    def __init__(self, ctx: BoardContext, insights: Optional[InsightGenerator] = None):
        self.ctx = ctx
        self.loading = False
        self.loaded = False
        self.is_processing = False
        self._load_lock = asyncio.Lock()
        self.sync = BoardSynchronizer(insights, processing=self._processing)

    @asynccontextmanager
    async def _processing(self):
        self.is_processing = True
        try:
            yield
        finally:
            self.is_processing = False

    # --- Loading --- #

    async def load(self) -> SyncResult:
        """Fetch the whole board concurrently; create the default columns on first use."""
        async with self._load_lock:
            return await self._load()

    async def ensure_loaded(self) -> SyncResult:
        if self.loaded:
            return SyncResult.success()
        async with self._load_lock:
            # another request may have finished loading while this one waited
            if self.loaded:
                return SyncResult.success()
            return await self._load()

    async def _load(self) -> SyncResult:
        remote = self.ctx.remote
        self.loading = True
        try:
            columns, cards, suggestions, summaries = await asyncio.gather(
                remote.columns.select(order_by="position"),
                remote.idea_cards.select(order_by="position"),
                remote.ai_suggestions.select(
                    order_by="created_at", ascending=False, limit=RECENT_SUGGESTIONS
                ),
                remote.board_summaries.select(order_by="created_at", ascending=False, limit=1),
            )
            if not columns:
                columns = await self._initialize_default_columns()

            self.ctx.store.replace_all(
                columns=[ColumnRead.model_validate(c) for c in columns],
                cards=[IdeaCardRead.model_validate(c) for c in cards],
                suggestions=[SuggestionRead.model_validate(s) for s in suggestions],
                summary=BoardSummaryRead.model_validate(summaries[0]) if summaries else None,
            )
            self.loaded = True
            logger.info(
                f"Loaded board for user {self.ctx.user.id}: "
                f"{len(columns)} columns, {len(cards)} cards"
            )
            return SyncResult.success()
        except RemoteStoreError as e:
            logger.error(f"❌ Error loading board for user {self.ctx.user.id}: {e}", exc_info=True)
            return SyncResult.remote_failure(e)
        finally:
            self.loading = False

    async def _initialize_default_columns(self):
        logger.info(f"Creating default columns for user {self.ctx.user.id}")
        return await self.ctx.remote.columns.insert(
            [
                {"id": str(uuid.uuid4()), "name": name, "position": i}
                for i, name in enumerate(DEFAULT_COLUMNS)
            ]
        )

    # --- Intents --- #

    async def add_card(
        self, column_id: Optional[str] = None, title: str = "New idea", description: str = ""
    ) -> SyncResult:
        return await self.sync.create_card(self.ctx, column_id, title, description)

    async def update_card(self, card_id: str, title: str, description: str) -> SyncResult:
        return await self.sync.update_card(self.ctx, card_id, title, description)

    async def delete_card(self, card_id: str) -> SyncResult:
        return await self.sync.delete_card(self.ctx, card_id)

    async def move_card(self, card_id: str, target_column_id: str) -> SyncResult:
        return await self.sync.move_card(self.ctx, card_id, target_column_id)

    async def cluster(self) -> SyncResult:
        async with self._processing():
            return await self.sync.cluster_sample(self.ctx)

    async def summarize(self) -> SyncResult:
        async with self._processing():
            return await self.sync.summarize(self.ctx)

    async def accept_suggestion(self, suggestion_id: str) -> SyncResult:
        return await self.sync.accept_suggestion(self.ctx, suggestion_id)


class SessionRegistry:
    """Maps signed-in users to their board controller for the life of the process."""

    def __init__(self, remote: RemoteBoard, insights: Optional[InsightGenerator] = None):
        self.remote = remote
        self.insights = insights
        self._controllers: Dict[str, BoardController] = {}

    def controller_for(self, user: AuthenticatedUser) -> BoardController:
        controller = self._controllers.get(user.id)
        if controller is None:
            ctx = BoardContext.open(user, self.remote)
            controller = BoardController(ctx, self.insights)
            self._controllers[user.id] = controller
        return controller

    def close(self, user_id: str):
        self._controllers.pop(user_id, None)
