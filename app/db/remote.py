"""
Generic remote data access for the board collections.

Every collection (`columns`, `idea_cards`, `ai_suggestions`, `board_summaries`)
is reached through a `RemoteTable`: select with equality filters, ordering and
limit; insert one or many records; update and delete by filter. Records cross
this boundary as plain dicts. Any backend failure is raised as RemoteStoreError.
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Union

from sqlalchemy import select, update, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.db.models import BoardColumn, IdeaCard, AISuggestion, BoardSummary

logger = logging.getLogger(__name__)

Record = Dict[str, Any]
Filters = Optional[Dict[str, Any]]


class RemoteStoreError(Exception):
    """A remote read or write did not complete."""

    def __init__(self, table: str, operation: str, message: str):
        self.table = table
        self.operation = operation
        super().__init__(f"{operation} on {table} failed: {message}")


class RemoteTable(ABC):
    """Abstract CRUD access to one remote collection."""

    name: str

    @abstractmethod
    async def select(
        self,
        filters: Filters = None,
        order_by: Optional[str] = None,
        ascending: bool = True,
        limit: Optional[int] = None,
    ) -> List[Record]:
        """Return matching records in the requested order."""

    @abstractmethod
    async def insert(self, records: Union[Record, List[Record]]) -> List[Record]:
        """Insert one or more records and return them as created."""

    @abstractmethod
    async def update(self, values: Record, filters: Filters) -> int:
        """Apply `values` to matching records. Returns the number matched."""

    @abstractmethod
    async def delete(self, filters: Filters) -> int:
        """Delete matching records. Returns the number removed."""


class SqlAlchemyTable(RemoteTable):
    """RemoteTable over one SQLAlchemy model, one session per call."""

    def __init__(self, model, session_factory: async_sessionmaker[AsyncSession]):
        self.model = model
        self.name = model.__tablename__
        self.session_factory = session_factory

    def _to_record(self, obj) -> Record:
        return {c.name: getattr(obj, c.name) for c in self.model.__table__.columns}

    def _where(self, stmt, filters: Filters):
        for field, value in (filters or {}).items():
            stmt = stmt.where(getattr(self.model, field) == value)
        return stmt

    async def select(self, filters=None, order_by=None, ascending=True, limit=None):
        stmt = self._where(select(self.model), filters)
        if order_by:
            col = getattr(self.model, order_by)
            stmt = stmt.order_by(col.asc() if ascending else col.desc())
        if limit is not None:
            stmt = stmt.limit(limit)
        try:
            async with self.session_factory() as db:
                result = await db.execute(stmt)
                return [self._to_record(obj) for obj in result.scalars().all()]
        except SQLAlchemyError as e:
            raise RemoteStoreError(self.name, "select", str(e)) from e

    async def insert(self, records):
        rows = records if isinstance(records, list) else [records]
        try:
            async with self.session_factory() as db:
                objs = [self.model(**row) for row in rows]
                db.add_all(objs)
                await db.commit()
                for obj in objs:
                    await db.refresh(obj)
                return [self._to_record(obj) for obj in objs]
        except SQLAlchemyError as e:
            raise RemoteStoreError(self.name, "insert", str(e)) from e

    async def update(self, values, filters):
        stmt = self._where(update(self.model), filters).values(**values)
        try:
            async with self.session_factory() as db:
                result = await db.execute(stmt)
                await db.commit()
                return result.rowcount
        except SQLAlchemyError as e:
            raise RemoteStoreError(self.name, "update", str(e)) from e

    async def delete(self, filters):
        stmt = self._where(delete(self.model), filters)
        try:
            async with self.session_factory() as db:
                result = await db.execute(stmt)
                await db.commit()
                return result.rowcount
        except SQLAlchemyError as e:
            raise RemoteStoreError(self.name, "delete", str(e)) from e


class UserScopedTable(RemoteTable):
    """Wraps a table so every read filters, and every write stamps, `user_id`."""

    def __init__(self, table: RemoteTable, user_id: str):
        self.table = table
        self.name = table.name
        self.user_id = user_id

    def _scope(self, filters: Filters) -> Record:
        return {**(filters or {}), "user_id": self.user_id}

    async def select(self, filters=None, order_by=None, ascending=True, limit=None):
        return await self.table.select(self._scope(filters), order_by, ascending, limit)

    async def insert(self, records):
        rows = records if isinstance(records, list) else [records]
        return await self.table.insert([{**row, "user_id": self.user_id} for row in rows])

    async def update(self, values, filters):
        values = {k: v for k, v in values.items() if k not in ("id", "user_id")}
        return await self.table.update(values, self._scope(filters))

    async def delete(self, filters):
        return await self.table.delete(self._scope(filters))


class RemoteBoard:
    """The four board collections, as seen by one user."""

    def __init__(
        self,
        columns: RemoteTable,
        idea_cards: RemoteTable,
        ai_suggestions: RemoteTable,
        board_summaries: RemoteTable,
    ):
        self.columns = columns
        self.idea_cards = idea_cards
        self.ai_suggestions = ai_suggestions
        self.board_summaries = board_summaries

    def for_user(self, user_id: str) -> "RemoteBoard":
        return RemoteBoard(
            UserScopedTable(self.columns, user_id),
            UserScopedTable(self.idea_cards, user_id),
            UserScopedTable(self.ai_suggestions, user_id),
            UserScopedTable(self.board_summaries, user_id),
        )


def sqlalchemy_board(session_factory: async_sessionmaker[AsyncSession]) -> RemoteBoard:
    """Build the unscoped RemoteBoard backed by the relational database."""
    logger.info("Using SQLAlchemy remote board tables")
    return RemoteBoard(
        SqlAlchemyTable(BoardColumn, session_factory),
        SqlAlchemyTable(IdeaCard, session_factory),
        SqlAlchemyTable(AISuggestion, session_factory),
        SqlAlchemyTable(BoardSummary, session_factory),
    )
