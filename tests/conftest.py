"""Shared fixtures: an in-memory remote board and a loaded controller."""

import asyncio
import copy
import itertools
import os
import uuid
from datetime import datetime, timedelta, timezone

import pytest

# Must be set before the app modules read them
os.environ["JWT_SECRET"] = "test-secret"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"

from app.core.context import AuthenticatedUser, BoardContext
from app.core.controller import BoardController
from app.db.remote import RemoteBoard, RemoteStoreError, RemoteTable

_clock = itertools.count()
EPOCH = datetime(2020, 1, 1, tzinfo=timezone.utc)

TABLE_DEFAULTS = {
    "columns": {},
    "idea_cards": {"description": "", "cluster_id": None},
    "ai_suggestions": {"parent_card_id": None, "is_accepted": False},
    "board_summaries": {"key_themes": [], "top_ideas": []},
}


class FakeTable(RemoteTable):
    """In-memory RemoteTable. Failures can be switched on per operation or per record id."""

    def __init__(self, name):
        self.name = name
        self.rows = []
        self.calls = []
        self.failing_ops = set()
        self.failing_ids = set()

    def _check(self, op, filters=None, records=()):
        ids = {(filters or {}).get("id")} | {r.get("id") for r in records}
        if op in self.failing_ops or ids & self.failing_ids:
            raise RemoteStoreError(self.name, op, "simulated outage")

    @staticmethod
    def _matches(row, filters):
        return all(row.get(k) == v for k, v in (filters or {}).items())

    async def select(self, filters=None, order_by=None, ascending=True, limit=None):
        self.calls.append(("select", filters))
        self._check("select", filters)
        rows = [r for r in self.rows if self._matches(r, filters)]
        if order_by:
            rows.sort(key=lambda r: r[order_by], reverse=not ascending)
        if limit is not None:
            rows = rows[:limit]
        return copy.deepcopy(rows)

    async def insert(self, records):
        rows = records if isinstance(records, list) else [records]
        self.calls.append(("insert", rows))
        self._check("insert", records=rows)
        created = []
        for record in rows:
            stamp = EPOCH + timedelta(seconds=next(_clock))
            row = {
                "id": str(uuid.uuid4()),
                "created_at": stamp,
                "updated_at": stamp,
                **copy.deepcopy(TABLE_DEFAULTS[self.name]),
                **record,
            }
            self.rows.append(row)
            created.append(row)
        return copy.deepcopy(created)

    async def update(self, values, filters):
        self.calls.append(("update", values, filters))
        self._check("update", filters)
        matched = [r for r in self.rows if self._matches(r, filters)]
        for row in matched:
            row.update(values)
        return len(matched)

    async def delete(self, filters):
        self.calls.append(("delete", filters))
        self._check("delete", filters)
        before = len(self.rows)
        self.rows = [r for r in self.rows if not self._matches(r, filters)]
        return before - len(self.rows)

    def writes(self):
        return [c for c in self.calls if c[0] != "select"]


def fake_board():
    return RemoteBoard(
        FakeTable("columns"),
        FakeTable("idea_cards"),
        FakeTable("ai_suggestions"),
        FakeTable("board_summaries"),
    )


@pytest.fixture
def remote():
    return fake_board()


@pytest.fixture
def user():
    return AuthenticatedUser(id="user-1", email="ada@example.com")


@pytest.fixture
def ctx(user, remote):
    return BoardContext.open(user, remote)


@pytest.fixture
def controller(ctx):
    """A controller whose board has been loaded (and so has the three default columns)."""
    board = BoardController(ctx)
    result = asyncio.run(board.load())
    assert result.ok
    return board


@pytest.fixture
def columns(controller):
    """Default columns keyed by name."""
    return {c.name: c for c in controller.ctx.store.columns()}
