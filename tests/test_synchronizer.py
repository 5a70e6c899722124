"""
Tests for board synchronization: card lifecycle, clustering, summaries, accept.
"""
import asyncio

from app.core.insights import EMPTY_BOARD_MESSAGE
from app.core.results import SyncStatus


def run(coro):
    return asyncio.run(coro)


def add(controller, column_id=None, title="New idea"):
    result = run(controller.add_card(column_id, title))
    assert result.ok, result.reason
    return result.value


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Create / move / delete
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def test_board_scenario(controller, columns):
    """Add two cards to Ideas, move one, delete the other"""
    ideas, in_progress = columns["Ideas"], columns["In Progress"]
    store = controller.ctx.store

    a = add(controller, ideas.id, "A")
    b = add(controller, ideas.id, "B")
    assert a.position == 0
    assert b.position == 1

    moved = run(controller.move_card(b.id, in_progress.id)).value
    assert moved.column_id == in_progress.id
    assert moved.position == 0

    assert run(controller.delete_card(a.id)).ok
    assert store.list_by_column(ideas.id) == []
    assert [c.id for c in store.list_by_column(in_progress.id)] == [b.id]


def test_positions_strictly_increase(controller, columns):
    ideas, done = columns["Ideas"], columns["Completed"]
    seen = []
    for i in range(3):
        seen.append(add(controller, ideas.id, f"idea {i}").position)
        other = add(controller, done.id, f"done {i}")
        seen.append(run(controller.move_card(other.id, ideas.id)).value.position)
    assert seen == sorted(seen)
    assert len(set(seen)) == len(seen)


def test_position_after_gap(controller, columns, remote):
    ideas = columns["Ideas"]
    first = add(controller, ideas.id)
    second = add(controller, ideas.id)
    run(controller.delete_card(first.id))
    third = add(controller, ideas.id)
    assert third.position == second.position + 1


def test_create_defaults_to_first_column(controller, columns):
    card = add(controller)
    assert card.column_id == columns["Ideas"].id
    assert card.title == "New idea"
    assert card.description == ""
    assert card.user_id == "user-1"


def test_create_in_unknown_column(controller, remote):
    result = run(controller.add_card("missing"))
    assert result.status is SyncStatus.NOT_FOUND
    assert remote.idea_cards.writes() == []


def test_create_without_columns_is_skipped(ctx, remote):
    from app.core.synchronizer import BoardSynchronizer

    result = run(BoardSynchronizer().create_card(ctx))
    assert result.status is SyncStatus.SKIPPED
    assert remote.idea_cards.writes() == []


def test_create_generates_related_suggestions(controller, remote):
    card = add(controller, title="Solar kiosk")
    suggestions = controller.ctx.store.recent_suggestions()
    assert len(suggestions) == 3
    assert all(s.parent_card_id == card.id for s in suggestions)
    assert all(s.suggestion_type == "related_idea" for s in suggestions)
    assert suggestions[0].suggestion_text == 'Explore "Solar kiosk" from a different angle'
    assert len(remote.ai_suggestions.rows) == 3


def test_create_failure_leaves_store_untouched(controller, remote):
    remote.idea_cards.failing_ops.add("insert")
    result = run(controller.add_card())
    assert result.status is SyncStatus.REMOTE_FAILURE
    assert controller.ctx.store.cards() == []
    assert controller.ctx.store.recent_suggestions() == []


def test_suggestion_failure_does_not_undo_card(controller, remote):
    remote.ai_suggestions.failing_ops.add("insert")
    result = run(controller.add_card(title="Still here"))
    assert result.ok
    assert controller.ctx.store.get_card(result.value.id) is not None
    assert controller.ctx.store.recent_suggestions() == []
    assert controller.is_processing is False


def test_duplicate_adds_both_land(controller, columns):
    """Back-to-back adds are not de-duplicated"""
    async def double_click():
        return await asyncio.gather(
            controller.add_card(columns["Ideas"].id),
            controller.add_card(columns["Ideas"].id),
        )

    results = run(double_click())
    assert all(r.ok for r in results)
    assert len(controller.ctx.store.cards()) == 2


def test_move_to_same_column_is_noop(controller, columns, remote):
    card = add(controller, columns["Ideas"].id)
    writes_before = len(remote.idea_cards.writes())

    result = run(controller.move_card(card.id, card.column_id))
    assert result.status is SyncStatus.SKIPPED
    assert len(remote.idea_cards.writes()) == writes_before
    assert controller.ctx.store.get_card(card.id) == card


def test_move_to_unknown_column(controller, columns):
    card = add(controller, columns["Ideas"].id)
    result = run(controller.move_card(card.id, "nowhere"))
    assert result.status is SyncStatus.NOT_FOUND
    assert controller.ctx.store.get_card(card.id).column_id == columns["Ideas"].id


def test_move_failure_keeps_old_column(controller, columns, remote):
    card = add(controller, columns["Ideas"].id)
    remote.idea_cards.failing_ops.add("update")
    result = run(controller.move_card(card.id, columns["Completed"].id))
    assert result.status is SyncStatus.REMOTE_FAILURE
    assert controller.ctx.store.get_card(card.id) == card


def test_move_only_changes_column_and_position(controller, columns):
    card = add(controller, columns["Ideas"].id)
    moved = run(controller.move_card(card.id, columns["Completed"].id)).value
    assert moved.title == card.title
    assert moved.cluster_id == card.cluster_id
    assert moved.updated_at == card.updated_at


def test_delete_failure_keeps_card(controller, remote):
    card = add(controller)
    remote.idea_cards.failing_ops.add("delete")
    result = run(controller.delete_card(card.id))
    assert result.status is SyncStatus.REMOTE_FAILURE
    assert controller.ctx.store.get_card(card.id) is not None


def test_delete_unknown_card(controller):
    assert run(controller.delete_card("ghost")).status is SyncStatus.NOT_FOUND


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Update
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def test_update_merges_text_fields(controller, columns, remote):
    card = add(controller, columns["Ideas"].id)
    result = run(controller.update_card(card.id, "  Better title ", "details"))
    assert result.ok

    stored = controller.ctx.store.get_card(card.id)
    assert stored.title == "Better title"
    assert stored.description == "details"
    assert stored.position == card.position
    assert stored.column_id == card.column_id
    assert stored.updated_at > card.updated_at
    assert remote.idea_cards.rows[0]["title"] == "Better title"


def test_update_rejects_blank_title(controller, remote):
    card = add(controller)
    writes_before = len(remote.idea_cards.writes())

    result = run(controller.update_card(card.id, "   ", "ignored"))
    assert result.status is SyncStatus.SKIPPED
    assert len(remote.idea_cards.writes()) == writes_before
    assert controller.ctx.store.get_card(card.id).title == "New idea"


def test_update_failure_keeps_title(controller, remote):
    card = add(controller)
    remote.idea_cards.failing_ops.add("update")
    result = run(controller.update_card(card.id, "Renamed", ""))
    assert result.status is SyncStatus.REMOTE_FAILURE
    assert controller.ctx.store.get_card(card.id).title == "New idea"


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Cluster
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def test_cluster_tags_first_three(controller):
    cards = [add(controller, title=f"idea {i}") for i in range(5)]
    result = run(controller.cluster())
    assert result.ok

    tag = result.value["cluster_id"]
    store = controller.ctx.store
    assert [store.get_card(c.id).cluster_id for c in cards] == [tag, tag, tag, None, None]
    assert result.value["suggestion"].suggestion_text == "Clustered 3 similar ideas together"
    assert result.value["suggestion"].suggestion_type == "cluster"
    assert store.recent_suggestions()[0].suggestion_type == "cluster"


def test_cluster_fewer_cards_than_sample(controller):
    card = add(controller)
    result = run(controller.cluster())
    assert result.value["card_ids"] == [card.id]
    assert result.value["suggestion"].suggestion_text == "Clustered 1 similar ideas together"


def test_cluster_empty_board_writes_nothing(controller, remote):
    result = run(controller.cluster())
    assert result.status is SyncStatus.SKIPPED
    assert remote.idea_cards.writes() == []
    assert remote.ai_suggestions.writes() == []


def test_cluster_new_tag_each_time(controller):
    add(controller)
    first = run(controller.cluster()).value["cluster_id"]
    second = run(controller.cluster()).value["cluster_id"]
    assert first != second


def test_cluster_partial_failure(controller, remote):
    cards = [add(controller, title=f"idea {i}") for i in range(3)]
    remote.idea_cards.failing_ids.add(cards[1].id)

    result = run(controller.cluster())
    assert result.status is SyncStatus.PARTIAL_FAILURE
    store = controller.ctx.store
    tag = result.value["cluster_id"]
    assert store.get_card(cards[0].id).cluster_id == tag
    assert store.get_card(cards[1].id).cluster_id is None
    assert store.get_card(cards[2].id).cluster_id == tag
    assert result.value["failed_card_ids"] == [cards[1].id]
    assert controller.is_processing is False


def test_cluster_unexpected_error_counts_as_failed_write(controller, remote):
    cards = [add(controller, title=f"idea {i}") for i in range(3)]
    update = remote.idea_cards.update

    async def flaky_update(values, filters):
        if filters.get("id") == cards[0].id:
            raise ValueError("malformed row")
        return await update(values, filters)

    remote.idea_cards.update = flaky_update
    result = run(controller.cluster())

    assert result.status is SyncStatus.PARTIAL_FAILURE
    store = controller.ctx.store
    tag = result.value["cluster_id"]
    assert store.get_card(cards[0].id).cluster_id is None
    assert store.get_card(cards[1].id).cluster_id == tag
    assert store.get_card(cards[2].id).cluster_id == tag
    assert result.value["failed_card_ids"] == [cards[0].id]


def test_suggestion_insert_unexpected_error_is_partial(controller, remote):
    card = add(controller, title="Seed")
    insert = remote.ai_suggestions.insert
    calls = []

    async def flaky_insert(records):
        calls.append(records)
        if len(calls) == 2:
            raise ValueError("bad payload")
        return await insert(records)

    remote.ai_suggestions.insert = flaky_insert
    result = run(controller.sync.generate_suggestions(controller.ctx, card))

    assert result.status is SyncStatus.PARTIAL_FAILURE
    assert len(result.value) == 2


def test_cluster_all_writes_fail(controller, remote):
    add(controller)
    remote.idea_cards.failing_ops.add("update")
    result = run(controller.cluster())
    assert result.status is SyncStatus.REMOTE_FAILURE
    assert all(c.cluster_id is None for c in controller.ctx.store.cards())
    assert not any(r["suggestion_type"] == "cluster" for r in remote.ai_suggestions.rows)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Summarize
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def test_summarize_empty_board(controller, remote):
    result = run(controller.summarize())
    assert result.ok
    summary = controller.ctx.store.latest_summary()
    assert summary.summary_text == EMPTY_BOARD_MESSAGE
    assert summary.key_themes == []
    assert summary.top_ideas == []
    assert len(remote.board_summaries.rows) == 1


def test_summarize_replaces_current_summary(controller):
    for title in ["A", "B", "C", "D"]:
        add(controller, title=title)
    first = run(controller.summarize()).value
    add(controller, title="E")
    second = run(controller.summarize()).value

    assert controller.ctx.store.latest_summary() == second
    assert second.id != first.id
    assert second.top_ideas == ["A", "B", "C"]
    assert "5 ideas across 3 stages" in second.summary_text


def test_summarize_failure_keeps_previous(controller, remote):
    previous = run(controller.summarize()).value
    remote.board_summaries.failing_ops.add("insert")
    result = run(controller.summarize())
    assert result.status is SyncStatus.REMOTE_FAILURE
    assert controller.ctx.store.latest_summary() == previous
    assert controller.is_processing is False


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Accept suggestion
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def _first_suggestion(controller):
    add(controller, controller.ctx.store.columns()[-1].id, title="Seed")
    return controller.ctx.store.recent_suggestions()[0]


def test_accept_creates_card_in_first_column(controller, columns, remote):
    suggestion = _first_suggestion(controller)
    result = run(controller.accept_suggestion(suggestion.id))
    assert result.ok

    card = result.value["card"]
    assert card.column_id == columns["Ideas"].id
    assert card.title == "New idea"
    assert controller.ctx.store.get_suggestion(suggestion.id).is_accepted
    stored = next(r for r in remote.ai_suggestions.rows if r["id"] == suggestion.id)
    assert stored["is_accepted"] is True


def test_accept_twice_stays_accepted(controller):
    suggestion = _first_suggestion(controller)
    run(controller.accept_suggestion(suggestion.id))
    cards_after_first = len(controller.ctx.store.cards())

    result = run(controller.accept_suggestion(suggestion.id))
    assert result.status is SyncStatus.SKIPPED
    assert controller.ctx.store.get_suggestion(suggestion.id).is_accepted is True
    assert len(controller.ctx.store.cards()) == cards_after_first


def test_accept_flag_failure_removes_new_card(controller, remote):
    suggestion = _first_suggestion(controller)
    cards_before = len(controller.ctx.store.cards())
    remote.ai_suggestions.failing_ops.add("update")

    result = run(controller.accept_suggestion(suggestion.id))
    assert result.status is SyncStatus.REMOTE_FAILURE
    assert len(controller.ctx.store.cards()) == cards_before
    assert len(remote.idea_cards.rows) == cards_before
    assert controller.ctx.store.get_suggestion(suggestion.id).is_accepted is False


def test_accept_inconsistent_when_cleanup_fails(controller, remote):
    suggestion = _first_suggestion(controller)
    remote.ai_suggestions.failing_ops.add("update")
    remote.idea_cards.failing_ops.add("delete")

    result = run(controller.accept_suggestion(suggestion.id))
    assert result.status is SyncStatus.INCONSISTENT
    assert controller.ctx.store.get_card(result.value.id) is not None
    assert controller.ctx.store.get_suggestion(suggestion.id).is_accepted is False


def test_accept_unknown_suggestion(controller):
    assert run(controller.accept_suggestion("nope")).status is SyncStatus.NOT_FOUND
