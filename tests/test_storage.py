"""Summary: Tests for SQLite storage layer.

Importance: Ensures boards, lists, and cards persist as the services expect.
Alternatives: Rely on manual testing for storage operations.
"""

from __future__ import annotations

from datetime import date
from pathlib import Path

from taskboard.models import CardPatch, ListPatch, User
from taskboard.storage.sqlite_store import SqliteStore


def _store(tmp_path: Path) -> SqliteStore:
    store = SqliteStore(str(tmp_path / "test.db"))
    store.initialize()
    return store


def test_ensure_user_is_idempotent(tmp_path: Path) -> None:
    """Summary: Ensuring the same email twice returns the same ID.

    Importance: The CLI ensures the default user on every run.
    Alternatives: Fail on duplicate emails.
    """

    store = _store(tmp_path)
    first = store.ensure_user(User(display_name="Ada", email="ada@example.com"))
    second = store.ensure_user(User(display_name="Ada L.", email="ada@example.com"))
    assert first == second
    assert store.get_user_by_email("ada@example.com").id == first


def test_lists_are_ordered_by_position(tmp_path: Path) -> None:
    """Summary: Lists come back sorted by position, ties by creation order.

    Importance: List order drives display and suggestion tie-breaks.
    Alternatives: Sort lists in the client.
    """

    store = _store(tmp_path)
    board_id = store.create_board("Roadmap", owner_id=1)
    done = store.create_list(board_id, "Done", position=5)
    todo = store.create_list(board_id, "To Do", position=0)
    doing = store.create_list(board_id, "Doing", position=0)
    assert [item.id for item in store.list_lists(board_id)] == [todo, doing, done]


def test_cards_round_trip_members_and_due_date(tmp_path: Path) -> None:
    """Summary: Card members and due dates survive storage.

    Importance: Related-card and due-date logic read these fields.
    Alternatives: Store members as a comma-separated column.
    """

    store = _store(tmp_path)
    board_id = store.create_board("Roadmap", owner_id=1)
    list_id = store.create_list(board_id, "To Do")
    card_id = store.create_card(
        board_id, list_id, "Write docs", description="intro", member_ids=(2, 3)
    )
    card = store.get_card(card_id)
    assert card.member_ids == (2, 3)
    assert card.due_date is None

    updated = store.update_card(card_id, CardPatch(due_date=date(2026, 5, 1), member_ids=(3,)))
    assert updated.due_date == date(2026, 5, 1)
    assert updated.member_ids == (3,)
    assert updated.title == "Write docs"

    cleared = store.update_card(card_id, CardPatch(clear_due_date=True))
    assert cleared.due_date is None


def test_update_list_applies_only_given_fields(tmp_path: Path) -> None:
    """Summary: A list patch leaves unspecified fields untouched."""

    store = _store(tmp_path)
    board_id = store.create_board("Roadmap", owner_id=1)
    list_id = store.create_list(board_id, "Backlog", position=3)
    updated = store.update_list(list_id, ListPatch(title="Icebox"))
    assert updated.title == "Icebox"
    assert updated.position == 3


def test_delete_board_cascades(tmp_path: Path) -> None:
    """Summary: Deleting a board removes its lists, cards, and members.

    Importance: Nothing on a board outlives it.
    Alternatives: Soft-delete boards.
    """

    store = _store(tmp_path)
    board_id = store.create_board("Roadmap", owner_id=1)
    store.add_board_member(board_id, 2)
    list_id = store.create_list(board_id, "To Do")
    card_id = store.create_card(board_id, list_id, "Task", member_ids=(2,))
    assert store.delete_board(board_id) is True
    assert store.get_board(board_id) is None
    assert store.list_lists(board_id) == []
    assert store.list_cards(board_id) == []
    assert store.get_card(card_id) is None
    assert store.list_boards_for_user(2) == []


def test_delete_list_keeps_cards(tmp_path: Path) -> None:
    """Summary: Deleting a list leaves its cards on the board.

    Importance: Orphaned cards remain visible to the suggestion engine.
    Alternatives: Cascade list deletion to cards.
    """

    store = _store(tmp_path)
    board_id = store.create_board("Roadmap", owner_id=1)
    list_id = store.create_list(board_id, "To Do")
    card_id = store.create_card(board_id, list_id, "Task")
    assert store.delete_list(list_id) is True
    assert store.get_list(list_id) is None
    assert [card.id for card in store.list_cards(board_id)] == [card_id]


def test_boards_for_user_include_memberships(tmp_path: Path) -> None:
    """Summary: Users see boards they own and boards they were invited to."""

    store = _store(tmp_path)
    owned = store.create_board("Mine", owner_id=1)
    shared = store.create_board("Shared", owner_id=2)
    store.create_board("Other", owner_id=3)
    store.add_board_member(shared, 1)
    assert [board.id for board in store.list_boards_for_user(1)] == [owned, shared]
    assert store.get_board(shared).member_ids == (1,)
