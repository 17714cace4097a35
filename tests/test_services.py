"""Summary: Tests for board, list, and card services.

Importance: Validates access control, materialization, and patch handling.
Alternatives: Test only through the HTTP API.
"""

from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from taskboard.models import CardPatch, ListPatch, User
from taskboard.services import (
    AccessError,
    BoardService,
    CardService,
    ListService,
    NotFoundError,
)
from taskboard.storage.sqlite_store import SqliteStore


def _setup(tmp_path: Path) -> tuple[SqliteStore, int, int, int]:
    store = SqliteStore(str(tmp_path / "test.db"))
    store.initialize()
    owner = store.ensure_user(User(display_name="Owner", email="owner@example.com"))
    member = store.ensure_user(User(display_name="Member", email="member@example.com"))
    outsider = store.ensure_user(User(display_name="Outsider", email="outsider@example.com"))
    return store, owner, member, outsider


def test_board_view_nests_cards_under_ordered_lists(tmp_path: Path) -> None:
    """Summary: The materialized board nests cards under their lists in position order.

    Importance: One read renders the whole board.
    Alternatives: Return flat lists and cards.
    """

    store, owner, _, _ = _setup(tmp_path)
    boards = BoardService(store=store, user_id=owner)
    lists = ListService(store=store, user_id=owner)
    cards = CardService(store=store, user_id=owner)
    board = boards.create_board("Launch")
    done = lists.create_list(board.id, "Done", position=2)
    todo = lists.create_list(board.id, "To Do", position=0)
    first = cards.create_card(board.id, todo.id, "Draft copy")
    second = cards.create_card(board.id, done.id, "Pick name")
    third = cards.create_card(board.id, todo.id, "Book venue")

    view = boards.get_board(board.id)
    assert view.board.title == "Launch"
    assert [item.list.title for item in view.lists] == ["To Do", "Done"]
    assert [card.id for card in view.lists[0].cards] == [first.id, third.id]
    assert [card.id for card in view.lists[1].cards] == [second.id]


def test_board_access_requires_owner_or_member(tmp_path: Path) -> None:
    """Summary: Members can read a board; outsiders get AccessError.

    Importance: Access is owner OR member.
    Alternatives: Role-based permissions per board.
    """

    store, owner, member, outsider = _setup(tmp_path)
    board = BoardService(store=store, user_id=owner).create_board("Launch")
    BoardService(store=store, user_id=owner).invite_member(board.id, "member@example.com")
    assert BoardService(store=store, user_id=member).get_board(board.id).board.id == board.id
    with pytest.raises(AccessError):
        BoardService(store=store, user_id=outsider).get_board(board.id)
    with pytest.raises(NotFoundError):
        BoardService(store=store, user_id=owner).get_board(999)


def test_invite_rules(tmp_path: Path) -> None:
    """Summary: Only the owner invites, and owner or existing members are rejected.

    Importance: Keeps the member set free of duplicates.
    Alternatives: Ignore duplicate invitations silently.
    """

    store, owner, member, _ = _setup(tmp_path)
    boards = BoardService(store=store, user_id=owner)
    board = boards.create_board("Launch")
    invited = boards.invite_member(board.id, "member@example.com")
    assert invited.member_ids == (member,)
    with pytest.raises(ValueError):
        boards.invite_member(board.id, "member@example.com")
    with pytest.raises(ValueError):
        boards.invite_member(board.id, "owner@example.com")
    with pytest.raises(NotFoundError):
        boards.invite_member(board.id, "nobody@example.com")
    with pytest.raises(AccessError):
        BoardService(store=store, user_id=member).invite_member(board.id, "outsider@example.com")


def test_only_owner_deletes_board(tmp_path: Path) -> None:
    """Summary: Members cannot delete a board; the owner can."""

    store, owner, member, _ = _setup(tmp_path)
    boards = BoardService(store=store, user_id=owner)
    board = boards.create_board("Launch")
    boards.invite_member(board.id, "member@example.com")
    with pytest.raises(AccessError):
        BoardService(store=store, user_id=member).delete_board(board.id)
    boards.delete_board(board.id)
    with pytest.raises(NotFoundError):
        boards.get_board(board.id)


def test_create_board_requires_title(tmp_path: Path) -> None:
    """Summary: Blank titles are rejected."""

    store, owner, _, _ = _setup(tmp_path)
    with pytest.raises(ValueError):
        BoardService(store=store, user_id=owner).create_board("  ")


def test_card_list_must_belong_to_board(tmp_path: Path) -> None:
    """Summary: Cards cannot be created on or moved to another board's list.

    Importance: A card's list always belongs to the card's board.
    Alternatives: Derive the board from the list.
    """

    store, owner, _, _ = _setup(tmp_path)
    boards = BoardService(store=store, user_id=owner)
    lists = ListService(store=store, user_id=owner)
    cards = CardService(store=store, user_id=owner)
    first = boards.create_board("One")
    second = boards.create_board("Two")
    first_list = lists.create_list(first.id, "To Do")
    second_list = lists.create_list(second.id, "To Do")
    with pytest.raises(ValueError):
        cards.create_card(first.id, second_list.id, "Misplaced")
    card = cards.create_card(first.id, first_list.id, "Placed")
    with pytest.raises(ValueError):
        cards.update_card(card.id, CardPatch(list_id=second_list.id))


def test_outsider_cannot_touch_lists_or_cards(tmp_path: Path) -> None:
    """Summary: List and card writes are gated on board access."""

    store, owner, _, outsider = _setup(tmp_path)
    board = BoardService(store=store, user_id=owner).create_board("Launch")
    board_list = ListService(store=store, user_id=owner).create_list(board.id, "To Do")
    card = CardService(store=store, user_id=owner).create_card(board.id, board_list.id, "Task")
    with pytest.raises(AccessError):
        ListService(store=store, user_id=outsider).update_list(board_list.id, ListPatch(title="X"))
    with pytest.raises(AccessError):
        CardService(store=store, user_id=outsider).delete_card(card.id)
    with pytest.raises(NotFoundError):
        CardService(store=store, user_id=owner).delete_card(999)


def test_apply_suggestion_sets_due_date_and_list(tmp_path: Path) -> None:
    """Summary: Accepted suggestions update only the due date, list, or position.

    Importance: Suggestions never rewrite card content.
    Alternatives: Allow arbitrary patches from suggestions.
    """

    store, owner, _, _ = _setup(tmp_path)
    board = BoardService(store=store, user_id=owner).create_board("Launch")
    lists = ListService(store=store, user_id=owner)
    todo = lists.create_list(board.id, "To Do")
    done = lists.create_list(board.id, "Done", position=1)
    cards = CardService(store=store, user_id=owner)
    card = cards.create_card(board.id, todo.id, "Ship it")
    updated = cards.apply_suggestion(card.id, CardPatch(due_date=date(2026, 6, 1)))
    assert updated.due_date == date(2026, 6, 1)
    moved = cards.apply_suggestion(card.id, CardPatch(list_id=done.id, position=0))
    assert moved.list_id == done.id
    with pytest.raises(ValueError):
        cards.apply_suggestion(card.id, CardPatch(title="Renamed"))
    with pytest.raises(ValueError):
        cards.apply_suggestion(card.id, CardPatch(clear_description=True))
    with pytest.raises(ValueError):
        cards.apply_suggestion(card.id, CardPatch())


def test_board_view_resolves_board_and_card_members(tmp_path: Path) -> None:
    """Summary: The materialized board carries names and emails for its members.

    Importance: Clients show who is on a board or card without extra lookups.
    Alternatives: Return bare member IDs only.
    """

    store, owner, member, _ = _setup(tmp_path)
    boards = BoardService(store=store, user_id=owner)
    board = boards.create_board("Launch")
    boards.invite_member(board.id, "member@example.com")
    column = ListService(store=store, user_id=owner).create_list(board.id, "To Do")
    cards = CardService(store=store, user_id=owner)
    shared = cards.create_card(board.id, column.id, "Pair up", member_ids=(member, owner))
    solo = cards.create_card(board.id, column.id, "Alone")

    view = boards.get_board(board.id)
    assert [(item.id, item.display_name, item.email) for item in view.members] == [
        (member, "Member", "member@example.com")
    ]
    assert [item.email for item in view.members_of(shared.member_ids)] == [
        "member@example.com",
        "owner@example.com",
    ]
    assert view.members_of(solo.member_ids) == ()


def test_card_members_must_belong_to_board(tmp_path: Path) -> None:
    """Summary: Cards only accept the board owner and board members as members.

    Importance: Unknown users never feed related-card matching.
    Alternatives: Accept any user ID and resolve it lazily.
    """

    store, owner, member, outsider = _setup(tmp_path)
    boards = BoardService(store=store, user_id=owner)
    board = boards.create_board("Launch")
    column = ListService(store=store, user_id=owner).create_list(board.id, "To Do")
    cards = CardService(store=store, user_id=owner)
    with pytest.raises(ValueError):
        cards.create_card(board.id, column.id, "Task", member_ids=(member,))
    with pytest.raises(ValueError):
        cards.create_card(board.id, column.id, "Task", member_ids=(999,))
    card = cards.create_card(board.id, column.id, "Task", member_ids=(owner,))
    with pytest.raises(ValueError):
        cards.update_card(card.id, CardPatch(member_ids=(outsider,)))
    boards.invite_member(board.id, "member@example.com")
    updated = cards.update_card(card.id, CardPatch(member_ids=(owner, member)))
    assert updated.member_ids == (owner, member)
    assert store.get_card(card.id).member_ids == (owner, member)
