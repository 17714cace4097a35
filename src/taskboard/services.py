"""Summary: Core application services for Taskboard.

Importance: Orchestrates board access, CRUD workflows, and the suggestion engine.
Alternatives: Build a full service layer with dependency injection framework.
"""

from __future__ import annotations

from dataclasses import dataclass
import hashlib
import logging
import secrets
from datetime import datetime, timezone

from taskboard.models import (
    Board,
    BoardList,
    BoardView,
    Card,
    CardPatch,
    ListPatch,
    ListView,
    Member,
    Recommendation,
    User,
)
from taskboard.recommendations import RecommendationEngine
from taskboard.storage.sqlite_store import SqliteStore, StoredUser


logger = logging.getLogger(__name__)


class NotFoundError(Exception):
    """Summary: Raised when a board, list, card, or user does not exist."""


class AccessError(Exception):
    """Summary: Raised when the requester may not act on a board."""


def require_board_access(store: SqliteStore, board_id: int, user_id: int) -> Board:
    """Summary: Load a board and verify the user is its owner or a member.

    Importance: Shared gate for every board-scoped read and write.
    Alternatives: Enforce access with row-level security in the database.
    """

    board = store.get_board(board_id)
    if board is None:
        raise NotFoundError(f"Board {board_id} not found")
    if not board.allows(user_id):
        logger.warning("User %s denied access to board %s.", user_id, board_id)
        raise AccessError("User not authorized")
    return board


def _require_owner(store: SqliteStore, board_id: int, user_id: int, message: str) -> Board:
    board = store.get_board(board_id)
    if board is None:
        raise NotFoundError(f"Board {board_id} not found")
    if board.owner_id != user_id:
        logger.warning("User %s is not the owner of board %s.", user_id, board_id)
        raise AccessError(message)
    return board


def _require_card_members(board: Board, member_ids: tuple[int, ...]) -> None:
    outsiders = [user_id for user_id in member_ids if not board.allows(user_id)]
    if outsiders:
        raise ValueError(f"Users {outsiders} are not members of board {board.id}")


@dataclass(frozen=True)
class UserService:
    """Summary: Manages user records for multi-user boards.

    Importance: Provides user creation and lookup for invitations and API keys.
    Alternatives: Use an external identity provider.
    """

    store: SqliteStore

    def create_user(self, display_name: str, email: str) -> int:
        """Summary: Create or ensure a user exists.

        Importance: Allows onboarding collaborators without a schema rewrite.
        Alternatives: Keep a single hardcoded user.
        """

        return self.store.ensure_user(User(display_name=display_name, email=email))

    def get_user_by_email(self, email: str) -> StoredUser | None:
        return self.store.get_user_by_email(email)


@dataclass(frozen=True)
class ApiKeyService:
    """Summary: Issues and verifies API keys for users.

    Importance: Resolves the requesting user for every API call.
    Alternatives: Use OAuth or an external auth service.
    """

    store: SqliteStore
    token_secret: str

    def create_api_key(self, user_id: int, label: str | None = None) -> tuple[int, str]:
        """Summary: Create a new API key for a user.

        Importance: Returns a one-time plaintext token for client storage.
        Alternatives: Store raw tokens in the database.
        """

        if self.store.get_user(user_id) is None:
            raise NotFoundError(f"User {user_id} not found")
        raw_token = secrets.token_urlsafe(32)
        key_id = self.store.create_api_key(
            user_id=user_id,
            token_hash=self._hash_token(raw_token),
            label=label,
            created_at=datetime.now(timezone.utc).isoformat(),
        )
        return key_id, raw_token

    def resolve_user_id(self, token: str) -> int | None:
        return self.store.get_user_id_by_api_key(self._hash_token(token))

    def _hash_token(self, token: str) -> str:
        """Summary: Hash an API token with a secret salt.

        Importance: Avoids storing raw API keys in the database.
        Alternatives: Use an HSM or external secrets manager.
        """

        salt = self.token_secret or "taskboard"
        return hashlib.sha256(f"{salt}:{token}".encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class BoardService:
    """Summary: Board workflows for a single requesting user.

    Importance: Owns board creation, membership, deletion, and the materialized view.
    Alternatives: Expose the store directly to the API layer.
    """

    store: SqliteStore
    user_id: int

    def list_boards(self) -> list[Board]:
        return self.store.list_boards_for_user(self.user_id)

    def create_board(self, title: str) -> Board:
        if not title or not title.strip():
            raise ValueError("Please add a title")
        board_id = self.store.create_board(title, owner_id=self.user_id)
        logger.info("Created board %s (%s).", board_id, title)
        return Board(id=board_id, title=title, owner_id=self.user_id)

    def get_board(self, board_id: int) -> BoardView:
        """Summary: Materialize a board with its ordered lists and nested cards.

        Importance: Cards are nested under the list whose ID equals their list reference.
        Board and card members are resolved to their names and emails.
        Alternatives: Return lists and cards as separate collections.
        """

        board = require_board_access(self.store, board_id, self.user_id)
        lists = self.store.list_lists(board_id)
        cards = self.store.list_cards(board_id)
        return BoardView(
            board=board,
            lists=tuple(
                ListView(
                    list=board_list,
                    cards=tuple(card for card in cards if card.list_id == board_list.id),
                )
                for board_list in lists
            ),
            users=self._resolve_members(board, cards),
        )

    def delete_board(self, board_id: int) -> None:
        """Summary: Delete a board and everything on it.

        Importance: Only the owner may delete; lists and cards go with the board.
        Alternatives: Archive boards instead of deleting them.
        """

        _require_owner(self.store, board_id, self.user_id, "User not authorized")
        self.store.delete_board(board_id)
        logger.info("Deleted board %s.", board_id)

    def invite_member(self, board_id: int, email: str) -> Board:
        """Summary: Add a user, looked up by email, to the board's members.

        Importance: Only the owner may invite; the owner and existing members are rejected.
        Alternatives: Send invitations that the invitee must accept.
        """

        board = _require_owner(self.store, board_id, self.user_id, "Only owner can invite")
        invitee = self.store.get_user_by_email(email)
        if invitee is None:
            raise NotFoundError("User not found")
        if invitee.id == board.owner_id or invitee.id in board.member_ids:
            raise ValueError("User already a member")
        self.store.add_board_member(board_id, invitee.id)
        logger.info("Invited user %s to board %s.", invitee.id, board_id)
        return Board(
            id=board.id,
            title=board.title,
            owner_id=board.owner_id,
            member_ids=(*board.member_ids, invitee.id),
        )

    def _resolve_members(self, board: Board, cards: list[Card]) -> tuple[Member, ...]:
        user_ids = set(board.member_ids)
        for card in cards:
            user_ids.update(card.member_ids)
        return tuple(
            Member(id=user.id, display_name=user.display_name, email=user.email)
            for user in self.store.get_users(user_ids)
        )


@dataclass(frozen=True)
class ListService:
    """Summary: List workflows for a single requesting user.

    Importance: Every list change is gated on access to the owning board.
    Alternatives: Manage lists as part of the board document.
    """

    store: SqliteStore
    user_id: int

    def create_list(self, board_id: int, title: str, position: int = 0) -> BoardList:
        if not title or not title.strip():
            raise ValueError("Please add title and boardId")
        require_board_access(self.store, board_id, self.user_id)
        list_id = self.store.create_list(board_id, title, position)
        logger.info("Created list %s on board %s.", list_id, board_id)
        return BoardList(id=list_id, title=title, board_id=board_id, position=position)

    def update_list(self, list_id: int, patch: ListPatch) -> BoardList:
        board_list = self._require_list(list_id)
        if patch.title is not None and not patch.title.strip():
            raise ValueError("List title cannot be empty")
        updated = self.store.update_list(board_list.id, patch)
        if updated is None:
            raise NotFoundError("List not found")
        logger.info("Updated list %s.", list_id)
        return updated

    def delete_list(self, list_id: int) -> None:
        """Summary: Delete a list without touching its cards.

        Importance: Cards of a deleted list stay on the board and keep being scanned.
        Alternatives: Cascade to cards or refuse to delete non-empty lists.
        """

        self._require_list(list_id)
        self.store.delete_list(list_id)
        logger.info("Deleted list %s.", list_id)

    def _require_list(self, list_id: int) -> BoardList:
        board_list = self.store.get_list(list_id)
        if board_list is None:
            raise NotFoundError("List not found")
        require_board_access(self.store, board_list.board_id, self.user_id)
        return board_list


@dataclass(frozen=True)
class CardService:
    """Summary: Card workflows for a single requesting user.

    Importance: Keeps every card on a list that belongs to the card's board.
    Alternatives: Trust clients to send consistent list and board references.
    """

    store: SqliteStore
    user_id: int

    def create_card(
        self,
        board_id: int,
        list_id: int,
        title: str,
        description: str | None = None,
        member_ids: tuple[int, ...] = (),
        position: int = 0,
    ) -> Card:
        if not title or not title.strip():
            raise ValueError("Please add title, listId and boardId")
        board = require_board_access(self.store, board_id, self.user_id)
        self._require_list_on_board(list_id, board_id)
        _require_card_members(board, member_ids)
        card_id = self.store.create_card(
            board_id=board_id,
            list_id=list_id,
            title=title,
            description=description,
            position=position,
            member_ids=member_ids,
        )
        logger.info("Created card %s on list %s.", card_id, list_id)
        return Card(
            id=card_id,
            title=title,
            list_id=list_id,
            board_id=board_id,
            description=description,
            member_ids=member_ids,
            position=position,
        )

    def update_card(self, card_id: int, patch: CardPatch) -> Card:
        """Summary: Apply a patch to a card.

        Importance: A list change must target a list on the same board.
        Card members must be the board owner or board members.
        Alternatives: Allow moving cards across boards.
        """

        card = self._require_card(card_id)
        if patch.title is not None and not patch.title.strip():
            raise ValueError("Card title cannot be empty")
        if patch.list_id is not None:
            self._require_list_on_board(patch.list_id, card.board_id)
        if patch.member_ids is not None:
            board = require_board_access(self.store, card.board_id, self.user_id)
            _require_card_members(board, patch.member_ids)
        updated = self.store.update_card(card_id, patch)
        if updated is None:
            raise NotFoundError("Card not found")
        logger.info("Updated card %s.", card_id)
        return updated

    def apply_suggestion(self, card_id: int, patch: CardPatch) -> Card:
        """Summary: Apply an accepted recommendation to a card.

        Importance: Only due date, list, and position may change through a suggestion.
        Alternatives: Route accepted suggestions through the generic update.
        """

        if (
            patch.title is not None
            or patch.description is not None
            or patch.clear_description
            or patch.member_ids is not None
        ):
            raise ValueError("Suggestions may only set the due date, list, or position")
        if patch.is_empty():
            raise ValueError("Suggestion does not change the card")
        card = self.update_card(card_id, patch)
        logger.info("Applied suggestion to card %s.", card_id)
        return card

    def delete_card(self, card_id: int) -> None:
        self._require_card(card_id)
        self.store.delete_card(card_id)
        logger.info("Deleted card %s.", card_id)

    def _require_card(self, card_id: int) -> Card:
        card = self.store.get_card(card_id)
        if card is None:
            raise NotFoundError("Card not found")
        require_board_access(self.store, card.board_id, self.user_id)
        return card

    def _require_list_on_board(self, list_id: int, board_id: int) -> BoardList:
        board_list = self.store.get_list(list_id)
        if board_list is None:
            raise NotFoundError("List not found")
        if board_list.board_id != board_id:
            raise ValueError(f"List {list_id} does not belong to board {board_id}")
        return board_list


@dataclass(frozen=True)
class RecommendationService:
    """Summary: Computes suggestions for a board on demand.

    Importance: Suggestions are recomputed per request and never stored.
    Alternatives: Precompute suggestions in a background job.
    """

    store: SqliteStore
    engine: RecommendationEngine
    user_id: int

    def get_recommendations(self, board_id: int) -> list[Recommendation]:
        """Summary: Recommend due dates, list moves, and related cards for a board.

        Importance: Access failures withhold the whole result.
        Alternatives: Return partial results for readable cards.
        """

        require_board_access(self.store, board_id, self.user_id)
        lists = self.store.list_lists(board_id)
        cards = self.store.list_cards(board_id)
        recommendations = self.engine.recommend(lists, cards)
        logger.info(
            "Computed %s recommendations for board %s (%s cards).",
            len(recommendations),
            board_id,
            len(cards),
        )
        return recommendations
