"""Summary: Domain model dataclasses for Taskboard.

Importance: Defines the board entities and the recommendation variants shared across services.
Alternatives: Use Pydantic models or ORM classes directly.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Union


@dataclass(frozen=True)
class User:
    """Summary: Represents a board participant.

    Importance: Owners and members are resolved to users for access checks.
    Alternatives: Delegate identity to an external provider.
    """

    display_name: str
    email: str


@dataclass(frozen=True)
class Board:
    """Summary: Represents a board snapshot.

    Importance: Carries ownership and membership used by every access check.
    Alternatives: Store access rules in a separate ACL table.
    """

    id: int
    title: str
    owner_id: int
    member_ids: tuple[int, ...] = ()

    def allows(self, user_id: int) -> bool:
        return self.owner_id == user_id or user_id in self.member_ids


@dataclass(frozen=True)
class BoardList:
    """Summary: Represents a named column on a board.

    Importance: Lists are the targets of move suggestions.
    Alternatives: Model columns as a fixed status enum.
    """

    id: int
    title: str
    board_id: int
    position: int = 0


@dataclass(frozen=True)
class Card:
    """Summary: Represents a unit of work on a board.

    Importance: Cards are the subjects of every recommendation.
    Alternatives: Store cards as free-form documents.
    """

    id: int
    title: str
    list_id: int
    board_id: int
    description: str | None = None
    member_ids: tuple[int, ...] = ()
    due_date: date | None = None
    position: int = 0


@dataclass(frozen=True)
class CardPatch:
    """Summary: Explicit set of card fields an update may change.

    Importance: Only recognized fields are applied; None leaves a field untouched.
    Alternatives: Apply arbitrary dictionaries to stored records.
    """

    title: str | None = None
    description: str | None = None
    clear_description: bool = False
    list_id: int | None = None
    due_date: date | None = None
    clear_due_date: bool = False
    position: int | None = None
    member_ids: tuple[int, ...] | None = None

    def is_empty(self) -> bool:
        return (
            self.title is None
            and self.description is None
            and not self.clear_description
            and self.list_id is None
            and self.due_date is None
            and not self.clear_due_date
            and self.position is None
            and self.member_ids is None
        )


@dataclass(frozen=True)
class ListPatch:
    """Summary: Explicit set of list fields an update may change."""

    title: str | None = None
    position: int | None = None


@dataclass(frozen=True)
class RelatedCard:
    id: int
    title: str


@dataclass(frozen=True)
class DueDateRecommendation:
    """Summary: Suggests a due date for a card that has none.

    Importance: Surfaces deadlines implied by the card text.
    Alternatives: Ask users to set every due date manually.
    """

    card_id: int
    card_title: str
    suggested_date: date
    reason: str

    type = "due_date"

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "cardId": self.card_id,
            "cardTitle": self.card_title,
            "suggestedDate": self.suggested_date.isoformat(),
            "reason": self.reason,
        }


@dataclass(frozen=True)
class MoveCardRecommendation:
    """Summary: Suggests moving a card to the list matching its status keywords.

    Importance: Keeps the board in step with what card text says about progress.
    Alternatives: Track status in a dedicated field instead of list placement.
    """

    card_id: int
    card_title: str
    from_list: str
    to_list: str
    to_list_id: int
    reason: str

    type = "move_card"

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "cardId": self.card_id,
            "cardTitle": self.card_title,
            "fromList": self.from_list,
            "toList": self.to_list,
            "toListId": self.to_list_id,
            "reason": self.reason,
        }


@dataclass(frozen=True)
class RelatedCardsRecommendation:
    """Summary: Points at cards sharing vocabulary or members with a card.

    Importance: Helps collaborators spot duplicated or connected work.
    Alternatives: Require explicit card links.
    """

    card_id: int
    card_title: str
    related_cards: tuple[RelatedCard, ...]
    reason: str

    type = "related_cards"

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "cardId": self.card_id,
            "cardTitle": self.card_title,
            "relatedCards": [{"id": card.id, "title": card.title} for card in self.related_cards],
            "reason": self.reason,
        }


Recommendation = Union[DueDateRecommendation, MoveCardRecommendation, RelatedCardsRecommendation]


@dataclass(frozen=True)
class Member:
    """Summary: Display details for a board or card member.

    Importance: Clients render names and emails without a second lookup.
    Alternatives: Return bare user IDs and let clients resolve them.
    """

    id: int
    display_name: str
    email: str


@dataclass(frozen=True)
class ListView:
    """Summary: A list together with the cards nested under it."""

    list: BoardList
    cards: tuple[Card, ...]


@dataclass(frozen=True)
class BoardView:
    """Summary: Materialized board with position-ordered lists and their cards.

    Importance: Single read model consumed by the API and the CLI.
    Alternatives: Let clients join lists and cards themselves.
    """

    board: Board
    lists: tuple[ListView, ...]
    users: tuple[Member, ...] = ()

    @property
    def members(self) -> tuple[Member, ...]:
        return self.members_of(self.board.member_ids)

    def members_of(self, user_ids: tuple[int, ...]) -> tuple[Member, ...]:
        """Summary: Resolve user IDs to member details, keeping their order.

        Importance: IDs without a user record are left out.
        """

        by_id = {user.id: user for user in self.users}
        return tuple(by_id[user_id] for user_id in user_ids if user_id in by_id)
