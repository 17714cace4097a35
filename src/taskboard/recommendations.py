"""Summary: Heuristic suggestion engine for board cards.

Importance: Produces due-date, list-move, and related-card suggestions from board content.
Alternatives: Use AI-based recommendations or user-defined automation rules.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Callable, Iterable, Sequence

from taskboard.classifier import (
    HORIZON_TOMORROW,
    HORIZON_WEEK,
    STATUS_TODO,
    KeywordClassifier,
    card_text,
)
from taskboard.models import (
    BoardList,
    Card,
    DueDateRecommendation,
    MoveCardRecommendation,
    Recommendation,
    RelatedCard,
    RelatedCardsRecommendation,
)


logger = logging.getLogger(__name__)

DUE_DATE_REASON = "Based on keywords in title/description"
MOVE_CARD_REASON = "Based on status keywords"
RELATED_CARDS_REASON = "Shared keywords or members"

MIN_SHARED_TOKEN_LENGTH = 4

_WHITESPACE = re.compile(r"\s")


def suggest_due_date(
    classifier: KeywordClassifier, title: str, description: str | None, today: date
) -> date | None:
    """Summary: Suggest a due date from urgency and horizon keywords.

    Importance: Urgency wins over "this week", which wins over "tomorrow".
    Alternatives: Default every card to a fixed offset.
    """

    signal = classifier.classify(card_text(title, description))
    if signal.urgent:
        return today + timedelta(days=1)
    if signal.horizon == HORIZON_WEEK:
        return today + timedelta(days=7)
    if signal.horizon == HORIZON_TOMORROW:
        return today + timedelta(days=1)
    return None


def suggest_list_movement(
    classifier: KeywordClassifier,
    title: str,
    description: str | None,
    lists: Sequence[BoardList],
) -> BoardList | None:
    """Summary: Suggest the list whose title matches the card's status keywords.

    Importance: The first list in board order whose name matches wins.
    Alternatives: Map statuses to lists through explicit board settings.
    """

    status = classifier.status(card_text(title, description))
    if status is None:
        return None
    for board_list in lists:
        if _list_matches(board_list.title, status):
            return board_list
    return None


def _list_matches(title: str, status: str) -> bool:
    # "to do" is checked against the unstripped title; the token against the stripped one.
    lowered = title.lower()
    if status in _WHITESPACE.sub("", lowered):
        return True
    return status == STATUS_TODO and "to do" in lowered


def find_related_cards(card: Card, cards: Iterable[Card], limit: int | None = None) -> list[Card]:
    """Summary: Find cards sharing a keyword or a member with the given card.

    Importance: Keyword matching is substring containment of tokens longer than three characters.
    A limit of None or below one returns every match.
    Alternatives: Rank candidates with TF-IDF similarity.
    """

    tokens = [
        token
        for token in card_text(card.title, card.description).split()
        if len(token) >= MIN_SHARED_TOKEN_LENGTH
    ]
    members = set(card.member_ids)
    related: list[Card] = []
    for other in cards:
        if other.id == card.id:
            continue
        other_text = card_text(other.title, other.description)
        shared_keyword = any(token in other_text for token in tokens)
        shared_member = any(member in members for member in other.member_ids)
        if shared_keyword or shared_member:
            related.append(other)
            if limit is not None and 0 < limit <= len(related):
                break
    return related


@dataclass(frozen=True)
class RecommendationEngine:
    """Summary: Runs every suggester over a snapshot of a board's lists and cards.

    Importance: Stateless, so one engine can serve concurrent requests.
    Alternatives: Compute suggestions incrementally as cards change.
    """

    classifier: KeywordClassifier = field(default_factory=KeywordClassifier)
    today: Callable[[], date] = date.today
    related_limit: int | None = None

    def recommend(self, lists: Sequence[BoardList], cards: Sequence[Card]) -> list[Recommendation]:
        """Summary: Build recommendations card by card.

        Importance: Emits due_date, move_card, then related_cards for each card in fetch order.
        Alternatives: Group recommendations by kind.
        """

        today = self.today()
        lists_by_id = {board_list.id: board_list for board_list in lists}
        recommendations: list[Recommendation] = []
        for card in cards:
            if card.due_date is None:
                suggested = suggest_due_date(self.classifier, card.title, card.description, today)
                if suggested is not None:
                    recommendations.append(
                        DueDateRecommendation(
                            card_id=card.id,
                            card_title=card.title,
                            suggested_date=suggested,
                            reason=DUE_DATE_REASON,
                        )
                    )

            current = lists_by_id.get(card.list_id)
            if current is None:
                logger.debug("Card %s has no list on its board; skipping move check.", card.id)
            else:
                target = suggest_list_movement(self.classifier, card.title, card.description, lists)
                if target is not None and target.id != current.id:
                    recommendations.append(
                        MoveCardRecommendation(
                            card_id=card.id,
                            card_title=card.title,
                            from_list=current.title,
                            to_list=target.title,
                            to_list_id=target.id,
                            reason=MOVE_CARD_REASON,
                        )
                    )

            related = find_related_cards(card, cards, limit=self.related_limit)
            if related:
                recommendations.append(
                    RelatedCardsRecommendation(
                        card_id=card.id,
                        card_title=card.title,
                        related_cards=tuple(RelatedCard(id=other.id, title=other.title) for other in related),
                        reason=RELATED_CARDS_REASON,
                    )
                )
        return recommendations
