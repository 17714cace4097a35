"""Summary: Keyword classification of card text.

Importance: Turns free text into the urgency, horizon, and status signals the suggesters use.
Alternatives: Use an LLM-based classifier for higher accuracy.
"""

from __future__ import annotations

from dataclasses import dataclass

STATUS_DONE = "done"
STATUS_IN_PROGRESS = "inprogress"
STATUS_TODO = "todo"

HORIZON_WEEK = "week"
HORIZON_TOMORROW = "tomorrow"


@dataclass(frozen=True)
class KeywordSets:
    """Summary: Immutable keyword tables driving classification.

    Importance: Keeps the classifier pure and lets configuration swap vocabularies.
    Alternatives: Store keyword lists on each board.
    """

    urgent: tuple[str, ...] = ("urgent", "asap")
    week: tuple[str, ...] = ("this week",)
    tomorrow: tuple[str, ...] = ("tomorrow",)
    done: tuple[str, ...] = ("completed", "fixed", "finished", "done", "shipped")
    in_progress: tuple[str, ...] = ("started", "working", "ongoing", "current")
    todo: tuple[str, ...] = ("plan", "idea", "backlog")


DEFAULT_KEYWORDS = KeywordSets()


@dataclass(frozen=True)
class TextSignal:
    """Summary: Result of classifying one piece of text along every axis."""

    urgent: bool
    horizon: str | None
    status: str | None


@dataclass(frozen=True)
class KeywordClassifier:
    """Summary: Substring-based classifier over fixed keyword sets.

    Importance: Offers deterministic, fast classification without AI.
    Alternatives: Use a supervised ML classifier.
    """

    keywords: KeywordSets = DEFAULT_KEYWORDS

    def classify(self, text: str) -> TextSignal:
        """Summary: Classify lowercased text along urgency, horizon, and status.

        Importance: One pass feeds both the due-date and list-movement suggesters.
        Alternatives: Let each suggester scan the text on its own.
        """

        return TextSignal(
            urgent=_contains_any(text, self.keywords.urgent),
            horizon=self.horizon(text),
            status=self.status(text),
        )

    def horizon(self, text: str) -> str | None:
        if _contains_any(text, self.keywords.week):
            return HORIZON_WEEK
        if _contains_any(text, self.keywords.tomorrow):
            return HORIZON_TOMORROW
        return None

    def status(self, text: str) -> str | None:
        """Summary: Return the first matching status in done, in-progress, todo order."""

        if _contains_any(text, self.keywords.done):
            return STATUS_DONE
        if _contains_any(text, self.keywords.in_progress):
            return STATUS_IN_PROGRESS
        if _contains_any(text, self.keywords.todo):
            return STATUS_TODO
        return None


def card_text(title: str, description: str | None) -> str:
    """Summary: Build the lowercased text a card is classified on."""

    return f"{title} {description or ''}".lower()


def _contains_any(text: str, keywords: tuple[str, ...]) -> bool:
    return any(keyword in text for keyword in keywords)
