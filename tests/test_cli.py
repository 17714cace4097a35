"""Summary: Tests for the command-line interface.

Importance: Ensures commands parse and suggestions render readably.
Alternatives: Exercise the CLI only by hand.
"""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path

import pytest

from taskboard.cli import build_parser, format_recommendation, run_cli
from taskboard.models import (
    DueDateRecommendation,
    MoveCardRecommendation,
    RelatedCard,
    RelatedCardsRecommendation,
)


def test_parser_accepts_card_members() -> None:
    """Summary: Repeated --member flags collect member IDs."""

    args = build_parser().parse_args(["add-card", "1", "2", "Task", "--member", "3", "--member", "4"])
    assert args.command == "add-card"
    assert args.member == [3, 4]


def test_format_recommendation_variants() -> None:
    """Summary: Each recommendation kind renders on one line.

    Importance: CLI users read suggestions without JSON tooling.
    Alternatives: Print raw dictionaries.
    """

    due = DueDateRecommendation(1, "Fix bug", date(2026, 1, 2), "reason")
    move = MoveCardRecommendation(1, "Fix bug", "To Do", "Done", 3, "reason")
    related = RelatedCardsRecommendation(1, "Fix bug", (RelatedCard(2, "Bug triage"),), "reason")
    assert format_recommendation(due) == "due_date: #1 Fix bug: due 2026-01-02"
    assert format_recommendation(move) == "move_card: #1 Fix bug: move To Do -> Done"
    assert format_recommendation(related) == "related_cards: #1 Fix bug: related to #2 Bug triage"


def test_run_cli_board_workflow(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    """Summary: Create a board, list, and card, then print suggestions.

    Importance: Confirms the CLI wires configuration, storage, and the engine.
    Alternatives: Test services only.
    """

    monkeypatch.chdir(tmp_path)
    (tmp_path / "config").mkdir()
    (tmp_path / "config" / "defaults.json").write_text(
        json.dumps(
            {
                "db_path": str(tmp_path / "cli.db"),
                "api_host": "127.0.0.1",
                "api_port": "8000",
                "default_user_name": "Local User",
                "default_user_email": "local@taskboard",
                "token_secret": "",
                "related_cards_limit": "0",
                "urgent_keywords": "urgent,asap",
                "done_keywords": "completed,fixed,finished,done,shipped",
                "in_progress_keywords": "started,working,ongoing,current",
                "todo_keywords": "plan,idea,backlog",
            }
        ),
        encoding="utf-8",
    )
    monkeypatch.delenv("TASKBOARD_DB_PATH", raising=False)
    for argv in (
        ["taskboard", "create-board", "Launch"],
        ["taskboard", "add-list", "1", "Inbox"],
        ["taskboard", "add-card", "1", "1", "Urgent fix"],
        ["taskboard", "recommend", "1"],
    ):
        monkeypatch.setattr("sys.argv", argv)
        run_cli()
    output = capsys.readouterr().out
    assert "Created board 1 (Launch)." in output
    assert "due_date: #1 Urgent fix: due" in output

    monkeypatch.setattr("sys.argv", ["taskboard", "recommend", "42"])
    with pytest.raises(SystemExit) as excinfo:
        run_cli()
    assert excinfo.value.code == 1
