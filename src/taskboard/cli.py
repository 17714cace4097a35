"""Summary: Command-line interface for Taskboard.

Importance: Provides a local-first entry point for board workflows and suggestions.
Alternatives: Build a web UI or desktop client first.
"""

from __future__ import annotations

import argparse
import logging

from taskboard.app import AppServices, build_services
from taskboard.config import AppConfig
from taskboard.models import DueDateRecommendation, MoveCardRecommendation, Recommendation
from taskboard.services import AccessError, NotFoundError


def build_parser() -> argparse.ArgumentParser:
    """Summary: Build the CLI argument parser.

    Importance: Defines supported commands for local operation.
    Alternatives: Use a CLI framework like Typer or Click.
    """

    parser = argparse.ArgumentParser(description="Taskboard CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    create_user = subparsers.add_parser("create-user", help="Create a user")
    create_user.add_argument("display_name", type=str)
    create_user.add_argument("email", type=str)

    create_api_key = subparsers.add_parser("create-api-key", help="Issue an API key for a user")
    create_api_key.add_argument("email", type=str)
    create_api_key.add_argument("--label", type=str, default=None)

    create_board = subparsers.add_parser("create-board", help="Create a board")
    create_board.add_argument("title", type=str)

    subparsers.add_parser("list-boards", help="List boards you own or belong to")

    invite = subparsers.add_parser("invite", help="Invite a user to a board")
    invite.add_argument("board_id", type=int)
    invite.add_argument("email", type=str)

    add_list = subparsers.add_parser("add-list", help="Add a list to a board")
    add_list.add_argument("board_id", type=int)
    add_list.add_argument("title", type=str)
    add_list.add_argument("--position", type=int, default=0)

    add_card = subparsers.add_parser("add-card", help="Add a card to a list")
    add_card.add_argument("board_id", type=int)
    add_card.add_argument("list_id", type=int)
    add_card.add_argument("title", type=str)
    add_card.add_argument("--description", type=str, default=None)
    add_card.add_argument("--member", type=int, action="append", default=[])

    show_board = subparsers.add_parser("show-board", help="Show a board with its lists and cards")
    show_board.add_argument("board_id", type=int)

    recommend = subparsers.add_parser("recommend", help="Show suggestions for a board")
    recommend.add_argument("board_id", type=int)

    return parser


def format_recommendation(recommendation: Recommendation) -> str:
    """Summary: Render a recommendation as one line of text."""

    if isinstance(recommendation, DueDateRecommendation):
        detail = f"due {recommendation.suggested_date.isoformat()}"
    elif isinstance(recommendation, MoveCardRecommendation):
        detail = f"move {recommendation.from_list} -> {recommendation.to_list}"
    else:
        detail = "related to " + ", ".join(
            f"#{card.id} {card.title}" for card in recommendation.related_cards
        )
    return f"{recommendation.type}: #{recommendation.card_id} {recommendation.card_title}: {detail}"


def run_cli() -> None:
    """Summary: Execute CLI commands based on arguments.

    Importance: Drives board workflows without a UI.
    Alternatives: Invoke services via an HTTP API.
    """

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    parser = build_parser()
    args = parser.parse_args()
    config = AppConfig.from_env()
    services = build_services(config)

    try:
        _dispatch(args, services)
    except (NotFoundError, AccessError, ValueError) as exc:
        parser.exit(1, f"error: {exc}\n")


def _dispatch(args: argparse.Namespace, services: AppServices) -> None:
    if args.command == "create-user":
        user_id = services.users.create_user(args.display_name, args.email)
        print(f"User {user_id} ({args.email}).")
        return

    if args.command == "create-api-key":
        user = services.users.get_user_by_email(args.email)
        if user is None:
            raise NotFoundError("User not found")
        key_id, token = services.api_keys.create_api_key(user.id, label=args.label)
        print(f"Created API key {key_id}: {token}")
        return

    if args.command == "create-board":
        board = services.boards.create_board(args.title)
        print(f"Created board {board.id} ({board.title}).")
        return

    if args.command == "list-boards":
        for board in services.boards.list_boards():
            print(f"{board.id}: {board.title}")
        return

    if args.command == "invite":
        services.boards.invite_member(args.board_id, args.email)
        print(f"Invited {args.email}.")
        return

    if args.command == "add-list":
        board_list = services.lists.create_list(args.board_id, args.title, args.position)
        print(f"Created list {board_list.id} ({board_list.title}).")
        return

    if args.command == "add-card":
        card = services.cards.create_card(
            board_id=args.board_id,
            list_id=args.list_id,
            title=args.title,
            description=args.description,
            member_ids=tuple(args.member),
        )
        print(f"Created card {card.id} ({card.title}).")
        return

    if args.command == "show-board":
        view = services.boards.get_board(args.board_id)
        print(f"{view.board.id}: {view.board.title}")
        if view.members:
            print("  members: " + ", ".join(member.display_name for member in view.members))
        for item in view.lists:
            print(f"  [{item.list.id}] {item.list.title}")
            for card in item.cards:
                due = f" (due {card.due_date.isoformat()})" if card.due_date else ""
                print(f"    #{card.id} {card.title}{due}")
        return

    if args.command == "recommend":
        recommendations = services.recommendations.get_recommendations(args.board_id)
        if not recommendations:
            print("No suggestions.")
            return
        for recommendation in recommendations:
            print(format_recommendation(recommendation))
        return


if __name__ == "__main__":
    run_cli()
