"""Summary: FastAPI application for Taskboard.

Importance: Exposes HTTP endpoints for boards, lists, cards, and recommendations.
Alternatives: Use a CLI-only workflow or a different web framework.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

from fastapi import Depends, FastAPI, Header, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from taskboard.app import AppServices, build_context
from taskboard.config import AppConfig
from taskboard.models import Board, BoardList, BoardView, Card, CardPatch, ListPatch, Member
from taskboard.services import AccessError, NotFoundError


class BoardCreateRequest(BaseModel):
    """Summary: Request payload for board creation."""

    title: str = ""


class InviteRequest(BaseModel):
    """Summary: Request payload for inviting a user to a board.

    Importance: Invitations address users by email.
    Alternatives: Invite by user ID.
    """

    email: str


class ListCreateRequest(BaseModel):
    """Summary: Request payload for list creation."""

    board_id: int
    title: str = ""
    position: int = 0


class ListUpdateRequest(BaseModel):
    """Summary: Request payload for list updates.

    Importance: Unknown fields are rejected instead of silently stored.
    Alternatives: Accept arbitrary fields and drop the unknown ones.
    """

    model_config = ConfigDict(extra="forbid")

    title: str | None = None
    position: int | None = None


class CardCreateRequest(BaseModel):
    """Summary: Request payload for card creation."""

    board_id: int
    list_id: int
    title: str = ""
    description: str | None = None
    member_ids: list[int] = Field(default_factory=list)
    position: int = 0


class CardUpdateRequest(BaseModel):
    """Summary: Request payload for card updates.

    Importance: An explicit null due_date clears it; omitted fields stay unchanged.
    Alternatives: Require full card replacement on every update.
    """

    model_config = ConfigDict(extra="forbid")

    title: str | None = None
    description: str | None = None
    list_id: int | None = None
    due_date: date | None = None
    position: int | None = None
    member_ids: list[int] | None = None


class ApplySuggestionRequest(BaseModel):
    """Summary: Request payload for accepting a recommendation.

    Importance: Clients may post back a recommendation as received.
    Alternatives: Require a dedicated patch format.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    suggested_date: date | None = Field(default=None, alias="suggestedDate")
    to_list_id: int | None = Field(default=None, alias="toListId")
    position: int | None = None


def create_app(config: AppConfig) -> FastAPI:
    """Summary: Create a FastAPI app wired to Taskboard services.

    Importance: Ensures the API layer shares the same configuration and storage.
    Alternatives: Instantiate services globally outside the factory.
    """

    if not logging.getLogger().handlers:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    app = FastAPI(title="Taskboard API", version="0.1.0")
    context = build_context(config)

    @app.exception_handler(NotFoundError)
    def handle_not_found(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(AccessError)
    def handle_access(request: Request, exc: AccessError) -> JSONResponse:
        return JSONResponse(status_code=401, content={"detail": str(exc)})

    @app.exception_handler(ValueError)
    def handle_invalid(request: Request, exc: ValueError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    def current_services(x_api_key: str | None = Header(default=None)) -> AppServices:
        """Summary: Resolve the requesting user from the API key header.

        Importance: Every board operation is performed on behalf of a known user.
        Alternatives: Use OAuth or session-based authentication.
        """

        if not x_api_key:
            raise HTTPException(status_code=401, detail="Missing API key")
        user_id = context.api_keys().resolve_user_id(x_api_key)
        if user_id is None:
            raise HTTPException(status_code=401, detail="Invalid API key")
        return context.services_for_user(user_id)

    @app.get("/health")
    def health() -> dict[str, str]:
        """Summary: Health check endpoint.

        Importance: Supports uptime checks in local and cloud deployments.
        Alternatives: Use a metrics endpoint only.
        """

        return {"status": "ok"}

    @app.get("/boards")
    def list_boards(services: AppServices = Depends(current_services)) -> list[dict[str, Any]]:
        return [_board_dict(board) for board in services.boards.list_boards()]

    @app.post("/boards")
    def create_board(
        payload: BoardCreateRequest, services: AppServices = Depends(current_services)
    ) -> dict[str, Any]:
        return _board_dict(services.boards.create_board(payload.title))

    @app.get("/boards/{board_id}")
    def get_board(board_id: int, services: AppServices = Depends(current_services)) -> dict[str, Any]:
        """Summary: Return a board with its ordered lists and nested cards.

        Importance: Single read that renders a whole board.
        Alternatives: Separate list and card endpoints per board.
        """

        return _board_view_dict(services.boards.get_board(board_id))

    @app.delete("/boards/{board_id}")
    def delete_board(board_id: int, services: AppServices = Depends(current_services)) -> dict[str, Any]:
        services.boards.delete_board(board_id)
        return {"id": board_id}

    @app.post("/boards/{board_id}/invite")
    def invite(
        board_id: int, payload: InviteRequest, services: AppServices = Depends(current_services)
    ) -> dict[str, Any]:
        return _board_dict(services.boards.invite_member(board_id, payload.email))

    @app.get("/boards/{board_id}/recommendations")
    def recommendations(
        board_id: int, services: AppServices = Depends(current_services)
    ) -> list[dict[str, Any]]:
        """Summary: Compute suggestions for every card on a board.

        Importance: Field names are part of the client contract.
        Alternatives: Stream suggestions per card.
        """

        return [
            recommendation.to_dict()
            for recommendation in services.recommendations.get_recommendations(board_id)
        ]

    @app.post("/lists")
    def create_list(
        payload: ListCreateRequest, services: AppServices = Depends(current_services)
    ) -> dict[str, Any]:
        board_list = services.lists.create_list(payload.board_id, payload.title, payload.position)
        return _list_dict(board_list)

    @app.put("/lists/{list_id}")
    def update_list(
        list_id: int, payload: ListUpdateRequest, services: AppServices = Depends(current_services)
    ) -> dict[str, Any]:
        patch = ListPatch(title=payload.title, position=payload.position)
        return _list_dict(services.lists.update_list(list_id, patch))

    @app.delete("/lists/{list_id}")
    def delete_list(list_id: int, services: AppServices = Depends(current_services)) -> dict[str, Any]:
        services.lists.delete_list(list_id)
        return {"id": list_id}

    @app.post("/cards")
    def create_card(
        payload: CardCreateRequest, services: AppServices = Depends(current_services)
    ) -> dict[str, Any]:
        card = services.cards.create_card(
            board_id=payload.board_id,
            list_id=payload.list_id,
            title=payload.title,
            description=payload.description,
            member_ids=tuple(payload.member_ids),
            position=payload.position,
        )
        return _card_dict(card)

    @app.put("/cards/{card_id}")
    def update_card(
        card_id: int, payload: CardUpdateRequest, services: AppServices = Depends(current_services)
    ) -> dict[str, Any]:
        patch = CardPatch(
            title=payload.title,
            description=payload.description,
            clear_description=(
                "description" in payload.model_fields_set and payload.description is None
            ),
            list_id=payload.list_id,
            due_date=payload.due_date,
            clear_due_date="due_date" in payload.model_fields_set and payload.due_date is None,
            position=payload.position,
            member_ids=tuple(payload.member_ids) if payload.member_ids is not None else None,
        )
        return _card_dict(services.cards.update_card(card_id, patch))

    @app.post("/cards/{card_id}/apply-suggestion")
    def apply_suggestion(
        card_id: int, payload: ApplySuggestionRequest, services: AppServices = Depends(current_services)
    ) -> dict[str, Any]:
        """Summary: Accept a due-date or move recommendation for a card.

        Importance: Closes the loop between suggestions and board state.
        Alternatives: Require clients to issue a generic card update.
        """

        patch = CardPatch(
            due_date=payload.suggested_date,
            list_id=payload.to_list_id,
            position=payload.position,
        )
        return _card_dict(services.cards.apply_suggestion(card_id, patch))

    @app.delete("/cards/{card_id}")
    def delete_card(card_id: int, services: AppServices = Depends(current_services)) -> dict[str, Any]:
        services.cards.delete_card(card_id)
        return {"id": card_id}

    return app


def _board_dict(board: Board) -> dict[str, Any]:
    return {
        "id": board.id,
        "title": board.title,
        "owner_id": board.owner_id,
        "member_ids": list(board.member_ids),
    }


def _list_dict(board_list: BoardList) -> dict[str, Any]:
    return {
        "id": board_list.id,
        "title": board_list.title,
        "board_id": board_list.board_id,
        "position": board_list.position,
    }


def _card_dict(card: Card) -> dict[str, Any]:
    return {
        "id": card.id,
        "title": card.title,
        "description": card.description,
        "list_id": card.list_id,
        "board_id": card.board_id,
        "member_ids": list(card.member_ids),
        "due_date": card.due_date.isoformat() if card.due_date else None,
        "position": card.position,
    }


def _member_dicts(members: tuple[Member, ...]) -> list[dict[str, Any]]:
    return [
        {"id": member.id, "display_name": member.display_name, "email": member.email}
        for member in members
    ]


def _board_view_dict(view: BoardView) -> dict[str, Any]:
    data = _board_dict(view.board)
    data["members"] = _member_dicts(view.members)
    data["lists"] = [
        {
            **_list_dict(item.list),
            "cards": [
                {**_card_dict(card), "members": _member_dicts(view.members_of(card.member_ids))}
                for card in item.cards
            ],
        }
        for item in view.lists
    ]
    return data
