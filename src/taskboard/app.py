"""Summary: Application factory wiring core services.

Importance: Centralizes dependency creation for the CLI and the API.
Alternatives: Instantiate services manually in each entrypoint.
"""

from __future__ import annotations

from dataclasses import dataclass

from taskboard.classifier import KeywordClassifier
from taskboard.config import AppConfig
from taskboard.models import User
from taskboard.recommendations import RecommendationEngine
from taskboard.services import (
    ApiKeyService,
    BoardService,
    CardService,
    ListService,
    RecommendationService,
    UserService,
)
from taskboard.storage.sqlite_store import SqliteStore


@dataclass(frozen=True)
class AppContext:
    """Summary: Shared application context for building user services.

    Importance: Reuses storage and the suggestion engine across user-bound services.
    Alternatives: Rebuild dependencies for every request.
    """

    store: SqliteStore
    engine: RecommendationEngine
    config: AppConfig

    def services_for_user(self, user_id: int) -> "AppServices":
        """Summary: Build user-scoped services from shared context.

        Importance: Every board operation runs on behalf of one requester.
        Alternatives: Pass the requester to each service call.
        """

        return AppServices(
            boards=BoardService(store=self.store, user_id=user_id),
            lists=ListService(store=self.store, user_id=user_id),
            cards=CardService(store=self.store, user_id=user_id),
            recommendations=RecommendationService(
                store=self.store, engine=self.engine, user_id=user_id
            ),
            users=UserService(store=self.store),
            api_keys=self.api_keys(),
            store=self.store,
            user_id=user_id,
        )

    def api_keys(self) -> ApiKeyService:
        return ApiKeyService(store=self.store, token_secret=self.config.token_secret)


@dataclass(frozen=True)
class AppServices:
    """Summary: Bundle of core services for one requesting user.

    Importance: Simplifies passing dependencies to UI or API layers.
    Alternatives: Use a dependency injection container.
    """

    boards: BoardService
    lists: ListService
    cards: CardService
    recommendations: RecommendationService
    users: UserService
    api_keys: ApiKeyService
    store: SqliteStore
    user_id: int


def build_engine(config: AppConfig) -> RecommendationEngine:
    """Summary: Build the suggestion engine from configuration.

    Importance: Keyword tables and the related-card cap come from config.
    Alternatives: Use module-level defaults everywhere.
    """

    return RecommendationEngine(
        classifier=KeywordClassifier(config.keyword_sets()),
        related_limit=config.related_cards_limit or None,
    )


def build_context(config: AppConfig) -> AppContext:
    """Summary: Build shared context for user-scoped services.

    Importance: Reuses storage and the engine across requests.
    Alternatives: Construct dependencies separately per request.
    """

    store = SqliteStore(config.db_path)
    store.initialize()
    return AppContext(store=store, engine=build_engine(config), config=config)


def build_services(config: AppConfig) -> AppServices:
    """Summary: Build core services for the configured default user.

    Importance: Provides a single construction path for the CLI.
    Alternatives: Require a user argument on every command.
    """

    context = build_context(config)
    user = User(display_name=config.default_user_name, email=config.default_user_email)
    user_id = context.store.ensure_user(user)
    return context.services_for_user(user_id)
