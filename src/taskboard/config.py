"""Summary: Application configuration for Taskboard.

Importance: Centralizes environment, .env, and config defaults for consistent behavior.
Alternatives: Use a dedicated settings library like Pydantic Settings.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from dataclasses import dataclass

from taskboard.classifier import DEFAULT_KEYWORDS, KeywordSets


@dataclass(frozen=True)
class AppConfig:
    """Summary: Holds configuration values for storage, the API, and the suggestion engine.

    Importance: Ensures all services derive settings from a single source of truth.
    Alternatives: Store settings in a shared config file and parse at startup.
    """

    db_path: str
    api_host: str
    api_port: int
    default_user_name: str
    default_user_email: str
    token_secret: str
    related_cards_limit: int = 0
    urgent_keywords: tuple[str, ...] = DEFAULT_KEYWORDS.urgent
    done_keywords: tuple[str, ...] = DEFAULT_KEYWORDS.done
    in_progress_keywords: tuple[str, ...] = DEFAULT_KEYWORDS.in_progress
    todo_keywords: tuple[str, ...] = DEFAULT_KEYWORDS.todo

    @staticmethod
    def from_env() -> "AppConfig":
        """Summary: Build configuration from defaults, .env, and environment.

        Importance: Keeps all variables defined in config defaults while allowing overrides.
        Alternatives: Parse only environment variables without a defaults file.
        """

        defaults = load_defaults(Path("config") / "defaults.json")
        load_dotenv(Path(".env"))
        return AppConfig(
            db_path=os.getenv("TASKBOARD_DB_PATH", defaults["db_path"]),
            api_host=os.getenv("TASKBOARD_API_HOST", defaults["api_host"]),
            api_port=int(os.getenv("TASKBOARD_API_PORT", defaults["api_port"])),
            default_user_name=os.getenv(
                "TASKBOARD_DEFAULT_USER_NAME", defaults["default_user_name"]
            ),
            default_user_email=os.getenv(
                "TASKBOARD_DEFAULT_USER_EMAIL", defaults["default_user_email"]
            ),
            token_secret=os.getenv("TASKBOARD_TOKEN_SECRET", defaults["token_secret"]),
            related_cards_limit=parse_limit(
                os.getenv("TASKBOARD_RELATED_CARDS_LIMIT", defaults["related_cards_limit"])
            ),
            urgent_keywords=split_keywords(
                os.getenv("TASKBOARD_URGENT_KEYWORDS", defaults["urgent_keywords"])
            ),
            done_keywords=split_keywords(
                os.getenv("TASKBOARD_DONE_KEYWORDS", defaults["done_keywords"])
            ),
            in_progress_keywords=split_keywords(
                os.getenv("TASKBOARD_IN_PROGRESS_KEYWORDS", defaults["in_progress_keywords"])
            ),
            todo_keywords=split_keywords(
                os.getenv("TASKBOARD_TODO_KEYWORDS", defaults["todo_keywords"])
            ),
        )

    def keyword_sets(self) -> KeywordSets:
        """Summary: Build the classifier keyword tables from configured vocabularies.

        Importance: Horizon phrases stay fixed; status and urgency words are tunable.
        Alternatives: Hardcode every keyword in the classifier.
        """

        return KeywordSets(
            urgent=self.urgent_keywords,
            done=self.done_keywords,
            in_progress=self.in_progress_keywords,
            todo=self.todo_keywords,
        )


def parse_limit(raw: str) -> int:
    """Summary: Parse the related-card cap, where 0 means unlimited.

    Importance: A negative cap is a configuration mistake and fails at startup.
    Alternatives: Clamp negative values to zero.
    """

    limit = int(raw)
    if limit < 0:
        raise ValueError(f"Related card limit must be 0 or greater, got {limit}")
    return limit


def split_keywords(raw: str) -> tuple[str, ...]:
    """Summary: Parse a comma-separated keyword list.

    Importance: Keyword overrides come from flat environment strings.
    Alternatives: Require JSON arrays in environment variables.
    """

    return tuple(keyword.strip().lower() for keyword in raw.split(",") if keyword.strip())


def load_defaults(path: Path) -> dict[str, str]:
    """Summary: Load configuration defaults from JSON.

    Importance: Ensures all variables exist in a single config file.
    Alternatives: Inline defaults in the AppConfig initializer.
    """

    if not path.exists():
        raise FileNotFoundError(f"Defaults file not found: {path}")
    return json.loads(path.read_text(encoding="utf-8"))


def load_dotenv(path: Path) -> None:
    """Summary: Load key-value pairs from a .env file into the environment.

    Importance: Keeps secrets out of code while supporting local workflows.
    Alternatives: Use python-dotenv or OS-specific secret stores.
    """

    if not path.exists():
        return
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        os.environ.setdefault(key.strip(), value.strip())
