"""Summary: SQLite storage implementation for Taskboard.

Importance: Provides a local-first persistence layer for boards, lists, and cards.
Alternatives: Use an ORM or an external database immediately.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Iterable, Iterator

from taskboard.models import Board, BoardList, Card, CardPatch, ListPatch, User


@dataclass(frozen=True)
class StoredUser:
    """Summary: User record with database identifier.

    Importance: Owners and members reference users by ID.
    Alternatives: Use email addresses as natural keys.
    """

    id: int
    display_name: str
    email: str


class SqliteStore:
    """Summary: SQLite-backed storage for Taskboard.

    Importance: Enables local-first persistence with minimal dependencies.
    Alternatives: Use Postgres and SQLAlchemy from day one.
    """

    def __init__(self, db_path: str) -> None:
        """Summary: Initialize the storage with a database path.

        Importance: Allows configurable database location per environment.
        Alternatives: Hardcode a default path in the class.
        """

        self._db_path = Path(db_path)

    def initialize(self) -> None:
        """Summary: Create tables if they do not exist.

        Importance: Ensures the database is ready before any board workflow.
        Alternatives: Run migrations using a dedicated migration tool.
        """

        with self._connection() as connection:
            cursor = connection.cursor()
            cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS users (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    display_name TEXT NOT NULL,
                    email TEXT NOT NULL UNIQUE
                )
                """
            )
            cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS api_keys (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id INTEGER NOT NULL,
                    token_hash TEXT NOT NULL UNIQUE,
                    label TEXT,
                    created_at TEXT NOT NULL
                )
                """
            )
            cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS boards (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    title TEXT NOT NULL,
                    owner_id INTEGER NOT NULL
                )
                """
            )
            cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS board_members (
                    board_id INTEGER NOT NULL,
                    user_id INTEGER NOT NULL,
                    PRIMARY KEY (board_id, user_id)
                )
                """
            )
            cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS lists (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    board_id INTEGER NOT NULL,
                    title TEXT NOT NULL,
                    position INTEGER NOT NULL DEFAULT 0
                )
                """
            )
            cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS cards (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    board_id INTEGER NOT NULL,
                    list_id INTEGER NOT NULL,
                    title TEXT NOT NULL,
                    description TEXT,
                    due_date TEXT,
                    position INTEGER NOT NULL DEFAULT 0
                )
                """
            )
            cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS card_members (
                    card_id INTEGER NOT NULL,
                    user_id INTEGER NOT NULL,
                    PRIMARY KEY (card_id, user_id)
                )
                """
            )
            connection.commit()

    def ensure_user(self, user: User) -> int:
        """Summary: Ensure a user exists and return their ID.

        Importance: Provides a stable user record for board ownership.
        Alternatives: Omit user records in single-user mode.
        """

        with self._connection() as connection:
            cursor = connection.cursor()
            cursor.execute(
                "INSERT OR IGNORE INTO users (display_name, email) VALUES (?, ?)",
                (user.display_name, user.email),
            )
            if cursor.rowcount:
                user_id = cursor.lastrowid
            else:
                cursor.execute("SELECT id FROM users WHERE email = ?", (user.email,))
                row = cursor.fetchone()
                user_id = int(row[0]) if row else 0
            connection.commit()
        return int(user_id)

    def get_user(self, user_id: int) -> StoredUser | None:
        with self._connection() as connection:
            cursor = connection.cursor()
            cursor.execute("SELECT id, display_name, email FROM users WHERE id = ?", (user_id,))
            row = cursor.fetchone()
        return StoredUser(*row) if row else None

    def get_users(self, user_ids: Iterable[int]) -> list[StoredUser]:
        """Summary: Fetch several users in one query.

        Importance: The materialized board resolves every member at once.
        Alternatives: Call get_user once per member.
        """

        unique_ids = sorted(set(user_ids))
        if not unique_ids:
            return []
        placeholders = ", ".join("?" for _ in unique_ids)
        with self._connection() as connection:
            cursor = connection.cursor()
            cursor.execute(
                f"SELECT id, display_name, email FROM users WHERE id IN ({placeholders}) ORDER BY id",
                unique_ids,
            )
            rows = cursor.fetchall()
        return [StoredUser(*row) for row in rows]

    def get_user_by_email(self, email: str) -> StoredUser | None:
        """Summary: Fetch a user by email.

        Importance: Invitations address users by email.
        Alternatives: Invite by user ID only.
        """

        with self._connection() as connection:
            cursor = connection.cursor()
            cursor.execute("SELECT id, display_name, email FROM users WHERE email = ?", (email,))
            row = cursor.fetchone()
        return StoredUser(*row) if row else None

    def create_api_key(
        self, user_id: int, token_hash: str, label: str | None, created_at: str
    ) -> int:
        """Summary: Persist a hashed API key for a user."""

        with self._connection() as connection:
            cursor = connection.cursor()
            cursor.execute(
                "INSERT INTO api_keys (user_id, token_hash, label, created_at) VALUES (?, ?, ?, ?)",
                (user_id, token_hash, label, created_at),
            )
            key_id = cursor.lastrowid
            connection.commit()
        return int(key_id)

    def get_user_id_by_api_key(self, token_hash: str) -> int | None:
        with self._connection() as connection:
            cursor = connection.cursor()
            cursor.execute("SELECT user_id FROM api_keys WHERE token_hash = ?", (token_hash,))
            row = cursor.fetchone()
        return int(row[0]) if row else None

    def create_board(self, title: str, owner_id: int) -> int:
        """Summary: Create a board and return its ID.

        Importance: Boards are the unit of ownership and access.
        Alternatives: Create boards implicitly with the first list.
        """

        with self._connection() as connection:
            cursor = connection.cursor()
            cursor.execute("INSERT INTO boards (title, owner_id) VALUES (?, ?)", (title, owner_id))
            board_id = cursor.lastrowid
            connection.commit()
        return int(board_id)

    def get_board(self, board_id: int) -> Board | None:
        """Summary: Fetch a board with its member set.

        Importance: Every access check starts from this snapshot.
        Alternatives: Check membership with a single joined query.
        """

        with self._connection() as connection:
            cursor = connection.cursor()
            cursor.execute("SELECT id, title, owner_id FROM boards WHERE id = ?", (board_id,))
            row = cursor.fetchone()
            if not row:
                return None
            member_ids = self._member_ids(cursor, "board_members", "board_id", board_id)
        return Board(id=int(row[0]), title=row[1], owner_id=int(row[2]), member_ids=member_ids)

    def list_boards_for_user(self, user_id: int) -> list[Board]:
        """Summary: List boards the user owns or is a member of."""

        with self._connection() as connection:
            cursor = connection.cursor()
            cursor.execute(
                """
                SELECT id FROM boards
                WHERE owner_id = ?
                   OR id IN (SELECT board_id FROM board_members WHERE user_id = ?)
                ORDER BY id
                """,
                (user_id, user_id),
            )
            board_ids = [int(row[0]) for row in cursor.fetchall()]
        boards = [self.get_board(board_id) for board_id in board_ids]
        return [board for board in boards if board is not None]

    def add_board_member(self, board_id: int, user_id: int) -> None:
        with self._connection() as connection:
            cursor = connection.cursor()
            cursor.execute(
                "INSERT OR IGNORE INTO board_members (board_id, user_id) VALUES (?, ?)",
                (board_id, user_id),
            )
            connection.commit()

    def delete_board(self, board_id: int) -> bool:
        """Summary: Delete a board together with its lists, cards, and memberships.

        Importance: Lists and cards never outlive their board.
        Alternatives: Soft-delete boards with an archived flag.
        """

        with self._connection() as connection:
            cursor = connection.cursor()
            cursor.execute(
                "DELETE FROM card_members WHERE card_id IN (SELECT id FROM cards WHERE board_id = ?)",
                (board_id,),
            )
            cursor.execute("DELETE FROM cards WHERE board_id = ?", (board_id,))
            cursor.execute("DELETE FROM lists WHERE board_id = ?", (board_id,))
            cursor.execute("DELETE FROM board_members WHERE board_id = ?", (board_id,))
            cursor.execute("DELETE FROM boards WHERE id = ?", (board_id,))
            deleted = cursor.rowcount > 0
            connection.commit()
        return deleted

    def create_list(self, board_id: int, title: str, position: int = 0) -> int:
        with self._connection() as connection:
            cursor = connection.cursor()
            cursor.execute(
                "INSERT INTO lists (board_id, title, position) VALUES (?, ?, ?)",
                (board_id, title, position),
            )
            list_id = cursor.lastrowid
            connection.commit()
        return int(list_id)

    def get_list(self, list_id: int) -> BoardList | None:
        with self._connection() as connection:
            cursor = connection.cursor()
            cursor.execute(
                "SELECT id, title, board_id, position FROM lists WHERE id = ?", (list_id,)
            )
            row = cursor.fetchone()
        return BoardList(*row) if row else None

    def list_lists(self, board_id: int) -> list[BoardList]:
        """Summary: Retrieve a board's lists ordered by position.

        Importance: List order drives display and the move-suggestion tie-break.
        Alternatives: Sort lists in the client.
        """

        with self._connection() as connection:
            cursor = connection.cursor()
            cursor.execute(
                """
                SELECT id, title, board_id, position
                FROM lists
                WHERE board_id = ?
                ORDER BY position, id
                """,
                (board_id,),
            )
            rows = cursor.fetchall()
        return [BoardList(*row) for row in rows]

    def update_list(self, list_id: int, patch: ListPatch) -> BoardList | None:
        with self._connection() as connection:
            cursor = connection.cursor()
            if patch.title is not None:
                cursor.execute("UPDATE lists SET title = ? WHERE id = ?", (patch.title, list_id))
            if patch.position is not None:
                cursor.execute(
                    "UPDATE lists SET position = ? WHERE id = ?", (patch.position, list_id)
                )
            connection.commit()
        return self.get_list(list_id)

    def delete_list(self, list_id: int) -> bool:
        """Summary: Delete a list record only.

        Importance: Cards of the list are left in place on the board.
        Alternatives: Cascade the delete to the list's cards.
        """

        with self._connection() as connection:
            cursor = connection.cursor()
            cursor.execute("DELETE FROM lists WHERE id = ?", (list_id,))
            deleted = cursor.rowcount > 0
            connection.commit()
        return deleted

    def create_card(
        self,
        board_id: int,
        list_id: int,
        title: str,
        description: str | None = None,
        position: int = 0,
        member_ids: tuple[int, ...] = (),
        due_date: date | None = None,
    ) -> int:
        """Summary: Create a card and return its ID.

        Importance: Callers must have checked that the list belongs to the board.
        Alternatives: Derive the board from the list inside the store.
        """

        with self._connection() as connection:
            cursor = connection.cursor()
            cursor.execute(
                """
                INSERT INTO cards (board_id, list_id, title, description, due_date, position)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    board_id,
                    list_id,
                    title,
                    description,
                    due_date.isoformat() if due_date else None,
                    position,
                ),
            )
            card_id = int(cursor.lastrowid)
            self._replace_card_members(cursor, card_id, member_ids)
            connection.commit()
        return card_id

    def get_card(self, card_id: int) -> Card | None:
        with self._connection() as connection:
            cursor = connection.cursor()
            cursor.execute(
                """
                SELECT id, title, list_id, board_id, description, due_date, position
                FROM cards
                WHERE id = ?
                """,
                (card_id,),
            )
            row = cursor.fetchone()
            if not row:
                return None
            return self._card_from_row(cursor, row)

    def list_cards(self, board_id: int) -> list[Card]:
        """Summary: Retrieve every card on a board in insertion order.

        Importance: Cards are fetched per board, independent of their list.
        Alternatives: Fetch cards list by list.
        """

        with self._connection() as connection:
            cursor = connection.cursor()
            cursor.execute(
                """
                SELECT id, title, list_id, board_id, description, due_date, position
                FROM cards
                WHERE board_id = ?
                ORDER BY id
                """,
                (board_id,),
            )
            rows = cursor.fetchall()
            return [self._card_from_row(cursor, row) for row in rows]

    def update_card(self, card_id: int, patch: CardPatch) -> Card | None:
        """Summary: Apply the recognized fields of a patch to a card.

        Importance: Fields left as None keep their stored values.
        Alternatives: Replace the whole record on every update.
        """

        assignments: list[str] = []
        values: list[object] = []
        if patch.title is not None:
            assignments.append("title = ?")
            values.append(patch.title)
        if patch.clear_description:
            assignments.append("description = NULL")
        elif patch.description is not None:
            assignments.append("description = ?")
            values.append(patch.description)
        if patch.list_id is not None:
            assignments.append("list_id = ?")
            values.append(patch.list_id)
        if patch.clear_due_date:
            assignments.append("due_date = NULL")
        elif patch.due_date is not None:
            assignments.append("due_date = ?")
            values.append(patch.due_date.isoformat())
        if patch.position is not None:
            assignments.append("position = ?")
            values.append(patch.position)
        with self._connection() as connection:
            cursor = connection.cursor()
            if assignments:
                cursor.execute(
                    f"UPDATE cards SET {', '.join(assignments)} WHERE id = ?",
                    (*values, card_id),
                )
            if patch.member_ids is not None:
                self._replace_card_members(cursor, card_id, patch.member_ids)
            connection.commit()
        return self.get_card(card_id)

    def delete_card(self, card_id: int) -> bool:
        with self._connection() as connection:
            cursor = connection.cursor()
            cursor.execute("DELETE FROM card_members WHERE card_id = ?", (card_id,))
            cursor.execute("DELETE FROM cards WHERE id = ?", (card_id,))
            deleted = cursor.rowcount > 0
            connection.commit()
        return deleted

    def _card_from_row(self, cursor: sqlite3.Cursor, row: tuple) -> Card:
        card_id, title, list_id, board_id, description, due_date, position = row
        return Card(
            id=int(card_id),
            title=title,
            list_id=int(list_id),
            board_id=int(board_id),
            description=description,
            member_ids=self._member_ids(cursor, "card_members", "card_id", card_id),
            due_date=date.fromisoformat(due_date) if due_date else None,
            position=int(position),
        )

    def _replace_card_members(
        self, cursor: sqlite3.Cursor, card_id: int, member_ids: tuple[int, ...]
    ) -> None:
        cursor.execute("DELETE FROM card_members WHERE card_id = ?", (card_id,))
        cursor.executemany(
            "INSERT OR IGNORE INTO card_members (card_id, user_id) VALUES (?, ?)",
            [(card_id, member_id) for member_id in member_ids],
        )

    @staticmethod
    def _member_ids(
        cursor: sqlite3.Cursor, table: str, key_column: str, key: int
    ) -> tuple[int, ...]:
        cursor.execute(
            f"SELECT user_id FROM {table} WHERE {key_column} = ? ORDER BY rowid", (key,)
        )
        return tuple(int(row[0]) for row in cursor.fetchall())

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        """Summary: Context manager for SQLite connections.

        Importance: Ensures connections are closed cleanly after use.
        Alternatives: Keep a single long-lived connection.
        """

        connection = sqlite3.connect(self._db_path)
        try:
            yield connection
        finally:
            connection.close()
