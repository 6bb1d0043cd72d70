"""
SQLite database integration and simple migration system.

This module provides functions for obtaining a database connection
(``get_connection``), a cursor context manager (``get_cursor``) and
applying migrations on application start (``init_db``).  SQLite is
used as a lightweight embedded database; to switch to another DBMS you
would replace the connection logic and adapt the SQL in
``repositories.wish_repository``.

The migration mechanism stores applied migration versions in the
``migrations`` table and executes new migrations in order.
"""

import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from .config import settings


MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: wishes and the per-user like table
    (
        1,
        """
        -- ``seq`` records insertion order and breaks ordering ties.
        -- Author columns are NULL for anonymous wishes.
        CREATE TABLE IF NOT EXISTS wishes (
            seq INTEGER PRIMARY KEY AUTOINCREMENT,
            id TEXT NOT NULL UNIQUE,
            content TEXT NOT NULL,
            category TEXT NOT NULL,
            is_anonymous INTEGER NOT NULL DEFAULT 0,
            author_id TEXT,
            author_name TEXT,
            author_avatar TEXT,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        );

        -- One row per (wish, user); the primary key keeps likes unique.
        CREATE TABLE IF NOT EXISTS wish_likes (
            wish_id TEXT NOT NULL,
            user_id TEXT NOT NULL,
            created_at TEXT NOT NULL,
            PRIMARY KEY (wish_id, user_id),
            FOREIGN KEY (wish_id) REFERENCES wishes(id)
        );
        """,
    ),
    # Migration 2: indices for the feed filters and orderings
    (
        2,
        """
        CREATE INDEX IF NOT EXISTS idx_wishes_category ON wishes(category);
        CREATE INDEX IF NOT EXISTS idx_wishes_created_at ON wishes(created_at);
        CREATE INDEX IF NOT EXISTS idx_wishes_author_id ON wishes(author_id);
        CREATE INDEX IF NOT EXISTS idx_wish_likes_wish_id ON wish_likes(wish_id);
        """,
    ),
]


def get_database_path(database_url: Optional[str] = None) -> str:
    """Compute the path to the SQLite database file.

    If the configured path is absolute, use it directly.  Otherwise
    resolve it relative to the project root.
    """
    db_url = database_url or settings.database_url
    if os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent.parent  # project root
    return str((base_dir / db_url).resolve())


def get_connection(database_url: Optional[str] = None) -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    Rows are returned as ``sqlite3.Row`` so columns can be accessed by
    name.  Foreign key enforcement is switched on for the connection.
    """
    conn = sqlite3.connect(get_database_path(database_url))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


@contextmanager
def get_cursor(database_url: Optional[str] = None) -> Iterator[sqlite3.Cursor]:
    """Yield a cursor; commit on success, roll back on error, always close."""
    conn = get_connection(database_url)
    try:
        yield conn.cursor()
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def init_db(database_url: Optional[str] = None) -> int:
    """Initialise the database and apply pending migrations.

    Creates the ``migrations`` table if it does not exist, checks the
    current schema version, and applies any new migrations defined in
    ``MIGRATIONS`` in order.  Each migration and its version row commit
    together; a failing migration leaves no trace and raises.  Returns
    the resulting schema version.
    """
    with get_cursor(database_url) as cursor:
        cursor.execute(
            "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
        )
        cursor.execute("SELECT MAX(version) AS version FROM migrations")
        row = cursor.fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0

        for version, sql in MIGRATIONS:
            if version > current_version:
                # executescript commits first, so the migration opens its
                # own transaction and records its version inside it
                cursor.executescript(
                    f"BEGIN;\n{sql}\n"
                    f"INSERT INTO migrations (version) VALUES ({int(version)});\n"
                    "COMMIT;"
                )
                current_version = version
    return current_version
