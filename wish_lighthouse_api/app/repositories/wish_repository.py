"""
Repository: storage operations for wishes.

This module contains only storage code.  Business rules (validation,
toggle semantics, pagination maths, anonymity) live in
``services.wish_service``.  Two interchangeable backends implement the
``WishRepository`` interface:

* ``InMemoryWishRepository`` keeps records in a per-instance list.  It
  is used for demos and tests; concurrent writers can lose updates.
* ``SQLiteWishRepository`` stores wishes in the ``wishes`` table and
  likes in ``wish_likes``.  Each call opens its own connection and
  commits once, so a like mutation and its ``updated_at`` bump land
  together.

``get`` returns ``None`` for an unknown id; not finding a wish is not
an error at this layer.
"""

import logging
import sqlite3
import uuid
from abc import ABC, abstractmethod
from contextlib import contextmanager
from copy import deepcopy
from datetime import datetime, timezone
from typing import Dict, Iterator, List, Optional, Tuple

from ..core.db import get_cursor, init_db
from ..core.errors import InternalError
from ..models.wish import (
    UserRef,
    WishCategory,
    WishFilter,
    WishRecord,
    WishSort,
    utcnow,
)


logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


def new_wish_id() -> str:
    return uuid.uuid4().hex


class WishRepository(ABC):
    """Storage contract for wishes."""

    @abstractmethod
    def insert(self, wish: WishRecord) -> WishRecord:
        """Persist a new wish and return the stored copy.

        Assigns ``id`` when the record has none and stamps
        ``created_at``/``updated_at`` with the current time unless set.
        """

    @abstractmethod
    def get(self, wish_id: str) -> Optional[WishRecord]:
        """Return the wish with ``wish_id`` or ``None``."""

    @abstractmethod
    def list(
        self,
        wish_filter: WishFilter,
        sort: WishSort = WishSort.NEWEST,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> List[WishRecord]:
        """Return matching wishes in ``sort`` order, windowed by offset/limit."""

    @abstractmethod
    def count(self, wish_filter: WishFilter) -> int:
        """Return how many wishes match ``wish_filter``."""

    @abstractmethod
    def add_like(self, wish_id: str, user_id: str, at: Optional[datetime] = None) -> Optional[WishRecord]:
        """Add ``user_id`` to the wish's likers and bump ``updated_at``."""

    @abstractmethod
    def remove_like(self, wish_id: str, user_id: str, at: Optional[datetime] = None) -> Optional[WishRecord]:
        """Remove ``user_id`` from the wish's likers and bump ``updated_at``."""

    def ping(self) -> None:
        """Raise if the store is unreachable."""


def _prepare_for_insert(wish: WishRecord) -> WishRecord:
    stored = deepcopy(wish)
    if not stored.id:
        stored.id = new_wish_id()
    now = utcnow()
    if stored.created_at is None:
        stored.created_at = now
    if stored.updated_at is None:
        stored.updated_at = stored.created_at
    if stored.is_anonymous:
        stored.author = None
    return stored


class InMemoryWishRepository(WishRepository):
    """List-backed store.  Each instance owns its own data."""

    def __init__(self) -> None:
        # (insertion sequence, record)
        self._rows: List[Tuple[int, WishRecord]] = []
        self._by_id: Dict[str, WishRecord] = {}
        self._seq = 0

    def insert(self, wish: WishRecord) -> WishRecord:
        stored = _prepare_for_insert(wish)
        if stored.id in self._by_id:
            raise ValueError(f"Wish {stored.id} already exists")
        self._seq += 1
        self._rows.append((self._seq, stored))
        self._by_id[stored.id] = stored
        return deepcopy(stored)

    def get(self, wish_id: str) -> Optional[WishRecord]:
        wish = self._by_id.get(wish_id)
        return deepcopy(wish) if wish is not None else None

    def list(
        self,
        wish_filter: WishFilter,
        sort: WishSort = WishSort.NEWEST,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> List[WishRecord]:
        rows = [(seq, wish) for seq, wish in self._rows if wish_filter.matches(wish)]
        if sort == WishSort.POPULAR:
            rows.sort(key=lambda row: (row[1].likes, row[1].created_at, row[0]), reverse=True)
        else:
            rows.sort(key=lambda row: (row[1].created_at, row[0]), reverse=True)
        end = None if limit is None else offset + limit
        return [deepcopy(wish) for _, wish in rows[offset:end]]

    def count(self, wish_filter: WishFilter) -> int:
        return sum(1 for _, wish in self._rows if wish_filter.matches(wish))

    def add_like(self, wish_id: str, user_id: str, at: Optional[datetime] = None) -> Optional[WishRecord]:
        wish = self._by_id.get(wish_id)
        if wish is None:
            return None
        wish.liked_by.add(user_id)
        wish.updated_at = at or utcnow()
        return deepcopy(wish)

    def remove_like(self, wish_id: str, user_id: str, at: Optional[datetime] = None) -> Optional[WishRecord]:
        wish = self._by_id.get(wish_id)
        if wish is None:
            return None
        wish.liked_by.discard(user_id)
        wish.updated_at = at or utcnow()
        return deepcopy(wish)


def _format_ts(value: datetime) -> str:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime(TIMESTAMP_FORMAT)


def _parse_ts(value: str) -> datetime:
    return datetime.strptime(value, TIMESTAMP_FORMAT).replace(tzinfo=timezone.utc)


class SQLiteWishRepository(WishRepository):
    """SQLite-backed store.

    ``likes`` is never stored: ordering by popularity counts rows in
    ``wish_likes``, and ``liked_by`` is loaded for the returned page only.
    """

    _SELECT = (
        "SELECT w.seq, w.id, w.content, w.category, w.is_anonymous, w.author_id, "
        "w.author_name, w.author_avatar, w.created_at, w.updated_at, "
        "(SELECT COUNT(*) FROM wish_likes l WHERE l.wish_id = w.id) AS likes "
        "FROM wishes w"
    )

    def __init__(self, database_url: Optional[str] = None, migrate: bool = True) -> None:
        self.database_url = database_url
        if migrate:
            init_db(database_url)

    @contextmanager
    def _cursor(self) -> Iterator[sqlite3.Cursor]:
        """``get_cursor`` with SQLite failures raised as ``InternalError``."""
        try:
            with get_cursor(self.database_url) as cursor:
                yield cursor
        except sqlite3.Error as exc:
            logger.error("Wish store query failed: %s", exc)
            raise InternalError("Wish store unavailable") from exc

    @staticmethod
    def _where(wish_filter: WishFilter) -> Tuple[str, list]:
        clauses = []
        params: list = []
        if wish_filter.category is not None:
            clauses.append("w.category = ?")
            params.append(wish_filter.category.value)
        if wish_filter.author_id is not None:
            clauses.append("w.author_id = ?")
            params.append(wish_filter.author_id)
        if not clauses:
            return "", params
        return " WHERE " + " AND ".join(clauses), params

    @staticmethod
    def _load_likers(cursor: sqlite3.Cursor, wish_ids: List[str]) -> Dict[str, set]:
        likers: Dict[str, set] = {wish_id: set() for wish_id in wish_ids}
        if not wish_ids:
            return likers
        placeholders = ", ".join("?" for _ in wish_ids)
        rows = cursor.execute(
            f"SELECT wish_id, user_id FROM wish_likes WHERE wish_id IN ({placeholders})",
            tuple(wish_ids),
        ).fetchall()
        for row in rows:
            likers[row["wish_id"]].add(row["user_id"])
        return likers

    @staticmethod
    def _row_to_record(row: sqlite3.Row, liked_by: set) -> WishRecord:
        author = None
        if row["author_id"] is not None:
            author = UserRef(id=row["author_id"], name=row["author_name"], avatar=row["author_avatar"])
        return WishRecord(
            id=row["id"],
            content=row["content"],
            category=WishCategory(row["category"]),
            is_anonymous=bool(row["is_anonymous"]),
            author=author,
            liked_by=set(liked_by),
            created_at=_parse_ts(row["created_at"]),
            updated_at=_parse_ts(row["updated_at"]),
        )

    def _fetch_one(self, cursor: sqlite3.Cursor, wish_id: str) -> Optional[WishRecord]:
        row = cursor.execute(self._SELECT + " WHERE w.id = ?", (wish_id,)).fetchone()
        if not row:
            return None
        likers = self._load_likers(cursor, [wish_id])
        return self._row_to_record(row, likers[wish_id])

    def insert(self, wish: WishRecord) -> WishRecord:
        stored = _prepare_for_insert(wish)
        author = stored.author
        with self._cursor() as cursor:
            cursor.execute(
                """
                INSERT INTO wishes (id, content, category, is_anonymous, author_id,
                                    author_name, author_avatar, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    stored.id,
                    stored.content,
                    stored.category.value,
                    1 if stored.is_anonymous else 0,
                    author.id if author else None,
                    author.name if author else None,
                    author.avatar if author else None,
                    _format_ts(stored.created_at),
                    _format_ts(stored.updated_at),
                ),
            )
            if stored.liked_by:
                cursor.executemany(
                    "INSERT OR IGNORE INTO wish_likes (wish_id, user_id, created_at) VALUES (?, ?, ?)",
                    [(stored.id, user_id, _format_ts(stored.created_at)) for user_id in sorted(stored.liked_by)],
                )
            return self._fetch_one(cursor, stored.id)

    def get(self, wish_id: str) -> Optional[WishRecord]:
        with self._cursor() as cursor:
            return self._fetch_one(cursor, wish_id)

    def list(
        self,
        wish_filter: WishFilter,
        sort: WishSort = WishSort.NEWEST,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> List[WishRecord]:
        where, params = self._where(wish_filter)
        if sort == WishSort.POPULAR:
            order = " ORDER BY likes DESC, w.created_at DESC, w.seq DESC"
        else:
            order = " ORDER BY w.created_at DESC, w.seq DESC"
        # SQLite requires a LIMIT before OFFSET; -1 means no limit
        query = self._SELECT + where + order + " LIMIT ? OFFSET ?"
        params.extend([-1 if limit is None else limit, offset])
        with self._cursor() as cursor:
            rows = cursor.execute(query, tuple(params)).fetchall()
            likers = self._load_likers(cursor, [row["id"] for row in rows])
            return [self._row_to_record(row, likers[row["id"]]) for row in rows]

    def count(self, wish_filter: WishFilter) -> int:
        where, params = self._where(wish_filter)
        with self._cursor() as cursor:
            row = cursor.execute(
                "SELECT COUNT(*) AS total FROM wishes w" + where, tuple(params)
            ).fetchone()
            return row["total"]

    def _set_like(self, wish_id: str, user_id: str, liked: bool, at: Optional[datetime]) -> Optional[WishRecord]:
        stamp = _format_ts(at or utcnow())
        with self._cursor() as cursor:
            exists = cursor.execute("SELECT 1 FROM wishes WHERE id = ?", (wish_id,)).fetchone()
            if not exists:
                return None
            if liked:
                cursor.execute(
                    "INSERT OR IGNORE INTO wish_likes (wish_id, user_id, created_at) VALUES (?, ?, ?)",
                    (wish_id, user_id, stamp),
                )
            else:
                cursor.execute(
                    "DELETE FROM wish_likes WHERE wish_id = ? AND user_id = ?",
                    (wish_id, user_id),
                )
            cursor.execute("UPDATE wishes SET updated_at = ? WHERE id = ?", (stamp, wish_id))
            return self._fetch_one(cursor, wish_id)

    def add_like(self, wish_id: str, user_id: str, at: Optional[datetime] = None) -> Optional[WishRecord]:
        return self._set_like(wish_id, user_id, True, at)

    def remove_like(self, wish_id: str, user_id: str, at: Optional[datetime] = None) -> Optional[WishRecord]:
        return self._set_like(wish_id, user_id, False, at)

    def ping(self) -> None:
        with self._cursor() as cursor:
            cursor.execute("SELECT 1")


def build_repository(store: str, database_url: Optional[str] = None) -> WishRepository:
    """Create the repository named by the ``WISH_STORE`` setting."""
    if store == "memory":
        logger.info("Using in-memory wish store")
        return InMemoryWishRepository()
    if store == "sqlite":
        logger.info("Using SQLite wish store")
        return SQLiteWishRepository(database_url)
    raise ValueError(f"Unknown wish store: {store!r}")
