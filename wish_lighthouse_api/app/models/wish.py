"""
Domain records for wishes.

These dataclasses are what the repositories store and return.  They
are deliberately separate from the Pydantic schemas in ``schemas``:
a ``WishRecord`` holds the full state (including ``liked_by``), while
the API only ever sees the projection produced by
``services.wish_service.to_public_view``.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Set


class WishCategory(str, Enum):
    """Closed set of topics a wish can be filed under."""

    HEALTH = "health"
    CAREER = "career"
    LOVE = "love"
    STUDY = "study"
    FAMILY = "family"
    WEALTH = "wealth"
    OTHER = "other"


class WishSort(str, Enum):
    """Feed orderings.  Anything that is not ``popular`` means newest first."""

    NEWEST = "createdAt"
    POPULAR = "popular"

    @classmethod
    def parse(cls, value: Optional[str]) -> "WishSort":
        if value == cls.POPULAR.value:
            return cls.POPULAR
        return cls.NEWEST


CONTENT_MIN_LENGTH = 10
CONTENT_MAX_LENGTH = 500


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class UserRef:
    """Author identity embedded in a wish."""

    id: str
    name: str
    avatar: Optional[str] = None


@dataclass
class WishRecord:
    """A stored wish.

    ``likes`` is not stored; it is always ``len(liked_by)``.  ``author``
    is ``None`` for anonymous wishes.
    """

    content: str
    category: WishCategory
    is_anonymous: bool = False
    author: Optional[UserRef] = None
    liked_by: Set[str] = field(default_factory=set)
    id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def likes(self) -> int:
        return len(self.liked_by)

    def is_liked_by(self, user_id: Optional[str]) -> bool:
        return user_id is not None and user_id in self.liked_by


@dataclass(frozen=True)
class WishFilter:
    """Predicate applied by ``WishRepository.list`` and ``count``."""

    category: Optional[WishCategory] = None
    author_id: Optional[str] = None

    def matches(self, wish: WishRecord) -> bool:
        if self.category is not None and wish.category != self.category:
            return False
        if self.author_id is not None:
            if wish.author is None or wish.author.id != self.author_id:
                return False
        return True
