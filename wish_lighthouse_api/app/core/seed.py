"""
Sample wishes for demos.

``seed_demo_wishes`` loads four wishes into an empty store so the wish
wall has something to show on first start.  Their like counts are
represented by placeholder liker ids (``seed-liker-<n>``) because
``likes`` is always derived from the set of likers.
"""

import logging
from datetime import datetime, timezone
from typing import List

from ..models.wish import UserRef, WishCategory, WishFilter, WishRecord
from ..repositories.wish_repository import WishRepository


logger = logging.getLogger(__name__)


def _ts(value: str) -> datetime:
    return datetime.strptime(value, "%Y-%m-%dT%H:%M:%SZ").replace(tzinfo=timezone.utc)


def _likers(count: int) -> set:
    return {f"seed-liker-{n}" for n in range(1, count + 1)}


def demo_wishes() -> List[WishRecord]:
    return [
        WishRecord(
            id="1",
            content="I wish for good health for my family and myself in the coming year.",
            category=WishCategory.HEALTH,
            author=UserRef(
                id="user1",
                name="Sarah Johnson",
                avatar="https://images.unsplash.com/photo-1494790108755-2616b9997188?w=150",
            ),
            liked_by=_likers(42),
            created_at=_ts("2024-01-15T10:30:00Z"),
        ),
        WishRecord(
            id="2",
            content="May I find the courage to pursue my dreams and start my own business.",
            category=WishCategory.CAREER,
            is_anonymous=True,
            liked_by=_likers(28),
            created_at=_ts("2024-01-15T09:15:00Z"),
        ),
        WishRecord(
            id="3",
            content="I hope to meet someone special who truly understands and loves me.",
            category=WishCategory.LOVE,
            author=UserRef(
                id="user3",
                name="Michael Chen",
                avatar="https://images.unsplash.com/photo-1507003211169-0a1dd7228f2d?w=150",
            ),
            liked_by=_likers(67),
            created_at=_ts("2024-01-14T16:45:00Z"),
        ),
        WishRecord(
            id="4",
            content="I wish for my parents to stay healthy and happy for many years to come.",
            category=WishCategory.FAMILY,
            author=UserRef(
                id="user4",
                name="Emma Wilson",
                avatar="https://images.unsplash.com/photo-1438761681033-6461ffad8d80?w=150",
            ),
            liked_by=_likers(89),
            created_at=_ts("2024-01-14T14:20:00Z"),
        ),
    ]


def seed_demo_wishes(repository: WishRepository) -> int:
    """Insert the sample wishes if the store is empty.

    Returns the number of wishes inserted (0 when the store already
    had data).
    """
    if repository.count(WishFilter()) > 0:
        return 0
    wishes = demo_wishes()
    for wish in wishes:
        repository.insert(wish)
    logger.info("Seeded %d demo wishes", len(wishes))
    return len(wishes)
