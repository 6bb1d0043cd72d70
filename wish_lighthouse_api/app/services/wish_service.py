"""
Business logic for wishes.

``WishService`` implements the three operations behind the wish wall:

* browsing: filter by category, sort by recency or popularity and
  paginate (``list_wishes``, ``list_user_wishes``);
* posting a wish, optionally anonymously (``create_wish``);
* liking and unliking (``toggle_like``).

The service is free of storage code; it receives a
``WishRepository`` and talks to it only through the repository
contract.  Everything it returns has passed through
``to_public_view``, so callers never see ``liked_by`` and never see
the author of an anonymous wish.
"""

import logging
import math
from typing import Any, Dict, Optional

from pydantic import ValidationError as PydanticValidationError

from ..core.errors import NotFoundError, ValidationError, format_validation_errors
from ..models.wish import UserRef, WishCategory, WishFilter, WishRecord, WishSort
from ..repositories.wish_repository import WishRepository
from ..schemas.wish import LikeToggleResult, WishAuthor, WishCreate, WishPage, WishRead


logger = logging.getLogger(__name__)

ALL_CATEGORIES = "all"


def to_public_view(wish: WishRecord, viewer_id: Optional[str] = None) -> WishRead:
    """Project a stored wish onto its public shape.

    The record is not modified.  ``author`` is dropped for anonymous
    wishes, ``liked_by`` is reduced to the ``likes`` count and the
    viewer's own ``is_liked`` flag.
    """
    author = None
    if not wish.is_anonymous and wish.author is not None:
        author = WishAuthor(id=wish.author.id, name=wish.author.name, avatar=wish.author.avatar)
    return WishRead(
        id=wish.id,
        content=wish.content,
        category=wish.category,
        is_anonymous=wish.is_anonymous,
        author=author,
        likes=wish.likes,
        is_liked=wish.is_liked_by(viewer_id),
        created_at=wish.created_at,
        updated_at=wish.updated_at,
    )


def author_from_user(current_user: Dict[str, Any]) -> UserRef:
    """Build the author reference for the user dict from ``get_current_user``."""
    return UserRef(
        id=str(current_user["user_id"]),
        name=current_user.get("name") or str(current_user["user_id"]),
        avatar=current_user.get("avatar"),
    )


class WishService:
    """Service for browsing, posting and liking wishes.

    Example usage::

        service = WishService(InMemoryWishRepository())
        page = await service.list_wishes(page=1, limit=10, sort="popular")
    """

    def __init__(
        self,
        repository: WishRepository,
        default_limit: int = 10,
        max_limit: int = 100,
    ) -> None:
        self.repository = repository
        self.default_limit = default_limit
        self.max_limit = max_limit

    # ------------------------------------------------------------------
    # Validation helpers
    # ------------------------------------------------------------------
    def _window(self, page: Any, limit: Any) -> tuple[int, int]:
        if limit is None:
            limit = self.default_limit
        errors = []
        if isinstance(page, bool) or not isinstance(page, int) or page < 1:
            errors.append("page: must be a positive integer")
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
            errors.append("limit: must be a positive integer")
        elif limit > self.max_limit:
            errors.append(f"limit: must not exceed {self.max_limit}")
        if errors:
            raise ValidationError(errors)
        return page, limit

    @staticmethod
    def _category(category: Optional[str]) -> Optional[WishCategory]:
        if category is None or category == "" or category == ALL_CATEGORIES:
            return None
        try:
            return WishCategory(category)
        except ValueError:
            allowed = ", ".join(c.value for c in WishCategory)
            raise ValidationError([f"category: must be one of: {ALL_CATEGORIES}, {allowed}"])

    def _paginate(
        self,
        wish_filter: WishFilter,
        sort: WishSort,
        page: Any,
        limit: Any,
        viewer_id: Optional[str],
    ) -> WishPage:
        page, limit = self._window(page, limit)
        total = self.repository.count(wish_filter)
        offset = (page - 1) * limit
        records = []
        # Past the end: don't hand the store an offset it may not represent
        if offset < total:
            records = self.repository.list(
                wish_filter, sort=sort, offset=offset, limit=limit
            )
        return WishPage(
            wishes=[to_public_view(record, viewer_id) for record in records],
            total=total,
            page=page,
            limit=limit,
            total_pages=math.ceil(total / limit),
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    async def list_wishes(
        self,
        page: int = 1,
        limit: Optional[int] = None,
        category: Optional[str] = None,
        sort: Optional[str] = None,
        viewer_id: Optional[str] = None,
    ) -> WishPage:
        """Return one page of the wish feed.

        ``category`` of ``None`` or ``"all"`` means no filter.  ``sort``
        of ``"popular"`` orders by likes (ties newest first); any other
        value orders by creation time, newest first.  A page past the
        end yields an empty ``wishes`` list with the real totals.
        """
        wish_filter = WishFilter(category=self._category(category))
        return self._paginate(wish_filter, WishSort.parse(sort), page, limit, viewer_id)

    async def list_user_wishes(
        self,
        user_id: str,
        page: int = 1,
        limit: Optional[int] = None,
        viewer_id: Optional[str] = None,
    ) -> WishPage:
        """Return the wishes authored by ``user_id``, newest first.

        Anonymous wishes carry no author and are never included.
        """
        return self._paginate(WishFilter(author_id=user_id), WishSort.NEWEST, page, limit, viewer_id)

    async def get_wish(self, wish_id: str, viewer_id: Optional[str] = None) -> WishRead:
        wish = self.repository.get(wish_id)
        if wish is None:
            raise NotFoundError("Wish not found")
        return to_public_view(wish, viewer_id)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    async def create_wish(
        self,
        content: Any,
        category: Any,
        is_anonymous: Any = False,
        author: Optional[UserRef] = None,
    ) -> WishRead:
        """Validate and store a new wish.

        ``content`` is trimmed and must be 10 to 500 characters long;
        ``category`` must be one of the fixed categories.  A
        non-anonymous wish is attributed to ``author``; an anonymous one
        is stored without any author at all.

        Raises
        ------
        ValidationError
            With one message per invalid field.
        """
        try:
            data = WishCreate.model_validate(
                {"content": content, "category": category, "is_anonymous": is_anonymous}
            )
        except PydanticValidationError as exc:
            raise ValidationError(format_validation_errors(exc.errors()))
        if not data.is_anonymous and author is None:
            raise ValidationError(["author: required unless the wish is anonymous"])

        record = self.repository.insert(
            WishRecord(
                content=data.content,
                category=data.category,
                is_anonymous=data.is_anonymous,
                author=None if data.is_anonymous else author,
            )
        )
        logger.info(
            "Created %s wish %s in %s",
            "anonymous" if record.is_anonymous else "signed",
            record.id,
            record.category.value,
        )
        return to_public_view(record, author.id if author else None)

    async def toggle_like(self, wish_id: str, user_id: str) -> LikeToggleResult:
        """Flip ``user_id``'s like on a wish.

        Returns the state after the flip.  Calling it twice in a row
        restores the previous state.  ``updated_at`` changes on every
        call.

        Raises
        ------
        NotFoundError
            If no wish has ``wish_id``.
        """
        wish = self.repository.get(wish_id)
        if wish is None:
            raise NotFoundError("Wish not found")
        if wish.is_liked_by(user_id):
            updated = self.repository.remove_like(wish_id, user_id)
        else:
            updated = self.repository.add_like(wish_id, user_id)
        if updated is None:
            # Disappeared between the read and the write
            raise NotFoundError("Wish not found")
        is_liked = updated.is_liked_by(user_id)
        logger.info(
            "User %s %s wish %s (likes=%d)",
            user_id,
            "liked" if is_liked else "unliked",
            wish_id,
            updated.likes,
        )
        return LikeToggleResult(wish_id=updated.id, likes=updated.likes, is_liked=is_liked)

    def health_check(self) -> None:
        """Ping the underlying store; raises if it is unreachable."""
        self.repository.ping()
