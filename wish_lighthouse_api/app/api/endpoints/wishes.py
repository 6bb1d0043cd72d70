"""
API endpoints for wishes.

These endpoints back the wish wall: browsing the feed, posting a wish,
reading a single wish and toggling a like.  Validation failures become
400 responses and unknown ids become 404 responses through the
handlers in ``core.errors``; the routes themselves only call the
service and wrap its result in the response envelope.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, status

from wish_lighthouse_api.app.api.deps import get_wish_service
from wish_lighthouse_api.app.core.security import get_current_user
from wish_lighthouse_api.app.schemas.common import ApiResponse
from wish_lighthouse_api.app.schemas.wish import (
    LikeToggleResult,
    WishCreate,
    WishPage,
    WishRead,
)
from wish_lighthouse_api.app.services.wish_service import WishService, author_from_user


router = APIRouter()


@router.get(
    "/wishes",
    response_model=ApiResponse[WishPage],
    response_model_exclude_none=True,
    summary="List wishes",
)
async def list_wishes(
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1, description="Page size (default 10)"),
    category: Optional[str] = Query(None, description="Category filter; 'all' disables it"),
    sort: str = Query("createdAt", description="'popular' or 'createdAt'"),
    current_user: Dict[str, Any] = Depends(get_current_user),
    service: WishService = Depends(get_wish_service),
) -> ApiResponse[WishPage]:
    """Return one page of wishes, optionally filtered by category.

    ``sort=popular`` orders by likes; anything else orders by creation
    time, newest first.
    """
    result = await service.list_wishes(
        page=page,
        limit=limit,
        category=category,
        sort=sort,
        viewer_id=current_user["user_id"],
    )
    return ApiResponse(data=result)


@router.post(
    "/wishes",
    response_model=ApiResponse[WishRead],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    summary="Post a wish",
)
async def create_wish(
    data: WishCreate,
    current_user: Dict[str, Any] = Depends(get_current_user),
    service: WishService = Depends(get_wish_service),
) -> ApiResponse[WishRead]:
    """Create a new wish.

    The current user becomes the author unless ``isAnonymous`` is set,
    in which case no author is stored.
    """
    wish = await service.create_wish(
        data.content,
        data.category,
        data.is_anonymous,
        author=author_from_user(current_user),
    )
    return ApiResponse(data=wish, message="Wish created successfully")


@router.get(
    "/wishes/{wish_id}",
    response_model=ApiResponse[WishRead],
    response_model_exclude_none=True,
    summary="Get a single wish",
)
async def get_wish(
    wish_id: str,
    current_user: Dict[str, Any] = Depends(get_current_user),
    service: WishService = Depends(get_wish_service),
) -> ApiResponse[WishRead]:
    wish = await service.get_wish(wish_id, viewer_id=current_user["user_id"])
    return ApiResponse(data=wish)


@router.post(
    "/wishes/{wish_id}/like",
    response_model=ApiResponse[LikeToggleResult],
    response_model_exclude_none=True,
    summary="Like or unlike a wish",
)
async def toggle_like(
    wish_id: str,
    current_user: Dict[str, Any] = Depends(get_current_user),
    service: WishService = Depends(get_wish_service),
) -> ApiResponse[LikeToggleResult]:
    """Flip the current user's like on a wish.

    Returns the like count and the user's like state after the flip.
    """
    result = await service.toggle_like(wish_id, current_user["user_id"])
    return ApiResponse(
        data=result,
        message="Wish liked" if result.is_liked else "Like removed",
    )
