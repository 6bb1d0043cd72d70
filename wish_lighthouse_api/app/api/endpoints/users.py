"""
API endpoints for users.

There is no user registry behind these routes.  ``/users/profile``
echoes the identity resolved by ``get_current_user`` (the demo user
unless a bearer token says otherwise) and ``/users/{user_id}/wishes``
lists the signed wishes of any author id.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query

from wish_lighthouse_api.app.api.deps import get_wish_service
from wish_lighthouse_api.app.core.security import get_current_user
from wish_lighthouse_api.app.schemas.common import ApiResponse
from wish_lighthouse_api.app.schemas.user import UserRead
from wish_lighthouse_api.app.schemas.wish import WishPage
from wish_lighthouse_api.app.services.wish_service import WishService


router = APIRouter()


@router.get(
    "/profile",
    response_model=ApiResponse[UserRead],
    response_model_exclude_none=True,
    summary="Current user profile",
)
async def get_profile(
    current_user: Dict[str, Any] = Depends(get_current_user),
) -> ApiResponse[UserRead]:
    user = UserRead(
        id=current_user["user_id"],
        name=current_user["name"],
        email=current_user.get("email"),
        avatar=current_user.get("avatar"),
    )
    return ApiResponse(data=user)


@router.get(
    "/{user_id}/wishes",
    response_model=ApiResponse[WishPage],
    response_model_exclude_none=True,
    summary="List a user's wishes",
)
async def list_user_wishes(
    user_id: str,
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1),
    current_user: Dict[str, Any] = Depends(get_current_user),
    service: WishService = Depends(get_wish_service),
) -> ApiResponse[WishPage]:
    """Return the wishes signed by ``user_id``, newest first.

    Anonymous wishes are never attributed to anyone and do not appear
    here, not even for their own author.
    """
    result = await service.list_user_wishes(
        user_id,
        page=page,
        limit=limit,
        viewer_id=current_user["user_id"],
    )
    return ApiResponse(data=result)
