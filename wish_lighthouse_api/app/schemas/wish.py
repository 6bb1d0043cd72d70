"""
Pydantic schemas for wishes.

These models define the request payload for creating a wish and the
public shapes returned by the API.  JSON keys are camelCase
(``isAnonymous``, ``createdAt``, ``totalPages``) to match the web
frontend; request bodies may use either camelCase or snake_case.

The public ``WishRead`` shape never has a ``likedBy`` field, and its
``author`` is left unset for anonymous wishes.  Routes serialize with
``response_model_exclude_none`` so an unset author disappears from the
JSON entirely.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

from ..models.wish import CONTENT_MAX_LENGTH, CONTENT_MIN_LENGTH, WishCategory


CAMEL_CONFIG = {
    "alias_generator": to_camel,
    "populate_by_name": True,
    "from_attributes": True,
}


class WishCreate(BaseModel):
    """Schema for posting a new wish."""

    content: str = Field(..., description="Wish text, 10 to 500 characters after trimming")
    category: WishCategory = Field(..., description="One of the fixed wish categories")
    is_anonymous: bool = Field(False, description="Hide the author of this wish")

    model_config = {
        **CAMEL_CONFIG,
        "json_schema_extra": {
            "example": {
                "content": "I wish for good health for my family this year.",
                "category": "health",
                "isAnonymous": False,
            }
        },
    }

    @field_validator("content")
    @classmethod
    def trim_content(cls, v: str) -> str:
        """Trim surrounding whitespace and enforce the length bounds."""
        v = v.strip()
        if not CONTENT_MIN_LENGTH <= len(v) <= CONTENT_MAX_LENGTH:
            raise ValueError(
                f"Content must be between {CONTENT_MIN_LENGTH} and {CONTENT_MAX_LENGTH} characters"
            )
        return v

    @field_validator("category", mode="before")
    @classmethod
    def check_category(cls, v):
        allowed = [c.value for c in WishCategory]
        if isinstance(v, WishCategory):
            return v
        if v not in allowed:
            raise ValueError(f"Category must be one of: {', '.join(allowed)}")
        return v


class WishAuthor(BaseModel):
    id: str
    name: str
    avatar: Optional[str] = None

    model_config = CAMEL_CONFIG


class WishRead(BaseModel):
    """Public view of a wish."""

    id: str
    content: str
    category: WishCategory
    is_anonymous: bool
    author: Optional[WishAuthor] = None
    likes: int = Field(..., ge=0)
    is_liked: bool = Field(False, description="Whether the requesting user likes this wish")
    created_at: datetime
    updated_at: datetime

    model_config = CAMEL_CONFIG


class WishPage(BaseModel):
    """One page of the wish feed plus pagination metadata."""

    wishes: List[WishRead]
    total: int
    page: int
    limit: int
    total_pages: int

    model_config = CAMEL_CONFIG


class LikeToggleResult(BaseModel):
    """State of a wish right after a like toggle."""

    wish_id: str
    likes: int
    is_liked: bool

    model_config = CAMEL_CONFIG
