"""
Pydantic models for user data.

Users are not stored by this service.  The identity comes from the
bearer token claims or, without a token, from the configured demo
user.  ``UserRead`` is the profile shape returned by
``GET /api/users/profile``.  No account record exists, so there is no
creation date to report.
"""

from typing import Optional

from pydantic import BaseModel, Field

from .wish import CAMEL_CONFIG


class UserRead(BaseModel):
    """Schema for reading the current user."""

    id: str = Field(..., examples=["demo-user"])
    name: str = Field(..., examples=["Demo User"])
    email: Optional[str] = Field(None, examples=["demo@example.com"])
    avatar: Optional[str] = None

    model_config = CAMEL_CONFIG
