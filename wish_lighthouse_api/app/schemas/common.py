"""
Response envelope shared by every endpoint.

Successful responses look like ``{"success": true, "data": ...}`` with
an optional human-readable ``message``.  Error responses use the same
``success``/``message`` keys and are built in ``core.errors``.
"""

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel


T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    data: T
    message: Optional[str] = None
