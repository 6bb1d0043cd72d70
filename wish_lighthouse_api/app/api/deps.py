"""
Shared FastAPI dependencies.

The wish service is built once per application in ``create_app`` and
kept on ``app.state``; routes obtain it through ``get_wish_service``
so tests can run several isolated applications side by side.
"""

from fastapi import Request

from ..services.wish_service import WishService


def get_wish_service(request: Request) -> WishService:
    return request.app.state.wish_service
