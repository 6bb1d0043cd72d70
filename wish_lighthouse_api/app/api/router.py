"""
Top-level router for the API.

This router aggregates the domain routers under the ``/api`` prefix
applied in ``main.create_app``.  The health check is mounted
separately at the application root.
"""

from fastapi import APIRouter

from .endpoints import users, wishes


router = APIRouter()

# The wishes router defines its own "/wishes" paths internally, so no
# prefix is given here.
router.include_router(wishes.router, tags=["wishes"])
router.include_router(users.router, prefix="/users", tags=["users"])
