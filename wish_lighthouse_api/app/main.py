"""
Main entrypoint for the Wish Lighthouse API.

This module assembles the FastAPI application: logging, CORS, error
handlers, the ``/api`` routers and the root ``/health`` check.  The
``create_app`` function builds and configures the app, which is then
instantiated at module import time as ``app`` so it can be served
directly, e.g.::

    uvicorn wish_lighthouse_api.app.main:app --reload

The wish store is opened when the application starts (and seeded with
the demo wishes if configured).  Tests pass their own ``Settings``
and repository to ``create_app`` to get an isolated application.
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.endpoints import health
from .api.router import router as api_router
from .core.config import Settings, settings as default_settings
from .core.errors import register_exception_handlers
from .core.logging_config import setup_logging
from .core.seed import seed_demo_wishes
from .repositories.wish_repository import WishRepository, build_repository
from .services.wish_service import WishService


logger = logging.getLogger(__name__)


def create_app(
    app_settings: Optional[Settings] = None,
    repository: Optional[WishRepository] = None,
) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    app_settings : Optional[Settings]
        Configuration to use.  Defaults to the module-level settings
        read from the environment.
    repository : Optional[WishRepository]
        Wish store to use.  When omitted, the store named by
        ``settings.wish_store`` is opened at startup.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    app_settings = app_settings or default_settings
    # Initialise logging before anything else so startup can log.
    setup_logging(app_settings.log_level, app_settings.log_file or None)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        repo = repository or build_repository(app_settings.wish_store, app_settings.database_url)
        if app_settings.seed_demo_data:
            seed_demo_wishes(repo)
        app.state.wish_service = WishService(
            repo,
            default_limit=app_settings.default_page_limit,
            max_limit=app_settings.max_page_limit,
        )
        logger.info(
            "%s %s started (environment=%s, store=%s)",
            app_settings.project_name,
            app_settings.api_version,
            app_settings.environment,
            type(repo).__name__,
        )
        yield

    app = FastAPI(
        title=app_settings.project_name,
        version=app_settings.api_version,
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.started_at = time.monotonic()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app, debug=app_settings.debug)

    app.include_router(health.router, tags=["health"])
    app.include_router(api_router, prefix="/api")

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
