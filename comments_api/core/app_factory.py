"""Application factory for the FastAPI app.

Builds the app with its metadata, middleware, handlers, routers and the
lifespan hook that builds the comment service on startup (so bad storage
settings abort the boot) and closes its storage client on shutdown.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from comments_api.api.routes import comments_router, health_router
from comments_api.api.routes.comments import close_comment_service, get_comment_service
from comments_api.core.config import settings
from comments_api.core.exception_handlers import setup_exception_handlers
from comments_api.core.logging import configure_logging
from comments_api.core.middleware import request_id_middleware
from comments_api.core.openapi import apply_openapi_customizations

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logger.info(
        "app.startup",
        extra={
            "app_env": settings.app_env,
            "rate_limit_enabled": settings.app.rate_limit_enabled,
            "rate_limit_window_s": settings.app.rate_limit_window_seconds,
        },
    )
    get_comment_service()
    yield
    await close_comment_service()
    logger.info("app.shutdown")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance.

    Returns:
        Configured FastAPI app with middleware, handlers and routers.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="Comments API",
        description=(
            "Stores and serves comments for blog posts. Comments are kept in a "
            "managed database table; creation is throttled per client and "
            "guarded by a honeypot field."
        ),
        version="0.1.0",
        license_info={
            "name": "MIT License",
            "url": "https://opensource.org/licenses/MIT",
        },
        lifespan=lifespan,
    )

    app.middleware("http")(request_id_middleware)

    setup_exception_handlers(app)

    app.include_router(comments_router)
    app.include_router(health_router)

    apply_openapi_customizations(app)

    return app
