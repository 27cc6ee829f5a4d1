from __future__ import annotations

from comments_api.api.routes.comments import router as comments_router
from comments_api.api.routes.health import router as health_router

__all__ = ["comments_router", "health_router"]
