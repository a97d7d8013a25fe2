"""
API Routers Package

Contains all FastAPI routers grouped by functionality.

Architecture Notes:
    - Part of API Layer (Presentation)
    - Routers are thin wrappers around Application Layer use cases and
      query handlers
    - All routers follow the dependency injection pattern (src.api.dependencies)

Available Routers:
    - generations_router: single-model generations
    - apps_router: multi-step app executions
    - notifications_router: WebSocket completion notifications
"""

from .apps import router as apps_router
from .generations import router as generations_router
from .notifications import router as notifications_router

__all__ = ["apps_router", "generations_router", "notifications_router"]
