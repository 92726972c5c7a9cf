"""API Routers package

This package contains all API route handlers.
Routers are organized by feature domain.
"""

from . import admin_router, events_router, submit_router

__all__ = [
    "admin_router",
    "events_router",
    "submit_router",
]
