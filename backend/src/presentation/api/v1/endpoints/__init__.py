"""
API V1 Endpoints Package
Exports routers used by main app
"""
from .auth import router as auth_router
from .jobs import router as jobs_router
from .matches import router as matches_router
from .notifications import router as notifications_router

__all__ = [
    "auth_router",
    "jobs_router",
    "matches_router",
    "notifications_router",
]
