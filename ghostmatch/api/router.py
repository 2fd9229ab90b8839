"""
GhostMatch — Main API Router

Aggregates all sub-routers under a single prefix so that ``ghostmatch.main``
can mount the entire API surface with one ``include_router`` call.
"""

from fastapi import APIRouter

from ghostmatch.api import admin, matching, notifications, sessions

router = APIRouter()

router.include_router(matching.router, tags=["Matching"])
router.include_router(sessions.router, prefix="/sessions", tags=["Chat Sessions"])
router.include_router(notifications.router, prefix="/notifications", tags=["Notifications"])
router.include_router(admin.router, prefix="/admin", tags=["Admin"])
