"""
GhostMatch — Notifications API
"""

from __future__ import annotations

from typing import Optional

import structlog
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ghostmatch.api.deps import apply_and_save, get_store
from ghostmatch.schemas import Notification
from ghostmatch.services.match_store import MatchStore

logger = structlog.get_logger("ghostmatch.api.notifications")

router = APIRouter()


class NotificationListResponse(BaseModel):
    notifications: list[Notification]
    unread: int


class MarkReadResponse(BaseModel):
    marked: int
    warning: Optional[str] = None


@router.get(
    "",
    response_model=NotificationListResponse,
    summary="List notifications, newest first",
)
def list_notifications(store: MatchStore = Depends(get_store)) -> NotificationListResponse:
    notifications = store.get_notifications()
    return NotificationListResponse(
        notifications=notifications,
        unread=sum(1 for n in notifications if not n.read),
    )


@router.post(
    "/read",
    response_model=MarkReadResponse,
    summary="Mark every notification as read",
)
def mark_notifications_read(store: MatchStore = Depends(get_store)) -> MarkReadResponse:
    marked, warning = apply_and_save(store, store.mark_all_read)
    logger.info("notifications_marked_read", marked=marked, warning=warning)
    return MarkReadResponse(marked=marked or 0, warning=warning)
