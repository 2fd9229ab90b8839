"""
GhostMatch — Admin API

Demo maintenance endpoints.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends

from ghostmatch.api.deps import apply_and_save, get_store
from ghostmatch.schemas.match import StoreActionResponse
from ghostmatch.services.match_store import MatchStore

logger = structlog.get_logger("ghostmatch.api.admin")

router = APIRouter()


@router.post(
    "/reset",
    response_model=StoreActionResponse,
    summary="Reset the store to its first-run state",
)
def reset_store(store: MatchStore = Depends(get_store)) -> StoreActionResponse:
    """Drop all matches and sessions and restore the seed notifications."""
    _, warning = apply_and_save(store, store.reset)
    logger.warning("store_reset_requested", warning=warning)
    return StoreActionResponse(status="reset", warning=warning)
