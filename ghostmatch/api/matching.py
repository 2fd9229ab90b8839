"""
GhostMatch — Matching API

Endpoints for building a user's swipe queue, recording swipes, and listing
or removing matches.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, HTTPException, status

from ghostmatch.api.deps import apply_and_save, get_catalog, get_store
from ghostmatch.errors import ValidationFailure
from ghostmatch.schemas import MatchCandidate, UserProfile
from ghostmatch.schemas.match import (
    QueueResponse,
    StoreActionResponse,
    SwipeCreate,
    SwipeResponse,
)
from ghostmatch.services.catalog import ProfileCatalog
from ghostmatch.services.match_store import MatchStore
from ghostmatch.services.queue_service import build_queue

logger = structlog.get_logger("ghostmatch.api.matching")

router = APIRouter()


# ──────────────────────────────────────────────────────────────────────────────
# POST /queue — Build the swipe queue for a user
# ──────────────────────────────────────────────────────────────────────────────

@router.post(
    "/queue",
    response_model=QueueResponse,
    summary="Build the swipe queue for a user",
)
def request_queue(
    user: UserProfile,
    store: MatchStore = Depends(get_store),
    catalog: ProfileCatalog = Depends(get_catalog),
) -> QueueResponse:
    """Return the catalog candidates the user may swipe on, in catalog order.

    Excludes the user themself and everyone already matched.
    """
    candidates = store.request_queue(user, catalog)
    logger.info("queue_built", user_id=user.id, total=len(candidates))
    return QueueResponse(candidates=list(candidates), total=len(candidates))


# ──────────────────────────────────────────────────────────────────────────────
# POST /swipe — Record a swipe
# ──────────────────────────────────────────────────────────────────────────────

@router.post(
    "/swipe",
    response_model=SwipeResponse,
    summary="Swipe left or right on a candidate",
)
def swipe(
    payload: SwipeCreate,
    store: MatchStore = Depends(get_store),
    catalog: ProfileCatalog = Depends(get_catalog),
) -> SwipeResponse:
    """Swipe on a catalog candidate.

    A right swipe records the match, opens a chat session and emits a
    "match" notification.  Swiping right again on the same candidate is a
    no-op.  The candidate must pass the same rules as the queue (not the
    user themself, eligible for the user); otherwise the swipe is a 422.
    """
    user = payload.user
    log = logger.bind(user_id=user.id, candidate_id=payload.candidate_id)

    candidate = catalog.get(payload.candidate_id)
    if candidate is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Candidate ({payload.candidate_id}) not found.",
        )

    # Already-matched candidates are left out of the queue but stay swipeable.
    if not build_queue(user, [candidate]):
        log.info("swipe_rejected_ineligible")
        raise ValidationFailure(
            f"Candidate ({candidate.id}) is not in the queue for user ({user.id})."
        )

    if payload.direction == "left":
        log.info("swipe_left")
        return SwipeResponse(status="skipped", is_match=False)

    created, warning = apply_and_save(
        store, lambda: store.add_match(candidate, user.id)
    )
    log.info("swipe_right", created=created, warning=warning)
    return SwipeResponse(
        status="matched" if created else "already_matched",
        is_match=True,
        match_id=candidate.id,
        warning=warning,
    )


# ──────────────────────────────────────────────────────────────────────────────
# GET /matches — List matches
# ──────────────────────────────────────────────────────────────────────────────

@router.get(
    "/matches",
    response_model=list[MatchCandidate],
    summary="List all matches",
)
def list_matches(store: MatchStore = Depends(get_store)) -> list[MatchCandidate]:
    return store.get_matches()


# ──────────────────────────────────────────────────────────────────────────────
# DELETE /matches/{match_id} — Unmatch
# ──────────────────────────────────────────────────────────────────────────────

@router.delete(
    "/matches/{match_id}",
    response_model=StoreActionResponse,
    summary="Remove a match and its chat session",
)
def remove_match(
    match_id: str,
    store: MatchStore = Depends(get_store),
) -> StoreActionResponse:
    _, warning = apply_and_save(store, lambda: store.remove_match(match_id))
    logger.info("unmatch", match_id=match_id, warning=warning)
    return StoreActionResponse(status="removed", warning=warning)
