"""
GhostMatch — Chat Sessions API

Endpoints for reading a match's chat session, sending messages and revealing
identities.
"""

from __future__ import annotations

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from ghostmatch.api.deps import apply_and_save, get_store
from ghostmatch.schemas import Message, MessageCreate, Session
from ghostmatch.services.match_store import MatchStore

logger = structlog.get_logger("ghostmatch.api.sessions")

router = APIRouter()


class MessageSendResponse(BaseModel):
    message: Message
    warning: Optional[str] = None


class RevealResponse(BaseModel):
    session: Session
    warning: Optional[str] = None


# ──────────────────────────────────────────────────────────────────────────────
# GET /{match_id} — Read a chat session
# ──────────────────────────────────────────────────────────────────────────────

@router.get(
    "/{match_id}",
    response_model=Session,
    summary="Get the chat session for a match",
)
def get_session(match_id: str, store: MatchStore = Depends(get_store)) -> Session:
    return store.get_session(match_id)


# ──────────────────────────────────────────────────────────────────────────────
# POST /{match_id}/messages — Send a message
# ──────────────────────────────────────────────────────────────────────────────

@router.post(
    "/{match_id}/messages",
    response_model=MessageSendResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Send a message in a match's chat session",
)
def send_message(
    match_id: str,
    payload: MessageCreate,
    store: MatchStore = Depends(get_store),
) -> MessageSendResponse:
    """Append a message to the session.

    Blank text is rejected with 422 and an unknown match with 404; neither
    touches any session.
    """
    message, warning = apply_and_save(
        store,
        lambda: store.add_message(
            match_id,
            payload.sender_id,
            payload.text,
            is_system=payload.is_system,
        ),
    )
    logger.info("message_sent", match_id=match_id, message_id=message.id, warning=warning)
    return MessageSendResponse(message=message, warning=warning)


# ──────────────────────────────────────────────────────────────────────────────
# POST /{match_id}/reveal — Reveal identities
# ──────────────────────────────────────────────────────────────────────────────

@router.post(
    "/{match_id}/reveal",
    response_model=RevealResponse,
    summary="Mark a session as revealed",
)
def reveal_session(
    match_id: str,
    store: MatchStore = Depends(get_store),
) -> RevealResponse:
    session, warning = apply_and_save(store, lambda: store.reveal_session(match_id))
    return RevealResponse(session=session, warning=warning)
