"""
GhostMatch — Shared API dependencies

Exposes the store and catalog held on ``app.state`` to routes, and the
save-retry policy applied when a mutation was applied in memory but the
bundle write failed.
"""

from __future__ import annotations

from typing import Callable, Optional, TypeVar

import structlog
from fastapi import Request
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ghostmatch.config import get_settings
from ghostmatch.errors import PersistenceError
from ghostmatch.services.catalog import ProfileCatalog
from ghostmatch.services.match_store import MatchStore

logger = structlog.get_logger("ghostmatch.api.deps")

SAVE_WARNING = "changes may not be saved"

T = TypeVar("T")


def get_store(request: Request) -> MatchStore:
    return request.app.state.store


def get_catalog(request: Request) -> ProfileCatalog:
    return request.app.state.catalog


def retry_save(store: MatchStore) -> Optional[str]:
    """Retry ``store.save()`` with exponential backoff.

    Returns ``None`` once a write succeeds, or the user-facing warning when
    every attempt failed.  Never raises ``PersistenceError``.
    """
    attempts = get_settings().SAVE_RETRY_ATTEMPTS
    try:
        for attempt in Retrying(
            retry=retry_if_exception_type(PersistenceError),
            stop=stop_after_attempt(attempts),
            wait=wait_exponential(multiplier=0.1, min=0.1, max=2),
            reraise=True,
        ):
            with attempt:
                logger.debug(
                    "save_retry_attempt",
                    attempt_number=attempt.retry_state.attempt_number,
                )
                store.save()
    except PersistenceError as exc:
        logger.error("save_retry_exhausted", attempts=attempts, error=str(exc))
        return SAVE_WARNING

    logger.info("save_retry_succeeded")
    return None


def apply_and_save(
    store: MatchStore,
    operation: Callable[[], T],
) -> tuple[T, Optional[str]]:
    """Run a mutating store operation, recovering from a failed write.

    The operation's result is returned either way; the second element is the
    warning to surface when the change could not be persisted.
    """
    try:
        return operation(), None
    except PersistenceError as exc:
        logger.warning("store_write_failed", error=str(exc))
        return exc.result, retry_save(store)  # type: ignore[return-value]
