"""
GhostMatch — Match & Session Store

The single owner of matches, chat sessions and notifications for one user.

Lifecycle:
  store = MatchStore(gateway)      # nothing loaded yet
  store.open()                     # load bundle (never raises on bad data)
  ... operations ...
  store.close()                    # flush unsaved state, release backend

Every mutating operation runs inside one re-entrant lock that covers both the
in-memory update and the bundle write, so two concurrent right-swipes on the
same candidate cannot both create a session.  Reads take the same lock and
return copies, so callers never see a session halfway through an append.

When the bundle write fails the in-memory change is kept, the store is marked
dirty and a ``PersistenceError`` is raised; ``save()`` retries the write.
"""

from __future__ import annotations

import threading
import uuid
from typing import Iterable, Optional

import structlog

from ghostmatch.clock import Clock, now_ms
from ghostmatch.errors import NotFoundError, PersistenceError, ValidationFailure
from ghostmatch.persistence.gateway import PersistenceGateway
from ghostmatch.schemas import (
    Bundle,
    MatchCandidate,
    Message,
    Notification,
    NotificationType,
    Profile,
    Session,
)
from ghostmatch.services.match_registry import MatchRegistry
from ghostmatch.services.notification_center import NotificationCenter
from ghostmatch.services.queue_service import (
    EligibilityPredicate,
    build_queue,
    complementary_gender,
)
from ghostmatch.services.session_store import SessionStore

logger = structlog.get_logger("ghostmatch.match_store")

MATCH_TITLE = "It's a Match!"
MESSAGE_TITLE = "New message"


class MatchStore:
    """Explicit store object with an injected persistence gateway.

    Parameters
    ----------
    gateway:
        Load/save contract for the durable bundle.
    clock:
        Millisecond clock; injectable for deterministic tests.
    """

    def __init__(self, gateway: PersistenceGateway, clock: Clock = now_ms) -> None:
        self.gateway = gateway
        self._clock = clock
        self._lock = threading.RLock()
        self._registry = MatchRegistry()
        self._sessions = SessionStore()
        self._notifications = NotificationCenter()
        self._opened = False
        self._dirty = False
        self.load_error: Optional[PersistenceError] = None

    # ── Lifecycle ─────────────────────────────────────────────────────────

    def open(self) -> "MatchStore":
        """Load the persisted bundle.

        A missing or unreadable bundle falls back to the first-run state; the
        warning is kept on ``load_error`` instead of being raised.
        """
        with self._lock:
            result = self.gateway.load()
            self._install(result.bundle)
            self.load_error = result.error
            self._opened = True
            self._dirty = False

        if result.error is not None:
            logger.warning("store_opened_with_fallback", error=str(result.error))
        else:
            logger.info(
                "store_opened",
                matches=len(self._registry),
                sessions=len(self._sessions),
                notifications=len(self._notifications),
            )
        return self

    def close(self) -> None:
        """Flush pending changes (best effort) and release the backend."""
        with self._lock:
            if not self._opened:
                return
            if self._dirty:
                try:
                    self._persist()
                except PersistenceError:
                    logger.error("store_close_unsaved_changes")
            self.gateway.close()
            self._opened = False
        logger.info("store_closed")

    def __enter__(self) -> "MatchStore":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def is_open(self) -> bool:
        return self._opened

    @property
    def has_unsaved_changes(self) -> bool:
        return self._dirty

    # ── Matches ───────────────────────────────────────────────────────────

    def add_match(self, candidate: MatchCandidate, current_user_id: str) -> bool:
        """Record a match with ``candidate``.

        Creates the chat session and the "match" notification in the same
        step.  Returns False (and changes nothing) if the candidate is already
        matched.  Matching with one's own profile is a ``ValidationFailure``.
        """
        if candidate.id == current_user_id:
            raise ValidationFailure("Cannot match with your own profile")
        log = logger.bind(match_id=candidate.id, user_id=current_user_id)
        with self._lock:
            self._ensure_open()
            if self._registry.contains(candidate.id):
                log.info("add_match_already_matched")
                return False

            now = self._now()
            self._registry.add(candidate)
            self._sessions.create(candidate.id, current_user_id, candidate.id, now)
            self._notifications.add_notification(
                Notification(
                    id=uuid.uuid4().hex,
                    title=MATCH_TITLE,
                    message=f"You matched with {candidate.anonymous_id}!",
                    timestamp=now,
                    type=NotificationType.MATCH,
                )
            )
            log.info("match_created")
            self._persist(result=True)
        return True

    def remove_match(self, match_id: str) -> None:
        """Unmatch: drop the match and its session together.

        Past notifications are an event log and stay.
        """
        with self._lock:
            self._ensure_open()
            if not self._registry.contains(match_id):
                raise NotFoundError("match", match_id)
            self._registry.remove(match_id)
            self._sessions.remove(match_id)
            logger.info("match_removed", match_id=match_id)
            self._persist()

    def get_matches(self) -> list[MatchCandidate]:
        with self._lock:
            return self._registry.get_matches()

    def matched_ids(self) -> frozenset[str]:
        with self._lock:
            return self._registry.ids()

    def is_matched(self, match_id: str) -> bool:
        with self._lock:
            return self._registry.contains(match_id)

    def request_queue(
        self,
        user: Profile,
        catalog: Iterable[MatchCandidate],
        eligible: EligibilityPredicate = complementary_gender,
    ) -> tuple[MatchCandidate, ...]:
        return build_queue(user, catalog, self.matched_ids(), eligible)

    # ── Sessions ──────────────────────────────────────────────────────────

    def get_session(self, match_id: str) -> Session:
        with self._lock:
            return self._sessions.get_session(match_id).model_copy(deep=True)

    def get_sessions(self) -> dict[str, Session]:
        with self._lock:
            return {
                match_id: session.model_copy(deep=True)
                for match_id, session in self._sessions.sessions().items()
            }

    def add_message(
        self,
        match_id: str,
        sender_id: str,
        text: str,
        *,
        is_system: bool = False,
        message_id: Optional[str] = None,
    ) -> Message:
        """Append a message to the session for ``match_id``.

        Raises ``ValidationFailure`` for blank text (system messages excepted),
        ``NotFoundError`` when no session exists and ``ConflictError`` for a
        reused ``message_id``; none of these touch any session.
        """
        if not sender_id:
            raise ValidationFailure("Message sender is required")
        if not is_system and not text.strip():
            raise ValidationFailure("Message text must not be empty")

        with self._lock:
            self._ensure_open()
            now = self._now()
            message = self._sessions.add_message(
                match_id,
                sender_id,
                text,
                now,
                is_system=is_system,
                message_id=message_id,
            )
            session = self._sessions.get_session(match_id)
            if not is_system and sender_id == session.user_b:
                match = self._registry.get(match_id)
                sender_name = match.anonymous_id if match is not None else sender_id
                self._notifications.add_notification(
                    Notification(
                        id=uuid.uuid4().hex,
                        title=MESSAGE_TITLE,
                        message=f"{sender_name} sent you a message.",
                        timestamp=now,
                        type=NotificationType.MESSAGE,
                    )
                )
            logger.debug("message_added", match_id=match_id, message_id=message.id)
            self._persist(result=message)
        return message

    def reveal_session(self, match_id: str) -> Session:
        """Flag the session as revealed. Idempotent."""
        with self._lock:
            self._ensure_open()
            session = self._sessions.get_session(match_id)
            if session.is_revealed:
                return session.model_copy(deep=True)
            self._sessions.reveal(match_id, self._now())
            logger.info("session_revealed", match_id=match_id)
            revealed = session.model_copy(deep=True)
            self._persist(result=revealed)
            return revealed

    # ── Notifications ─────────────────────────────────────────────────────

    def add_notification(self, notification: Notification) -> None:
        with self._lock:
            self._ensure_open()
            self._notifications.add_notification(notification)
            self._persist()

    def notify(
        self,
        notification_type: NotificationType,
        title: str,
        message: str,
    ) -> Notification:
        """Build a notification stamped with the current time and add it."""
        notification = Notification(
            id=uuid.uuid4().hex,
            title=title,
            message=message,
            timestamp=self._now(),
            type=notification_type,
        )
        self.add_notification(notification)
        return notification

    def mark_all_read(self) -> int:
        with self._lock:
            self._ensure_open()
            changed = self._notifications.mark_all_read()
            if changed or self._dirty:
                self._persist(result=changed)
        return changed

    def get_notifications(self) -> list[Notification]:
        with self._lock:
            return [n.model_copy() for n in self._notifications.get_notifications()]

    def unread_count(self) -> int:
        with self._lock:
            return self._notifications.unread_count()

    # ── Persistence ───────────────────────────────────────────────────────

    def save(self) -> None:
        """Write the current state; use to retry after a ``PersistenceError``."""
        with self._lock:
            self._ensure_open()
            self._persist()

    def snapshot(self) -> Bundle:
        with self._lock:
            return self._bundle().model_copy(deep=True)

    def reset(self) -> None:
        """Return to the first-run state (empty matches, seed notifications)."""
        with self._lock:
            self._ensure_open()
            self._install(self.gateway.default_bundle())
            logger.info("store_reset")
            self._persist()

    # ── Internals ─────────────────────────────────────────────────────────

    def _ensure_open(self) -> None:
        if not self._opened:
            raise RuntimeError("MatchStore.open() must be called before use")

    def _now(self) -> int:
        return self._clock()

    def _install(self, bundle: Bundle) -> None:
        self._registry = MatchRegistry(bundle.matches)
        self._sessions = SessionStore(bundle.sessions)
        self._notifications = NotificationCenter(bundle.notifications)

    def _bundle(self) -> Bundle:
        return Bundle(
            matches=self._registry.get_matches(),
            sessions=self._sessions.sessions(),
            notifications=self._notifications.get_notifications(),
        )

    def _persist(self, result: object = None) -> None:
        try:
            self.gateway.save(self._bundle())
        except PersistenceError as exc:
            self._dirty = True
            exc.result = result
            raise
        self._dirty = False
