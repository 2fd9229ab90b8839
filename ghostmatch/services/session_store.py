"""
GhostMatch — Session Store

One chat session per match.  Messages are append-only and never reordered or
deduplicated by content.  Message identifiers come from a monotonic counter
seeded above every numeric identifier already present, so ids stay unique even
when several messages land in the same millisecond.
"""

from __future__ import annotations

import re
from typing import Mapping, Optional

from ghostmatch.errors import ConflictError, NotFoundError
from ghostmatch.schemas import Message, Session

# ASCII-digit ids of at most 18 digits seed the counter; other ids never do
_NUMERIC_ID = re.compile(r"[0-9]{1,18}")


class SessionStore:
    def __init__(self, sessions: Optional[Mapping[str, Session]] = None) -> None:
        self._sessions: dict[str, Session] = dict(sessions or {})
        self._message_ids: set[str] = {
            m.id for s in self._sessions.values() for m in s.messages
        }
        numeric = [int(mid) for mid in self._message_ids if _NUMERIC_ID.fullmatch(mid)]
        self._next_id = max(numeric, default=0) + 1

    # ── Lookup ────────────────────────────────────────────────────────────

    def contains(self, match_id: str) -> bool:
        return match_id in self._sessions

    def get_session(self, match_id: str) -> Session:
        session = self._sessions.get(match_id)
        if session is None:
            raise NotFoundError("session", match_id)
        return session

    def sessions(self) -> dict[str, Session]:
        return dict(self._sessions)

    # ── Mutation ──────────────────────────────────────────────────────────

    def create(self, match_id: str, user_a: str, user_b: str, now: int) -> Session:
        session = Session(
            match_id=match_id,
            user_a=user_a,
            user_b=user_b,
            messages=[],
            last_updated=now,
            is_revealed=False,
        )
        self._sessions[match_id] = session
        return session

    def remove(self, match_id: str) -> bool:
        # Removed sessions keep their message ids reserved.
        return self._sessions.pop(match_id, None) is not None

    def allocate_message_id(self) -> str:
        while str(self._next_id) in self._message_ids:
            self._next_id += 1
        message_id = str(self._next_id)
        self._next_id += 1
        return message_id

    def add_message(
        self,
        match_id: str,
        sender_id: str,
        text: str,
        now: int,
        *,
        is_system: bool = False,
        message_id: Optional[str] = None,
    ) -> Message:
        session = self.get_session(match_id)
        if message_id is not None and message_id in self._message_ids:
            raise ConflictError(f"Message id {message_id!r} already exists")

        message = Message(
            id=message_id if message_id is not None else self.allocate_message_id(),
            sender_id=sender_id,
            text=text,
            timestamp=now,
            is_system=is_system,
        )
        session.messages.append(message)
        session.last_updated = max(session.last_updated, now)
        self._message_ids.add(message.id)
        return message

    def reveal(self, match_id: str, now: int) -> Session:
        session = self.get_session(match_id)
        if not session.is_revealed:
            session.is_revealed = True
            session.last_updated = max(session.last_updated, now)
        return session

    def __len__(self) -> int:
        return len(self._sessions)
