"""
GhostMatch — Persistence Gateway

Serializes matches, sessions and notifications as ONE bundle and stores it
under one key of a ``BlobStore``.  Because the whole bundle is encoded before
anything is written, and backends replace a key in a single write, a failed
``save`` can never leave a mix of old and new collections on disk.

Reading is forgiving: a missing bundle yields the first-run state (no matches,
no sessions, seed notifications) and a corrupt bundle yields the same state
plus a warning-level ``PersistenceError`` in ``LoadResult.error``.  ``load``
itself never raises.

Bundles written by the legacy web client, which kept the three collections
under separate keys, are picked up when the combined key is absent.
"""

from __future__ import annotations

import json
from typing import Callable, NamedTuple, Optional

import structlog
from pydantic import ValidationError

from ghostmatch.errors import PersistenceError
from ghostmatch.persistence.backends import BlobStore
from ghostmatch.persistence.encryption import InvalidToken, decrypt_blob, encrypt_blob
from ghostmatch.schemas import Bundle, Notification

logger = structlog.get_logger("ghostmatch.persistence.gateway")

DEFAULT_BUNDLE_KEY = "oh_bundle"

# Collection name -> key used by the legacy web client
LEGACY_KEYS: dict[str, str] = {
    "matches": "oh_matches",
    "sessions": "oh_chats",
    "notifications": "oh_notifications",
}

# ValidationError and UnicodeDecodeError are both ValueErrors
_DECODE_ERRORS = (ValueError, InvalidToken)


class LoadResult(NamedTuple):
    bundle: Bundle
    error: Optional[PersistenceError] = None


class PersistenceGateway:
    """Load/save contract between the match store and a durable blob."""

    def __init__(
        self,
        store: BlobStore,
        key: str = DEFAULT_BUNDLE_KEY,
        seed_notifications: Optional[Callable[[], list[Notification]]] = None,
        encryption_key: str = "",
    ) -> None:
        self.store = store
        self.key = key
        self._seed_notifications = seed_notifications or list
        self._encryption_key = encryption_key

    # ── Public API ────────────────────────────────────────────────────────

    def default_bundle(self) -> Bundle:
        """First-run state: nothing matched, seed notifications only."""
        return Bundle(notifications=self._seed_notifications())

    def load(self) -> LoadResult:
        log = logger.bind(key=self.key)

        try:
            raw = self.store.get(self.key)
        except Exception as exc:
            log.warning("bundle_read_failed", error=str(exc))
            return LoadResult(
                self.default_bundle(),
                PersistenceError(f"Could not read bundle {self.key!r}: {exc}"),
            )

        if raw is None:
            return self._load_legacy()

        try:
            bundle = self._decode(raw)
        except _DECODE_ERRORS as exc:
            log.warning("bundle_corrupt", error=str(exc))
            return LoadResult(
                self.default_bundle(),
                PersistenceError(f"Stored bundle {self.key!r} is unreadable; starting fresh"),
            )

        log.info(
            "bundle_loaded",
            matches=len(bundle.matches),
            sessions=len(bundle.sessions),
            notifications=len(bundle.notifications),
        )
        return LoadResult(bundle)

    def save(self, bundle: Bundle) -> None:
        """Write the full bundle or raise ``PersistenceError`` leaving the
        previous durable state untouched."""
        try:
            payload = self._encode(bundle)
            self.store.put(self.key, payload)
        except Exception as exc:
            logger.warning("bundle_write_failed", key=self.key, error=str(exc))
            raise PersistenceError(f"Could not write bundle {self.key!r}: {exc}") from exc

        logger.debug("bundle_saved", key=self.key, size=len(payload))

    def ping(self) -> None:
        self.store.ping()

    def close(self) -> None:
        self.store.close()

    # ── Encoding ──────────────────────────────────────────────────────────

    def _encode(self, bundle: Bundle) -> bytes:
        data = bundle.model_dump_json(by_alias=True).encode("utf-8")
        if self._encryption_key:
            data = encrypt_blob(data, self._encryption_key)
        return data

    def _decode(self, raw: bytes) -> Bundle:
        if self._encryption_key:
            raw = decrypt_blob(raw, self._encryption_key)
        return Bundle.model_validate_json(raw)

    # ── Legacy three-key layout ───────────────────────────────────────────

    def _load_legacy(self) -> LoadResult:
        parts: dict[str, object] = {}
        try:
            for name, legacy_key in LEGACY_KEYS.items():
                raw = self.store.get(legacy_key)
                if raw is not None:
                    parts[name] = json.loads(raw)
        except Exception as exc:
            logger.warning("legacy_bundle_unreadable", error=str(exc))
            return LoadResult(
                self.default_bundle(),
                PersistenceError(f"Legacy bundle is unreadable; starting fresh: {exc}"),
            )

        if not parts:
            logger.info("bundle_missing_first_run", key=self.key)
            return LoadResult(self.default_bundle())

        if "notifications" not in parts:
            parts["notifications"] = [
                n.model_dump(by_alias=True, mode="json") for n in self._seed_notifications()
            ]

        try:
            bundle = Bundle.model_validate(parts)
        except ValidationError as exc:
            logger.warning("legacy_bundle_corrupt", error=str(exc))
            return LoadResult(
                self.default_bundle(),
                PersistenceError("Legacy bundle is unreadable; starting fresh"),
            )

        logger.info("legacy_bundle_imported", collections=sorted(parts))
        return LoadResult(bundle)
