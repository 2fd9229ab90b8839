"""
GhostMatch — Store error taxonomy.

Every error raised by the match store derives from ``StoreError`` so that
the HTTP layer can translate the whole family with one handler.  None of
them is fatal: the store remains usable after any failed operation.
"""

from __future__ import annotations


class StoreError(Exception):
    """Base class for all match-store failures."""


class NotFoundError(StoreError):
    """An operation referenced an identifier with no backing record."""

    def __init__(self, kind: str, identifier: str) -> None:
        super().__init__(f"{kind} {identifier!r} not found")
        self.kind = kind
        self.identifier = identifier


class ConflictError(StoreError):
    """A record with the same identifier already exists."""


class ValidationFailure(StoreError):
    """Input was rejected before any state was touched."""


class PersistenceError(StoreError):
    """The durable bundle could not be read or written.

    On a write failure the in-memory state has already been updated; the
    caller may retry with ``MatchStore.save()``.  ``result`` carries whatever
    the failed operation would have returned.
    """

    def __init__(self, message: str, result: object = None) -> None:
        super().__init__(message)
        self.result = result
