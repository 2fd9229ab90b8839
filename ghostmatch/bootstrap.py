"""
GhostMatch — Store and catalog wiring

Builds the configured ``MatchStore`` and ``ProfileCatalog`` without importing
the web application, so command-line tools can share the same wiring.
"""

from __future__ import annotations

from ghostmatch.config import Settings
from ghostmatch.fixtures import default_notifications
from ghostmatch.persistence.backends import build_blob_store
from ghostmatch.persistence.gateway import PersistenceGateway
from ghostmatch.services.catalog import ProfileCatalog
from ghostmatch.services.match_store import MatchStore


def build_store(settings: Settings) -> MatchStore:
    """Wire a ``MatchStore`` to the configured blob backend."""
    gateway = PersistenceGateway(
        build_blob_store(settings),
        key=settings.BUNDLE_KEY,
        seed_notifications=default_notifications,
        encryption_key=settings.BUNDLE_ENCRYPTION_KEY,
    )
    return MatchStore(gateway)


def build_catalog(settings: Settings) -> ProfileCatalog:
    if settings.CATALOG_PATH:
        return ProfileCatalog.from_json(settings.CATALOG_PATH)
    return ProfileCatalog.demo()
