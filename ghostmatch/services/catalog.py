"""
GhostMatch — Profile Catalog

Read-only pool of match candidates.  The catalog is supplied from outside the
store (a JSON file, or the demo fixture) and never changes for the lifetime of
the process.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, Iterator, Optional

import structlog

from ghostmatch.schemas import MatchCandidate

logger = structlog.get_logger("ghostmatch.catalog")


class ProfileCatalog:
    def __init__(self, candidates: Iterable[MatchCandidate]) -> None:
        self._candidates: tuple[MatchCandidate, ...] = tuple(candidates)
        self._by_id: dict[str, MatchCandidate] = {}
        for candidate in self._candidates:
            if candidate.id in self._by_id:
                raise ValueError(f"Duplicate candidate id in catalog: {candidate.id!r}")
            self._by_id[candidate.id] = candidate

    @classmethod
    def from_records(cls, records: Iterable[dict]) -> "ProfileCatalog":
        return cls(MatchCandidate.model_validate(r) for r in records)

    @classmethod
    def from_json(cls, path: str | Path) -> "ProfileCatalog":
        """Load a catalog from a JSON array of candidate records."""
        with open(path, encoding="utf-8") as f:
            records = json.load(f)
        catalog = cls.from_records(records)
        logger.info("catalog_loaded", path=str(path), candidates=len(catalog))
        return catalog

    @classmethod
    def demo(cls) -> "ProfileCatalog":
        from ghostmatch.fixtures import DEMO_CANDIDATES

        return cls.from_records(DEMO_CANDIDATES)

    def get(self, candidate_id: str) -> Optional[MatchCandidate]:
        return self._by_id.get(candidate_id)

    def __iter__(self) -> Iterator[MatchCandidate]:
        return iter(self._candidates)

    def __len__(self) -> int:
        return len(self._candidates)

    def __contains__(self, candidate_id: object) -> bool:
        return candidate_id in self._by_id
