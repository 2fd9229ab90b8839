from __future__ import annotations

from typing import Iterable, Optional

from ghostmatch.schemas import MatchCandidate


class MatchRegistry:
    """Confirmed matches, keyed by candidate id, in match order."""

    def __init__(self, matches: Optional[Iterable[MatchCandidate]] = None) -> None:
        self._matches: dict[str, MatchCandidate] = {}
        for match in matches or []:
            self._matches.setdefault(match.id, match)

    def contains(self, match_id: str) -> bool:
        return match_id in self._matches

    def get(self, match_id: str) -> Optional[MatchCandidate]:
        return self._matches.get(match_id)

    def add(self, candidate: MatchCandidate) -> bool:
        """Record a match; False if the candidate was already matched."""
        if candidate.id in self._matches:
            return False
        self._matches[candidate.id] = candidate
        return True

    def remove(self, match_id: str) -> bool:
        return self._matches.pop(match_id, None) is not None

    def ids(self) -> frozenset[str]:
        return frozenset(self._matches)

    def get_matches(self) -> list[MatchCandidate]:
        return list(self._matches.values())

    def __len__(self) -> int:
        return len(self._matches)
