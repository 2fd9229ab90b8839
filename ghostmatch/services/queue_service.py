"""
GhostMatch — Match Queue Builder

Derives, for one user, the ordered list of candidates they may swipe on:

  1. Keep candidates accepted by the eligibility predicate
     (default: the complementary gender marker).
  2. Drop the user's own profile.
  3. Drop anyone already matched.

Catalog order is preserved.  ``build_queue`` is a pure function of its
inputs; ``SwipeDeck`` adds a cursor over one built queue for the swipe UI.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Iterable, Optional, Sequence, Union

import structlog

from ghostmatch.errors import PersistenceError, ValidationFailure
from ghostmatch.schemas import MatchCandidate, Profile

if TYPE_CHECKING:
    from ghostmatch.services.match_store import MatchStore

logger = structlog.get_logger("ghostmatch.queue_service")

EligibilityPredicate = Callable[[Profile, MatchCandidate], bool]

SWIPE_DIRECTIONS = ("left", "right")


def complementary_gender(user: Profile, candidate: MatchCandidate) -> bool:
    """Binary rule: ``Male`` users see ``Female`` candidates, everyone else
    sees ``Male`` candidates."""
    target = "Female" if user.gender == "Male" else "Male"
    return candidate.gender == target


def build_queue(
    user: Profile,
    catalog: Iterable[MatchCandidate],
    existing_matches: Iterable[Union[str, MatchCandidate]] = (),
    eligible: EligibilityPredicate = complementary_gender,
) -> tuple[MatchCandidate, ...]:
    """Return the candidates ``user`` may swipe on, in catalog order.

    ``existing_matches`` may hold match identifiers or matched candidates.
    """
    matched = {m if isinstance(m, str) else m.id for m in existing_matches}
    return tuple(
        candidate
        for candidate in catalog
        if candidate.id != user.id
        and candidate.id not in matched
        and eligible(user, candidate)
    )


class SwipeDeck:
    """Cursor over a single built queue.

    ``reset`` rewinds to the first card without rebuilding, so candidates
    matched after the build are only dropped by building a new deck.
    """

    def __init__(self, candidates: Sequence[MatchCandidate]) -> None:
        self._candidates: tuple[MatchCandidate, ...] = tuple(candidates)
        self._position = 0

    @classmethod
    def for_user(
        cls,
        user: Profile,
        catalog: Iterable[MatchCandidate],
        store: "MatchStore",
        eligible: EligibilityPredicate = complementary_gender,
    ) -> "SwipeDeck":
        return cls(build_queue(user, catalog, store.matched_ids(), eligible))

    @property
    def current(self) -> Optional[MatchCandidate]:
        if self._position >= len(self._candidates):
            return None
        return self._candidates[self._position]

    @property
    def exhausted(self) -> bool:
        return self._position >= len(self._candidates)

    @property
    def remaining(self) -> int:
        return max(0, len(self._candidates) - self._position)

    def __len__(self) -> int:
        return len(self._candidates)

    def advance(self) -> None:
        if not self.exhausted:
            self._position += 1

    def reset(self) -> None:
        self._position = 0

    def swipe(self, direction: str, store: "MatchStore", user_id: str) -> bool:
        """Apply a swipe to the current card and move to the next one.

        Returns True when a right swipe created a new match.  The deck
        advances even if the store reports a persistence failure, since the
        match is already recorded in memory.  Any other error leaves the
        current card in place.
        """
        if direction not in SWIPE_DIRECTIONS:
            raise ValidationFailure(f"Unknown swipe direction: {direction!r}")
        candidate = self.current
        if candidate is None:
            raise ValidationFailure("No candidate left to swipe on")

        logger.debug("swipe", direction=direction, candidate_id=candidate.id)
        try:
            created = direction == "right" and store.add_match(candidate, user_id)
        except PersistenceError:
            self.advance()
            raise
        self.advance()
        return created
