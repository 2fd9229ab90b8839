import re
from typing import Optional

from pydantic import ConfigDict, Field, field_validator

from ghostmatch.schemas.common import CamelModel

MAX_INTERESTS = 5

_UNIVERSITY_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.edu$", re.IGNORECASE)


class Profile(CamelModel):
    """Catalog record for a student. Read-only once produced."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    anonymous_id: str
    university: str = ""
    gender: str = ""
    branch: str = "General"
    year: str = "Freshman"
    interests: tuple[str, ...] = ()
    bio: str = ""
    is_verified: bool = False
    avatar_url: Optional[str] = None

    @field_validator("interests")
    @classmethod
    def validate_interest_count(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        if len(v) > MAX_INTERESTS:
            raise ValueError(f"Too many interests: {len(v)} (maximum {MAX_INTERESTS})")
        return v


class UserProfile(Profile):
    university_email: str

    @field_validator("university_email")
    @classmethod
    def validate_university_email(cls, v: str) -> str:
        v = v.strip()
        if not _UNIVERSITY_EMAIL_RE.match(v):
            raise ValueError("Please use a valid university (.edu) email.")
        return v


class MatchCandidate(Profile):
    match_percentage: float = Field(default=0.0, ge=0, le=100)
    distance: str = ""
