from typing import Literal, Optional

from pydantic import BaseModel

from ghostmatch.schemas.profile import MatchCandidate, UserProfile


class SwipeCreate(BaseModel):
    user: UserProfile
    candidate_id: str
    direction: Literal["left", "right"] = "right"


class SwipeResponse(BaseModel):
    status: str
    is_match: bool
    match_id: Optional[str] = None
    warning: Optional[str] = None


class QueueResponse(BaseModel):
    candidates: list[MatchCandidate]
    total: int


class StoreActionResponse(BaseModel):
    status: str
    warning: Optional[str] = None
