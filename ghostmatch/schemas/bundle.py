from pydantic import Field

from ghostmatch.schemas.common import CamelModel
from ghostmatch.schemas.notification import Notification
from ghostmatch.schemas.profile import MatchCandidate
from ghostmatch.schemas.session import Session


class Bundle(CamelModel):
    """The atomic unit of persisted state.

    Key names are part of the stored format and must not change.
    """

    matches: list[MatchCandidate] = Field(default_factory=list)
    sessions: dict[str, Session] = Field(default_factory=dict)
    notifications: list[Notification] = Field(default_factory=list)
