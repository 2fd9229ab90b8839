from pydantic import Field

from ghostmatch.schemas.common import CamelModel


class Message(CamelModel):
    id: str
    sender_id: str
    text: str
    timestamp: int
    is_system: bool = False


class Session(CamelModel):
    """Per-match conversation state. ``messages`` is append-only."""

    match_id: str
    user_a: str
    user_b: str
    messages: list[Message] = Field(default_factory=list)
    last_updated: int
    is_revealed: bool = False


class MessageCreate(CamelModel):
    sender_id: str = Field(min_length=1)
    text: str
    is_system: bool = False
