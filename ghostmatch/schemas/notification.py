from enum import Enum

from ghostmatch.schemas.common import CamelModel


class NotificationType(str, Enum):
    MATCH = "match"
    MESSAGE = "message"
    SYSTEM = "system"


class Notification(CamelModel):
    id: str
    title: str
    message: str
    timestamp: int
    read: bool = False
    type: NotificationType
