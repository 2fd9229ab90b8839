"""
GhostMatch — schema registry.

Re-exports every persisted record so call-sites can import from
``ghostmatch.schemas`` directly.
"""

from ghostmatch.schemas.bundle import Bundle
from ghostmatch.schemas.notification import Notification, NotificationType
from ghostmatch.schemas.profile import MAX_INTERESTS, MatchCandidate, Profile, UserProfile
from ghostmatch.schemas.session import Message, MessageCreate, Session

__all__ = [
    "Bundle",
    "MAX_INTERESTS",
    "MatchCandidate",
    "Message",
    "MessageCreate",
    "Notification",
    "NotificationType",
    "Profile",
    "Session",
    "UserProfile",
]
