"""
GhostMatch — Demo fixtures.

The candidate pool and the first-run notifications are external inputs to the
store.  These defaults back the demo when no ``CATALOG_PATH`` is configured.
"""

from __future__ import annotations

from ghostmatch.clock import now_ms
from ghostmatch.schemas import Notification, NotificationType

DEMO_CANDIDATES: list[dict] = [
    {
        "id": "c1",
        "anonymousId": "Ghost#A1F",
        "university": "State University",
        "gender": "Female",
        "branch": "Computer Science",
        "year": "Junior",
        "interests": ["Coding", "Anime", "Coffee"],
        "bio": "Debugging life one coffee at a time.",
        "isVerified": True,
        "matchPercentage": 92,
        "distance": "0.5 miles",
    },
    {
        "id": "c2",
        "anonymousId": "Ghost#7C2",
        "university": "State University",
        "gender": "Male",
        "branch": "Mechanical Engineering",
        "year": "Senior",
        "interests": ["Gym", "Robotics", "Hiking"],
        "bio": "Will build you a robot. Probably.",
        "isVerified": True,
        "matchPercentage": 85,
        "distance": "1.2 miles",
    },
    {
        "id": "c3",
        "anonymousId": "Ghost#3E9",
        "university": "State University",
        "gender": "Female",
        "branch": "Fine Arts",
        "year": "Sophomore",
        "interests": ["Painting", "Music", "Poetry", "Travel"],
        "bio": "Looking for someone to visit galleries with.",
        "isVerified": True,
        "matchPercentage": 78,
        "distance": "2 miles",
    },
    {
        "id": "c4",
        "anonymousId": "Ghost#B40",
        "university": "State University",
        "gender": "Male",
        "branch": "Economics",
        "year": "Freshman",
        "interests": ["Chess", "Finance", "Coffee"],
        "bio": "Ask me about index funds. Or don't.",
        "isVerified": False,
        "matchPercentage": 64,
        "distance": "0.8 miles",
    },
    {
        "id": "c5",
        "anonymousId": "Ghost#5D1",
        "university": "State University",
        "gender": "Female",
        "branch": "Biology",
        "year": "Senior",
        "interests": ["Hiking", "Photography", "Dogs"],
        "bio": "Pre-med by day, trail runner by weekend.",
        "isVerified": True,
        "matchPercentage": 88,
        "distance": "1.5 miles",
    },
    {
        "id": "c6",
        "anonymousId": "Ghost#E2A",
        "university": "State University",
        "gender": "Male",
        "branch": "Computer Science",
        "year": "Junior",
        "interests": ["Gaming", "Coding", "Music"],
        "bio": "Ranked top 500. In one game. Once.",
        "isVerified": True,
        "matchPercentage": 81,
        "distance": "0.3 miles",
    },
]


def default_notifications() -> list[Notification]:
    """Seed notifications shown on first run, newest first."""
    now = now_ms()
    return [
        Notification(
            id="welcome",
            title="Welcome to GhostMatch",
            message="Your identity stays hidden until you both choose to reveal it.",
            timestamp=now,
            type=NotificationType.SYSTEM,
        ),
        Notification(
            id="verified",
            title="Profile verified",
            message="Your university email has been verified.",
            timestamp=now,
            read=True,
            type=NotificationType.SYSTEM,
        ),
    ]
