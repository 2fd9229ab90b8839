"""Shared pytest fixtures for GhostMatch tests."""
import pytest

from ghostmatch.persistence.backends import MemoryBlobStore
from ghostmatch.persistence.gateway import PersistenceGateway
from ghostmatch.schemas import MatchCandidate, Notification, NotificationType, UserProfile
from ghostmatch.services.catalog import ProfileCatalog
from ghostmatch.services.match_store import MatchStore


class StepClock:
    """Deterministic millisecond clock advancing by ``step`` on every read."""

    def __init__(self, start: int = 1_700_000_000_000, step: int = 1000):
        self.now = start
        self.step = step
        self.calls: list[int] = []

    def __call__(self) -> int:
        self.now += self.step
        self.calls.append(self.now)
        return self.now


def seed_notifications() -> list[Notification]:
    return [
        Notification(
            id="welcome",
            title="Welcome",
            message="Welcome aboard",
            timestamp=1_600_000_000_000,
            type=NotificationType.SYSTEM,
        )
    ]


@pytest.fixture
def seed():
    return seed_notifications


@pytest.fixture
def clock():
    return StepClock()


@pytest.fixture
def blob_store():
    return MemoryBlobStore()


@pytest.fixture
def gateway(blob_store):
    return PersistenceGateway(blob_store, seed_notifications=seed_notifications)


@pytest.fixture
def store(gateway, clock):
    match_store = MatchStore(gateway, clock=clock).open()
    yield match_store
    match_store.close()


@pytest.fixture
def user():
    """Current user from the swipe scenario: U, gender=Male."""
    return UserProfile(
        id="u1",
        anonymous_id="User#1A2B",
        university_email="student@state.edu",
        gender="Male",
        interests=("Coding", "Coffee"),
    )


@pytest.fixture
def candidate_x():
    """Candidate X from the swipe scenario: id=c1, gender=Female."""
    return MatchCandidate(
        id="c1",
        anonymous_id="Ghost#A1F",
        gender="Female",
        branch="Computer Science",
        year="Junior",
        interests=("Coding", "Anime"),
        match_percentage=92,
        distance="0.5 miles",
    )


@pytest.fixture
def catalog_records():
    return [
        {"id": "c1", "anonymousId": "Ghost#A1F", "gender": "Female", "matchPercentage": 92},
        {"id": "c2", "anonymousId": "Ghost#7C2", "gender": "Male", "matchPercentage": 85},
        {"id": "c3", "anonymousId": "Ghost#3E9", "gender": "Female", "matchPercentage": 78},
        {"id": "u1", "anonymousId": "User#1A2B", "gender": "Female", "matchPercentage": 100},
        {"id": "c4", "anonymousId": "Ghost#B40", "gender": "Male", "matchPercentage": 64},
        {"id": "c5", "anonymousId": "Ghost#5D1", "gender": "Female", "matchPercentage": 88},
    ]


@pytest.fixture
def catalog(catalog_records):
    return ProfileCatalog.from_records(catalog_records)
