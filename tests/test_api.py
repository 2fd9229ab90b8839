"""Integration tests for the HTTP surface.

These drive the real store through FastAPI's TestClient with an in-memory
blob backend; the storage failure cases use a backend whose writes fail.
"""
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from ghostmatch.api.deps import SAVE_WARNING
from ghostmatch.config import Settings
from ghostmatch.main import create_app
from ghostmatch.persistence.gateway import PersistenceGateway
from ghostmatch.services.match_store import MatchStore

USER = {
    "id": "u1",
    "anonymousId": "User#1A2B",
    "universityEmail": "student@state.edu",
    "gender": "Male",
}


class BrokenBlobStore:
    def __init__(self):
        self.fail_writes = False

    def get(self, key):
        return None

    def put(self, key, data):
        if self.fail_writes:
            raise OSError("bucket unavailable")

    def ping(self):
        if self.fail_writes:
            raise OSError("bucket unavailable")

    def close(self):
        pass


@pytest.fixture
def settings():
    return Settings(STORAGE_BACKEND="memory", LOG_LEVEL="WARNING")


@pytest.fixture
def client(settings, gateway, clock, catalog):
    app = create_app(settings=settings, store=MatchStore(gateway, clock=clock), catalog=catalog)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def broken():
    return BrokenBlobStore()


@pytest.fixture
def broken_client(settings, broken, seed, catalog):
    store = MatchStore(PersistenceGateway(broken, seed_notifications=seed))
    app = create_app(settings=settings, store=store, catalog=catalog)
    with TestClient(app) as test_client:
        yield test_client


def _swipe_right(client, candidate_id="c1"):
    return client.post(
        "/api/v1/swipe",
        json={"user": USER, "candidate_id": candidate_id, "direction": "right"},
    )


class TestQueueAndSwipe:
    def test_queue_for_male_user(self, client):
        response = client.post("/api/v1/queue", json=USER)
        assert response.status_code == 200
        body = response.json()
        assert [c["id"] for c in body["candidates"]] == ["c1", "c3", "c5"]
        assert body["total"] == 3

    def test_queue_rejects_non_university_email(self, client):
        response = client.post("/api/v1/queue", json={**USER, "universityEmail": "me@gmail.com"})
        assert response.status_code == 422

    def test_swipe_right_creates_match(self, client):
        response = _swipe_right(client)
        assert response.status_code == 200
        assert response.json() == {
            "status": "matched",
            "is_match": True,
            "match_id": "c1",
            "warning": None,
        }

        queue = client.post("/api/v1/queue", json=USER).json()
        assert [c["id"] for c in queue["candidates"]] == ["c3", "c5"]

    def test_swipe_right_twice(self, client):
        _swipe_right(client)
        response = _swipe_right(client)
        assert response.json()["status"] == "already_matched"
        assert len(client.get("/api/v1/matches").json()) == 1

    def test_swipe_left(self, client):
        response = client.post(
            "/api/v1/swipe",
            json={"user": USER, "candidate_id": "c1", "direction": "left"},
        )
        assert response.json()["is_match"] is False
        assert client.get("/api/v1/matches").json() == []

    def test_swipe_unknown_candidate(self, client):
        assert _swipe_right(client, "nobody").status_code == 404

    def test_swipe_on_own_profile_rejected(self, client):
        response = _swipe_right(client, "u1")
        assert response.status_code == 422
        assert client.get("/api/v1/matches").json() == []

    @pytest.mark.parametrize("direction", ["left", "right"])
    def test_swipe_on_ineligible_candidate_rejected(self, client, direction):
        response = client.post(
            "/api/v1/swipe",
            json={"user": USER, "candidate_id": "c2", "direction": direction},
        )
        assert response.status_code == 422
        assert client.get("/api/v1/matches").json() == []


class TestSessionsApi:
    def test_send_and_read_messages(self, client):
        _swipe_right(client)
        response = client.post(
            "/api/v1/sessions/c1/messages",
            json={"senderId": "u1", "text": "hi"},
        )
        assert response.status_code == 201
        assert response.json()["message"]["text"] == "hi"

        session = client.get("/api/v1/sessions/c1").json()
        assert [m["text"] for m in session["messages"]] == ["hi"]
        assert session["lastUpdated"] == response.json()["message"]["timestamp"]

    def test_message_to_unknown_session(self, client):
        response = client.post(
            "/api/v1/sessions/c99/messages",
            json={"senderId": "u1", "text": "hi"},
        )
        assert response.status_code == 404

    def test_blank_message(self, client):
        _swipe_right(client)
        response = client.post(
            "/api/v1/sessions/c1/messages",
            json={"senderId": "u1", "text": "   "},
        )
        assert response.status_code == 422

    def test_reveal(self, client):
        _swipe_right(client)
        response = client.post("/api/v1/sessions/c1/reveal")
        assert response.status_code == 200
        assert response.json()["session"]["isRevealed"] is True

    def test_unmatch(self, client):
        _swipe_right(client)
        assert client.delete("/api/v1/matches/c1").json()["status"] == "removed"
        assert client.get("/api/v1/sessions/c1").status_code == 404
        assert client.delete("/api/v1/matches/c1").status_code == 404


class TestNotificationsApi:
    def test_match_notification_first(self, client):
        _swipe_right(client)
        body = client.get("/api/v1/notifications").json()
        assert body["notifications"][0]["type"] == "match"
        assert "Ghost#A1F" in body["notifications"][0]["message"]
        assert body["unread"] == 2

    def test_mark_read(self, client):
        _swipe_right(client)
        assert client.post("/api/v1/notifications/read").json()["marked"] == 2
        assert client.post("/api/v1/notifications/read").json()["marked"] == 0
        assert client.get("/api/v1/notifications").json()["unread"] == 0

    def test_reset(self, client):
        _swipe_right(client)
        assert client.post("/api/v1/admin/reset").json()["status"] == "reset"
        assert client.get("/api/v1/matches").json() == []


class TestPersistenceWarnings:
    """Write failures surface a warning instead of an error."""

    @pytest.fixture(autouse=True)
    def fast_retries(self):
        with patch("ghostmatch.api.deps.get_settings") as mock:
            settings = MagicMock()
            settings.SAVE_RETRY_ATTEMPTS = 2
            mock.return_value = settings
            yield

    def test_swipe_applied_with_warning(self, broken_client, broken):
        broken.fail_writes = True
        response = _swipe_right(broken_client)

        assert response.status_code == 200
        assert response.json()["status"] == "matched"
        assert response.json()["warning"] == SAVE_WARNING
        assert [m["id"] for m in broken_client.get("/api/v1/matches").json()] == ["c1"]

    def test_message_applied_with_warning(self, broken_client, broken):
        _swipe_right(broken_client)
        broken.fail_writes = True
        response = broken_client.post(
            "/api/v1/sessions/c1/messages",
            json={"senderId": "u1", "text": "hi"},
        )
        assert response.status_code == 201
        assert response.json()["warning"] == SAVE_WARNING
        assert response.json()["message"]["text"] == "hi"

    def test_recovers_when_storage_returns(self, broken_client, broken):
        broken.fail_writes = True
        _swipe_right(broken_client)
        broken.fail_writes = False

        response = broken_client.post("/api/v1/notifications/read")
        assert response.json()["warning"] is None
        assert broken_client.get("/health/deep").json()["unsaved_changes"] is False


class TestHealth:
    def test_liveness(self, client):
        assert client.get("/health").json() == {"status": "healthy"}

    def test_deep_healthy(self, client):
        assert client.get("/health/deep").json()["status"] == "healthy"

    def test_deep_degraded(self, broken_client, broken):
        broken.fail_writes = True
        body = broken_client.get("/health/deep").json()
        assert body["status"] == "degraded"
        assert body["storage"].startswith("error:")
