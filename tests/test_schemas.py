"""Unit tests for record validation at the boundary."""
import json

import pytest
from pydantic import ValidationError

from ghostmatch.schemas import MatchCandidate, Profile, UserProfile
from ghostmatch.services.catalog import ProfileCatalog


class TestProfileValidation:
    def test_five_interests_allowed(self):
        profile = Profile(id="p1", anonymous_id="Ghost#1", interests=("a", "b", "c", "d", "e"))
        assert len(profile.interests) == 5

    def test_six_interests_rejected(self):
        with pytest.raises(ValidationError):
            Profile(id="p1", anonymous_id="Ghost#1", interests=("a", "b", "c", "d", "e", "f"))

    def test_profiles_are_immutable(self):
        profile = Profile(id="p1", anonymous_id="Ghost#1")
        with pytest.raises(ValidationError):
            profile.bio = "changed"

    def test_accepts_camel_case_and_snake_case(self):
        camel = MatchCandidate.model_validate({"id": "c1", "anonymousId": "Ghost#1", "matchPercentage": 50})
        snake = MatchCandidate(id="c1", anonymous_id="Ghost#1", match_percentage=50)
        assert camel == snake

    @pytest.mark.parametrize("percentage", [-1, 101])
    def test_match_percentage_bounds(self, percentage):
        with pytest.raises(ValidationError):
            MatchCandidate(id="c1", anonymous_id="Ghost#1", match_percentage=percentage)


class TestUniversityEmail:
    @pytest.mark.parametrize("email", ["student@state.edu", "A.B@cs.Uni.EDU", "  x@y.edu  "])
    def test_valid(self, email):
        user = UserProfile(id="u1", anonymous_id="User#1", university_email=email)
        assert user.university_email == email.strip()

    @pytest.mark.parametrize("email", ["student@gmail.com", "no-at-sign.edu", "a@b@c.edu", "@state.edu", ""])
    def test_invalid(self, email):
        with pytest.raises(ValidationError):
            UserProfile(id="u1", anonymous_id="User#1", university_email=email)


class TestCatalog:
    def test_lookup_and_order(self, catalog):
        assert len(catalog) == 6
        assert catalog.get("c3").anonymous_id == "Ghost#3E9"
        assert catalog.get("missing") is None
        assert "c1" in catalog
        assert [c.id for c in catalog][:2] == ["c1", "c2"]

    def test_duplicate_ids_rejected(self):
        with pytest.raises(ValueError):
            ProfileCatalog.from_records([
                {"id": "c1", "anonymousId": "A"},
                {"id": "c1", "anonymousId": "B"},
            ])

    def test_from_json(self, tmp_path, catalog_records):
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps(catalog_records), encoding="utf-8")
        assert len(ProfileCatalog.from_json(path)) == len(catalog_records)

    def test_demo_catalog_loads(self):
        demo = ProfileCatalog.demo()
        assert len(demo) > 0
        assert all(len(c.interests) <= 5 for c in demo)
