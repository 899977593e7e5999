"""
Endpoint tests for favorites, notes, reviews, reports and history.
"""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from dependencies import get_history_store
from main import app
from services.history_store import InMemoryKeyValueStore

client = TestClient(app)


class TestFavorites:
    @pytest.fixture
    def repos(self):
        with patch("routes.favorite_routes.repo") as repo, \
                patch("routes.favorite_routes.location_repo") as location_repo:
            location_repo.exists.return_value = True
            yield repo, location_repo

    def test_add(self, repos, user_headers):
        repo, _ = repos
        repo.add_favorite.return_value = True

        response = client.post("/favorites/", json={"locationId": "loc-1"}, headers=user_headers)

        assert response.status_code == 201
        repo.add_favorite.assert_called_once_with("user-1", "loc-1")

    def test_duplicate_rejected(self, repos, user_headers):
        repo, _ = repos
        repo.add_favorite.return_value = False

        response = client.post("/favorites/", json={"locationId": "loc-1"}, headers=user_headers)

        assert response.status_code == 409

    def test_unknown_location(self, repos, user_headers):
        repo, location_repo = repos
        location_repo.exists.return_value = False

        response = client.post("/favorites/", json={"locationId": "nope"}, headers=user_headers)

        assert response.status_code == 404
        repo.add_favorite.assert_not_called()

    def test_list(self, repos, user_headers, sample_location):
        repo, _ = repos
        repo.get_favorite_locations.return_value = [sample_location]

        response = client.get("/favorites/", headers=user_headers)

        assert response.json()[0]["id"] == "loc-1"

    def test_check_and_remove(self, repos, user_headers):
        repo, _ = repos
        repo.is_favorite.return_value = True
        repo.remove_favorite.return_value = True

        assert client.get("/favorites/loc-1", headers=user_headers).json()["favorite"] is True
        response = client.delete("/favorites/loc-1", headers=user_headers)

        assert response.json() == {"location_id": "loc-1", "favorite": False, "removed": True}

    def test_requires_user(self, repos):
        response = client.get("/favorites/", headers={"X-API-Key": "test-api-key"})
        assert response.status_code == 401


class TestNotes:
    @pytest.fixture
    def repos(self):
        with patch("routes.note_routes.repo") as repo, \
                patch("routes.note_routes.location_repo") as location_repo:
            location_repo.exists.return_value = True
            yield repo, location_repo

    def test_save(self, repos, user_headers):
        repo, _ = repos
        repo.save_note.return_value = {"id": "n1", "locationId": "loc-1", "userId": "user-1", "note": "Bring ID"}

        response = client.put("/notes/loc-1", json={"note": "Bring ID"}, headers=user_headers)

        assert response.status_code == 200
        repo.save_note.assert_called_once_with("loc-1", "Bring ID", "user-1")

    def test_empty_note_rejected(self, repos, user_headers):
        response = client.put("/notes/loc-1", json={"note": ""}, headers=user_headers)
        assert response.status_code == 422

    def test_get_missing(self, repos, user_headers):
        repo, _ = repos
        repo.get_note.return_value = None

        assert client.get("/notes/loc-1", headers=user_headers).status_code == 404

    def test_delete(self, repos, user_headers):
        repo, _ = repos
        repo.delete_note.return_value = True

        response = client.delete("/notes/loc-1", headers=user_headers)

        assert response.status_code == 204


class TestReviews:
    @pytest.fixture
    def repos(self):
        with patch("routes.review_routes.repo") as repo, \
                patch("routes.review_routes.location_repo") as location_repo:
            location_repo.exists.return_value = True
            yield repo, location_repo

    def test_create(self, repos, user_headers):
        repo, _ = repos
        repo.create.return_value = {"id": "r1", "rating": 4}

        response = client.post("/reviews/location/loc-1", json={"rating": 4, "comment": "Helpful"}, headers=user_headers)

        assert response.status_code == 201
        repo.create.assert_called_once_with("loc-1", {"rating": 4, "comment": "Helpful"}, "user-1")

    @pytest.mark.parametrize("rating", [0, 6])
    def test_rating_out_of_range(self, repos, user_headers, rating):
        response = client.post("/reviews/location/loc-1", json={"rating": rating}, headers=user_headers)
        assert response.status_code == 422

    def test_rating_summary(self, repos, user_headers):
        repo, _ = repos
        repo.get_location_rating.return_value = {"average": 4.3, "count": 3}

        response = client.get("/reviews/location/loc-1/rating", headers=user_headers)

        assert response.json() == {"average": 4.3, "count": 3}

    def test_only_owner_can_edit(self, repos, user_headers):
        repo, _ = repos
        repo.get_by_id.return_value = {"id": "r1", "userId": "someone-else", "rating": 2}

        response = client.patch("/reviews/r1", json={"rating": 5}, headers=user_headers)

        assert response.status_code == 403
        repo.update.assert_not_called()

    def test_owner_edits(self, repos, user_headers):
        repo, _ = repos
        repo.get_by_id.return_value = {"id": "r1", "userId": "user-1", "rating": 2}
        repo.update.return_value = {"id": "r1", "userId": "user-1", "rating": 5}

        response = client.patch("/reviews/r1", json={"rating": 5}, headers=user_headers)

        assert response.json()["rating"] == 5
        repo.update.assert_called_once_with("r1", {"rating": 5})

    def test_admin_can_delete_any_review(self, repos, admin_headers):
        repo, _ = repos
        repo.get_by_id.return_value = {"id": "r1", "userId": "user-1"}

        response = client.delete("/reviews/r1", headers=admin_headers)

        assert response.status_code == 204
        repo.delete.assert_called_once_with("r1")

    def test_other_user_cannot_delete(self, repos, user_headers):
        repo, _ = repos
        repo.get_by_id.return_value = {"id": "r1", "userId": "someone-else"}

        response = client.delete("/reviews/r1", headers=user_headers)

        assert response.status_code == 403


class TestReports:
    @pytest.fixture
    def repos(self):
        with patch("routes.report_routes.repo") as repo, \
                patch("routes.report_routes.location_repo") as location_repo:
            location_repo.exists.return_value = True
            repo.create.return_value = {"id": "rep-1", "status": "pending"}
            yield repo, location_repo

    def test_anonymous_report(self, repos):
        repo, _ = repos

        response = client.post(
            "/reports/location/loc-1",
            json={"reason": "Wrong hours"},
            headers={"X-API-Key": "test-api-key"},
        )

        assert response.status_code == 201
        repo.create.assert_called_once_with("loc-1", {"reason": "Wrong hours"}, None)

    def test_signed_in_report(self, repos, user_headers):
        repo, _ = repos

        client.post("/reports/location/loc-1", json={"reason": "Closed permanently"}, headers=user_headers)

        assert repo.create.call_args.args[2] == "user-1"

    def test_listing_requires_admin(self, repos, user_headers):
        assert client.get("/reports/location/loc-1", headers=user_headers).status_code == 403


class TestHistory:
    @pytest.fixture
    def store(self):
        store = InMemoryKeyValueStore()
        app.dependency_overrides[get_history_store] = lambda: store
        yield store
        app.dependency_overrides.pop(get_history_store, None)

    @pytest.fixture
    def location_repo(self):
        with patch("routes.history_routes.location_repo") as repo:
            yield repo

    def test_add_and_list(self, store, location_repo, user_headers, sample_location):
        location_repo.get_by_id.return_value = sample_location

        response = client.post("/history/", json={"locationId": "loc-1"}, headers=user_headers)

        assert response.status_code == 200
        assert response.json()[0]["id"] == "loc-1"
        assert client.get("/history/", headers=user_headers).json()[0]["name"] == "Downtown Food Bank"
        assert store.get("locationHistory:user-1") is not None

    def test_unknown_location(self, store, location_repo, user_headers):
        location_repo.get_by_id.return_value = None

        response = client.post("/history/", json={"locationId": "nope"}, headers=user_headers)

        assert response.status_code == 404

    def test_remove_and_clear(self, store, location_repo, user_headers, sample_location):
        location_repo.get_by_id.return_value = sample_location
        client.post("/history/", json={"locationId": "loc-1"}, headers=user_headers)

        assert client.delete("/history/loc-1", headers=user_headers).json() == []
        assert client.delete("/history/", headers=user_headers).status_code == 204
        assert client.get("/history/", headers=user_headers).json() == []
