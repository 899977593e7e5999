"""
Endpoint tests for /locations.

Repositories and the geocoder are mocked, so no database is needed.
"""

from unittest.mock import Mock, patch

import pytest
from fastapi.testclient import TestClient

from dependencies import get_geocoder
from main import app

client = TestClient(app)


@pytest.fixture
def mock_repo():
    with patch("routes.location_routes.repo") as repo:
        yield repo


@pytest.fixture
def mock_geocoder():
    geocoder = Mock()
    geocoder.geocode_address.return_value = {
        "latitude": 32.72,
        "longitude": -117.16,
        "formattedAddress": "1 Health Way, San Diego, CA 92101, USA",
        "addressComponents": {"street": "1 Health Way", "city": "San Diego", "state": "CA", "zipCode": "92101", "country": "US"},
        "error": None,
    }
    app.dependency_overrides[get_geocoder] = lambda: geocoder
    yield geocoder
    app.dependency_overrides.pop(get_geocoder, None)


NEW_LOCATION = {
    "name": "Downtown Food Bank",
    "address": "123 Main St",
    "city": "San Diego",
    "state": "ca",
    "zipCode": "92101",
    "latitude": 32.7157,
    "longitude": -117.1611,
    "categories": ["Food"],
}


def test_requires_api_key(mock_repo):
    response = client.get("/locations/")
    assert response.status_code == 401


class TestCreateLocation:
    def test_admin_create_is_approved(self, mock_repo, mock_geocoder, admin_headers):
        mock_repo.create.return_value = {"id": "loc-1", **NEW_LOCATION}

        response = client.post("/locations/", json=NEW_LOCATION, headers=admin_headers)

        assert response.status_code == 201
        assert response.json()["status"] == "approved"
        data, user_id, is_admin = mock_repo.create.call_args.args
        assert data["state"] == "CA"
        assert data["zipCode"] == "92101"
        assert user_id == "admin-1"
        assert is_admin is True
        mock_geocoder.geocode_address.assert_not_called()

    def test_user_create_is_pending(self, mock_repo, mock_geocoder, user_headers):
        mock_repo.create.return_value = {"id": "pending-1", **NEW_LOCATION, "status": "pending"}

        response = client.post("/locations/", json=NEW_LOCATION, headers=user_headers)

        assert response.status_code == 201
        assert response.json()["status"] == "pending"
        assert mock_repo.create.call_args.args[1:] == ("user-1", False)

    def test_requires_user(self, mock_repo, mock_geocoder):
        response = client.post("/locations/", json=NEW_LOCATION, headers={"X-API-Key": "test-api-key"})
        assert response.status_code == 401
        mock_repo.create.assert_not_called()

    def test_geocodes_when_coordinates_missing(self, mock_repo, mock_geocoder, admin_headers):
        mock_repo.create.side_effect = lambda data, user_id, is_admin: {"id": "loc-2", **data}
        body = {"name": "Clinic", "address": "1 Health Way"}

        response = client.post("/locations/", json=body, headers=admin_headers)

        assert response.status_code == 201
        saved = mock_repo.create.call_args.args[0]
        assert saved["latitude"] == 32.72
        assert saved["city"] == "San Diego"

    def test_geocoding_failure(self, mock_repo, mock_geocoder, admin_headers):
        mock_geocoder.geocode_address.return_value = {"error": "Address not found"}

        response = client.post("/locations/", json={"name": "Clinic", "address": "nowhere"}, headers=admin_headers)

        assert response.status_code == 422
        assert response.json()["detail"] == "Failed to geocode address: Address not found"
        mock_repo.create.assert_not_called()

    def test_physical_location_requires_address(self, mock_repo, mock_geocoder, admin_headers):
        response = client.post("/locations/", json={"name": "Nowhere"}, headers=admin_headers)

        assert response.status_code == 422
        assert "Missing required field: address" in response.text

    def test_online_only_requires_contact(self, mock_repo, mock_geocoder, admin_headers):
        response = client.post("/locations/", json={"name": "Hotline", "onlineOnly": True}, headers=admin_headers)

        assert response.status_code == 422
        assert "Online-only services must have at least one" in response.text

    def test_online_only_skips_geocoding(self, mock_repo, mock_geocoder, admin_headers):
        mock_repo.create.return_value = {"id": "loc-3"}
        body = {"name": "Hotline", "onlineOnly": True, "phone": "988"}

        response = client.post("/locations/", json=body, headers=admin_headers)

        assert response.status_code == 201
        mock_geocoder.geocode_address.assert_not_called()


class TestReadLocations:
    def test_list_with_filters(self, mock_repo, user_headers, sample_location):
        mock_repo.get_all.return_value = [sample_location]

        response = client.get(
            "/locations/?category=Food&online_only=false&q=pantry&limit=10",
            headers=user_headers,
        )

        assert response.status_code == 200
        assert response.json()[0]["id"] == "loc-1"
        mock_repo.get_all.assert_called_once_with(
            skip=0, limit=10,
            filters={"category": "Food", "online_only": False, "q": "pantry"},
        )

    def test_get_location(self, mock_repo, user_headers, sample_location):
        mock_repo.get_by_id.return_value = sample_location

        response = client.get("/locations/loc-1", headers=user_headers)

        assert response.status_code == 200
        assert response.json()["name"] == "Downtown Food Bank"

    def test_get_missing_location(self, mock_repo, user_headers):
        mock_repo.get_by_id.return_value = None

        response = client.get("/locations/missing", headers=user_headers)

        assert response.status_code == 404

    def test_nearby(self, mock_repo, user_headers, sample_location):
        far = {**sample_location, "id": "far", "latitude": 34.0522, "longitude": -118.2437}
        near = {**sample_location, "id": "near", "latitude": 32.72, "longitude": -117.16}
        mock_repo.get_with_coordinates.return_value = [far, near]

        response = client.get("/locations/nearby?lat=32.7157&lng=-117.1611&radius=50", headers=user_headers)

        assert response.status_code == 200
        data = response.json()
        assert [loc["id"] for loc in data] == ["near"]
        assert data[0]["distanceText"] == "0.3 mi"

    def test_status(self, mock_repo, user_headers, sample_location):
        mock_repo.get_by_id.return_value = {**sample_location, "hours": "Open 24/7"}

        response = client.get("/locations/loc-1/status", headers=user_headers)

        assert response.json() == {"isOpen": True, "status": "Open 24 hours"}

    def test_share(self, mock_repo, user_headers, sample_location):
        mock_repo.get_by_id.return_value = sample_location

        response = client.get("/locations/loc-1/share", headers=user_headers)

        data = response.json()
        assert data["url"] == "https://map.example.org/?location=loc-1&lat=32.7157&lng=-117.1611"
        assert data["text"] == "Check out Downtown Food Bank at 123 Main St"

    def test_transit_requires_coordinates(self, mock_repo, user_headers):
        mock_repo.get_by_id.return_value = {"id": "online", "name": "Hotline", "onlineOnly": True}

        response = client.get("/locations/online/transit", headers=user_headers)

        assert response.status_code == 400

    def test_statistics_route_is_not_an_id(self, mock_repo, user_headers):
        mock_repo.get_statistics.return_value = {"total_locations": 3}

        response = client.get("/locations/statistics/summary", headers=user_headers)

        assert response.json() == {"total_locations": 3}
        mock_repo.get_by_id.assert_not_called()


class TestUpdateLocation:
    def test_admin_update(self, mock_repo, admin_headers, sample_location):
        mock_repo.get_by_id.return_value = sample_location
        mock_repo.update.return_value = {**sample_location, "hours": "Mon 10:00-12:00"}

        response = client.patch("/locations/loc-1", json={"hours": "Mon 10:00-12:00"}, headers=admin_headers)

        assert response.status_code == 200
        mock_repo.update.assert_called_once_with("loc-1", {"hours": "Mon 10:00-12:00"})

    def test_non_admin_forbidden(self, mock_repo, user_headers):
        response = client.patch("/locations/loc-1", json={"hours": "Mon 10:00-12:00"}, headers=user_headers)

        assert response.status_code == 403
        mock_repo.update.assert_not_called()

    def test_update_cannot_break_location_invariant(self, mock_repo, admin_headers, sample_location):
        mock_repo.get_by_id.return_value = sample_location

        response = client.patch("/locations/loc-1", json={"onlineOnly": True}, headers=admin_headers)

        assert response.status_code == 422
        mock_repo.update.assert_not_called()

    def test_switch_to_physical_geocodes_address(self, mock_repo, mock_geocoder, admin_headers):
        mock_repo.get_by_id.return_value = {
            "id": "loc-9", "name": "Hotline", "onlineOnly": True, "website": "https://x.org"
        }
        mock_repo.update.side_effect = lambda location_id, data: {"id": location_id, **data}

        response = client.patch(
            "/locations/loc-9",
            json={"onlineOnly": False, "address": "1 Health Way"},
            headers=admin_headers
        )

        assert response.status_code == 200
        mock_geocoder.geocode_address.assert_called_once_with("1 Health Way", "", "", "")
        saved = mock_repo.update.call_args.args[1]
        assert saved["onlineOnly"] is False
        assert saved["latitude"] == 32.72
        assert saved["longitude"] == -117.16
        assert saved["city"] == "San Diego"
        assert saved["zipCode"] == "92101"

    def test_switch_to_physical_geocoding_failure(self, mock_repo, mock_geocoder, admin_headers):
        mock_repo.get_by_id.return_value = {
            "id": "loc-9", "name": "Hotline", "onlineOnly": True, "website": "https://x.org"
        }
        mock_geocoder.geocode_address.return_value = {"error": "Address not found"}

        response = client.patch(
            "/locations/loc-9",
            json={"onlineOnly": False, "address": "nowhere"},
            headers=admin_headers
        )

        assert response.status_code == 422
        mock_repo.update.assert_not_called()

    def test_update_with_coordinates_skips_geocoding(self, mock_repo, mock_geocoder, admin_headers, sample_location):
        mock_repo.get_by_id.return_value = sample_location
        mock_repo.update.return_value = sample_location

        response = client.patch("/locations/loc-1", json={"name": "Uptown Food Bank"}, headers=admin_headers)

        assert response.status_code == 200
        mock_geocoder.geocode_address.assert_not_called()

    def test_empty_update(self, mock_repo, admin_headers, sample_location):
        mock_repo.get_by_id.return_value = sample_location

        response = client.patch("/locations/loc-1", json={}, headers=admin_headers)

        assert response.status_code == 400


class TestDeleteLocation:
    def test_admin_deletes_directly(self, mock_repo, admin_headers):
        mock_repo.exists.return_value = True
        mock_repo.delete.return_value = {"deleted": True}

        response = client.delete("/locations/loc-1", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["message"] == "Location deleted"
        mock_repo.delete.assert_called_once_with("loc-1", "admin-1", True)

    def test_user_files_deletion_request(self, mock_repo, user_headers):
        mock_repo.exists.return_value = True
        mock_repo.delete.return_value = {"request": {"id": "req-1", "locationId": "loc-1"}}

        response = client.delete("/locations/loc-1", headers=user_headers)

        assert response.status_code == 200
        assert response.json()["request_id"] == "req-1"
        mock_repo.delete.assert_called_once_with("loc-1", "user-1", False)

    def test_missing_location(self, mock_repo, admin_headers):
        mock_repo.exists.return_value = False

        response = client.delete("/locations/missing", headers=admin_headers)

        assert response.status_code == 404
