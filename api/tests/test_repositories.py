"""
Unit tests for the location and engagement repositories.

Neo4j is mocked at execute_query, so these check the Cypher parameters and
the routing logic built on top of BaseRepository.
"""

from unittest.mock import patch

import pytest

from repositories.favorite_repository import FavoriteRepository
from repositories.location_repository import LocationRepository
from repositories.note_repository import NoteRepository
from repositories.report_repository import ReportRepository
from repositories.review_repository import ReviewRepository


def echo_node(query, parameters=None):
    """Stand-in for execute_query that returns whatever props were written."""
    return [{"n": dict(parameters["props"])}]


class TestBaseRepository:
    @pytest.fixture
    def repo(self):
        return LocationRepository()

    def test_create_node_assigns_id_and_timestamps(self, repo):
        with patch.object(repo, "execute_query", side_effect=echo_node) as mock_query:
            node = repo.create_node("Location", {"name": "Clinic", "phone": None})

        assert len(node["id"]) == 32
        assert node["createdAt"] == node["updatedAt"]
        assert "phone" not in node
        assert "CREATE (n:Location)" in mock_query.call_args.args[0]

    def test_find_nodes_builds_where_clause(self, repo):
        with patch.object(repo, "execute_query", return_value=[{"n": {"id": "a"}}]) as mock_query:
            result = repo.find_nodes("Review", {"locationId": "loc-1"}, limit=5)

        query, params = mock_query.call_args.args
        assert "n.locationId = $locationId" in query
        assert "ORDER BY n.createdAt DESC" in query
        assert "LIMIT $limit" in query
        assert params == {"locationId": "loc-1", "skip": 0, "limit": 5}
        assert result == [{"id": "a"}]

    def test_delete_node(self, repo):
        with patch.object(repo, "execute_query", return_value=[{"deleted": 1}]):
            assert repo.delete_node("Location", "loc-1") is True
        with patch.object(repo, "execute_query", return_value=[{"deleted": 0}]):
            assert repo.delete_node("Location", "loc-1") is False


class TestLocationRepository:
    @pytest.fixture
    def repo(self):
        return LocationRepository()

    def test_admin_create_goes_to_locations(self, repo):
        with patch.object(repo, "execute_query", side_effect=echo_node) as mock_query:
            node = repo.create({"name": "Clinic"}, "admin-1", is_admin=True)

        assert "CREATE (n:Location)" in mock_query.call_args.args[0]
        assert node["createdBy"] == "admin-1"
        assert "approvedAt" in node
        assert "status" not in node

    def test_user_create_goes_to_pending(self, repo):
        with patch.object(repo, "execute_query", side_effect=echo_node) as mock_query:
            node = repo.create({"name": "Clinic"}, "user-1", is_admin=False)

        assert "CREATE (n:PendingLocation)" in mock_query.call_args.args[0]
        assert node["status"] == "pending"
        assert node["requestedBy"] == "user-1"

    def test_user_delete_files_request(self, repo):
        with patch.object(repo, "execute_query", side_effect=echo_node) as mock_query:
            result = repo.delete("loc-1", "user-1", is_admin=False)

        assert "CREATE (n:PendingDeletion)" in mock_query.call_args.args[0]
        assert result["request"]["locationId"] == "loc-1"
        assert result["request"]["status"] == "pending"

    def test_admin_delete(self, repo):
        with patch.object(repo, "delete_node", return_value=True) as mock_delete:
            assert repo.delete("loc-1", "admin-1", is_admin=True) == {"deleted": True}
        mock_delete.assert_called_once_with("Location", "loc-1")

    def test_approve_pending_copies_submission(self, repo):
        pending = {
            "id": "p1", "name": "Shelter", "address": "5 Elm St", "status": "pending",
            "requestedBy": "user-1", "requestedAt": "t", "createdAt": "t", "updatedAt": "t",
        }
        with patch.object(repo, "get_node", return_value=pending), \
                patch.object(repo, "create_node", side_effect=lambda label, data: {"id": "loc-9", **data}) as mock_create, \
                patch.object(repo, "update_node") as mock_update:
            created = repo.approve_pending("p1")

        label, data = mock_create.call_args.args
        assert label == "Location"
        assert data["name"] == "Shelter"
        assert data["createdBy"] == "user-1"
        assert "status" not in data
        assert "requestedBy" not in data
        assert created["id"] == "loc-9"
        mock_update.assert_called_once_with("PendingLocation", "p1", {"status": "approved"})

    def test_approve_missing_pending(self, repo):
        with patch.object(repo, "get_node", return_value=None):
            assert repo.approve_pending("p1") is None

    def test_get_all_filters(self, repo):
        with patch.object(repo, "execute_query", return_value=[]) as mock_query:
            repo.get_all(filters={"category": "Food", "online_only": False, "state": "ca", "q": "pantry"})

        query, params = mock_query.call_args.args
        assert "$category IN l.categories" in query
        assert "coalesce(l.onlineOnly, false) = $online_only" in query
        assert params["state"] == "CA"
        assert params["q"] == "pantry"


class TestFavoriteRepository:
    @pytest.fixture
    def repo(self):
        return FavoriteRepository()

    def test_duplicate_favorite_rejected(self, repo):
        with patch.object(repo, "is_favorite", return_value=True), \
                patch.object(repo, "execute_query") as mock_query:
            assert repo.add_favorite("user-1", "loc-1") is False
        mock_query.assert_not_called()

    def test_add_favorite(self, repo):
        with patch.object(repo, "is_favorite", return_value=False), \
                patch.object(repo, "execute_query", return_value=[{"f": {}}]) as mock_query:
            assert repo.add_favorite("user-1", "loc-1") is True

        params = mock_query.call_args.args[1]
        assert params["user_id"] == "user-1"
        assert params["location_id"] == "loc-1"

    def test_missing_location(self, repo):
        with patch.object(repo, "is_favorite", return_value=False), \
                patch.object(repo, "execute_query", return_value=[]):
            assert repo.add_favorite("user-1", "gone") is False


class TestNoteRepository:
    @pytest.fixture
    def repo(self):
        return NoteRepository()

    def test_save_creates_first_note(self, repo):
        with patch.object(repo, "get_note", return_value=None), \
                patch.object(repo, "create_node", return_value={"id": "n1"}) as mock_create:
            repo.save_note("loc-1", "Bring ID", "user-1")

        mock_create.assert_called_once_with("UserNote", {"locationId": "loc-1", "userId": "user-1", "note": "Bring ID"})

    def test_save_overwrites_existing_note(self, repo):
        with patch.object(repo, "get_note", return_value={"id": "n1", "note": "old"}), \
                patch.object(repo, "update_node", return_value={"id": "n1", "note": "new"}) as mock_update, \
                patch.object(repo, "create_node") as mock_create:
            result = repo.save_note("loc-1", "new", "user-1")

        assert result["note"] == "new"
        mock_update.assert_called_once_with("UserNote", "n1", {"note": "new"})
        mock_create.assert_not_called()


class TestReviewRepository:
    @pytest.fixture
    def repo(self):
        return ReviewRepository()

    @pytest.mark.parametrize("average,expected", [
        (4.25, 4.3),
        (4.0, 4.0),
        (3.3333333, 3.3),
    ])
    def test_rating_rounded_to_one_decimal(self, repo, average, expected):
        with patch.object(repo, "execute_query", return_value=[{"average": average, "count": 3}]):
            assert repo.get_location_rating("loc-1") == {"average": expected, "count": 3}

    def test_unrated(self, repo):
        with patch.object(repo, "execute_query", return_value=[{"average": None, "count": 0}]):
            assert repo.get_location_rating("loc-1") == {"average": 0, "count": 0}


def test_report_starts_pending():
    repo = ReportRepository()
    with patch.object(repo, "create_node", side_effect=lambda label, data: data) as mock_create:
        report = repo.create("loc-1", {"reason": "Wrong hours"}, None)

    assert mock_create.call_args.args[0] == "LocationReport"
    assert report["status"] == "pending"
    assert report["userId"] is None
