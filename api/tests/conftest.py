"""
Shared pytest configuration for all tests.
Sets up the test environment and common fixtures.
"""
import os
import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

# Load test environment variables before any imports
from dotenv import load_dotenv

# Load test-specific environment variables
test_env_path = Path(__file__).parent.parent / ".env.test"
if test_env_path.exists():
    load_dotenv(test_env_path, override=True)
else:
    # Fallback to hardcoded test values if .env.test doesn't exist
    os.environ["NEO4J_URI"] = "bolt://localhost:7688"
    os.environ["NEO4J_USER"] = "neo4j"
    os.environ["NEO4J_PASSWORD"] = "testpassword123"
    os.environ["API_KEY"] = "test-api-key"
    os.environ["GOOGLE_MAPS_API_KEY"] = "test-maps-key"
    os.environ["PUBLIC_BASE_URL"] = "https://map.example.org"


API_KEY_HEADERS = {"X-API-Key": "test-api-key"}


@pytest.fixture
def user_headers():
    """Headers for a signed-in regular user"""
    return {**API_KEY_HEADERS, "X-User-Id": "user-1"}


@pytest.fixture
def admin_headers():
    """Headers for a signed-in admin"""
    return {**API_KEY_HEADERS, "X-User-Id": "admin-1", "X-User-Role": "admin"}


@pytest.fixture
def sample_location():
    """Stored approved location"""
    return {
        "id": "loc-1",
        "name": "Downtown Food Bank",
        "address": "123 Main St",
        "city": "San Diego",
        "state": "CA",
        "zipCode": "92101",
        "latitude": 32.7157,
        "longitude": -117.1611,
        "hours": "Mon-Fri 09:00-17:00",
        "categories": ["Food"],
        "resources": ["Food Pantry"],
        "benefits": ["Free"],
        "photos": [],
        "icon": "restaurant_menu",
        "onlineOnly": False,
        "createdAt": "2026-01-05T10:00:00+00:00",
        "updatedAt": "2026-01-05T10:00:00+00:00",
    }
