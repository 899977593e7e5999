"""
Google Geocoding API client.

Resolves addresses to coordinates and coordinates back to addresses. Failures
are returned as {"error": ...} dictionaries and never raised, so callers such
as the batch importer can record them per record and move on.
"""

import logging
from typing import Dict, List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from config import settings

logger = logging.getLogger(__name__)


def extract_address_components(components: List[Dict]) -> Dict[str, str]:
    """Flatten Google address_components into street/city/state/zipCode/country."""
    address = {
        "street": "",
        "city": "",
        "state": "",
        "zipCode": "",
        "country": "",
    }

    for component in components or []:
        types = component.get("types", [])
        if "street_number" in types or "route" in types:
            address["street"] = f"{address['street']} {component.get('long_name', '')}".strip()
        if "locality" in types:
            address["city"] = component.get("long_name", "")
        if "administrative_area_level_1" in types:
            address["state"] = component.get("short_name", "")
        if "postal_code" in types:
            address["zipCode"] = component.get("long_name", "")
        if "country" in types:
            address["country"] = component.get("short_name", "")

    return address


class GeocodingClient:
    """Client for the Google Geocoding API.

    Handles retries on transient HTTP errors and normalizes responses into
    the shapes the location service expects.
    """

    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None,
                 timeout: Optional[float] = None):
        """Initialize the geocoding client.

        Args:
            api_key: Google Maps API key. Defaults to GOOGLE_MAPS_API_KEY from settings
            base_url: Geocoding endpoint. Defaults to settings
            timeout: Per-request timeout in seconds
        """
        self.api_key = api_key or settings.google_maps_api_key
        self.base_url = base_url or settings.geocoding_base_url
        self.timeout = timeout or settings.geocoding_timeout_seconds

        # Configure session with retry strategy
        self.session = requests.Session()
        retry_strategy = Retry(
            total=3,
            backoff_factor=1,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["GET"]
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

    def _make_request(self, params: Dict) -> Dict:
        """Call the geocoding endpoint and return the decoded JSON body.

        Raises:
            requests.exceptions.RequestException: On transport or HTTP errors
        """
        response = self.session.get(
            self.base_url,
            params={**params, "key": self.api_key},
            timeout=self.timeout
        )
        response.raise_for_status()
        return response.json()

    def geocode_address(self, address: str, city: str = "", state: str = "",
                        zip_code: str = "") -> Dict:
        """Geocode an address to latitude and longitude.

        Args:
            address: Street address
            city: City
            state: State code
            zip_code: ZIP code

        Returns:
            dict: latitude, longitude, formattedAddress, addressComponents and
                error=None on success; {"error": message} otherwise
        """
        if not self.api_key:
            return {"error": "Google Maps API key not configured"}

        full_address = ", ".join(part for part in [address, city, state, zip_code] if part)
        if not full_address.strip():
            return {"error": "Address is required"}

        logger.info(f"Geocoding address: {full_address}")

        try:
            data = self._make_request({"address": full_address})
        except requests.exceptions.RequestException as e:
            logger.error(f"Geocoding request failed for '{full_address}': {e}")
            return {"error": str(e) or "Failed to geocode address"}
        except ValueError as e:
            logger.error(f"Invalid geocoding response for '{full_address}': {e}")
            return {"error": "Failed to geocode address"}

        if data.get("status") == "OK" and data.get("results"):
            result = data["results"][0]
            location = result["geometry"]["location"]
            return {
                "latitude": location["lat"],
                "longitude": location["lng"],
                "formattedAddress": result.get("formatted_address"),
                "addressComponents": extract_address_components(result.get("address_components")),
                "error": None,
            }

        logger.warning(f"Address not found: {full_address} (status {data.get('status')})")
        return {"error": data.get("error_message") or "Address not found"}

    def reverse_geocode(self, latitude: float, longitude: float) -> Dict:
        """Reverse geocode coordinates to an address.

        Args:
            latitude: Latitude in degrees
            longitude: Longitude in degrees

        Returns:
            dict: formattedAddress, addressComponents and error=None on
                success; {"error": message} otherwise
        """
        if not self.api_key:
            return {"error": "Google Maps API key not configured"}

        if not latitude or not longitude:
            return {"error": "Latitude and longitude are required"}

        logger.info(f"Reverse geocoding {latitude},{longitude}")

        try:
            data = self._make_request({"latlng": f"{latitude},{longitude}"})
        except requests.exceptions.RequestException as e:
            logger.error(f"Reverse geocoding request failed for {latitude},{longitude}: {e}")
            return {"error": str(e) or "Failed to reverse geocode"}
        except ValueError as e:
            logger.error(f"Invalid reverse geocoding response: {e}")
            return {"error": "Failed to reverse geocode"}

        if data.get("status") == "OK" and data.get("results"):
            result = data["results"][0]
            return {
                "formattedAddress": result.get("formatted_address"),
                "addressComponents": extract_address_components(result.get("address_components")),
                "error": None,
            }

        return {"error": data.get("error_message") or "Location not found"}
