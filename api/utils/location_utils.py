"""
Location Utility Module.

Pure helpers used by the location endpoints: great-circle distance, distance
formatting, open/closed status from a free-text hours string, and share or
transit links.
"""

import math
import re
from datetime import datetime
from typing import Dict, List, Optional
from urllib.parse import urlencode


EARTH_RADIUS_MILES = 3959

# First "H:MM-H:MM" range in an hours string; the colon is optional
TIME_RANGE_PATTERN = re.compile(r'(\d{1,2}):?(\d{2})\s*-\s*(\d{1,2}):?(\d{2})', re.IGNORECASE)


def calculate_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> Optional[float]:
    """
    Calculate distance between two coordinates using the haversine formula.

    A coordinate of exactly 0 is treated as missing.

    Args:
        lat1: Latitude of first point
        lon1: Longitude of first point
        lat2: Latitude of second point
        lon2: Longitude of second point

    Returns:
        Distance in miles, or None if any coordinate is missing
    """
    if not lat1 or not lon1 or not lat2 or not lon2:
        return None

    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_MILES * c


def format_distance(distance: Optional[float]) -> str:
    """
    Format distance for display.

    Handles:
    - None -> "Unknown"
    - 0.05 -> "< 0.1 mi"
    - 0.5 -> "0.5 mi"
    - 5.6 -> "6 mi"

    Args:
        distance: Distance in miles

    Returns:
        Formatted distance string
    """
    if distance is None:
        return 'Unknown'
    if distance < 0.1:
        return '< 0.1 mi'
    if distance < 1:
        # Round half up
        return f"{math.floor(distance * 10 + 0.5) / 10:.1f} mi"
    return f"{math.floor(distance + 0.5)} mi"


def sort_by_distance(locations: List[Dict], latitude: float, longitude: float) -> List[Dict]:
    """
    Annotate locations with their distance from a point and sort nearest first.

    Locations without coordinates (online-only services) sort last.

    Args:
        locations: Location dictionaries with latitude/longitude keys
        latitude: Reference latitude
        longitude: Reference longitude

    Returns:
        New list of location dictionaries with 'distance' and 'distanceText'
    """
    annotated = []
    for location in locations:
        distance = calculate_distance(
            latitude, longitude,
            location.get('latitude'), location.get('longitude')
        )
        annotated.append({
            **location,
            'distance': distance,
            'distanceText': format_distance(distance),
        })

    return sorted(annotated, key=lambda loc: (loc['distance'] is None, loc['distance'] or 0))


def check_open_status(hours: Optional[str], now: Optional[datetime] = None) -> Dict:
    """
    Check whether a location is open based on its hours string.

    Best-effort: only the first time range is read, day-of-week prefixes are
    ignored, and ranges crossing midnight are not supported. Never raises.

    Args:
        hours: Hours string (e.g. "Mon-Fri 09:00-17:00")
        now: Time to evaluate against; defaults to local wall-clock time

    Returns:
        Dictionary with 'isOpen' (True, False or None) and 'status'
    """
    if not hours:
        return {'isOpen': None, 'status': 'Hours not available'}

    lowered = hours.lower()

    # "24/7", "Open 24 hours" and anything else mentioning 24
    if '24' in lowered:
        return {'isOpen': True, 'status': 'Open 24 hours'}

    if 'closed' in lowered:
        return {'isOpen': False, 'status': 'Closed'}

    match = TIME_RANGE_PATTERN.search(hours)
    if match:
        now = now or datetime.now()
        current_time = now.hour * 100 + now.minute
        open_time = int(match.group(1)) * 100 + int(match.group(2))
        close_time = int(match.group(3)) * 100 + int(match.group(4))

        if open_time <= current_time < close_time:
            return {'isOpen': True, 'status': 'Open now'}
        elif current_time < open_time:
            return {'isOpen': False, 'status': f"Opens at {match.group(1)}:{match.group(2)}"}
        else:
            return {'isOpen': False, 'status': 'Closed'}

    return {'isOpen': None, 'status': hours}


def get_share_url(location: Dict, base_url: str) -> str:
    """
    Build the public map link for a location.

    Args:
        location: Location dictionary
        base_url: Origin of the map frontend

    Returns:
        Share URL such as "https://example.org/?location=abc&lat=32.7&lng=-117.1"
    """
    params = {
        'location': location.get('id') or location.get('name'),
        'lat': location.get('latitude'),
        'lng': location.get('longitude'),
    }
    # Mirror URLSearchParams, which renders missing values as "undefined"
    params = {k: ('undefined' if v is None else v) for k, v in params.items()}
    return f"{base_url.rstrip('/')}/?{urlencode(params)}"


def get_share_text(location: Dict) -> str:
    """Short message used alongside a share link."""
    where = location.get('address') or location.get('website') or 'this location'
    return f"Check out {location.get('name')} at {where}"


def get_transit_directions_url(location: Dict, origin: Optional[Dict] = None) -> str:
    """
    Get a Google Maps transit directions URL for a location.

    Args:
        location: Location dictionary with latitude/longitude
        origin: Optional {'lat': ..., 'lng': ...}; defaults to the user's position

    Returns:
        Google Maps directions URL with travelmode=transit
    """
    url = (
        "https://www.google.com/maps/dir/?api=1"
        f"&destination={location.get('latitude')},{location.get('longitude')}"
        "&travelmode=transit"
    )
    if origin:
        url += f"&origin={origin['lat']},{origin['lng']}"
    return url
