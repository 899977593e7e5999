"""
Import Validator Module for batch location imports.

This module provides pure functions for turning an uploaded JSON document
into normalized location records, with per-record validation errors that are
accumulated rather than raised.
"""

import json
import math
import re
from typing import Any, Dict, List, Optional, Union

from models.location import DEFAULT_ICON


LIST_FIELDS = ['categories', 'resources', 'benefits', 'photos']

# Keys added during validation that must never be persisted
INTERNAL_FIELDS = ['_index', '_valid', '_errors', '_selected', '_needsGeocoding']

# Leading numeric prefix, the part a browser parseFloat would read
FLOAT_PREFIX_PATTERN = re.compile(r'^\s*[-+]?(\d+\.?\d*|\.\d+)([eE][-+]?\d+)?')

EXPECTED_FIELDS = [
    'name', 'address', 'city', 'state', 'zipCode', 'latitude', 'longitude',
    'description', 'phone', 'email', 'website', 'hours', 'categories',
    'resources', 'benefits', 'icon', 'notes', 'onlineOnly', 'photos',
]


def format_phone_number(value: Any) -> str:
    """
    Format a phone number as (XXX) XXX-XXXX.

    Handles:
    - "6195551234" -> "(619) 555-1234"
    - "619-555" -> "(619) 555"
    - "61" -> "61"
    - "1-619-555-1234 ext 9" -> "(161) 955-5123" (first 10 digits only)

    Args:
        value: Phone number in any format

    Returns:
        Formatted phone string
    """
    digits = re.sub(r'\D', '', str(value))

    if len(digits) < 4:
        return digits
    if len(digits) < 7:
        return f"({digits[:3]}) {digits[3:]}"
    return f"({digits[:3]}) {digits[3:6]}-{digits[6:10]}"


def parse_coordinate(value: Any) -> float:
    """
    Parse a coordinate leniently.

    Handles:
    - 32.7157 -> 32.7157
    - "32.7157" -> 32.7157
    - " -117.16abc" -> -117.16
    - "abc", True -> nan

    Args:
        value: Number or numeric string

    Returns:
        Float value, or nan if no number can be read
    """
    if isinstance(value, bool):
        return math.nan
    if isinstance(value, (int, float)):
        return float(value)

    match = FLOAT_PREFIX_PATTERN.match(str(value))
    if not match:
        return math.nan
    return float(match.group(0))


def _is_blank(value: Any) -> bool:
    return value is None or not str(value).strip()


def validate_location(location: Dict, index: int) -> Dict:
    """
    Validate and normalize one imported location record.

    Normalization is applied whether or not the record is valid. All
    applicable errors are collected; validation never stops at the first one.

    Args:
        location: Raw record from the import document
        index: Position of the record in the document

    Returns:
        Dictionary with 'location' (normalized record), 'valid' and 'errors'
    """
    errors: List[str] = []
    normalized = dict(location)

    if _is_blank(location.get('name')):
        errors.append('Missing required field: name')

    online_only = location.get('onlineOnly') is True or location.get('onlineOnly') == 'true'
    normalized['onlineOnly'] = online_only

    if not online_only:
        if _is_blank(location.get('address')):
            errors.append('Missing required field: address')

        # 0 and "" count as missing, same as a falsy check in the frontend
        if not location.get('latitude') or not location.get('longitude'):
            if location.get('address'):
                normalized['_needsGeocoding'] = True
            else:
                errors.append('Missing required fields: latitude and longitude (or address for geocoding)')
        else:
            normalized['latitude'] = parse_coordinate(location['latitude'])
            normalized['longitude'] = parse_coordinate(location['longitude'])
            if math.isnan(normalized['latitude']) or math.isnan(normalized['longitude']):
                errors.append('Invalid latitude/longitude values')
    else:
        if not location.get('website') and not location.get('email') and not location.get('phone'):
            errors.append('Online-only services must have at least one: website, email, or phone')

    if location.get('phone'):
        normalized['phone'] = format_phone_number(location['phone'])

    for field in LIST_FIELDS:
        normalized[field] = location.get(field) if isinstance(location.get(field), list) else []

    if not normalized.get('icon'):
        normalized['icon'] = DEFAULT_ICON

    if normalized.get('state'):
        normalized['state'] = str(normalized['state']).upper()[:2]

    return {
        'location': normalized,
        'valid': len(errors) == 0,
        'errors': errors,
    }


def extract_locations_array(document: Any) -> List[Dict]:
    """
    Pull the list of location records out of an import document.

    Accepted shapes: a top-level array, or an object with a 'locations' or
    'data' array property.

    Args:
        document: Decoded JSON document

    Returns:
        List of raw location records

    Raises:
        ValueError: If no array is found or the array is empty
    """
    if isinstance(document, list):
        records = document
    elif isinstance(document, dict) and isinstance(document.get('locations'), list):
        records = document['locations']
    elif isinstance(document, dict) and isinstance(document.get('data'), list):
        records = document['data']
    else:
        raise ValueError('JSON must contain an array of locations')

    if not records:
        raise ValueError('JSON contains no locations')

    return records


def prepare_records(records: List[Any]) -> List[Dict]:
    """
    Validate every record and tag it with its import bookkeeping fields.

    Valid records are selected by default. A record that is not a JSON
    object is reported as invalid instead of being dropped.

    Args:
        records: Raw records from extract_locations_array

    Returns:
        Normalized records with _index, _valid, _errors and _selected
    """
    prepared = []
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            prepared.append({
                '_index': index,
                '_valid': False,
                '_errors': ['Record must be a JSON object'],
                '_selected': False,
            })
            continue

        validation = validate_location(record, index)
        prepared.append({
            **validation['location'],
            '_index': index,
            '_valid': validation['valid'],
            '_errors': validation['errors'],
            '_selected': validation['valid'],
        })
    return prepared


def parse_locations_json(content: Union[str, bytes]) -> List[Dict]:
    """
    Parse an import document and validate its records.

    Args:
        content: JSON text

    Returns:
        Prepared records (see prepare_records)

    Raises:
        ValueError: If the JSON is malformed or holds no location array
    """
    try:
        document = json.loads(content)
    except json.JSONDecodeError as e:
        raise ValueError(f"Error parsing JSON: {e}")

    return prepare_records(extract_locations_array(document))


def strip_internal_fields(record: Dict) -> Dict:
    """Copy of a prepared record without the validation bookkeeping keys."""
    return {k: v for k, v in record.items() if k not in INTERNAL_FIELDS}


def build_import_template() -> List[Dict]:
    """
    Example import document documenting the expected record shape.

    Returns:
        One physical location and one online-only service
    """
    return [
        {
            'name': 'Example Food Bank',
            'address': '123 Main Street',
            'city': 'San Diego',
            'state': 'CA',
            'zipCode': '92101',
            'latitude': 32.7157,
            'longitude': -117.1611,
            'description': 'Community food bank providing groceries and hot meals',
            'phone': '(619) 555-1234',
            'email': 'info@examplefoodbank.org',
            'website': 'https://examplefoodbank.org',
            'hours': 'Mon-Fri 09:00-17:00, Sat 10:00-14:00',
            'categories': ['Food'],
            'resources': ['Food Pantry', 'Hot Meals'],
            'benefits': ['Free', 'No ID Required'],
            'icon': 'restaurant_menu',
            'notes': 'Bring your own bags',
            'onlineOnly': False,
            'photos': [],
        },
        {
            'name': 'Example Crisis Hotline',
            'description': '24/7 phone and chat support',
            'phone': '(800) 555-0199',
            'website': 'https://examplehotline.org',
            'hours': 'Open 24/7',
            'categories': ['Mental Health'],
            'resources': ['Crisis Support'],
            'benefits': ['Free', 'Multilingual Services'],
            'icon': 'help',
            'onlineOnly': True,
            'photos': [],
        },
    ]


def get_record_name(record: Optional[Dict]) -> str:
    """Display name used in per-record error reports."""
    if record and not _is_blank(record.get('name')):
        return str(record['name'])
    return 'Unknown'
