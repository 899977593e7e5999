"""
Stateless helper endpoints used by the map frontend: hours conversion and
status, point-to-point distance, and address geocoding.
"""

from datetime import datetime
from typing import Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field

from dependencies import get_geocoder
from models.structured_hours import StructuredHours
from services.geocoding_client import GeocodingClient
from utils.hours_parser import format_hours_string, parse_hours_string
from utils.location_utils import calculate_distance, check_open_status, format_distance

router = APIRouter(tags=["utilities"])


class HoursText(BaseModel):
    hours: str = Field("", description="Free-text hours", example="Mon-Fri 09:00-17:00, Sat 10:00-14:00")


@router.post("/hours/format", response_model=HoursText)
async def format_hours(hours: StructuredHours):
    """Collapse day-by-day hours into the display string"""
    return HoursText(hours=format_hours_string(hours))


@router.post("/hours/parse", response_model=StructuredHours)
async def parse_hours(request: HoursText):
    """Expand a display string into day-by-day hours. Unrecognized text is kept as special hours."""
    return parse_hours_string(request.hours)


@router.get("/hours/status", response_model=Dict)
async def get_hours_status(
    hours: Optional[str] = Query(None, description="Free-text hours"),
    at: Optional[datetime] = Query(None, description="Evaluate at this local time instead of now")
):
    """Best-effort open/closed status for an hours string"""
    return check_open_status(hours, now=at)


@router.get("/distance", response_model=Dict)
async def get_distance(
    lat1: float = Query(..., ge=-90, le=90),
    lng1: float = Query(..., ge=-180, le=180),
    lat2: float = Query(..., ge=-90, le=90),
    lng2: float = Query(..., ge=-180, le=180)
):
    """Great-circle distance in miles between two points"""
    distance = calculate_distance(lat1, lng1, lat2, lng2)
    return {"distance": distance, "text": format_distance(distance)}


@router.get("/geocode", response_model=Dict)
async def geocode(
    address: str = Query(..., description="Street address"),
    city: str = Query("", description="City"),
    state: str = Query("", description="State"),
    zip_code: str = Query("", alias="zipCode", description="ZIP code"),
    geocoder: GeocodingClient = Depends(get_geocoder)
):
    """Resolve an address to coordinates"""
    result = geocoder.geocode_address(address, city, state, zip_code)
    if result.get("error"):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=result["error"]
        )
    return result


@router.get("/geocode/reverse", response_model=Dict)
async def reverse_geocode(
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    geocoder: GeocodingClient = Depends(get_geocoder)
):
    """Resolve coordinates to an address"""
    result = geocoder.reverse_geocode(lat, lng)
    if result.get("error"):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=result["error"]
        )
    return result
