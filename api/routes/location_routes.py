import logging
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import ValidationError

from config import settings
from dependencies import CurrentUser, get_current_user, get_geocoder, require_admin
from models.location import LocationCreate, LocationUpdate
from repositories.location_repository import LocationRepository
from services.geocoding_client import GeocodingClient
from utils.location_utils import (
    check_open_status,
    get_share_text,
    get_share_url,
    get_transit_directions_url,
    sort_by_distance,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/locations",
    tags=["locations"],
    responses={404: {"description": "Location not found"}}
)
repo = LocationRepository()


def _get_or_404(location_id: str) -> Dict:
    location = repo.get_by_id(location_id)
    if not location:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Location with ID {location_id} not found"
        )
    return location


def _apply_geocoding(data: Dict, geocoder: GeocodingClient) -> Dict:
    """Resolve missing coordinates from the address, filling empty address parts"""
    result = geocoder.geocode_address(
        data.get("address"),
        data.get("city") or "",
        data.get("state") or "",
        data.get("zipCode") or ""
    )
    if result.get("error"):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Failed to geocode address: {result['error']}"
        )

    data["latitude"] = result["latitude"]
    data["longitude"] = result["longitude"]
    components = result.get("addressComponents") or {}
    for field in ["city", "state", "zipCode"]:
        if not data.get(field) and components.get(field):
            data[field] = components[field]
    return data


@router.post("/", response_model=Dict, status_code=status.HTTP_201_CREATED)
async def create_location(
    location: LocationCreate,
    user: CurrentUser = Depends(get_current_user),
    geocoder: GeocodingClient = Depends(get_geocoder)
):
    """Submit a new location.

    Admin submissions are published immediately; other submissions wait in
    the pending queue for approval.
    """
    data = location.model_dump(by_alias=True)
    if location.needs_geocoding:
        data = _apply_geocoding(data, geocoder)

    result = repo.create(data, user.user_id, user.is_admin)
    if not result:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create location"
        )

    logger.info(
        f"Location '{location.name}' submitted by {user.user_id} "
        f"({'approved' if user.is_admin else 'pending'})"
    )
    return {
        "id": result["id"],
        "status": "approved" if user.is_admin else "pending",
        "location": result
    }


@router.get("/", response_model=List[Dict])
async def get_locations(
    skip: int = Query(0, ge=0, description="Number of items to skip"),
    limit: int = Query(100, ge=1, le=1000, description="Number of items to return"),
    category: Optional[str] = Query(None, description="Only locations tagged with this category"),
    online_only: Optional[bool] = Query(None, description="Filter by online-only status"),
    state: Optional[str] = Query(None, description="Two-letter state code"),
    q: Optional[str] = Query(None, description="Text search over name, description, address and resources")
):
    """Get approved locations with pagination and filters"""
    filters = {}
    if category:
        filters['category'] = category
    if online_only is not None:
        filters['online_only'] = online_only
    if state:
        filters['state'] = state
    if q:
        filters['q'] = q

    return repo.get_all(skip=skip, limit=limit, filters=filters)


@router.get("/nearby", response_model=List[Dict])
async def get_nearby_locations(
    lat: float = Query(..., ge=-90, le=90, description="Latitude of the reference point"),
    lng: float = Query(..., ge=-180, le=180, description="Longitude of the reference point"),
    radius: Optional[float] = Query(None, gt=0, description="Maximum distance in miles"),
    limit: int = Query(20, ge=1, le=500, description="Number of items to return")
):
    """Get physical locations ordered by distance from a point"""
    locations = sort_by_distance(repo.get_with_coordinates(), lat, lng)
    if radius is not None:
        locations = [loc for loc in locations if loc['distance'] is not None and loc['distance'] <= radius]
    return locations[:limit]


@router.get("/statistics/summary", response_model=Dict)
async def get_location_statistics():
    """Get location statistics"""
    return repo.get_statistics()


@router.get("/{location_id}", response_model=Dict)
async def get_location(location_id: str):
    """Get an approved location by ID"""
    return _get_or_404(location_id)


@router.get("/{location_id}/status", response_model=Dict)
async def get_location_open_status(location_id: str):
    """Best-effort open/closed status from the location's hours"""
    location = _get_or_404(location_id)
    return check_open_status(location.get("hours"))


@router.get("/{location_id}/share", response_model=Dict)
async def get_location_share_link(location_id: str):
    """Public link and message for sharing a location"""
    location = _get_or_404(location_id)
    return {
        "url": get_share_url(location, settings.public_base_url),
        "text": get_share_text(location),
        "title": location.get("name")
    }


@router.get("/{location_id}/transit", response_model=Dict)
async def get_location_transit_directions(
    location_id: str,
    origin_lat: Optional[float] = Query(None, ge=-90, le=90),
    origin_lng: Optional[float] = Query(None, ge=-180, le=180)
):
    """Google Maps transit directions link to a location"""
    location = _get_or_404(location_id)
    if location.get("latitude") is None or location.get("longitude") is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Location has no coordinates"
        )

    origin = None
    if origin_lat is not None and origin_lng is not None:
        origin = {"lat": origin_lat, "lng": origin_lng}
    return {"url": get_transit_directions_url(location, origin)}


@router.patch("/{location_id}", response_model=Dict)
async def update_location(
    location_id: str,
    updates: LocationUpdate,
    user: CurrentUser = Depends(require_admin),
    geocoder: GeocodingClient = Depends(get_geocoder)
):
    """Update a location's properties (admin only).

    A physical location left without coordinates is geocoded from its merged
    address before saving.
    """
    existing = _get_or_404(location_id)

    update_data = {k: v for k, v in updates.model_dump(by_alias=True).items() if v is not None}
    if not update_data:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No valid updates provided"
        )

    # The edited record must still be a valid physical or online-only location
    merged = {**existing, **update_data}
    try:
        edited = LocationCreate.model_validate(merged)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="; ".join(err['msg'] for err in e.errors())
        )

    if edited.needs_geocoding:
        geocoded = _apply_geocoding(merged, geocoder)
        for field in ["latitude", "longitude", "city", "state", "zipCode"]:
            if geocoded.get(field) is not None and geocoded.get(field) != existing.get(field):
                update_data[field] = geocoded[field]

    result = repo.update(location_id, update_data)
    if not result:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update location"
        )

    logger.info(f"Location {location_id} updated by {user.user_id}")
    return result


@router.delete("/{location_id}")
async def delete_location(location_id: str, user: CurrentUser = Depends(get_current_user)):
    """Delete a location.

    Admins delete directly; other users file a deletion request for review.
    """
    if not repo.exists(location_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Location with ID {location_id} not found"
        )

    result = repo.delete(location_id, user.user_id, user.is_admin)

    if user.is_admin:
        if not result.get("deleted"):
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to delete location"
            )
        return {"message": "Location deleted", "location_id": location_id}

    request = result.get("request")
    if not request:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to submit deletion request"
        )
    return {
        "message": "Deletion request submitted for review",
        "location_id": location_id,
        "request_id": request["id"]
    }
