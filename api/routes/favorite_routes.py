import logging
from typing import Dict, List

from fastapi import APIRouter, Depends, HTTPException, status

from dependencies import CurrentUser, get_current_user
from models.engagement import LocationRef
from repositories.favorite_repository import FavoriteRepository
from repositories.location_repository import LocationRepository

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/favorites",
    tags=["favorites"],
    responses={401: {"description": "Missing user identity"}}
)
repo = FavoriteRepository()
location_repo = LocationRepository()


@router.get("/", response_model=List[Dict])
async def get_favorites(user: CurrentUser = Depends(get_current_user)):
    """Get the current user's favorite locations"""
    return repo.get_favorite_locations(user.user_id)


@router.get("/ids", response_model=List[str])
async def get_favorite_ids(user: CurrentUser = Depends(get_current_user)):
    return repo.get_favorites(user.user_id)


@router.get("/{location_id}", response_model=Dict)
async def check_favorite(location_id: str, user: CurrentUser = Depends(get_current_user)):
    return {"location_id": location_id, "favorite": repo.is_favorite(user.user_id, location_id)}


@router.post("/", response_model=Dict, status_code=status.HTTP_201_CREATED)
async def add_favorite(request: LocationRef, user: CurrentUser = Depends(get_current_user)):
    """Add a location to the current user's favorites"""
    if not location_repo.exists(request.location_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Location with ID {request.location_id} not found"
        )

    if not repo.add_favorite(user.user_id, request.location_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Location is already in favorites"
        )

    logger.info(f"User {user.user_id} favorited location {request.location_id}")
    return {"location_id": request.location_id, "favorite": True}


@router.delete("/{location_id}", response_model=Dict)
async def remove_favorite(location_id: str, user: CurrentUser = Depends(get_current_user)):
    """Remove a location from favorites. Removing a non-favorite is a no-op."""
    removed = repo.remove_favorite(user.user_id, location_id)
    return {"location_id": location_id, "favorite": False, "removed": removed}
