from typing import Dict, List

from fastapi import APIRouter, Depends, HTTPException, status

from config import settings
from dependencies import CurrentUser, get_current_user, get_history_store
from models.engagement import LocationRef
from repositories.location_repository import LocationRepository
from services.history_store import KeyValueStore, LocationHistory, history_for_user

router = APIRouter(
    prefix="/history",
    tags=["history"],
    responses={401: {"description": "Missing user identity"}}
)
location_repo = LocationRepository()


def get_user_history(
    user: CurrentUser = Depends(get_current_user),
    store: KeyValueStore = Depends(get_history_store)
) -> LocationHistory:
    return history_for_user(store, user.user_id, settings.max_history_items)


@router.get("/", response_model=List[Dict])
async def get_history(history: LocationHistory = Depends(get_user_history)):
    """Recently viewed locations, most recent first"""
    return history.get()


@router.post("/", response_model=List[Dict])
async def add_to_history(request: LocationRef, history: LocationHistory = Depends(get_user_history)):
    """Record a location view"""
    location = location_repo.get_by_id(request.location_id)
    if not location:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Location with ID {request.location_id} not found"
        )
    return history.add(location)


@router.delete("/{location_id}", response_model=List[Dict])
async def remove_from_history(location_id: str, history: LocationHistory = Depends(get_user_history)):
    return history.remove(location_id)


@router.delete("/", status_code=status.HTTP_204_NO_CONTENT)
async def clear_history(history: LocationHistory = Depends(get_user_history)):
    history.clear()
