from typing import Dict, List

from fastapi import APIRouter, Depends, HTTPException, status

from dependencies import CurrentUser, get_current_user
from models.engagement import NoteRequest
from repositories.location_repository import LocationRepository
from repositories.note_repository import NoteRepository

router = APIRouter(
    prefix="/notes",
    tags=["notes"],
    responses={401: {"description": "Missing user identity"}}
)
repo = NoteRepository()
location_repo = LocationRepository()


@router.get("/", response_model=List[Dict])
async def get_my_notes(user: CurrentUser = Depends(get_current_user)):
    """Get all of the current user's notes, most recently edited first"""
    return repo.get_user_notes(user.user_id)


@router.get("/{location_id}", response_model=Dict)
async def get_note(location_id: str, user: CurrentUser = Depends(get_current_user)):
    note = repo.get_note(location_id, user.user_id)
    if not note:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No note for location {location_id}"
        )
    return note


@router.put("/{location_id}", response_model=Dict)
async def save_note(location_id: str, request: NoteRequest, user: CurrentUser = Depends(get_current_user)):
    """Create or overwrite the current user's note on a location"""
    if not location_repo.exists(location_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Location with ID {location_id} not found"
        )

    result = repo.save_note(location_id, request.note, user.user_id)
    if not result:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save note"
        )
    return result


@router.delete("/{location_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_note(location_id: str, user: CurrentUser = Depends(get_current_user)):
    if not repo.delete_note(location_id, user.user_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No note for location {location_id}"
        )
