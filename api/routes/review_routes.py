import logging
from typing import Dict, List

from fastapi import APIRouter, Depends, HTTPException, Query, status

from dependencies import CurrentUser, get_current_user
from models.engagement import ReviewCreate, ReviewUpdate
from repositories.location_repository import LocationRepository
from repositories.review_repository import ReviewRepository

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/reviews",
    tags=["reviews"],
    responses={404: {"description": "Review or location not found"}}
)
repo = ReviewRepository()
location_repo = LocationRepository()


def _get_review_or_404(review_id: str) -> Dict:
    review = repo.get_by_id(review_id)
    if not review:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Review with ID {review_id} not found"
        )
    return review


@router.get("/mine", response_model=List[Dict])
async def get_my_reviews(user: CurrentUser = Depends(get_current_user)):
    return repo.get_user_reviews(user.user_id)


@router.get("/location/{location_id}", response_model=List[Dict])
async def get_location_reviews(
    location_id: str,
    limit: int = Query(50, ge=1, le=200, description="Number of reviews to return")
):
    """Get reviews for a location, newest first"""
    return repo.get_location_reviews(location_id, limit=limit)


@router.get("/location/{location_id}/rating", response_model=Dict)
async def get_location_rating(location_id: str):
    """Average rating (one decimal) and review count"""
    return repo.get_location_rating(location_id)


@router.post("/location/{location_id}", response_model=Dict, status_code=status.HTTP_201_CREATED)
async def create_review(location_id: str, review: ReviewCreate, user: CurrentUser = Depends(get_current_user)):
    """Review a location"""
    if not location_repo.exists(location_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Location with ID {location_id} not found"
        )

    result = repo.create(location_id, review.model_dump(exclude_none=True), user.user_id)
    if not result:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create review"
        )

    logger.info(f"User {user.user_id} reviewed location {location_id} ({review.rating} stars)")
    return result


@router.patch("/{review_id}", response_model=Dict)
async def update_review(review_id: str, updates: ReviewUpdate, user: CurrentUser = Depends(get_current_user)):
    """Edit your own review"""
    review = _get_review_or_404(review_id)
    if review.get("userId") != user.user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only edit your own reviews"
        )

    update_data = updates.model_dump(exclude_none=True)
    if not update_data:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No valid updates provided"
        )

    return repo.update(review_id, update_data)


@router.delete("/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_review(review_id: str, user: CurrentUser = Depends(get_current_user)):
    """Delete a review. Owners and admins only."""
    review = _get_review_or_404(review_id)
    if review.get("userId") != user.user_id and not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only delete your own reviews"
        )

    repo.delete(review_id)
