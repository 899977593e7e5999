import logging
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from dependencies import CurrentUser, get_optional_user, require_admin
from models.engagement import ReportCreate
from repositories.location_repository import LocationRepository
from repositories.report_repository import ReportRepository

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/reports",
    tags=["reports"]
)
repo = ReportRepository()
location_repo = LocationRepository()


@router.post("/location/{location_id}", response_model=Dict, status_code=status.HTTP_201_CREATED)
async def report_location(
    location_id: str,
    report: ReportCreate,
    user: Optional[CurrentUser] = Depends(get_optional_user)
):
    """Report incorrect information about a location. Signing in is optional."""
    if not location_repo.exists(location_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Location with ID {location_id} not found"
        )

    result = repo.create(location_id, report.model_dump(exclude_none=True), user.user_id if user else None)
    if not result:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to submit report"
        )

    logger.info(f"Report filed on location {location_id}: {report.reason}")
    return result


@router.get("/location/{location_id}", response_model=List[Dict], dependencies=[Depends(require_admin)])
async def get_location_reports(location_id: str):
    """All reports filed on a location (admin only)"""
    return repo.get_location_reports(location_id)
