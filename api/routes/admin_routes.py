import logging
from typing import Dict, List

from fastapi import APIRouter, Depends, HTTPException, status

from dependencies import CurrentUser, require_admin
from models.engagement import ReportStatusUpdate
from repositories.location_repository import LocationRepository
from repositories.report_repository import ReportRepository

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/admin",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
    responses={403: {"description": "Admin access required"}}
)
repo = LocationRepository()
report_repo = ReportRepository()


@router.get("/pending", response_model=List[Dict])
async def get_pending_locations():
    """Get submissions awaiting approval"""
    return repo.get_pending()


@router.post("/pending/{pending_id}/approve", response_model=Dict)
async def approve_pending_location(pending_id: str, user: CurrentUser = Depends(require_admin)):
    """Publish a pending submission"""
    pending = repo.get_pending_by_id(pending_id)
    if not pending:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Pending location with ID {pending_id} not found"
        )
    if pending.get("status") != "pending":
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Pending location {pending_id} is already {pending.get('status')}"
        )

    location = repo.approve_pending(pending_id)
    if not location:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to approve location"
        )

    logger.info(f"Pending location {pending_id} approved by {user.user_id} as {location['id']}")
    return location


@router.post("/pending/{pending_id}/reject", response_model=Dict)
async def reject_pending_location(pending_id: str, user: CurrentUser = Depends(require_admin)):
    """Reject a pending submission"""
    pending = repo.get_pending_by_id(pending_id)
    if not pending:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Pending location with ID {pending_id} not found"
        )
    if pending.get("status") != "pending":
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Pending location {pending_id} is already {pending.get('status')}"
        )

    result = repo.reject_pending(pending_id)
    logger.info(f"Pending location {pending_id} rejected by {user.user_id}")
    return result


@router.get("/deletions", response_model=List[Dict])
async def get_deletion_requests():
    """Get deletion requests awaiting approval"""
    return repo.get_pending_deletions()


@router.post("/deletions/{request_id}/approve", response_model=Dict)
async def approve_deletion_request(request_id: str, user: CurrentUser = Depends(require_admin)):
    """Delete the requested location"""
    request = repo.get_deletion_request(request_id)
    if not request:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Deletion request with ID {request_id} not found"
        )
    if request.get("status") != "pending":
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Deletion request {request_id} is already {request.get('status')}"
        )

    if not repo.approve_deletion(request_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Location with ID {request['locationId']} not found"
        )

    logger.info(f"Deletion request {request_id} approved by {user.user_id}")
    return {"message": "Location deleted", "location_id": request["locationId"]}


@router.post("/deletions/{request_id}/reject", response_model=Dict)
async def reject_deletion_request(request_id: str):
    """Keep the location and close the deletion request"""
    result = repo.reject_deletion(request_id)
    if not result:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Deletion request with ID {request_id} not found"
        )
    return result


@router.get("/reports", response_model=List[Dict])
async def get_pending_reports():
    """Get reports nobody has reviewed yet"""
    return report_repo.get_pending_reports()


@router.patch("/reports/{report_id}", response_model=Dict)
async def update_report_status(report_id: str, update: ReportStatusUpdate):
    """Move a report to reviewed, resolved or dismissed"""
    result = report_repo.update_status(report_id, update.status)
    if not result:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Report with ID {report_id} not found"
        )
    return result
