"""
Batch Import Routes for the Community Resource Map API.

Provides endpoints for validating and importing location records from a JSON
document, pasted as text or uploaded as a base64-encoded file.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from config import settings
from dependencies import CurrentUser, get_geocoder, require_admin
from models.import_request import ImportRequest, ImportResponse, PreviewResponse
from repositories.location_repository import LocationRepository
from services.geocoding_client import GeocodingClient
from services.import_orchestrator import ImportOrchestrator
from utils.import_validator import EXPECTED_FIELDS, build_import_template

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/import",
    tags=["import"],
    responses={
        400: {"description": "Bad request - invalid JSON document"},
        403: {"description": "Admin access required"},
        500: {"description": "Internal server error"}
    }
)
repo = LocationRepository()


def _read_document(request: ImportRequest) -> str:
    """Decode the request body into JSON text, enforcing the size limit."""
    try:
        json_text = request.get_json_text()
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    if len(json_text.encode('utf-8')) > settings.import_max_bytes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Import document too large. Maximum size is {settings.import_max_bytes // (1024 * 1024)}MB"
        )

    logger.info(f"Received import document ({len(json_text)} characters)")
    return json_text


@router.get(
    "/template",
    response_model=dict,
    summary="Get import template",
    description="Example import document with every supported field"
)
async def get_import_template():
    """
    Get the downloadable import template.

    Returns:
        Dictionary with the expected fields and an example document
    """
    return {
        "file_name": "location-import-template.json",
        "fields": EXPECTED_FIELDS,
        "locations": build_import_template(),
        "notes": [
            "The document may be an array, or an object with a 'locations' or 'data' array",
            "Physical locations need an address; coordinates are geocoded when missing",
            "Online-only services need at least one of website, email or phone",
            "categories, resources, benefits and photos must be lists; anything else is replaced with an empty list"
        ]
    }


@router.post(
    "/preview",
    response_model=PreviewResponse,
    summary="Validate an import document",
    description="Validate every record without saving anything. Valid records come back pre-selected."
)
async def preview_import(
    request: ImportRequest,
    user: CurrentUser = Depends(require_admin)
) -> PreviewResponse:
    json_text = _read_document(request)

    try:
        result = ImportOrchestrator(location_repo=repo).preview(json_text)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    return PreviewResponse(**result)


@router.post(
    "/",
    response_model=ImportResponse,
    status_code=status.HTTP_200_OK,
    summary="Import locations from JSON",
    description="""
    Import community resource locations from a JSON document.

    ## Request Format
    Provide exactly one of:
    - `json_content`: The JSON document as text
    - `file_content`: Base64-encoded `.json` file (with `file_name`)

    Optionally pass `selected_indices` to import a subset of the records
    returned by `/import/preview`.

    ## Processing
    Records are saved one at a time in document order. Records that only have
    an address are geocoded first. A record that fails validation, geocoding
    or saving is reported in `errors` and the import continues with the next.
    Nothing is retried or rolled back.
    """
)
async def import_locations(
    request: ImportRequest,
    user: CurrentUser = Depends(require_admin),
    geocoder: GeocodingClient = Depends(get_geocoder)
) -> ImportResponse:
    """
    Import locations from a JSON document.

    Args:
        request: JSON text or uploaded file, plus optional selection
        user: Importing admin
        geocoder: Address geocoder

    Returns:
        ImportResponse with job ID, counts and per-record errors

    Raises:
        HTTPException: 400 for an unreadable document or empty selection
    """
    json_text = _read_document(request)
    orchestrator = ImportOrchestrator(location_repo=repo, geocoder=geocoder)

    try:
        result = await orchestrator.import_json(
            json_text=json_text,
            user_id=user.user_id,
            is_admin=True,
            selected_indices=request.selected_indices
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except Exception as e:
        logger.error(f"Unexpected error during import: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Internal error during import: {str(e)}"
        )

    return ImportResponse(**result)
