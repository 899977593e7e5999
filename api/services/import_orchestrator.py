"""
Batch Import Orchestrator for community resource locations.

This service coordinates a batch import: it validates the uploaded records,
geocodes the ones that only have an address, and commits them one at a time.
One record failing never stops the rest of the batch.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from pydantic import ValidationError

from models.location import LocationCreate
from repositories.location_repository import LocationRepository
from services.geocoding_client import GeocodingClient
from utils.import_validator import (
    get_record_name,
    parse_locations_json,
    strip_internal_fields,
)

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float], None]


class ImportOrchestrator:
    """
    Orchestrates the import of a batch of location records.

    Records are committed sequentially in document order. Each record either
    succeeds or is recorded as a failure with its reason; there are no
    retries and no rollback.
    """

    def __init__(self, location_repo: Optional[LocationRepository] = None,
                 geocoder: Optional[GeocodingClient] = None):
        """Initialize the orchestrator with its collaborators."""
        self.location_repo = location_repo or LocationRepository()
        self.geocoder = geocoder or GeocodingClient()

        # Track statistics for reporting
        self.stats = {
            "total": 0,
            "success": 0,
            "failed": 0,
            "errors": []
        }
        self.progress = 0.0

        # Generate unique job ID
        self.job_id = str(uuid.uuid4())
        self.start_time = datetime.now(timezone.utc)

    def preview(self, json_text: str) -> Dict:
        """
        Validate an import document without committing anything.

        Args:
            json_text: The import document as JSON text

        Returns:
            Dictionary with counts and the prepared records

        Raises:
            ValueError: If the document is not valid JSON or has no locations
        """
        records = parse_locations_json(json_text)
        valid = sum(1 for record in records if record['_valid'])

        logger.info(f"Previewed import with {len(records)} records ({valid} valid)")

        return {
            "total": len(records),
            "valid": valid,
            "invalid": len(records) - valid,
            "locations": records,
        }

    def _record_failure(self, record: Dict, error: str):
        self.stats["failed"] += 1
        self.stats["errors"].append({
            "index": record.get('_index'),
            "name": get_record_name(record),
            "error": error,
        })
        logger.warning(f"Import record {record.get('_index')} ({get_record_name(record)}) failed: {error}")

    def _geocode(self, record: Dict, location_data: Dict) -> Optional[str]:
        """
        Fill in coordinates, and empty city/state/zip, from the geocoder.

        Returns:
            Error message, or None on success
        """
        result = self.geocoder.geocode_address(
            record.get('address'),
            record.get('city') or '',
            record.get('state') or '',
            record.get('zipCode') or ''
        )

        if result.get('error') or not result.get('latitude') or not result.get('longitude'):
            return f"Failed to geocode address: {result.get('error') or 'Unknown error'}"

        location_data['latitude'] = result['latitude']
        location_data['longitude'] = result['longitude']

        components = result.get('addressComponents') or {}
        for field in ['city', 'state', 'zipCode']:
            if not location_data.get(field) and components.get(field):
                location_data[field] = components[field]

        return None

    def commit_record(self, record: Dict, user_id: str, is_admin: bool) -> Optional[str]:
        """
        Geocode (if needed), validate against the location model, and persist.

        Args:
            record: Prepared record from the validator
            user_id: Submitting user
            is_admin: Whether the record bypasses the approval queue

        Returns:
            Error message, or None on success
        """
        location_data = strip_internal_fields(record)

        if record.get('_needsGeocoding') and record.get('address'):
            error = self._geocode(record, location_data)
            if error:
                return error

        try:
            location = LocationCreate.model_validate(location_data)
        except ValidationError as e:
            return "; ".join(err['msg'] for err in e.errors())

        result = self.location_repo.create(location.model_dump(by_alias=True), user_id, is_admin)
        if not result:
            return "Failed to save location"
        return None

    async def import_locations(
        self,
        records: List[Dict],
        user_id: str,
        is_admin: bool = True,
        selected_indices: Optional[List[int]] = None,
        progress_callback: Optional[ProgressCallback] = None
    ) -> Dict:
        """
        Import prepared records one at a time, in order.

        Args:
            records: Prepared records (see utils.import_validator.prepare_records)
            user_id: Submitting user
            is_admin: Admin imports commit directly; others go to the pending set
            selected_indices: Which records to import; defaults to all
            progress_callback: Called with the completed percentage after each record

        Returns:
            Statistics: total, success, failed and per-record errors
        """
        if selected_indices is None:
            to_import = list(records)
        else:
            selected = set(selected_indices)
            to_import = [record for record in records if record.get('_index') in selected]

        self.stats["total"] = len(to_import)
        logger.info(f"Import job {self.job_id}: importing {len(to_import)} locations")

        for i, record in enumerate(to_import):
            if not record.get('_valid'):
                self._record_failure(
                    record,
                    "; ".join(record.get('_errors') or []) or "Invalid location"
                )
            else:
                try:
                    error = self.commit_record(record, user_id, is_admin)
                    if error:
                        self._record_failure(record, error)
                    else:
                        self.stats["success"] += 1
                        logger.debug(f"Imported location: {get_record_name(record)}")
                except Exception as e:
                    self._record_failure(record, str(e) or "Unknown error")

            self.progress = (i + 1) / len(to_import) * 100
            if progress_callback:
                progress_callback(self.progress)

        return self.stats

    async def import_json(
        self,
        json_text: str,
        user_id: str,
        is_admin: bool = True,
        selected_indices: Optional[List[int]] = None,
        progress_callback: Optional[ProgressCallback] = None
    ) -> Dict:
        """
        Main import method: parse, validate and commit a JSON document.

        Args:
            json_text: The import document as JSON text
            user_id: Submitting user
            is_admin: Admin imports commit directly
            selected_indices: Which records to import; defaults to all
            progress_callback: Progress reporter

        Returns:
            Dictionary with job id, status, summary and errors

        Raises:
            ValueError: If the document cannot be parsed
        """
        logger.info(f"Starting import job {self.job_id}")

        records = parse_locations_json(json_text)

        if selected_indices is not None and not selected_indices:
            raise ValueError("Please select at least one location to import")

        await self.import_locations(records, user_id, is_admin, selected_indices, progress_callback)

        execution_time = (datetime.now(timezone.utc) - self.start_time).total_seconds()

        if self.stats["total"] and self.stats["success"] == 0:
            status = "failed"
        elif self.stats["failed"]:
            status = "completed_with_errors"
        else:
            status = "completed"

        response = {
            "job_id": self.job_id,
            "status": status,
            "message": (
                f"Imported {self.stats['success']} of {self.stats['total']} locations"
            ),
            "execution_time_seconds": execution_time,
            "progress": self.progress,
            "summary": {
                "total": self.stats["total"],
                "success": self.stats["success"],
                "failed": self.stats["failed"],
            },
            "errors": self.stats["errors"][:100],
        }

        logger.info(
            f"Import job {self.job_id} completed in {execution_time:.2f} seconds. "
            f"Status: {status} ({self.stats['success']} imported, {self.stats['failed']} failed)"
        )

        return response
