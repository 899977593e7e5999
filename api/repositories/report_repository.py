from typing import Dict, List, Optional

from database import BaseRepository


REPORT_LABEL = "LocationReport"


class ReportRepository(BaseRepository):
    """Repository for incorrect-information reports on locations"""

    def create(self, location_id: str, report_data: Dict, user_id: Optional[str]) -> Optional[Dict]:
        """File a report. Anonymous reports are allowed."""
        return self.create_node(REPORT_LABEL, {
            **report_data,
            "locationId": location_id,
            "userId": user_id,
            "status": "pending",
        })

    def get_location_reports(self, location_id: str) -> List[Dict]:
        """Get all reports for a location, newest first"""
        return self.find_nodes(REPORT_LABEL, {"locationId": location_id})

    def get_pending_reports(self) -> List[Dict]:
        """Get reports nobody has looked at yet"""
        return self.find_nodes(REPORT_LABEL, {"status": "pending"})

    def update_status(self, report_id: str, status: str) -> Optional[Dict]:
        return self.update_node(REPORT_LABEL, report_id, {"status": status})
