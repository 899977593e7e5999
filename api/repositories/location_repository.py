from typing import Dict, List, Optional

from database import BaseRepository, utc_now


LOCATION_LABEL = "Location"
PENDING_LABEL = "PendingLocation"
DELETION_LABEL = "PendingDeletion"

# Fields that only make sense on a pending submission
PENDING_ONLY_FIELDS = ['id', 'status', 'requestedBy', 'requestedAt', 'createdAt', 'updatedAt']


class LocationRepository(BaseRepository):
    """Repository for approved locations and their moderation queues"""

    def create(self, location_data: Dict, user_id: str, is_admin: bool = False) -> Optional[Dict]:
        """Add a location.

        Admin submissions go straight to the approved set. Everyone else's
        land in the pending set and wait for approval.
        """
        if is_admin:
            return self.create_node(LOCATION_LABEL, {
                **location_data,
                "approvedAt": utc_now(),
                "createdBy": user_id,
            })

        return self.create_node(PENDING_LABEL, {
            **location_data,
            "status": "pending",
            "requestedBy": user_id,
            "requestedAt": utc_now(),
        })

    def get_by_id(self, location_id: str) -> Optional[Dict]:
        """Get an approved location by id"""
        return self.get_node(LOCATION_LABEL, location_id)

    def exists(self, location_id: str) -> bool:
        """Check if an approved location exists"""
        query = """
        MATCH (l:Location {id: $id})
        RETURN count(l) > 0 as exists
        """
        result = self.execute_query(query, {"id": location_id})
        return result[0]['exists'] if result else False

    def get_all(self, skip: int = 0, limit: int = 100, filters: Dict = None) -> List[Dict]:
        """Get approved locations with pagination and filters"""
        where_clauses = []
        params = {"skip": skip, "limit": limit}

        if filters:
            if filters.get('category'):
                where_clauses.append("$category IN l.categories")
                params['category'] = filters['category']

            if filters.get('online_only') is not None:
                where_clauses.append("coalesce(l.onlineOnly, false) = $online_only")
                params['online_only'] = filters['online_only']

            if filters.get('state'):
                where_clauses.append("l.state = $state")
                params['state'] = filters['state'].upper()

            if filters.get('q'):
                where_clauses.append(
                    "(toLower(l.name) CONTAINS toLower($q) "
                    "OR toLower(coalesce(l.description, '')) CONTAINS toLower($q) "
                    "OR toLower(coalesce(l.address, '')) CONTAINS toLower($q) "
                    "OR any(r IN coalesce(l.resources, []) WHERE toLower(r) CONTAINS toLower($q)))"
                )
                params['q'] = filters['q']

        where_clause = f"WHERE {' AND '.join(where_clauses)}" if where_clauses else ""

        query = f"""
        MATCH (l:Location)
        {where_clause}
        RETURN l
        ORDER BY l.createdAt DESC
        SKIP $skip
        LIMIT $limit
        """

        result = self.execute_query(query, params)
        return [record['l'] for record in result]

    def get_with_coordinates(self) -> List[Dict]:
        """All approved physical locations, for distance queries"""
        query = """
        MATCH (l:Location)
        WHERE l.latitude IS NOT NULL AND l.longitude IS NOT NULL
        RETURN l
        """
        result = self.execute_query(query)
        return [record['l'] for record in result]

    def update(self, location_id: str, updates: Dict) -> Optional[Dict]:
        """Update a location's properties in place"""
        return self.update_node(LOCATION_LABEL, location_id, updates)

    def delete(self, location_id: str, user_id: str, is_admin: bool = False) -> Dict:
        """Delete a location, or file a deletion request for non-admins.

        Returns:
            dict: {"deleted": bool} for admins, {"request": <request>} otherwise
        """
        if is_admin:
            return {"deleted": self.delete_node(LOCATION_LABEL, location_id)}

        request = self.create_node(DELETION_LABEL, {
            "locationId": location_id,
            "status": "pending",
            "requestedBy": user_id,
            "requestedAt": utc_now(),
            "type": "deletion",
        })
        return {"request": request}

    # Moderation

    def get_pending(self) -> List[Dict]:
        """Get submissions awaiting approval, newest first"""
        return self.find_nodes(PENDING_LABEL, {"status": "pending"}, order_by="requestedAt")

    def get_pending_by_id(self, pending_id: str) -> Optional[Dict]:
        return self.get_node(PENDING_LABEL, pending_id)

    def approve_pending(self, pending_id: str) -> Optional[Dict]:
        """Copy a pending submission into the approved set.

        Returns:
            dict: The new approved location, or None if the submission is gone
        """
        pending = self.get_pending_by_id(pending_id)
        if not pending:
            return None

        approved_data = {k: v for k, v in pending.items() if k not in PENDING_ONLY_FIELDS}
        approved_data["approvedAt"] = utc_now()
        approved_data["createdBy"] = pending.get("requestedBy")

        created = self.create_node(LOCATION_LABEL, approved_data)
        if not created:
            return None

        self.update_node(PENDING_LABEL, pending_id, {"status": "approved"})
        return created

    def reject_pending(self, pending_id: str) -> Optional[Dict]:
        """Mark a pending submission as rejected"""
        return self.update_node(PENDING_LABEL, pending_id, {"status": "rejected"})

    def get_pending_deletions(self) -> List[Dict]:
        """Get deletion requests awaiting approval"""
        return self.find_nodes(DELETION_LABEL, {"status": "pending"}, order_by="requestedAt")

    def get_deletion_request(self, request_id: str) -> Optional[Dict]:
        return self.get_node(DELETION_LABEL, request_id)

    def approve_deletion(self, request_id: str) -> bool:
        """Delete the requested location and mark the request approved"""
        request = self.get_deletion_request(request_id)
        if not request:
            return False

        if not self.delete_node(LOCATION_LABEL, request["locationId"]):
            return False

        self.update_node(DELETION_LABEL, request_id, {"status": "approved"})
        return True

    def reject_deletion(self, request_id: str) -> Optional[Dict]:
        return self.update_node(DELETION_LABEL, request_id, {"status": "rejected"})

    def get_statistics(self) -> Dict:
        """Get location statistics"""
        query = """
        MATCH (l:Location)
        RETURN
            count(l) as total_locations,
            count(CASE WHEN l.onlineOnly = true THEN 1 END) as online_only,
            count(CASE WHEN l.latitude IS NOT NULL THEN 1 END) as with_coordinates,
            count(CASE WHEN l.hours IS NOT NULL AND l.hours <> '' THEN 1 END) as with_hours
        """
        result = self.execute_query(query)
        return result[0] if result else {}
