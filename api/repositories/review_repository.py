import math
from typing import Dict, List, Optional

from database import BaseRepository


REVIEW_LABEL = "Review"


class ReviewRepository(BaseRepository):
    """Repository for location reviews"""

    def create(self, location_id: str, review_data: Dict, user_id: str) -> Optional[Dict]:
        """Add a review for a location"""
        return self.create_node(REVIEW_LABEL, {
            **review_data,
            "locationId": location_id,
            "userId": user_id,
        })

    def get_by_id(self, review_id: str) -> Optional[Dict]:
        return self.get_node(REVIEW_LABEL, review_id)

    def get_location_reviews(self, location_id: str, limit: int = 50) -> List[Dict]:
        """Get reviews for a location, newest first"""
        return self.find_nodes(REVIEW_LABEL, {"locationId": location_id}, limit=limit)

    def get_user_reviews(self, user_id: str) -> List[Dict]:
        """Get a user's reviews, newest first"""
        return self.find_nodes(REVIEW_LABEL, {"userId": user_id})

    def update(self, review_id: str, updates: Dict) -> Optional[Dict]:
        return self.update_node(REVIEW_LABEL, review_id, updates)

    def delete(self, review_id: str) -> bool:
        return self.delete_node(REVIEW_LABEL, review_id)

    def get_location_rating(self, location_id: str) -> Dict:
        """Average rating for a location, rounded to one decimal.

        Returns:
            dict: {"average": float, "count": int}; zeros when unrated
        """
        query = """
        MATCH (r:Review {locationId: $location_id})
        WHERE r.rating IS NOT NULL
        RETURN avg(r.rating) as average, count(r) as count
        """
        result = self.execute_query(query, {"location_id": location_id})
        if not result or not result[0]['count']:
            return {"average": 0, "count": 0}

        return {
            "average": math.floor(result[0]["average"] * 10 + 0.5) / 10,
            "count": result[0]['count'],
        }
