from typing import List

from database import BaseRepository, utc_now


class FavoriteRepository(BaseRepository):
    """Repository for user favorites, stored as FAVORITED relationships"""

    def get_favorites(self, user_id: str) -> List[str]:
        """Get the ids of a user's favorite locations, oldest first"""
        query = """
        MATCH (u:User {user_id: $user_id})-[f:FAVORITED]->(l:Location)
        RETURN l.id as location_id
        ORDER BY f.created_at
        """
        result = self.execute_query(query, {"user_id": user_id})
        return [record['location_id'] for record in result]

    def get_favorite_locations(self, user_id: str) -> List[dict]:
        """Get a user's favorite locations as full records"""
        query = """
        MATCH (u:User {user_id: $user_id})-[f:FAVORITED]->(l:Location)
        RETURN l
        ORDER BY f.created_at
        """
        result = self.execute_query(query, {"user_id": user_id})
        return [record['l'] for record in result]

    def is_favorite(self, user_id: str, location_id: str) -> bool:
        """Check if a location is in a user's favorites"""
        query = """
        MATCH (u:User {user_id: $user_id})-[f:FAVORITED]->(l:Location {id: $location_id})
        RETURN count(f) > 0 as favorited
        """
        result = self.execute_query(query, {"user_id": user_id, "location_id": location_id})
        return result[0]['favorited'] if result else False

    def add_favorite(self, user_id: str, location_id: str) -> bool:
        """Add a location to a user's favorites.

        Returns:
            bool: False if the location does not exist or is already a favorite
        """
        if self.is_favorite(user_id, location_id):
            return False

        query = """
        MATCH (l:Location {id: $location_id})
        MERGE (u:User {user_id: $user_id})
        CREATE (u)-[f:FAVORITED {created_at: $created_at}]->(l)
        RETURN f
        """
        params = {
            "user_id": user_id,
            "location_id": location_id,
            "created_at": utc_now(),
        }
        result = self.execute_query(query, params)
        return bool(result)

    def remove_favorite(self, user_id: str, location_id: str) -> bool:
        """Remove a location from a user's favorites. Removing a non-favorite is not an error."""
        query = """
        MATCH (u:User {user_id: $user_id})-[f:FAVORITED]->(l:Location {id: $location_id})
        DELETE f
        RETURN count(f) as removed
        """
        result = self.execute_query(query, {"user_id": user_id, "location_id": location_id})
        return result[0]['removed'] > 0 if result else False
