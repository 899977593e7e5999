from typing import Dict, List, Optional

from database import BaseRepository


NOTE_LABEL = "UserNote"


class NoteRepository(BaseRepository):
    """Repository for personal notes. One note per user and location."""

    def get_note(self, location_id: str, user_id: str) -> Optional[Dict]:
        """Get a user's note for a location"""
        notes = self.find_nodes(NOTE_LABEL, {"locationId": location_id, "userId": user_id}, limit=1)
        return notes[0] if notes else None

    def save_note(self, location_id: str, note_text: str, user_id: str) -> Optional[Dict]:
        """Create the note, or overwrite the existing one"""
        existing = self.get_note(location_id, user_id)
        if existing:
            return self.update_node(NOTE_LABEL, existing["id"], {"note": note_text})

        return self.create_node(NOTE_LABEL, {
            "locationId": location_id,
            "userId": user_id,
            "note": note_text,
        })

    def get_user_notes(self, user_id: str) -> List[Dict]:
        """Get all of a user's notes, most recently edited first"""
        return self.find_nodes(NOTE_LABEL, {"userId": user_id}, order_by="updatedAt")

    def delete_note(self, location_id: str, user_id: str) -> bool:
        """Delete a user's note for a location"""
        existing = self.get_note(location_id, user_id)
        if not existing:
            return False
        return self.delete_node(NOTE_LABEL, existing["id"])
