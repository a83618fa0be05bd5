# Area: Store
"""
team_challenge._store.repo_participants — Participants Repository
=================================================================

Repository for the match_participants table: who is in a match and
which team (if any) they play for.
"""

from typing import Any, Dict, List, Optional

from .database import BaseRepository


class ParticipantRepository(BaseRepository):
    """
    Repository for match_participants table.

    A participant with ``team_number`` NULL is spectating.
    """

    def add_participant(
        self,
        match_id: str,
        user_id: str,
        display_name: str = "",
        team_number: Optional[int] = None,
    ) -> bool:
        """
        Add a participant. Joining twice is a no-op.

        Returns:
            True if a new participant row was inserted
        """
        query = """
            INSERT OR IGNORE INTO match_participants
            (match_id, user_id, display_name, team_number)
            VALUES (?, ?, ?, ?)
        """
        return self._execute_write(query, (match_id, user_id, display_name, team_number)) == 1

    def remove_participant(self, match_id: str, user_id: str) -> bool:
        """Remove a participant from a match."""
        query = "DELETE FROM match_participants WHERE match_id = ? AND user_id = ?"
        return self._execute_write(query, (match_id, user_id)) == 1

    def get_participant(self, match_id: str, user_id: str) -> Optional[Dict[str, Any]]:
        query = "SELECT * FROM match_participants WHERE match_id = ? AND user_id = ?"
        return self._execute_one(query, (match_id, user_id))

    def list_participants(self, match_id: str) -> List[Dict[str, Any]]:
        """
        Get all participants of a match in join order.

        Returns:
            List of participant records
        """
        query = "SELECT * FROM match_participants WHERE match_id = ? ORDER BY id"
        return self._execute(query, (match_id,), fetch=True) or []

    def assign_team(self, match_id: str, user_id: str, team_number: Optional[int]) -> bool:
        """Move a participant to a team (None to spectate)."""
        query = """
            UPDATE match_participants SET team_number = ?
            WHERE match_id = ? AND user_id = ?
        """
        return self._execute_write(query, (team_number, match_id, user_id)) == 1

    def roster(self, match_id: str, team_number: int) -> List[str]:
        """User ids currently on a team."""
        query = """
            SELECT user_id FROM match_participants
            WHERE match_id = ? AND team_number = ? ORDER BY id
        """
        rows = self._execute(query, (match_id, team_number), fetch=True) or []
        return [row["user_id"] for row in rows]
