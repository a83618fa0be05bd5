# Area: Store
"""
team_challenge._store.repo_matches — Matches Repository
=======================================================

Repository for the team_matches table. Every write bumps the row's
``version``; turn transitions pass the version they read so that a
second writer working from the same snapshot loses cleanly.
"""

import json
import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from .database import BaseRepository
from ..errors import StaleMatchError

logger = logging.getLogger("team_challenge.store.matches")

# Columns that update_match() may set
UPDATABLE_COLUMNS = {
    "name",
    "is_active",
    "room_status",
    "teams",
    "questions_per_team",
    "time_per_question",
    "current_turn_team_id",
    "current_question_index",
    "current_question",
    "current_answers",
    "team_scores",
    "team_questions",
    "feedback",
}


class MatchRepository(BaseRepository):
    """
    Repository for team_matches table.

    Handles creating, reading, versioned updates, answer merges,
    and deletion of match records.
    """

    JSON_COLUMNS = (
        "teams",
        "current_question",
        "current_answers",
        "team_scores",
        "team_questions",
        "feedback",
    )

    def create_match(
        self,
        match_id: str,
        name: str,
        code: str,
        created_by: str,
        teams: Sequence[int] = (1, 2),
        questions_per_team: int = 10,
        time_per_question: int = 60,
    ) -> None:
        """
        Save a new match record in the lobby phase.

        Args:
            match_id: Unique match identifier
            name: Display name
            code: Join code
            created_by: Creator (host) user id
            teams: Team ids in turn order
            questions_per_team: Deck length per team
            time_per_question: Countdown length in seconds
        """
        query = """
            INSERT INTO team_matches
            (id, name, code, created_by, teams, questions_per_team,
             time_per_question, current_turn_team_id)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        """
        self._execute(query, (
            match_id, name, code, created_by, json.dumps(list(teams)),
            questions_per_team, time_per_question, teams[0],
        ))

    def get_match(self, match_id: str) -> Optional[Dict[str, Any]]:
        """
        Get a match by ID.

        Returns:
            Match record dict or None if not found
        """
        query = "SELECT * FROM team_matches WHERE id = ?"
        return self._execute_one(query, (match_id,))

    def get_by_code(self, code: str) -> Optional[Dict[str, Any]]:
        """Get an active match by its join code (case-insensitive)."""
        query = "SELECT * FROM team_matches WHERE code = ? AND is_active = 1"
        return self._execute_one(query, (code.strip().upper(),))

    def list_active(self) -> List[Dict[str, Any]]:
        """List active matches, newest first."""
        query = "SELECT * FROM team_matches WHERE is_active = 1 ORDER BY created_at DESC"
        return self._execute(query, fetch=True) or []

    def code_exists(self, code: str) -> bool:
        """True if an active match already uses this join code."""
        query = "SELECT 1 AS found FROM team_matches WHERE code = ? AND is_active = 1"
        return self._execute_one(query, (code,)) is not None

    def update_match(
        self,
        match_id: str,
        fields: Dict[str, Any],
        expected_version: Optional[int] = None,
    ) -> bool:
        """
        Update match columns and bump the version.

        Args:
            match_id: Match identifier
            fields: column -> value (JSON columns are encoded here)
            expected_version: If given, only update when the stored
                version still matches

        Returns:
            True if the row was updated, False on version mismatch or
            missing match

        Raises:
            ValueError: If a column is not updatable
        """
        unknown = set(fields) - UPDATABLE_COLUMNS
        if unknown:
            raise ValueError(f"Columns not updatable: {sorted(unknown)}")

        columns = sorted(fields)
        assignments = ", ".join(f"{column} = ?" for column in columns)
        params: List[Any] = [self._encode(column, fields[column]) for column in columns]

        query = (
            f"UPDATE team_matches SET {assignments}, "
            "version = version + 1, updated_at = CURRENT_TIMESTAMP WHERE id = ?"
        )
        params.append(match_id)
        if expected_version is not None:
            query += " AND version = ?"
            params.append(expected_version)

        updated = self._execute_write(query, tuple(params)) == 1
        if not updated:
            logger.debug(
                f"[{match_id}] Update skipped (expected version {expected_version})"
            )
        return updated

    def merge_answer(
        self,
        match_id: str,
        participant_id: str,
        answer: Any,
        expected_turn: Optional[Tuple[Any, ...]] = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Set one participant's entry in ``current_answers``.

        Runs as a single immediate transaction so concurrent submitters
        never drop each other's keys.

        Args:
            expected_turn: (room_status, active team, question index,
                question id) the answer was given for; if the stored turn
                differs inside the transaction nothing is written

        Returns:
            The updated match record, or None if the match does not exist

        Raises:
            StaleMatchError: If the turn moved on since ``expected_turn``
        """
        def put(answers: Dict[str, Any]) -> None:
            answers[participant_id] = answer

        return self._rewrite_answers(match_id, put, expected_turn)

    def drop_answer(self, match_id: str, participant_id: str) -> Optional[Dict[str, Any]]:
        """Remove one participant's entry from ``current_answers``."""
        def drop(answers: Dict[str, Any]) -> None:
            answers.pop(participant_id, None)

        return self._rewrite_answers(match_id, drop)

    def _rewrite_answers(
        self,
        match_id: str,
        change: Callable[[Dict[str, Any]], None],
        expected_turn: Optional[Tuple[Any, ...]] = None,
    ) -> Optional[Dict[str, Any]]:
        conn = self._get_conn()
        conn.isolation_level = None
        try:
            conn.execute("BEGIN IMMEDIATE")
            row = conn.execute(
                "SELECT room_status, current_turn_team_id, current_question_index, "
                "current_question, current_answers, version FROM team_matches WHERE id = ?",
                (match_id,),
            ).fetchone()
            if row is None:
                conn.execute("ROLLBACK")
                return None
            if expected_turn is not None and _stored_turn(row) != tuple(expected_turn):
                conn.execute("ROLLBACK")
                logger.debug(f"[{match_id}] Answer dropped, turn moved on")
                raise StaleMatchError(match_id, row["version"])
            answers = json.loads(row["current_answers"] or "{}")
            change(answers)
            conn.execute(
                "UPDATE team_matches SET current_answers = ?, version = version + 1, "
                "updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                (json.dumps(answers), match_id),
            )
            conn.execute("COMMIT")
        finally:
            conn.close()
        return self.get_match(match_id)

    def delete_match(self, match_id: str, requested_by: str) -> bool:
        """
        Delete a match. Only its creator may delete it.

        Returns:
            True if a row was deleted
        """
        query = "DELETE FROM team_matches WHERE id = ? AND created_by = ?"
        return self._execute_write(query, (match_id, requested_by)) == 1

    def find_abandoned(self, max_idle_seconds: int) -> List[Dict[str, Any]]:
        """Unfinished matches whose last update is older than the cutoff."""
        query = """
            SELECT * FROM team_matches
            WHERE room_status != 'finished'
              AND updated_at < datetime('now', ?)
        """
        return self._execute(query, (f"-{int(max_idle_seconds)} seconds",), fetch=True) or []

    def delete_by_id(self, match_id: str) -> bool:
        query = "DELETE FROM team_matches WHERE id = ?"
        return self._execute_write(query, (match_id,)) == 1

    def set_feedback_once(self, match_id: str, feedback: Dict[str, Any]) -> bool:
        """
        Attach feedback to a finished match unless feedback is already set.

        Returns:
            True if this call attached the feedback
        """
        query = """
            UPDATE team_matches
            SET feedback = ?, version = version + 1, updated_at = CURRENT_TIMESTAMP
            WHERE id = ? AND room_status = 'finished' AND feedback IS NULL
        """
        return self._execute_write(query, (json.dumps(feedback), match_id)) == 1


def _stored_turn(row) -> Tuple[Any, ...]:
    """(room_status, active team, question index, question id) of a raw row."""
    question = json.loads(row["current_question"]) if row["current_question"] else {}
    return (
        row["room_status"],
        row["current_turn_team_id"],
        row["current_question_index"],
        question.get("id"),
    )
