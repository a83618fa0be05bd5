# Area: Store
"""
team_challenge._store.repo_questions — Question Bank Repository
===============================================================

Repository for the question_bank table. Bank rows store their options
as ``[{"text": ..., "is_correct": ...}]`` and images as
``[{"path": ...}]``; conversion to question records happens in the
question source.
"""

from typing import Any, Dict, List, Optional

from .database import BaseRepository


class QuestionBankRepository(BaseRepository):
    """Repository for question_bank table."""

    JSON_COLUMNS = ("options", "images")

    def save_question(
        self,
        question_id: str,
        question_type: str,
        question_text: str,
        options: List[Dict[str, Any]],
        explanation: Optional[str] = None,
        year: Optional[int] = None,
        source_event: Optional[str] = None,
        images: Optional[List[Dict[str, Any]]] = None,
    ) -> None:
        """Insert or replace one bank question."""
        query = """
            INSERT OR REPLACE INTO question_bank
            (id, type, question_text, options, images, explanation, year, source_event)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        """
        self._execute(query, (
            question_id,
            question_type,
            question_text,
            self._encode("options", options),
            self._encode("images", images),
            explanation,
            year,
            source_event,
        ))

    def find_questions(
        self,
        year: Optional[int] = None,
        source_event: Optional[str] = None,
        limit: int = 50,
    ) -> List[Dict[str, Any]]:
        """
        Fetch bank questions, optionally filtered by year and source event.

        Args:
            year: Only questions from this year
            source_event: Only questions from this event
            limit: Maximum rows to return

        Returns:
            List of bank rows (options/images decoded)
        """
        clauses, params = [], []
        if year is not None:
            clauses.append("year = ?")
            params.append(year)
        if source_event is not None:
            clauses.append("source_event = ?")
            params.append(source_event)

        query = "SELECT * FROM question_bank"
        if clauses:
            query += " WHERE " + " AND ".join(clauses)
        query += " ORDER BY id LIMIT ?"
        params.append(limit)
        return self._execute(query, tuple(params), fetch=True) or []
