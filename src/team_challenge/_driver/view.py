# Area: Driver
"""
team_challenge._driver.view — Client view of a match
====================================================

Every client keeps a view derived from the last match row the store
pushed. Local state (the answer being composed, the countdown) is reset
whenever a pushed row shows the turn or the question moved on; nothing
is mutated between notifications except the client's own selection.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

from .._store.change_feed import Change

logger = logging.getLogger("team_challenge.view")

TurnKey = Tuple[str, Optional[int], int, Optional[str]]


def turn_key_of(row: Dict[str, Any]) -> TurnKey:
    """(phase, active team, question index, active question id) of a match row."""
    question = row.get("current_question") or {}
    team = row.get("current_turn_team_id")
    index = row.get("current_question_index")
    return (
        row.get("room_status", "lobby"),
        int(team) if team is not None else None,
        int(index) if index is not None else 0,
        question.get("id"),
    )


class ClientView:
    """
    Derived, per-client view of one match.

    Attributes:
        user_id: The viewing user
        row: Last match row received (None before the first / after delete)
        selected_answer: Answer being composed locally
        closed: True once the match was deleted
    """

    def __init__(self, user_id: str, row: Optional[Dict[str, Any]] = None):
        self.user_id = user_id
        self.row = row
        self.selected_answer: Any = None
        self.closed = False
        self._turn_key: Optional[TurnKey] = turn_key_of(row) if row else None

    def apply(self, change: Change) -> bool:
        """
        Update the view from a pushed change.

        Returns:
            True if the turn or question changed (local state was reset)
        """
        if change.table != "team_matches":
            return False

        if change.event == "DELETE":
            logger.info(f"[{change.match_id}] Match closed by host")
            self.row = None
            self.closed = True
            self.selected_answer = None
            return True

        self.row = change.row
        key = turn_key_of(change.row)
        if key == self._turn_key:
            return False
        self._turn_key = key
        self.selected_answer = None
        return True

    # ── Derived state ──────────────────────────────────────

    @property
    def phase(self) -> Optional[str]:
        return self.row.get("room_status") if self.row else None

    @property
    def is_host(self) -> bool:
        return bool(self.row) and self.row.get("created_by") == self.user_id

    @property
    def has_answered(self) -> bool:
        if not self.row:
            return False
        return self.user_id in (self.row.get("current_answers") or {})

    @property
    def is_steal(self) -> bool:
        if not self.row or not self.row.get("current_question"):
            return False
        owner = self.row["current_question"].get("owner_team_id")
        return owner != self.row.get("current_turn_team_id")

    @property
    def feedback_pending(self) -> bool:
        """True for a finished match whose feedback has not been committed yet."""
        return self.phase == "finished" and not self.row.get("feedback")
