# Area: Store
"""
team_challenge._store.store — Match store facade
================================================

Single entry point the driver talks to. Wraps the match and participant
repositories and publishes a Change to the feed after every committed
write, mirroring a hosted database with a change-subscription API.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from .change_feed import Change, ChangeFeed, ChangeHandler
from .database import init_database
from .repo_matches import MatchRepository
from .repo_participants import ParticipantRepository

logger = logging.getLogger("team_challenge.store")

MATCHES = "team_matches"
PARTICIPANTS = "match_participants"


class MatchStore:
    """
    Persistence + change notification for matches and participants.

    Attributes:
        matches: MatchRepository
        participants: ParticipantRepository
        feed: ChangeFeed shared by every client of this store
    """

    def __init__(self, db_path: str, feed: Optional[ChangeFeed] = None, initialize: bool = True):
        if initialize:
            init_database(db_path)
        self.db_path = db_path
        self.matches = MatchRepository(db_path)
        self.participants = ParticipantRepository(db_path)
        self.feed = feed or ChangeFeed()

    # ── Subscriptions ──────────────────────────────────────

    def subscribe(self, match_id: str, handler: ChangeHandler) -> Callable[[], None]:
        return self.feed.subscribe(match_id, handler)

    # ── Matches ────────────────────────────────────────────

    def create_match(
        self,
        match_id: str,
        name: str,
        code: str,
        created_by: str,
        teams: Sequence[int],
        questions_per_team: int,
        time_per_question: int,
    ) -> Dict[str, Any]:
        self.matches.create_match(
            match_id, name, code, created_by, teams, questions_per_team, time_per_question,
        )
        row = self.matches.get_match(match_id)
        self.feed.publish(Change(MATCHES, "INSERT", match_id, row))
        return row

    def get_match(self, match_id: str) -> Optional[Dict[str, Any]]:
        return self.matches.get_match(match_id)

    def get_by_code(self, code: str) -> Optional[Dict[str, Any]]:
        return self.matches.get_by_code(code)

    def code_exists(self, code: str) -> bool:
        return self.matches.code_exists(code)

    def update_match(
        self,
        match_id: str,
        fields: Dict[str, Any],
        expected_version: Optional[int] = None,
    ) -> bool:
        """Versioned update; publishes UPDATE only when the write applied."""
        applied = self.matches.update_match(match_id, fields, expected_version)
        if applied:
            self.feed.publish(Change(MATCHES, "UPDATE", match_id, self.matches.get_match(match_id)))
        return applied

    def merge_answer(
        self,
        match_id: str,
        participant_id: str,
        answer: Any,
        expected_turn: Optional[Tuple[Any, ...]] = None,
    ) -> Optional[Dict[str, Any]]:
        row = self.matches.merge_answer(match_id, participant_id, answer, expected_turn)
        if row is not None:
            self.feed.publish(Change(MATCHES, "UPDATE", match_id, row))
        return row

    def drop_answer(self, match_id: str, participant_id: str) -> Optional[Dict[str, Any]]:
        row = self.matches.drop_answer(match_id, participant_id)
        if row is not None:
            self.feed.publish(Change(MATCHES, "UPDATE", match_id, row))
        return row

    def attach_feedback(self, match_id: str, feedback: Dict[str, Any]) -> bool:
        """Attach post-match feedback; only the first attach applies."""
        attached = self.matches.set_feedback_once(match_id, feedback)
        if attached:
            self.feed.publish(Change(MATCHES, "UPDATE", match_id, self.matches.get_match(match_id)))
        return attached

    def delete_match(self, match_id: str, requested_by: str) -> bool:
        deleted = self.matches.delete_match(match_id, requested_by)
        if deleted:
            self.feed.publish(Change(MATCHES, "DELETE", match_id, None))
        return deleted

    def purge_abandoned(self, max_idle_seconds: int) -> List[str]:
        """
        Delete unfinished matches idle for longer than ``max_idle_seconds``.

        Returns:
            Ids of the deleted matches
        """
        purged = []
        for row in self.matches.find_abandoned(max_idle_seconds):
            if self.matches.delete_by_id(row["id"]):
                purged.append(row["id"])
                self.feed.publish(Change(MATCHES, "DELETE", row["id"], None))
        if purged:
            logger.info(f"Purged {len(purged)} abandoned match(es)")
        return purged

    # ── Participants ───────────────────────────────────────

    def add_participant(
        self,
        match_id: str,
        user_id: str,
        display_name: str = "",
        team_number: Optional[int] = None,
    ) -> bool:
        inserted = self.participants.add_participant(match_id, user_id, display_name, team_number)
        if inserted:
            row = self.participants.get_participant(match_id, user_id)
            self.feed.publish(Change(PARTICIPANTS, "INSERT", match_id, row))
        return inserted

    def remove_participant(self, match_id: str, user_id: str) -> bool:
        removed = self.participants.remove_participant(match_id, user_id)
        if removed:
            self.feed.publish(Change(PARTICIPANTS, "DELETE", match_id, {"user_id": user_id}))
        return removed

    def assign_team(self, match_id: str, user_id: str, team_number: Optional[int]) -> bool:
        updated = self.participants.assign_team(match_id, user_id, team_number)
        if updated:
            row = self.participants.get_participant(match_id, user_id)
            self.feed.publish(Change(PARTICIPANTS, "UPDATE", match_id, row))
        return updated

    def list_participants(self, match_id: str) -> List[Dict[str, Any]]:
        return self.participants.list_participants(match_id)

    def roster(self, match_id: str, team_number: int) -> List[str]:
        return self.participants.roster(match_id, team_number)
