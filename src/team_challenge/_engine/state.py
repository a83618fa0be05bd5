# Area: Engine
"""
team_challenge._engine.state — Match state snapshot
===================================================

Immutable snapshot of one team match: scores, whose turn it is, the
shared question index, the active question with its owner team, and
the answers submitted so far this round. Every engine operation
returns a new snapshot instead of mutating the old one.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping, Optional, Tuple

from .enums import MatchPhase
from .question import Question


@dataclass(frozen=True)
class ActiveQuestion:
    """The question currently on the table and the team whose deck it came from."""
    question: Question
    owner_team: int


@dataclass(frozen=True)
class MatchState:
    """
    Snapshot of a team-vs-team match.

    Attributes:
        match_id: Match identifier
        teams: Team ids in turn order
        questions_per_team: Deck length per team
        phase: lobby, in_progress or finished
        active_team: Team currently allowed to answer
        question_index: Shared per-round index into every team's deck
        active_question: Current question and its owner, None outside play
        answers: participant_id -> submitted answer for this round
        scores: team id -> cumulative points
        decks: team id -> that team's questions
        time_per_question: Countdown length in seconds
        version: Store version this snapshot was read at
    """

    match_id: str
    teams: Tuple[int, ...] = (1, 2)
    questions_per_team: int = 10
    phase: MatchPhase = MatchPhase.LOBBY
    active_team: int = 1
    question_index: int = 0
    active_question: Optional[ActiveQuestion] = None
    answers: Mapping[str, Any] = field(default_factory=dict)
    scores: Mapping[int, int] = field(default_factory=dict)
    decks: Mapping[int, Tuple[Question, ...]] = field(default_factory=dict)
    time_per_question: int = 60
    version: int = 0

    # ── Derived helpers ─────────────────────────────────────

    @property
    def owner_team(self) -> Optional[int]:
        if self.active_question is None:
            return None
        return self.active_question.owner_team

    @property
    def is_steal(self) -> bool:
        """True while a non-owning team is answering someone else's question."""
        return self.active_question is not None and self.active_team != self.owner_team

    def next_team(self, team: int) -> int:
        """Team that follows ``team`` in turn order (wrapping)."""
        position = self.teams.index(team)
        return self.teams[(position + 1) % len(self.teams)]

    def is_last_in_order(self, team: int) -> bool:
        return self.teams.index(team) == len(self.teams) - 1

    def score_of(self, team: int) -> int:
        return self.scores.get(team, 0)

    # ── Copy-on-write helpers ───────────────────────────────

    def with_answer(self, participant_id: str, answer: Any) -> "MatchState":
        answers: Dict[str, Any] = dict(self.answers)
        answers[participant_id] = answer
        return replace(self, answers=answers)

    def with_point(self, team: int) -> "MatchState":
        scores = dict(self.scores)
        scores[team] = scores.get(team, 0) + 1
        return replace(self, scores=scores)
