# Area: Engine
"""
team_challenge._engine.snapshot — Match state <-> store row
===========================================================

Converts a MatchState to the column dict persisted in the match table
and back. JSON columns use string team keys (``"1"``, ``"2"``) and the
active question carries its owner as ``owner_team_id``.
"""

from __future__ import annotations
from typing import Any, Dict, Optional

from .enums import MatchPhase
from .question import Question
from .state import ActiveQuestion, MatchState

# Columns written by state_to_row()
STATE_COLUMNS = (
    "room_status",
    "teams",
    "current_turn_team_id",
    "current_question_index",
    "current_question",
    "current_answers",
    "team_scores",
    "team_questions",
    "questions_per_team",
    "time_per_question",
)


def state_to_row(state: MatchState) -> Dict[str, Any]:
    """Build the persisted column dict for a snapshot."""
    return {
        "room_status": state.phase.value,
        "teams": list(state.teams),
        "current_turn_team_id": state.active_team,
        "current_question_index": state.question_index,
        "current_question": _active_question_record(state.active_question),
        "current_answers": {pid: _jsonable(ans) for pid, ans in state.answers.items()},
        "team_scores": {str(team): score for team, score in state.scores.items()},
        "team_questions": {
            str(team): [q.to_record() for q in deck] for team, deck in state.decks.items()
        },
        "questions_per_team": state.questions_per_team,
        "time_per_question": state.time_per_question,
    }


def state_from_row(row: Dict[str, Any]) -> MatchState:
    """
    Rebuild a snapshot from a stored row (JSON columns already decoded).

    Raises:
        QuestionDataError: If a stored question record is malformed
    """
    decks = {
        int(team): tuple(Question.from_record(rec) for rec in records)
        for team, records in (row.get("team_questions") or {}).items()
    }
    stored_teams = row.get("teams")
    teams = tuple(int(t) for t in stored_teams) if stored_teams else (1, 2)
    return MatchState(
        match_id=row["id"],
        teams=teams,
        questions_per_team=int(_column(row, "questions_per_team", 10)),
        phase=MatchPhase(_column(row, "room_status", MatchPhase.LOBBY.value)),
        active_team=int(_column(row, "current_turn_team_id", teams[0])),
        question_index=int(_column(row, "current_question_index", 0)),
        active_question=_active_question_from_record(row.get("current_question")),
        answers=dict(row.get("current_answers") or {}),
        scores={int(team): int(score) for team, score in (row.get("team_scores") or {}).items()},
        decks=decks,
        time_per_question=int(_column(row, "time_per_question", 60)),
        version=int(_column(row, "version", 0)),
    )


def _column(row: Dict[str, Any], name: str, default: Any) -> Any:
    """Stored value of a column; only a missing or NULL column takes the default."""
    value = row.get(name)
    return default if value is None else value


def _active_question_record(active: Optional[ActiveQuestion]) -> Optional[Dict[str, Any]]:
    if active is None:
        return None
    record = active.question.to_record()
    record["owner_team_id"] = active.owner_team
    return record


def _active_question_from_record(record: Optional[Dict[str, Any]]) -> Optional[ActiveQuestion]:
    if not record:
        return None
    return ActiveQuestion(
        question=Question.from_record(record),
        owner_team=int(record["owner_team_id"]),
    )


def _jsonable(value: Any) -> Any:
    if isinstance(value, (tuple, set, frozenset)):
        return list(value)
    return value
