# Area: Engine
"""
team_challenge._engine.deck — Deck building and match seeding
=============================================================

Splits a question pool into one deck per team and seeds the first
question of a freshly started match.
"""

from __future__ import annotations
from dataclasses import replace
from typing import Dict, Sequence, Tuple

from .enums import MatchEvent
from .phase_machine import next_phase
from .question import Question
from .state import ActiveQuestion, MatchState
from ..errors import QuestionDataError


def split_question_pool(
    pool: Sequence[Question],
    teams: Sequence[int],
    questions_per_team: int,
) -> Dict[int, Tuple[Question, ...]]:
    """
    Split a pool evenly into consecutive per-team decks.

    Team ``teams[i]`` receives ``pool[i*n:(i+1)*n]`` where ``n`` is
    ``questions_per_team``. Extra questions are ignored.

    Raises:
        QuestionDataError: If the pool cannot fill every deck
    """
    needed = len(teams) * questions_per_team
    if len(pool) < needed:
        raise QuestionDataError(
            question_id=None,
            reason=f"question pool has {len(pool)} questions, {needed} needed",
            record={"teams": list(teams), "questions_per_team": questions_per_team},
        )

    return {
        team: tuple(pool[i * questions_per_team:(i + 1) * questions_per_team])
        for i, team in enumerate(teams)
    }


def seed_match(state: MatchState, decks: Dict[int, Tuple[Question, ...]]) -> MatchState:
    """
    Move a lobby match into play.

    Index 0 of the first team's deck goes on the table, owned by that
    team. Scores start at zero for every team.

    Raises:
        InvalidTransitionError: If the match is not in the lobby
    """
    first_team = state.teams[0]
    return replace(
        state,
        phase=next_phase(state.phase, MatchEvent.START),
        decks=dict(decks),
        scores={team: 0 for team in state.teams},
        active_team=first_team,
        question_index=0,
        active_question=ActiveQuestion(question=decks[first_team][0], owner_team=first_team),
        answers={},
    )
