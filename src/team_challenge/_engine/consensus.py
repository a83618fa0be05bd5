# Area: Engine
"""
team_challenge._engine.consensus — Team consensus detection
===========================================================

A team answers as one: the round only resolves once every member of the
active team has submitted, and all submissions agree. Disagreement is
not an error; the team keeps resubmitting until it agrees or the
countdown runs out.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional

from .enums import MatchPhase
from .evaluator import comparison_key
from .question import Question
from .state import MatchState
from ..errors import InvalidTransitionError, NotOnActiveTeamError


@dataclass(frozen=True)
class ConsensusResult:
    """Whether the active team agrees, and on what."""
    reached: bool
    value: Any = None


def normalize_answer(value: Any) -> Any:
    """
    Normalize a submitted value for agreement checks.

    Collections become sorted tuples, strings are trimmed and lower-cased.
    """
    if isinstance(value, (list, tuple, set, frozenset)):
        return tuple(sorted((normalize_answer(v) for v in value), key=repr))
    if isinstance(value, str):
        return value.strip().lower()
    return value


def check_consensus(
    roster: Iterable[str],
    answer_bag: Mapping[str, Any],
    question: Optional[Question] = None,
) -> ConsensusResult:
    """
    Decide whether every roster member answered and all answers agree.

    Args:
        roster: Participant ids of the active team
        answer_bag: participant_id -> submitted answer
        question: Question on the table; when given, answers are compared
            the way evaluate() reads them, so ``1`` and ``"1"`` agree on
            a single-choice question

    Returns:
        ConsensusResult with the first member's answer when reached
    """
    members = list(roster)
    if not members:
        return ConsensusResult(reached=False)

    if any(member not in answer_bag for member in members):
        return ConsensusResult(reached=False)

    def key(value: Any) -> Any:
        if question is None:
            return normalize_answer(value)
        return comparison_key(question, value)

    submitted = [answer_bag[member] for member in members]
    first = key(submitted[0])
    if all(key(value) == first for value in submitted[1:]):
        return ConsensusResult(reached=True, value=submitted[0])
    return ConsensusResult(reached=False)


def submit_answer(
    state: MatchState,
    roster: Iterable[str],
    participant_id: str,
    answer: Any,
) -> MatchState:
    """
    Record (or overwrite) one participant's answer for the current round.

    Raises:
        InvalidTransitionError: If the match is not in progress
        NotOnActiveTeamError: If the participant is not on the active team
    """
    if state.phase is not MatchPhase.IN_PROGRESS:
        raise InvalidTransitionError(phase=state.phase.value, event="SUBMIT_ANSWER")
    if participant_id not in set(roster):
        raise NotOnActiveTeamError(participant_id, state.active_team)
    return state.with_answer(participant_id, answer)
