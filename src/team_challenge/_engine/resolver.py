# Area: Engine
"""
team_challenge._engine.resolver — Turn resolution
=================================================

The core state transition of a team match. Given the current snapshot
and the team's agreed answer (or ``PASS`` on timeout) it decides who
scores, whose turn is next, which question is on the table, and whether
the match is over.

Four cases, keyed on (correct?, steal?):

=========  =========  ==================================================
correct    steal      result
=========  =========  ==================================================
yes        no         +1 to active team; turn passes on; the last team
                      in turn order closes the round (index +1); next
                      team draws from its own deck
yes        yes        +1 to the stealing team; it keeps the turn; index
                      +1; fresh question from its own deck
no         no         no points; next team gets the *same* question
                      (steal sub-round); owner unchanged
no         yes        no points; turn returns to the owner; index +1;
                      fresh question from the owner's deck
=========  =========  ==================================================

The answer bag is cleared after every transition. When the index reaches
``questions_per_team`` the match finishes. The resolver is pure and does
not catch anything: evaluation errors propagate to the caller.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Any

from .enums import MatchEvent, MatchPhase, TurnOutcome
from .evaluator import evaluate
from .phase_machine import next_phase
from .state import ActiveQuestion, MatchState
from ..errors import InvalidTransitionError, MatchFinishedError, QuestionDataError


@dataclass(frozen=True)
class TurnResolution:
    """Outcome of one resolved turn."""
    state: MatchState
    outcome: TurnOutcome
    is_correct: bool
    is_steal: bool

    @property
    def finished(self) -> bool:
        return self.state.phase is MatchPhase.FINISHED


def resolve(state: MatchState, answer: Any) -> TurnResolution:
    """
    Resolve the current turn.

    Args:
        state: Snapshot of an in-progress match
        answer: The team's consensus answer, or ``PASS``

    Returns:
        TurnResolution holding the next snapshot

    Raises:
        MatchFinishedError: If the match already finished
        InvalidTransitionError: If the match has not started
        QuestionDataError: If the active question is malformed or a deck
            has no question where one is required
    """
    if state.phase is MatchPhase.FINISHED:
        raise MatchFinishedError(state.match_id)
    if state.phase is not MatchPhase.IN_PROGRESS or state.active_question is None:
        raise InvalidTransitionError(phase=state.phase.value, event="RESOLVE")

    question = state.active_question.question
    owner = state.active_question.owner_team
    active = state.active_team

    is_correct = evaluate(question, answer)
    is_steal = active != owner

    if is_correct and not is_steal:
        scored = state.with_point(active)
        new_team = state.next_team(active)
        new_index = state.question_index + 1 if state.is_last_in_order(active) else state.question_index
        next_state = _draw(scored, new_team, new_index)
        outcome = TurnOutcome.CORRECT_OWN
    elif is_correct:
        scored = state.with_point(active)
        next_state = _draw(scored, active, state.question_index + 1)
        outcome = TurnOutcome.STEAL_SUCCESS
    elif not is_steal:
        next_state = replace(
            state,
            active_team=state.next_team(active),
            answers={},
        )
        outcome = TurnOutcome.MISSED_OWN
    else:
        next_state = _draw(state, owner, state.question_index + 1)
        outcome = TurnOutcome.STEAL_FAILED

    return TurnResolution(
        state=next_state,
        outcome=outcome,
        is_correct=is_correct,
        is_steal=is_steal,
    )


def _draw(state: MatchState, team: int, index: int) -> MatchState:
    """
    Hand ``team`` the question at ``index`` from its own deck, or finish
    the match when the index has run past the deck length.
    """
    if index >= state.questions_per_team:
        return replace(
            state,
            phase=next_phase(state.phase, MatchEvent.FINISH),
            active_team=team,
            question_index=state.questions_per_team,
            active_question=None,
            answers={},
        )

    deck = state.decks.get(team, ())
    if index >= len(deck):
        raise QuestionDataError(
            question_id=None,
            reason=f"deck for team {team} has no question at index {index}",
            record={"team": team, "index": index, "deck_length": len(deck)},
        )

    return replace(
        state,
        active_team=team,
        question_index=index,
        active_question=ActiveQuestion(question=deck[index], owner_team=team),
        answers={},
    )
