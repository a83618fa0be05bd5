# Area: Engine
"""
team_challenge._engine.phase_machine — Match Phase Transitions
==============================================================

Transition table for the match lifecycle. A match only ever moves
forward: lobby, then in progress, then finished. There is no pause
and no reset.
"""

import logging

from .enums import MatchPhase, MatchEvent
from ..errors import InvalidTransitionError

logger = logging.getLogger("team_challenge.engine.phase")


# Valid phase transitions: {current_phase: {event: next_phase}}
TRANSITIONS = {
    MatchPhase.LOBBY: {
        MatchEvent.START: MatchPhase.IN_PROGRESS,
    },
    MatchPhase.IN_PROGRESS: {
        MatchEvent.FINISH: MatchPhase.FINISHED,
    },
    MatchPhase.FINISHED: {},
}


def can_transition(phase: MatchPhase, event: MatchEvent) -> bool:
    """
    Check if an event is valid from the given phase.

    Args:
        phase: Current match phase
        event: The event to check

    Returns:
        True if the transition is valid, False otherwise
    """
    return event in TRANSITIONS.get(phase, {})


def next_phase(phase: MatchPhase, event: MatchEvent) -> MatchPhase:
    """
    Compute the phase that follows an event.

    Raises:
        InvalidTransitionError: If the event is not valid from ``phase``
    """
    if not can_transition(phase, event):
        raise InvalidTransitionError(phase=phase.value, event=event.value)
    new_phase = TRANSITIONS[phase][event]
    logger.debug(f"Phase: {phase.value} → {new_phase.value} ({event.value})")
    return new_phase
