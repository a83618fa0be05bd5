# Area: Engine
"""
team_challenge._engine.enums — Turn Engine Enums
================================================

Defines the match phases and events, the question kinds and free-text
answer modes, and the outcome labels produced by the turn resolver.
"""

from enum import Enum


class MatchPhase(Enum):
    """
    Phases of a team match. Transitions are one-directional:

    LOBBY -> IN_PROGRESS (on START)
    IN_PROGRESS -> FINISHED (on FINISH)
    """
    LOBBY = "lobby"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"


class MatchEvent(Enum):
    """
    Events that move a match between phases.

    - START: host starts the match once every team has a member
    - FINISH: turn resolver advanced the question index past the deck
    """
    START = "START"
    FINISH = "FINISH"


class QuestionKind(Enum):
    """Kind of a trivia question; decides how answers are compared."""
    SINGLE_CHOICE = "single_choice"
    MULTI_CHOICE = "multi_choice"
    FREE_TEXT = "free_text"


# Kind names used by question banks and generated quizzes
QUESTION_KIND_ALIASES = {
    "single_choice": QuestionKind.SINGLE_CHOICE,
    "single-choice": QuestionKind.SINGLE_CHOICE,
    "multi_choice": QuestionKind.MULTI_CHOICE,
    "multi-choice": QuestionKind.MULTI_CHOICE,
    "free_text": QuestionKind.FREE_TEXT,
    "input": QuestionKind.FREE_TEXT,
    "input-range": QuestionKind.FREE_TEXT,
}


class AnswerMode(Enum):
    """How free-text answers are matched against the canonical answer."""
    EXACT = "exact"
    NUMERIC = "numeric"


class TurnOutcome(Enum):
    """
    What happened on a resolved turn.

    - CORRECT_OWN: team answered its own question correctly
    - STEAL_SUCCESS: opponent answered a stolen question correctly
    - MISSED_OWN: owner missed; steal sub-round begins
    - STEAL_FAILED: opponent also missed; turn returns to the owner
    """
    CORRECT_OWN = "correct_own"
    STEAL_SUCCESS = "steal_success"
    MISSED_OWN = "missed_own"
    STEAL_FAILED = "steal_failed"


class Sentinel(Enum):
    """Special submitted values that are never a real answer."""
    PASS = "PASS"


PASS = Sentinel.PASS
