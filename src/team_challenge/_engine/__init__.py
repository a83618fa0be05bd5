# Area: Engine
"""
Turn engine - Pure match logic for team challenges.

This package handles:
- Question model and record validation
- Answer evaluation
- Team consensus detection
- Turn/steal resolution
- Phase transitions and match seeding
- State <-> store row conversion
"""

from .enums import (
    MatchPhase,
    MatchEvent,
    QuestionKind,
    AnswerMode,
    TurnOutcome,
    PASS,
)
from .question import Question
from .state import ActiveQuestion, MatchState
from .evaluator import evaluate
from .consensus import ConsensusResult, check_consensus, submit_answer
from .resolver import TurnResolution, resolve
from .deck import split_question_pool, seed_match
from .snapshot import state_to_row, state_from_row

__all__ = [
    "MatchPhase",
    "MatchEvent",
    "QuestionKind",
    "AnswerMode",
    "TurnOutcome",
    "PASS",
    "Question",
    "ActiveQuestion",
    "MatchState",
    "evaluate",
    "ConsensusResult",
    "check_consensus",
    "submit_answer",
    "TurnResolution",
    "resolve",
    "split_question_pool",
    "seed_match",
    "state_to_row",
    "state_from_row",
]
