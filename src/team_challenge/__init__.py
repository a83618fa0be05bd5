"""
team_challenge — Team quiz matches with turns, steals and consensus
===================================================================

Quick Start:
    from team_challenge import MatchStore, MatchDriver, JsonFileQuestionSource
    store = MatchStore("team_challenge.db")
    host = MatchDriver(store, "host-user", question_source=JsonFileQuestionSource("q.json"))
    match = host.create_match("Friday quiz")
    ...
    host.start_match(match["id"])
    while True:
        host.tick(match["id"])   # advances on consensus or timeout

Pure engine (no storage):
    from team_challenge import MatchState, resolve, PASS
    resolution = resolve(state, PASS)

Custom feedback:
    from team_challenge import FeedbackGenerator
    class MyFeedback(FeedbackGenerator):
        def generate(self, ctx): ...

Type Definitions
----------------
Payload shapes are available for import:

    from team_challenge import QuestionPayload, FeedbackContext, FeedbackPayload
"""

__version__ = "1.0.0"

from ._engine import (
    MatchPhase,
    MatchEvent,
    QuestionKind,
    AnswerMode,
    TurnOutcome,
    PASS,
    Question,
    ActiveQuestion,
    MatchState,
    evaluate,
    ConsensusResult,
    check_consensus,
    submit_answer,
    TurnResolution,
    resolve,
    split_question_pool,
    seed_match,
)
from ._store import MatchStore, ChangeFeed, Change, QuestionBankRepository
from ._driver import (
    MatchDriver,
    ClientView,
    QuestionSource,
    StaticQuestionSource,
    JsonFileQuestionSource,
    QuestionBankSource,
    GeneratedQuestionSource,
    FeedbackGenerator,
    AnthropicFeedbackGenerator,
    FALLBACK_FEEDBACK,
)
from ._config import load_config, validate_config
from .errors import (
    TeamChallengeError,
    QuestionDataError,
    InvalidTransitionError,
    MatchFinishedError,
    NotOnActiveTeamError,
    NotHostError,
    MatchNotFoundError,
    StaleMatchError,
    EmptyTeamError,
    FeedbackGenerationError,
)
from .types import QuestionPayload, FeedbackContext, FeedbackPayload

__all__ = [
    "__version__",
    # Engine
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
    # Store
    "MatchStore",
    "ChangeFeed",
    "Change",
    "QuestionBankRepository",
    # Driver
    "MatchDriver",
    "ClientView",
    "QuestionSource",
    "StaticQuestionSource",
    "JsonFileQuestionSource",
    "QuestionBankSource",
    "GeneratedQuestionSource",
    "FeedbackGenerator",
    "AnthropicFeedbackGenerator",
    "FALLBACK_FEEDBACK",
    # Config
    "load_config",
    "validate_config",
    # Errors
    "TeamChallengeError",
    "QuestionDataError",
    "InvalidTransitionError",
    "MatchFinishedError",
    "NotOnActiveTeamError",
    "NotHostError",
    "MatchNotFoundError",
    "StaleMatchError",
    "EmptyTeamError",
    "FeedbackGenerationError",
    # Types
    "QuestionPayload",
    "FeedbackContext",
    "FeedbackPayload",
]
