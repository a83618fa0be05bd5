# Area: Driver
"""
Driver - Runs matches on top of the engine and the store.

This package handles:
- Match lifecycle (create, join, start, delete)
- Host-side turn advancement (consensus or timeout)
- Per-question countdowns
- Client views derived from pushed rows
- Question sources and post-match feedback
"""

from .countdown import QuestionCountdown
from .driver import MatchDriver
from .feedback import (
    FALLBACK_FEEDBACK,
    FeedbackGenerator,
    AnthropicFeedbackGenerator,
    build_feedback_context,
    generate_feedback_safe,
)
from .question_source import (
    QuestionSource,
    StaticQuestionSource,
    JsonFileQuestionSource,
    QuestionBankSource,
    GeneratedQuestionSource,
)
from .view import ClientView, turn_key_of

__all__ = [
    "QuestionCountdown",
    "MatchDriver",
    "FALLBACK_FEEDBACK",
    "FeedbackGenerator",
    "AnthropicFeedbackGenerator",
    "build_feedback_context",
    "generate_feedback_safe",
    "QuestionSource",
    "StaticQuestionSource",
    "JsonFileQuestionSource",
    "QuestionBankSource",
    "GeneratedQuestionSource",
    "ClientView",
    "turn_key_of",
]
