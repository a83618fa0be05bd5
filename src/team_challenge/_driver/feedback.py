# Area: Driver
"""
team_challenge._driver.feedback — Post-match feedback
=====================================================

When a match finishes, the host asks a FeedbackGenerator for a short
debrief. Generation runs in the background and never blocks the match:
any failure (exception, non-dict output, schema mismatch) is logged and
replaced by FALLBACK_FEEDBACK.
"""

from __future__ import annotations

import copy
import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from pydantic import ValidationError

from .._engine.schemas import FeedbackRecord
from .._engine.state import MatchState
from .._shared.llm_client import AnthropicClient, BaseLLMClient, strip_code_fences
from .._shared.logging_config import log_engine_error
from ..errors import FeedbackGenerationError
from ..types import FeedbackContext, FeedbackPayload

logger = logging.getLogger("team_challenge.feedback")

FALLBACK_FEEDBACK: Dict[str, Any] = {
    "summary": "Feedback unavailable.",
    "strengths": ["Quiz Completed"],
    "weak_points": [],
    "detailed_analysis": (
        "Unable to generate AI analysis at this time. Please review your score above."
    ),
}

# (topic, keywords) checked in order; first hit wins
TOPIC_KEYWORDS = [
    ("Braking", ("brake", "stopping")),
    ("Powertrain", ("engine", "intake", "fuel", "motor", "power")),
    ("Chassis/Structural", ("chassis", "frame", "tube", "hoop")),
    ("Suspension/VD", ("suspension", "tire", "wheel", "spring", "damper")),
    ("EV/Electronics", ("electrical", "battery", "voltage", "accumulator", "tsal", "bspd")),
    ("Aerodynamics", ("aero", "wing", "drag", "downforce")),
    ("Static Events", ("cost", "business", "presentation")),
]
DEFAULT_TOPIC = "General Rules"


class FeedbackGenerator(ABC):
    """
    Produces the post-match debrief.

    ``generate`` receives a FeedbackContext and must return a dict with
    ``summary``, ``strengths``, ``weak_points`` and ``detailed_analysis``.
    Raise FeedbackGenerationError (or anything else) on failure.
    """

    @abstractmethod
    def generate(self, ctx: FeedbackContext) -> FeedbackPayload:
        ...


class AnthropicFeedbackGenerator(FeedbackGenerator):
    """Feedback generator backed by an LLM, prompting for strict JSON."""

    def __init__(self, client: Optional[BaseLLMClient] = None, model: Optional[str] = None):
        if client is None:
            client = AnthropicClient(model=model) if model else AnthropicClient()
        self._client = client

    def generate(self, ctx: FeedbackContext) -> FeedbackPayload:
        prompt = build_feedback_prompt(ctx)
        text = self._client.generate(prompt)
        if not text:
            raise FeedbackGenerationError("empty response from model")
        try:
            return json.loads(strip_code_fences(text))
        except json.JSONDecodeError as e:
            raise FeedbackGenerationError(f"response is not JSON: {e.msg}", raw_output=text) from e


def detect_topic(question_text: str) -> str:
    """Tag a question with a coarse topic from keywords in its text."""
    text = question_text.lower()
    for topic, keywords in TOPIC_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return topic
    return DEFAULT_TOPIC


def build_feedback_context(state: MatchState) -> FeedbackContext:
    """Collect final scores and full decks of a finished match."""
    return {
        "match_id": state.match_id,
        "scores": {str(team): state.score_of(team) for team in state.teams},
        "questions": {
            str(team): [q.to_record() for q in state.decks.get(team, ())]
            for team in state.teams
        },
        "questions_per_team": state.questions_per_team,
    }


def build_feedback_prompt(ctx: FeedbackContext) -> str:
    all_questions = [q for deck in ctx["questions"].values() for q in deck]
    topics = sorted({detect_topic(q.get("question", "")) for q in all_questions})
    score_lines = "\n".join(
        f"    - Team {team} Score: {score} points" for team, score in ctx["scores"].items()
    )
    return f"""
    Analyze this quiz match between {len(ctx['scores'])} teams.

    DATA:
{score_lines}
    - Topics Covered: {', '.join(topics)}
    - Total Questions: {len(all_questions)}

    TASK:
    Act as a judge giving a post-game debrief.
    Compare the performance. If scores are low, assume the questions were difficult rules questions.
    If scores are high, commend their rulebook knowledge.

    OUTPUT FORMAT (Strict JSON):
    {{
      "summary": "A 2-sentence overview of who won and the general difficulty level.",
      "strengths": ["Short bullet point 1", "Short bullet point 2"],
      "weak_points": ["Short bullet point 1", "Short bullet point 2"],
      "detailed_analysis": "A paragraph offering advice on the topics mentioned above."
    }}
    """


def generate_feedback_safe(
    generator: Optional[FeedbackGenerator],
    ctx: FeedbackContext,
) -> Dict[str, Any]:
    """
    Run a generator and validate its output; fall back on any failure.

    Returns:
        A validated feedback dict, or a copy of FALLBACK_FEEDBACK
    """
    if generator is None:
        logger.info(f"[{ctx['match_id']}] No feedback generator configured, using fallback")
        return copy.deepcopy(FALLBACK_FEEDBACK)

    try:
        result = generator.generate(ctx)
        if not isinstance(result, dict):
            raise FeedbackGenerationError(
                f"generator returned {type(result).__name__} instead of dict",
                raw_output=result,
            )
        return FeedbackRecord.model_validate(result).model_dump()
    except FeedbackGenerationError as e:
        log_engine_error(e, match_id=ctx["match_id"])
    except ValidationError as e:
        logger.error(
            f"[{ctx['match_id']}] Feedback failed validation "
            f"({e.error_count()} error(s)), using fallback"
        )
    except Exception:
        logger.error(
            f"[{ctx['match_id']}] Feedback generator failed, using fallback",
            exc_info=True,
        )
    return copy.deepcopy(FALLBACK_FEEDBACK)
