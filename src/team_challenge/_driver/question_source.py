# Area: Driver
"""
team_challenge._driver.question_source — Question sources
=========================================================

Where a match gets its question pool from when it starts:

- QuestionBankSource: stored bank, optional year / event filters
- GeneratedQuestionSource: LLM-generated from a document context, with
  a small built-in fallback set when generation fails
- JsonFileQuestionSource / StaticQuestionSource: fixed sets for demos
  and tests
"""

from __future__ import annotations

import json
import logging
import random
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from .._engine.question import Question
from .._shared.llm_client import AnthropicClient, BaseLLMClient, strip_code_fences
from .._store.repo_questions import QuestionBankRepository
from ..errors import QuestionDataError

logger = logging.getLogger("team_challenge.questions")

# Rows fetched from the bank before shuffling
BANK_POOL_LIMIT = 50

FALLBACK_QUESTIONS: List[Dict[str, Any]] = [
    {
        "id": "fb1",
        "type": "single_choice",
        "question": "According to general FS rules, what is the maximum displacement for a combustion engine?",
        "options": ["500cc", "600cc", "710cc", "Unlimited"],
        "correct_answer": 2,
        "explanation": "Standard rules typically limit FSAE engines to 710cc.",
        "difficulty": "medium",
    },
    {
        "id": "fb2",
        "type": "input",
        "question": (
            "Calculate the points for a Skidpad run of 5.0s if the best time is 4.8s. "
            "(Formula: 3.5 + 3.5 * ( (Tmax/Tyour)^2 - 1 ) / ( (Tmax/Tmin)^2 - 1 ) ). "
            "Assume Tmax is 1.25*Tmin. Answer to 2 decimal places."
        ),
        "options": [],
        "correct_answer": "42.50",
        "explanation": "Using the standard scoring formula for skidpad.",
        "difficulty": "hard",
    },
    {
        "id": "fb3",
        "type": "multi_choice",
        "question": "Which of the following are required for the Impact Attenuator Data (IAD) submission?",
        "options": [
            "Test velocity > 7 m/s",
            "Average deceleration < 20g",
            "Peak deceleration < 40g",
            "Energy absorbed > 7350J",
        ],
        "correct_answer": [0, 1, 2, 3],
        "explanation": "These are standard IAD requirements.",
        "difficulty": "medium",
    },
]


class QuestionSource(ABC):
    """Supplies a pool of questions for a starting match."""

    @abstractmethod
    def fetch(self, count: int) -> List[Question]:
        """Return up to ``count`` questions."""
        ...


class StaticQuestionSource(QuestionSource):
    """Serves questions from a fixed, in-memory list in order."""

    def __init__(self, questions: Sequence[Question]):
        self._questions = list(questions)

    def fetch(self, count: int) -> List[Question]:
        return self._questions[:count]


class JsonFileQuestionSource(StaticQuestionSource):
    """Loads question records from a JSON file (a list, or {"questions": [...]})."""

    def __init__(self, path: str):
        with open(Path(path), encoding="utf-8") as f:
            data = json.load(f)
        records = data.get("questions", []) if isinstance(data, dict) else data
        super().__init__([Question.from_record(record) for record in records])


class QuestionBankSource(QuestionSource):
    """
    Random questions from the stored question bank.

    Fetches a pool of up to BANK_POOL_LIMIT matching rows, shuffles it
    and returns the first ``count``.
    """

    def __init__(
        self,
        repository: QuestionBankRepository,
        year: Optional[int] = None,
        source_event: Optional[str] = None,
        rng: Optional[random.Random] = None,
    ):
        self._repository = repository
        self._year = year
        self._source_event = source_event
        self._rng = rng or random.Random()

    def fetch(self, count: int) -> List[Question]:
        rows = self._repository.find_questions(
            year=self._year, source_event=self._source_event, limit=BANK_POOL_LIMIT,
        )
        if not rows:
            logger.warning(
                f"No bank questions for year={self._year} event={self._source_event}"
            )
            return []
        self._rng.shuffle(rows)
        return [Question.from_record(bank_row_to_record(row)) for row in rows[:count]]


class GeneratedQuestionSource(QuestionSource):
    """
    Questions generated by an LLM from a document context.

    Falls back to FALLBACK_QUESTIONS when there is no context, or the
    model call or its output fails.
    """

    def __init__(self, document_context: str, client: Optional[BaseLLMClient] = None):
        self._context = document_context
        self._client = client if client is not None else AnthropicClient()

    def fetch(self, count: int) -> List[Question]:
        if not self._context.strip():
            logger.warning("Empty document context, returning fallback questions")
            return _fallback(count)
        try:
            text = self._client.generate(build_generation_prompt(self._context, count))
            records = json.loads(strip_code_fences(text))
            if not isinstance(records, list):
                raise ValueError("response is not an array")
            return [
                Question.from_record(normalize_generated_record(record, index))
                for index, record in enumerate(records[:count])
            ]
        except (ValueError, QuestionDataError) as e:
            logger.error(f"Question generation output rejected: {e}")
        except Exception:
            logger.error("Question generation failed", exc_info=True)
        return _fallback(count)


def _fallback(count: int) -> List[Question]:
    logger.warning("Returning fallback questions")
    return [Question.from_record(record) for record in FALLBACK_QUESTIONS[:count]]


def build_generation_prompt(context: str, count: int) -> str:
    return f"""
    You are creating quiz questions for a team challenge.

    Generate exactly {count} questions based ONLY on the provided documents.

    DOCUMENTS:
    {context}

    RULES:
    1. Mix question types: "single_choice", "multi_choice" and "input".
    2. For 'input' types, the "options" array must be empty [] and
       "correct_answer" must be the string form of the answer (e.g. "12.34").
    3. For 'single_choice', "correct_answer" is the index of the right option.
    4. For 'multi_choice', "correct_answer" is an array of indices.

    OUTPUT FORMAT (Strict JSON array):
    [
      {{
        "type": "single_choice" | "multi_choice" | "input",
        "question": "Question text",
        "options": ["Option A", "Option B", "Option C", "Option D"],
        "correct_answer": 0,
        "explanation": "Why this is correct",
        "difficulty": "easy" | "medium" | "hard"
      }}
    ]
    """


def normalize_generated_record(record: Dict[str, Any], index: int) -> Dict[str, Any]:
    """
    Coerce a model-produced record into a valid question record.

    Unknown types become single choice; answers are coerced to the shape
    their type needs.
    """
    kind = record.get("type")
    if kind not in ("single_choice", "multi_choice", "input"):
        kind = "single_choice"

    answer = record.get("correct_answer")
    options = record.get("options") or []
    if kind == "input":
        options = []
        answer = "" if answer is None else str(answer)
    elif kind == "multi_choice":
        if not isinstance(answer, list):
            answer = [_to_int(answer)]
    else:
        answer = _to_int(answer)

    return {
        "id": str(record.get("id") or f"gen{index}"),
        "type": kind,
        "question": record.get("question", ""),
        "options": options,
        "correct_answer": answer,
        "explanation": record.get("explanation") or "Based on the provided documents.",
        "difficulty": record.get("difficulty") or "medium",
    }


def bank_row_to_record(row: Dict[str, Any]) -> Dict[str, Any]:
    """
    Map a question_bank row to a question record.

    Bank options are ``[{"text", "is_correct"}]``: single choice takes the
    index of the correct option, multi choice all correct indices, and
    input questions the correct option's text. ``input-range`` questions
    are matched numerically.
    """
    options = row.get("options") or []
    texts = [option.get("text", "") for option in options]
    correct = [i for i, option in enumerate(options) if option.get("is_correct")]
    kind = row.get("type", "single_choice")

    record: Dict[str, Any] = {
        "id": str(row["id"]),
        "type": kind,
        "question": row.get("question_text", ""),
        "explanation": row.get("explanation") or "Official Solution",
        "difficulty": "hard",
    }

    if kind in ("input", "input-range"):
        record["options"] = []
        record["correct_answer"] = texts[correct[0]] if correct else None
        if kind == "input-range":
            record["answer_mode"] = "numeric"
    elif kind in ("multi_choice", "multi-choice"):
        record["options"] = texts
        record["correct_answer"] = correct
    else:
        record["options"] = texts
        record["correct_answer"] = correct[0] if correct else None

    images = row.get("images") or []
    if images:
        record["image_path"] = images[0].get("path")
    return record


def _to_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0
