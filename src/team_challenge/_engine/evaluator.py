# Area: Engine
"""
team_challenge._engine.evaluator — Answer evaluation
====================================================

Pure comparison of a submitted answer against a question's canonical
answer. The comparison branches on question kind:

- single choice: index equality
- multi choice: order-independent set equality
- free text: trimmed, case-insensitive equality, or numeric matching
  (range or relative tolerance) when the question asks for it

A timeout ``PASS`` is never correct. A question with no canonical answer
is a data-integrity problem and raises instead of returning False.
"""

from __future__ import annotations
import re
from typing import Any, FrozenSet, Optional, Tuple

from .enums import AnswerMode, QuestionKind, Sentinel
from .question import Question
from ..errors import QuestionDataError

# "11.7-12.1", "-3 - 4", "10,5-11"
_RANGE_PATTERN = re.compile(
    r"^\s*(-?\d+(?:\.\d+)?)\s*-\s*(-?\d+(?:\.\d+)?)\s*$"
)


def evaluate(question: Question, submitted: Any) -> bool:
    """
    Check whether ``submitted`` answers ``question`` correctly.

    Args:
        question: The question being answered
        submitted: The submitted answer, ``PASS`` or None

    Returns:
        True if correct, False otherwise (always False for PASS/None)

    Raises:
        QuestionDataError: If the question has no usable canonical answer
    """
    _check_integrity(question)

    if submitted is Sentinel.PASS or submitted is None:
        return False

    if question.kind is QuestionKind.SINGLE_CHOICE:
        index = _as_index(submitted)
        return index is not None and index == int(question.correct_answer)

    if question.kind is QuestionKind.MULTI_CHOICE:
        indices = _as_index_set(submitted)
        return indices is not None and indices == _as_index_set(question.correct_answer)

    if question.answer_mode is AnswerMode.NUMERIC:
        return _numeric_match(str(submitted), str(question.correct_answer), question.tolerance)
    return _normalize_text(submitted) == _normalize_text(question.correct_answer)


def comparison_key(question: Question, submitted: Any) -> Any:
    """
    Canonical form of a submission under the question's comparison.

    Two submissions with equal keys are the same answer to ``evaluate``:
    ``1`` and ``"1"`` pick the same option, ``[2, 0]`` and ``("0", 2)``
    the same option set.
    """
    if question.kind is QuestionKind.SINGLE_CHOICE:
        index = _as_index(submitted)
        return submitted if index is None else index
    if question.kind is QuestionKind.MULTI_CHOICE:
        indices = _as_index_set(submitted)
        return submitted if indices is None else indices
    return _normalize_text(submitted)


def _check_integrity(question: Question) -> None:
    """Raise QuestionDataError if the canonical answer is missing or mis-shaped."""
    answer = question.correct_answer
    if answer is None:
        raise QuestionDataError(question.id, "missing canonical answer", question.to_record())

    if question.kind is QuestionKind.SINGLE_CHOICE:
        if _as_index(answer) is None:
            raise QuestionDataError(
                question.id, f"single-choice answer is not an index: {answer!r}",
                question.to_record(),
            )
    elif question.kind is QuestionKind.MULTI_CHOICE:
        if _as_index_set(answer) is None:
            raise QuestionDataError(
                question.id, f"multi-choice answer is not an index list: {answer!r}",
                question.to_record(),
            )
    elif isinstance(answer, str) and not answer.strip():
        raise QuestionDataError(question.id, "empty free-text answer", question.to_record())


def _as_index(value: Any) -> Optional[int]:
    """Interpret a value as an option index, or None if it is not one."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _as_index_set(value: Any) -> Optional[FrozenSet[int]]:
    """Interpret a collection as a set of option indices."""
    if not isinstance(value, (list, tuple, set, frozenset)):
        return None
    indices = [_as_index(item) for item in value]
    if any(index is None for index in indices):
        return None
    return frozenset(indices)


def _normalize_text(value: Any) -> str:
    return str(value).strip().lower()


def _parse_number(text: str) -> Optional[float]:
    try:
        return float(text.strip().replace(",", "."))
    except ValueError:
        return None


def _parse_range(text: str) -> Optional[Tuple[float, float]]:
    match = _RANGE_PATTERN.match(text.replace(",", "."))
    if not match:
        return None
    low, high = float(match.group(1)), float(match.group(2))
    return (low, high) if low <= high else (high, low)


def _numeric_match(submitted: str, canonical: str, tolerance: float) -> bool:
    """
    Numeric free-text matching.

    A canonical "min-max" range accepts any number inside it. Otherwise
    a number within ``tolerance`` (relative) of the canonical value is
    accepted. Non-numeric input falls back to exact text comparison.
    """
    user_number = _parse_number(submitted)

    bounds = _parse_range(canonical)
    if bounds is not None:
        return user_number is not None and bounds[0] <= user_number <= bounds[1]

    canonical_number = _parse_number(canonical)
    if user_number is not None and canonical_number is not None:
        return abs(user_number - canonical_number) <= abs(canonical_number) * tolerance

    return _normalize_text(submitted) == _normalize_text(canonical)
