# Area: Engine
"""
team_challenge._engine.question — Question value object
=======================================================

One trivia item. Questions are immutable once created; collections are
held as tuples so a question can be shared between decks and snapshots.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from pydantic import ValidationError

from .enums import AnswerMode, QuestionKind
from .schemas import QuestionRecord
from ..errors import QuestionDataError


@dataclass(frozen=True)
class Question:
    """
    A single question.

    Attributes:
        id: Question identifier
        kind: single choice, multi choice or free text
        prompt: Question text shown to players
        options: Ordered option strings (empty for free text)
        correct_answer: Option index, tuple of indices, or answer string
        explanation: Text shown after the question is resolved
        image_path: Optional image reference
        answer_mode: Free-text matching mode (exact or numeric)
        tolerance: Relative tolerance used in numeric mode
        difficulty: Optional difficulty label
    """

    id: str
    kind: QuestionKind
    prompt: str
    options: Tuple[str, ...] = ()
    correct_answer: Any = None
    explanation: str = ""
    image_path: Optional[str] = None
    answer_mode: AnswerMode = AnswerMode.EXACT
    tolerance: float = 0.02
    difficulty: Optional[str] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Question":
        """
        Build a Question from its stored/wire record.

        Raises:
            QuestionDataError: If the record does not match the schema
        """
        try:
            parsed = QuestionRecord.model_validate(record)
        except ValidationError as e:
            raise QuestionDataError(
                question_id=str(record.get("id")) if isinstance(record, dict) else None,
                reason=f"invalid record: {e.error_count()} validation error(s)",
                record=record if isinstance(record, dict) else {"raw": repr(record)},
            ) from e

        answer = parsed.correct_answer
        if isinstance(answer, list):
            answer = tuple(answer)

        return cls(
            id=parsed.id,
            kind=parsed.type,
            prompt=parsed.question,
            options=tuple(parsed.options),
            correct_answer=answer,
            explanation=parsed.explanation,
            image_path=parsed.image_path,
            answer_mode=parsed.answer_mode,
            tolerance=parsed.tolerance,
            difficulty=parsed.difficulty,
        )

    def to_record(self) -> Dict[str, Any]:
        """Serialize to the wire record used in the store's JSON columns."""
        answer = self.correct_answer
        if isinstance(answer, tuple):
            answer = list(answer)
        record = {
            "id": self.id,
            "type": self.kind.value,
            "question": self.prompt,
            "options": list(self.options),
            "correct_answer": answer,
            "explanation": self.explanation,
            "answer_mode": self.answer_mode.value,
            "tolerance": self.tolerance,
        }
        if self.image_path is not None:
            record["image_path"] = self.image_path
        if self.difficulty is not None:
            record["difficulty"] = self.difficulty
        return record
