# Area: Engine
"""
team_challenge._engine.schemas — External record schemas
========================================================

pydantic models for records that cross the package boundary: question
records coming from a question bank, a generated quiz or the store, and
feedback payloads coming back from the feedback generator.
"""

from __future__ import annotations
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .enums import AnswerMode, QuestionKind, QUESTION_KIND_ALIASES


class QuestionRecord(BaseModel):
    """Wire shape of one question (``current_question`` / deck entries)."""

    model_config = ConfigDict(extra="ignore")

    id: str
    type: QuestionKind
    question: str
    options: List[str] = Field(default_factory=list)
    correct_answer: Any = None
    explanation: str = ""
    image_path: Optional[str] = None
    answer_mode: AnswerMode = AnswerMode.EXACT
    tolerance: float = Field(default=0.02, ge=0)
    difficulty: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        if isinstance(value, (int, float)):
            return str(value)
        return value

    @field_validator("type", mode="before")
    @classmethod
    def _map_kind_alias(cls, value: Any) -> Any:
        if isinstance(value, str):
            kind = QUESTION_KIND_ALIASES.get(value.strip().lower())
            if kind is None:
                raise ValueError(f"unknown question type '{value}'")
            return kind
        return value

    @field_validator("options", mode="before")
    @classmethod
    def _none_options(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("explanation", mode="before")
    @classmethod
    def _none_explanation(cls, value: Any) -> Any:
        return "" if value is None else value


class FeedbackRecord(BaseModel):
    """Post-match debrief returned by a feedback generator."""

    model_config = ConfigDict(extra="allow")

    summary: str
    strengths: List[str] = Field(default_factory=list)
    weak_points: List[str] = Field(default_factory=list)
    detailed_analysis: str = ""
