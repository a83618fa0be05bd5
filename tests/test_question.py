# Area: Engine Tests
"""Tests for Question records and their validation."""

import pytest

from team_challenge._engine.enums import AnswerMode, QuestionKind
from team_challenge._engine.question import Question
from team_challenge.errors import QuestionDataError


class TestQuestionFromRecord:
    """Tests for Question.from_record()."""

    def test_single_choice_record(self):
        q = Question.from_record({
            "id": "q1", "type": "single_choice", "question": "Pick",
            "options": ["a", "b"], "correct_answer": 1,
        })
        assert q.kind is QuestionKind.SINGLE_CHOICE
        assert q.options == ("a", "b")
        assert q.correct_answer == 1
        assert q.answer_mode is AnswerMode.EXACT

    def test_kind_aliases(self):
        for alias, kind in [
            ("single-choice", QuestionKind.SINGLE_CHOICE),
            ("multi-choice", QuestionKind.MULTI_CHOICE),
            ("input", QuestionKind.FREE_TEXT),
            ("input-range", QuestionKind.FREE_TEXT),
        ]:
            q = Question.from_record({"id": "x", "type": alias, "question": "?"})
            assert q.kind is kind

    def test_numeric_id_coerced(self):
        q = Question.from_record({"id": 7, "type": "input", "question": "?", "correct_answer": "1"})
        assert q.id == "7"

    def test_list_answer_becomes_tuple(self):
        q = Question.from_record({
            "id": "m", "type": "multi_choice", "question": "?",
            "options": ["a", "b", "c"], "correct_answer": [0, 2],
        })
        assert q.correct_answer == (0, 2)

    def test_null_options_and_explanation(self):
        q = Question.from_record({
            "id": "f", "type": "input", "question": "?",
            "options": None, "explanation": None, "correct_answer": "x",
        })
        assert q.options == ()
        assert q.explanation == ""

    def test_unknown_type_raises(self):
        with pytest.raises(QuestionDataError) as exc:
            Question.from_record({"id": "bad", "type": "essay", "question": "?"})
        assert exc.value.question_id == "bad"

    def test_missing_prompt_raises(self):
        with pytest.raises(QuestionDataError):
            Question.from_record({"id": "bad", "type": "input"})

    def test_negative_tolerance_raises(self):
        with pytest.raises(QuestionDataError):
            Question.from_record({
                "id": "bad", "type": "input", "question": "?",
                "answer_mode": "numeric", "tolerance": -1,
            })


class TestQuestionToRecord:
    """Tests for Question.to_record()."""

    def test_record_round_trip_keeps_fields(self):
        record = {
            "id": "m", "type": "multi_choice", "question": "?",
            "options": ["a", "b", "c"], "correct_answer": [0, 2],
            "explanation": "because", "difficulty": "hard", "image_path": "img.png",
        }
        out = Question.from_record(record).to_record()
        assert out["type"] == "multi_choice"
        assert out["correct_answer"] == [0, 2]
        assert out["difficulty"] == "hard"
        assert out["image_path"] == "img.png"
        assert out["answer_mode"] == "exact"

    def test_optional_fields_omitted(self):
        q = Question(id="s", kind=QuestionKind.SINGLE_CHOICE, prompt="?", correct_answer=0)
        out = q.to_record()
        assert "image_path" not in out
        assert "difficulty" not in out
