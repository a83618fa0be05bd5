# Area: Engine Tests
"""Tests for answer evaluation."""

import pytest

from team_challenge._engine.enums import AnswerMode, QuestionKind, PASS
from team_challenge._engine.evaluator import evaluate
from team_challenge._engine.question import Question
from team_challenge.errors import QuestionDataError


def single(answer=1):
    return Question(
        id="s1", kind=QuestionKind.SINGLE_CHOICE, prompt="Pick one",
        options=("a", "b", "c"), correct_answer=answer,
    )


def multi(answer=(0, 2)):
    return Question(
        id="m1", kind=QuestionKind.MULTI_CHOICE, prompt="Pick some",
        options=("a", "b", "c"), correct_answer=answer,
    )


def free(answer="Paris", mode=AnswerMode.EXACT, tolerance=0.02):
    return Question(
        id="f1", kind=QuestionKind.FREE_TEXT, prompt="Capital?",
        correct_answer=answer, answer_mode=mode, tolerance=tolerance,
    )


class TestSingleChoice:
    """Index equality."""

    def test_correct_index(self):
        assert evaluate(single(1), 1) is True

    def test_wrong_index(self):
        assert evaluate(single(1), 2) is False

    def test_numeric_string_index(self):
        assert evaluate(single(1), " 1 ") is True

    def test_non_index_is_wrong(self):
        assert evaluate(single(1), "b") is False
        assert evaluate(single(1), True) is False


class TestMultiChoice:
    """Order-independent set equality."""

    def test_order_independent(self):
        assert evaluate(multi([0, 2]), [2, 0]) is True

    def test_subset_is_wrong(self):
        assert evaluate(multi([0, 2]), [0]) is False

    def test_superset_is_wrong(self):
        assert evaluate(multi([0, 2]), [0, 1, 2]) is False

    def test_scalar_submission_is_wrong(self):
        assert evaluate(multi([0]), 0) is False


class TestFreeText:
    """Trimmed, case-insensitive text and numeric modes."""

    def test_case_and_whitespace_ignored(self):
        assert evaluate(free("Paris"), "  paris ") is True

    def test_different_text(self):
        assert evaluate(free("Paris"), "London") is False

    def test_exact_mode_is_not_numeric(self):
        assert evaluate(free("42.50"), "42.5") is False

    def test_numeric_within_tolerance(self):
        q = free("100", mode=AnswerMode.NUMERIC, tolerance=0.02)
        assert evaluate(q, "101.5") is True
        assert evaluate(q, "103") is False

    def test_numeric_decimal_comma(self):
        q = free("42.5", mode=AnswerMode.NUMERIC)
        assert evaluate(q, "42,5") is True

    def test_numeric_range(self):
        q = free("11.7-12.1", mode=AnswerMode.NUMERIC)
        assert evaluate(q, "11.9") is True
        assert evaluate(q, "12.2") is False

    def test_numeric_non_number_falls_back_to_text(self):
        q = free("n/a", mode=AnswerMode.NUMERIC)
        assert evaluate(q, "N/A") is True


class TestPassAndIntegrity:
    """PASS never scores; malformed questions raise."""

    def test_pass_is_never_correct(self):
        assert evaluate(single(0), PASS) is False
        assert evaluate(multi([0]), PASS) is False
        assert evaluate(free("x"), PASS) is False

    def test_none_is_never_correct(self):
        assert evaluate(single(0), None) is False

    def test_missing_canonical_answer_raises(self):
        with pytest.raises(QuestionDataError):
            evaluate(single(None), 0)

    def test_missing_answer_raises_even_on_pass(self):
        with pytest.raises(QuestionDataError):
            evaluate(free(None), PASS)

    def test_misshaped_multi_answer_raises(self):
        with pytest.raises(QuestionDataError):
            evaluate(multi("0,2"), [0, 2])

    def test_empty_free_text_answer_raises(self):
        with pytest.raises(QuestionDataError) as exc:
            evaluate(free("  "), "x")
        assert exc.value.question_id == "f1"

    def test_idempotent(self):
        q = multi([1, 2])
        results = {evaluate(q, [2, 1]) for _ in range(5)}
        assert results == {True}
