# Area: Engine Tests
"""Tests for deck splitting and match seeding."""

import pytest

from team_challenge._engine.deck import seed_match, split_question_pool
from team_challenge._engine.enums import MatchPhase, QuestionKind
from team_challenge._engine.question import Question
from team_challenge._engine.state import MatchState
from team_challenge.errors import InvalidTransitionError, QuestionDataError


def pool(count):
    return [
        Question(id=f"q{i}", kind=QuestionKind.FREE_TEXT, prompt="?", correct_answer=str(i))
        for i in range(count)
    ]


class TestSplitQuestionPool:

    def test_consecutive_slices(self):
        decks = split_question_pool(pool(6), (1, 2), 3)
        assert [q.id for q in decks[1]] == ["q0", "q1", "q2"]
        assert [q.id for q in decks[2]] == ["q3", "q4", "q5"]

    def test_extra_questions_ignored(self):
        decks = split_question_pool(pool(9), (1, 2), 3)
        assert sum(len(deck) for deck in decks.values()) == 6

    def test_three_teams(self):
        decks = split_question_pool(pool(6), (1, 2, 3), 2)
        assert [q.id for q in decks[3]] == ["q4", "q5"]

    def test_short_pool_raises(self):
        with pytest.raises(QuestionDataError) as exc:
            split_question_pool(pool(5), (1, 2), 3)
        assert "6 needed" in exc.value.reason


class TestSeedMatch:

    def test_first_question_on_table(self):
        lobby = MatchState(match_id="m1", questions_per_team=3)
        started = seed_match(lobby, split_question_pool(pool(6), (1, 2), 3))

        assert started.phase is MatchPhase.IN_PROGRESS
        assert started.active_team == 1
        assert started.question_index == 0
        assert started.active_question.question.id == "q0"
        assert started.owner_team == 1
        assert started.scores == {1: 0, 2: 0}
        assert started.answers == {}

    def test_cannot_seed_twice(self):
        lobby = MatchState(match_id="m1", questions_per_team=3)
        decks = split_question_pool(pool(6), (1, 2), 3)
        started = seed_match(lobby, decks)
        with pytest.raises(InvalidTransitionError):
            seed_match(started, decks)
