# Area: Engine Tests
"""Tests for turn resolution: scoring, steals and match end."""

from dataclasses import replace

import pytest

from team_challenge._engine.deck import seed_match
from team_challenge._engine.enums import MatchPhase, QuestionKind, TurnOutcome, PASS
from team_challenge._engine.question import Question
from team_challenge._engine.resolver import resolve
from team_challenge._engine.state import ActiveQuestion, MatchState
from team_challenge.errors import InvalidTransitionError, MatchFinishedError, QuestionDataError


def make_deck(team, count):
    """Single-choice deck whose correct answer is always option 0."""
    return tuple(
        Question(
            id=f"t{team}q{i}", kind=QuestionKind.SINGLE_CHOICE,
            prompt=f"Team {team} question {i}", options=("right", "wrong"),
            correct_answer=0,
        )
        for i in range(count)
    )


def started_match(questions_per_team=10, teams=(1, 2)):
    lobby = MatchState(match_id="m1", teams=teams, questions_per_team=questions_per_team)
    decks = {team: make_deck(team, questions_per_team) for team in teams}
    return seed_match(lobby, decks)


RIGHT = 0
WRONG = 1


class TestScenarios:
    """The four turn cases plus match end."""

    def test_correct_own_question(self):
        """Team 1 answers its own Q1 correctly: +1, Team 2 gets its own Q1."""
        state = started_match().with_answer("u1", RIGHT)
        result = resolve(state, RIGHT)

        assert result.outcome is TurnOutcome.CORRECT_OWN
        assert result.is_correct and not result.is_steal
        new = result.state
        assert new.scores == {1: 1, 2: 0}
        assert new.active_team == 2
        assert new.question_index == 0
        assert new.active_question.question.id == "t2q0"
        assert new.owner_team == 2

    def test_missed_own_question_opens_steal(self):
        """Team 1 misses: Team 2 gets the same question, owner still Team 1."""
        result = resolve(started_match(), WRONG)

        assert result.outcome is TurnOutcome.MISSED_OWN
        new = result.state
        assert new.scores == {1: 0, 2: 0}
        assert new.active_team == 2
        assert new.active_question.question.id == "t1q0"
        assert new.owner_team == 1
        assert new.is_steal

    def test_successful_steal(self):
        """Team 2 steals: +1 to Team 2, it keeps the turn with its next question."""
        stolen = resolve(started_match(), WRONG).state
        result = resolve(stolen, RIGHT)

        assert result.outcome is TurnOutcome.STEAL_SUCCESS
        assert result.is_steal
        new = result.state
        assert new.scores == {1: 0, 2: 1}
        assert new.active_team == 2
        assert new.question_index == 1
        assert new.active_question.question.id == "t2q1"
        assert new.owner_team == 2

    def test_failed_steal_returns_turn_to_owner(self):
        """Team 2 fails the steal: turn returns to Team 1 at the next index."""
        stolen = resolve(started_match(), WRONG).state
        result = resolve(stolen, WRONG)

        assert result.outcome is TurnOutcome.STEAL_FAILED
        new = result.state
        assert new.scores == {1: 0, 2: 0}
        assert new.active_team == 1
        assert new.question_index == 1
        assert new.active_question.question.id == "t1q1"
        assert new.owner_team == 1

    def test_pass_counts_as_miss(self):
        result = resolve(started_match(), PASS)
        assert result.outcome is TurnOutcome.MISSED_OWN
        assert result.is_correct is False

    def test_last_team_correct_closes_round(self):
        after_team_1 = resolve(started_match(), RIGHT).state
        result = resolve(after_team_1, RIGHT)

        new = result.state
        assert new.active_team == 1
        assert new.question_index == 1
        assert new.active_question.question.id == "t1q1"
        assert new.scores == {1: 1, 2: 1}


class TestMatchEnd:
    """Finishing when the index reaches questions_per_team."""

    def test_finishes_after_last_round(self):
        state = started_match(questions_per_team=10)
        for _ in range(20):
            state = resolve(state, RIGHT).state

        assert state.phase is MatchPhase.FINISHED
        assert state.question_index == 10
        assert state.active_question is None
        assert state.scores == {1: 10, 2: 10}

    def test_no_resolve_after_finish(self):
        state = started_match(questions_per_team=1)
        state = resolve(state, RIGHT).state
        result = resolve(state, RIGHT)
        assert result.finished
        with pytest.raises(MatchFinishedError):
            resolve(result.state, RIGHT)

    def test_failed_steal_on_last_index_finishes(self):
        state = started_match(questions_per_team=1)
        state = resolve(state, WRONG).state
        result = resolve(state, WRONG)
        assert result.finished
        assert result.state.active_question is None

    def test_finished_error_is_invalid_transition(self):
        state = resolve(resolve(started_match(1), RIGHT).state, RIGHT).state
        with pytest.raises(InvalidTransitionError):
            resolve(state, PASS)

    def test_lobby_match_rejected(self):
        with pytest.raises(InvalidTransitionError):
            resolve(MatchState(match_id="m1"), RIGHT)


class TestInvariants:
    """Properties that hold across arbitrary answer sequences."""

    SEQUENCE = [RIGHT, WRONG, RIGHT, WRONG, WRONG, PASS, RIGHT, RIGHT, WRONG, RIGHT] * 6

    def play(self, questions_per_team=5):
        state = started_match(questions_per_team)
        history = [state]
        for answer in self.SEQUENCE:
            if state.phase is MatchPhase.FINISHED:
                break
            state = resolve(state.with_answer("u1", answer), answer).state
            history.append(state)
        return history

    def test_answer_bag_empty_after_every_resolve(self):
        for state in self.play()[1:]:
            assert state.answers == {}

    def test_index_never_decreases(self):
        indices = [s.question_index for s in self.play()]
        assert indices == sorted(indices)

    def test_scores_never_decrease(self):
        history = self.play()
        for before, after in zip(history, history[1:]):
            for team in (1, 2):
                assert after.score_of(team) >= before.score_of(team)

    def test_owner_changes_only_with_new_question(self):
        history = self.play()
        for before, after in zip(history, history[1:]):
            if after.active_question is None or before.active_question is None:
                continue
            same_question = after.active_question.question.id == before.active_question.question.id
            if same_question:
                assert after.owner_team == before.owner_team

    def test_match_eventually_finishes(self):
        assert self.play()[-1].phase is MatchPhase.FINISHED

    def test_input_state_not_mutated(self):
        state = started_match()
        resolve(state, RIGHT)
        assert state.scores == {1: 0, 2: 0}
        assert state.active_team == 1


class TestDataErrors:
    """Malformed questions propagate out of the resolver."""

    def test_malformed_active_question_raises(self):
        state = started_match()
        broken = Question(id="bad", kind=QuestionKind.SINGLE_CHOICE, prompt="?", correct_answer=None)
        state = replace(state, active_question=ActiveQuestion(question=broken, owner_team=1))
        with pytest.raises(QuestionDataError):
            resolve(state, RIGHT)

    def test_short_deck_raises(self):
        state = started_match(questions_per_team=3)
        state = replace(state, decks={1: make_deck(1, 3), 2: make_deck(2, 0)})
        with pytest.raises(QuestionDataError):
            resolve(state, RIGHT)


class TestTurnOrder:
    """Turn order across three teams."""

    TEAMS = (1, 2, 3)

    def test_turn_passes_through_every_team(self):
        state = started_match(questions_per_team=3, teams=self.TEAMS)
        order = []
        for _ in range(3):
            order.append((state.active_team, state.question_index))
            state = resolve(state, RIGHT).state

        assert order == [(1, 0), (2, 0), (3, 0)]
        assert state.active_team == 1
        assert state.question_index == 1
        assert state.active_question.question.id == "t1q1"
        assert state.scores == {1: 1, 2: 1, 3: 1}

    def test_only_last_team_advances_index(self):
        state = started_match(questions_per_team=3, teams=self.TEAMS)
        after_first = resolve(state, RIGHT).state
        after_second = resolve(after_first, RIGHT).state
        assert after_first.question_index == 0
        assert after_second.question_index == 0

    def test_last_team_miss_wraps_steal_to_first(self):
        state = started_match(questions_per_team=3, teams=self.TEAMS)
        state = resolve(resolve(state, RIGHT).state, RIGHT).state
        result = resolve(state, WRONG)

        assert result.outcome is TurnOutcome.MISSED_OWN
        assert result.state.active_team == 1
        assert result.state.owner_team == 3
        assert result.state.active_question.question.id == "t3q0"

    def test_failed_steal_skips_intermediate_team(self):
        """Team 2 fails to steal Team 1's question: turn goes back to Team 1, not Team 3."""
        state = started_match(questions_per_team=3, teams=self.TEAMS)
        stolen = resolve(state, WRONG).state
        assert stolen.active_team == 2

        result = resolve(stolen, WRONG)
        assert result.outcome is TurnOutcome.STEAL_FAILED
        assert result.state.active_team == 1
        assert result.state.question_index == 1
        assert result.state.active_question.question.id == "t1q1"

    def test_middle_team_miss_opens_steal_for_next(self):
        state = started_match(questions_per_team=3, teams=self.TEAMS)
        state = resolve(state, RIGHT).state
        result = resolve(state, WRONG)

        assert result.state.active_team == 3
        assert result.state.owner_team == 2
        assert result.state.active_question.question.id == "t2q0"

        stolen = resolve(result.state, RIGHT)
        assert stolen.outcome is TurnOutcome.STEAL_SUCCESS
        assert stolen.state.active_team == 3
        assert stolen.state.question_index == 1
        assert stolen.state.active_question.question.id == "t3q1"
        assert stolen.state.scores == {1: 1, 2: 0, 3: 1}
