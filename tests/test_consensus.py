# Area: Engine Tests
"""Tests for team consensus detection and answer submission."""

import pytest

from team_challenge._engine.consensus import check_consensus, normalize_answer, submit_answer
from team_challenge._engine.enums import MatchPhase, QuestionKind
from team_challenge._engine.evaluator import evaluate
from team_challenge._engine.question import Question
from team_challenge._engine.state import MatchState
from team_challenge.errors import InvalidTransitionError, NotOnActiveTeamError


class TestCheckConsensus:
    """Tests for check_consensus()."""

    def test_all_agree(self):
        result = check_consensus(["u1", "u2"], {"u1": 2, "u2": 2})
        assert result.reached is True
        assert result.value == 2

    def test_missing_member(self):
        result = check_consensus(["u1", "u2"], {"u1": 2})
        assert result.reached is False
        assert result.value is None

    def test_disagreement(self):
        assert check_consensus(["u1", "u2"], {"u1": 1, "u2": 2}).reached is False

    def test_single_member_team(self):
        assert check_consensus(["u1"], {"u1": "paris"}).reached is True

    def test_empty_roster_never_agrees(self):
        assert check_consensus([], {"u1": 1}).reached is False

    def test_multi_choice_order_ignored(self):
        result = check_consensus(["u1", "u2"], {"u1": [0, 2], "u2": [2, 0]})
        assert result.reached is True

    def test_text_case_ignored(self):
        assert check_consensus(["u1", "u2"], {"u1": "Paris ", "u2": "paris"}).reached is True

    def test_answers_from_other_team_ignored(self):
        result = check_consensus(["u1"], {"u1": 3, "x9": 1})
        assert result.reached is True
        assert result.value == 3


class TestConsensusWithQuestion:
    """Answers compared the way the evaluator reads them."""

    SINGLE = Question(id="s1", kind=QuestionKind.SINGLE_CHOICE, prompt="?",
                      options=("a", "b", "c"), correct_answer=1)
    MULTI = Question(id="m1", kind=QuestionKind.MULTI_CHOICE, prompt="?",
                     options=("a", "b", "c"), correct_answer=(0, 2))

    def test_index_forms_agree_on_single_choice(self):
        result = check_consensus(["u1", "u2"], {"u1": 1, "u2": "1"}, self.SINGLE)
        assert result.reached is True
        assert evaluate(self.SINGLE, result.value) is True

    def test_different_options_disagree(self):
        assert check_consensus(["u1", "u2"], {"u1": 1, "u2": "2"}, self.SINGLE).reached is False

    def test_index_forms_agree_on_multi_choice(self):
        answers = {"u1": [2, 0], "u2": ["0", "2"]}
        assert check_consensus(["u1", "u2"], answers, self.MULTI).reached is True


class TestNormalizeAnswer:

    def test_collections_sorted(self):
        assert normalize_answer([2, 0]) == normalize_answer((0, 2))

    def test_scalars_untouched(self):
        assert normalize_answer(3) == 3


class TestSubmitAnswer:
    """Tests for submit_answer()."""

    def state(self, phase=MatchPhase.IN_PROGRESS):
        return MatchState(match_id="m1", phase=phase, active_team=1)

    def test_records_answer(self):
        new = submit_answer(self.state(), ["u1"], "u1", 2)
        assert new.answers == {"u1": 2}

    def test_resubmit_overwrites(self):
        first = submit_answer(self.state(), ["u1"], "u1", 2)
        second = submit_answer(first, ["u1"], "u1", 3)
        assert second.answers == {"u1": 3}

    def test_original_state_untouched(self):
        original = self.state()
        submit_answer(original, ["u1"], "u1", 2)
        assert original.answers == {}

    def test_off_roster_rejected(self):
        with pytest.raises(NotOnActiveTeamError) as exc:
            submit_answer(self.state(), ["u1"], "u2", 2)
        assert exc.value.active_team == 1

    def test_lobby_rejected(self):
        with pytest.raises(InvalidTransitionError):
            submit_answer(self.state(MatchPhase.LOBBY), ["u1"], "u1", 2)

    def test_finished_rejected(self):
        with pytest.raises(InvalidTransitionError):
            submit_answer(self.state(MatchPhase.FINISHED), ["u1"], "u1", 2)
