# Area: Shared Tests
"""Tests for the team-challenge command line."""

import json
import logging
from unittest.mock import patch

import pytest

from team_challenge._store.store import MatchStore
from team_challenge.cli import main, parse_args


MOCK_DOTENV = "team_challenge._config.load_dotenv"


@pytest.fixture
def env(tmp_path, monkeypatch):
    """Point the database and log file at a temporary directory."""
    db_path = tmp_path / "tc.db"
    monkeypatch.setenv("TEAM_CHALLENGE_DB", str(db_path))
    monkeypatch.setenv("TEAM_CHALLENGE_LOG", str(tmp_path / "tc.log"))
    monkeypatch.delenv("QUESTIONS_PER_TEAM", raising=False)
    monkeypatch.delenv("TIME_PER_QUESTION", raising=False)
    with patch(MOCK_DOTENV):
        yield db_path

    # setup_logging() bound handlers to this test's captured streams
    pkg_logger = logging.getLogger("team_challenge")
    for handler in pkg_logger.handlers:
        handler.close()
    pkg_logger.handlers.clear()
    pkg_logger.propagate = True


class TestParseArgs:

    def test_command_required(self):
        with pytest.raises(SystemExit):
            parse_args([])

    def test_demo_options(self):
        args = parse_args(["demo", "--seed", "3", "--accuracy", "1.0"])
        assert args.command == "demo"
        assert args.seed == 3
        assert args.accuracy == 1.0


class TestCommands:

    def test_init_db(self, env, capsys):
        assert main(["init-db"]) == 0
        assert env.exists()
        assert "Database ready" in capsys.readouterr().out

    def test_demo_with_builtin_questions(self, env, capsys):
        assert main(["demo", "--seed", "1", "--accuracy", "1.0"]) == 0
        out = capsys.readouterr().out
        assert "Final scores: team 1 = 1, team 2 = 1" in out
        assert "Feedback:" in out

    def test_demo_with_question_file(self, env, tmp_path, capsys):
        records = [
            {"id": f"q{i}", "type": "input", "question": f"Q{i}?", "correct_answer": str(i)}
            for i in range(4)
        ]
        path = tmp_path / "questions.json"
        path.write_text(json.dumps(records), encoding="utf-8")

        assert main(["demo", "--questions", str(path), "--accuracy", "0"]) == 0
        assert "team 1 = 0, team 2 = 0" in capsys.readouterr().out

    def test_show_unknown_code(self, env, capsys):
        main(["init-db"])
        assert main(["show", "NOPE00"]) == 1
        assert "No active match" in capsys.readouterr().err

    def test_show_match(self, env, capsys):
        store = MatchStore(str(env))
        store.create_match("m1", "Quiz night", "ABC123", "host", [1, 2], 5, 30)
        store.add_participant("m1", "host", "Hostname", 1)

        assert main(["show", "abc123"]) == 0
        out = capsys.readouterr().out
        assert "Quiz night" in out
        assert "Team 1: 0 point(s)  Hostname" in out

    def test_purge(self, env, capsys):
        MatchStore(str(env)).create_match("m1", "Quiz", "ABC123", "host", [1, 2], 5, 30)
        assert main(["purge", "--max-idle", "3600"]) == 0
        assert "Purged 0 match(es)" in capsys.readouterr().out
