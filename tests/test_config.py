# Area: Shared Tests
"""Tests for configuration loading and validation."""

import json
from unittest.mock import patch

import pytest

from team_challenge._config import DEFAULT_CONFIG, ENV_MAPPINGS, load_config, validate_config


MOCK_DOTENV = "team_challenge._config.load_dotenv"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep real environment variables out of config tests."""
    for env_key in ENV_MAPPINGS:
        monkeypatch.delenv(env_key, raising=False)


class TestLoadConfig:

    def test_defaults(self):
        with patch(MOCK_DOTENV):
            config = load_config()
        assert config == DEFAULT_CONFIG
        assert config is not DEFAULT_CONFIG

    def test_file_overrides_defaults(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"questions_per_team": 4, "teams": [1, 2, 3]}))
        with patch(MOCK_DOTENV):
            config = load_config(str(path))
        assert config["questions_per_team"] == 4
        assert config["teams"] == [1, 2, 3]
        assert config["time_per_question"] == 60

    def test_missing_file_keeps_defaults(self, tmp_path):
        with patch(MOCK_DOTENV):
            config = load_config(str(tmp_path / "missing.json"))
        assert config["db_path"] == DEFAULT_CONFIG["db_path"]

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"time_per_question": 20}))
        monkeypatch.setenv("TIME_PER_QUESTION", "45")
        monkeypatch.setenv("TEAM_CHALLENGE_DB", "/tmp/tc.db")
        with patch(MOCK_DOTENV):
            config = load_config(str(path))
        assert config["time_per_question"] == 45
        assert config["db_path"] == "/tmp/tc.db"

    def test_dotenv_loaded(self):
        with patch(MOCK_DOTENV) as mock_dotenv:
            load_config()
        mock_dotenv.assert_called_once()


class TestValidateConfig:

    def test_defaults_are_valid(self):
        validate_config(dict(DEFAULT_CONFIG))

    def test_missing_key(self):
        config = dict(DEFAULT_CONFIG)
        del config["db_path"]
        with pytest.raises(ValueError, match="db_path"):
            validate_config(config)

    def test_single_team_rejected(self):
        with pytest.raises(ValueError):
            validate_config({**DEFAULT_CONFIG, "teams": [1]})

    def test_duplicate_teams_rejected(self):
        with pytest.raises(ValueError):
            validate_config({**DEFAULT_CONFIG, "teams": [1, 1]})

    def test_zero_questions_rejected(self):
        with pytest.raises(ValueError):
            validate_config({**DEFAULT_CONFIG, "questions_per_team": 0})

    def test_zero_time_rejected(self):
        with pytest.raises(ValueError):
            validate_config({**DEFAULT_CONFIG, "time_per_question": 0})
