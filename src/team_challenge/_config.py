# Area: Shared
"""
team_challenge._config — Configuration
======================================

Defaults, loading (JSON file + environment + .env) and validation for
the match driver and CLI.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

logger = logging.getLogger("team_challenge")

DEFAULT_CONFIG: Dict[str, Any] = {
    "db_path": "team_challenge.db",
    "log_file": "team_challenge.log",
    "teams": [1, 2],
    "questions_per_team": 10,
    "time_per_question": 60,
    "anthropic_model": "claude-3-haiku-20240307",
    "max_idle_seconds": 24 * 60 * 60,
}

# Environment variable -> (config key, converter)
ENV_MAPPINGS = {
    "TEAM_CHALLENGE_DB": ("db_path", str),
    "TEAM_CHALLENGE_LOG": ("log_file", str),
    "QUESTIONS_PER_TEAM": ("questions_per_team", int),
    "TIME_PER_QUESTION": ("time_per_question", int),
    "ANTHROPIC_MODEL": ("anthropic_model", str),
    "MAX_IDLE_SECONDS": ("max_idle_seconds", int),
}

# Required config keys
REQUIRED_CONFIG_KEYS = [
    "db_path",
    "teams",
    "questions_per_team",
    "time_per_question",
]


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load config from defaults, an optional JSON file, then environment.

    A ``.env`` file in the working directory is loaded first, so its
    values count as environment variables.
    """
    load_dotenv()
    config: Dict[str, Any] = dict(DEFAULT_CONFIG)

    if config_path:
        path = Path(config_path)
        if path.exists():
            with open(path, encoding="utf-8") as f:
                config.update(json.load(f))
        else:
            logger.warning(f"Config file not found: {config_path}")

    for env_key, (config_key, convert) in ENV_MAPPINGS.items():
        if env_key in os.environ:
            config[config_key] = convert(os.environ[env_key])

    return config


def validate_config(config: dict) -> None:
    """
    Validate required configuration keys and their ranges.

    Args:
        config: Configuration dict

    Raises:
        ValueError: If required keys are missing or out of range
    """
    missing = [k for k in REQUIRED_CONFIG_KEYS if k not in config]
    if missing:
        raise ValueError(f"Missing required config keys: {missing}")

    teams = config["teams"]
    if len(teams) < 2 or len(set(teams)) != len(teams):
        raise ValueError(f"Need at least two distinct teams, got {teams}")
    if int(config["questions_per_team"]) < 1:
        raise ValueError("questions_per_team must be at least 1")
    if int(config["time_per_question"]) < 1:
        raise ValueError("time_per_question must be at least 1 second")
