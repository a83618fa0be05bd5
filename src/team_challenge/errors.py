# Area: Shared
"""
team_challenge.errors — Custom exception classes
================================================

Defines the exception hierarchy raised by the turn engine and the
match driver. Data-integrity errors keep the offending record so the
driver can log a structured error block before leaving the match
untouched.
"""

from __future__ import annotations
from typing import Any, Dict, Optional
import json


class TeamChallengeError(Exception):
    """Base exception for all team_challenge errors."""
    pass


class QuestionDataError(TeamChallengeError):
    """Raised when a question is malformed (e.g. no canonical answer)."""

    def __init__(
        self,
        question_id: Optional[str],
        reason: str,
        record: Optional[Dict[str, Any]] = None,
    ):
        self.question_id = question_id
        self.reason = reason
        self.record = record or {}
        super().__init__(f"Question '{question_id}' is malformed: {reason}")

    def format_error_log(self) -> str:
        return _format_error_block(
            error_type="QUESTION_DATA_INTEGRITY",
            subject=f"question {self.question_id}",
            details=[self.reason],
            payload=self.record,
        )


class InvalidTransitionError(TeamChallengeError):
    """Raised when a phase transition is not allowed from the current phase."""

    def __init__(self, phase: str, event: str):
        self.phase = phase
        self.event = event
        super().__init__(f"Invalid transition: {event} from {phase}")


class MatchFinishedError(InvalidTransitionError):
    """Raised when a turn is resolved on a match that has already finished."""

    def __init__(self, match_id: str):
        self.match_id = match_id
        super().__init__(phase="finished", event="RESOLVE")
        self.args = (f"Match '{match_id}' is finished; no further turns accepted",)


class NotOnActiveTeamError(TeamChallengeError):
    """Raised when an answer comes from someone outside the active team roster."""

    def __init__(self, participant_id: str, active_team: int):
        self.participant_id = participant_id
        self.active_team = active_team
        super().__init__(
            f"Participant '{participant_id}' is not on active team {active_team}"
        )


class NotHostError(TeamChallengeError):
    """Raised when a host-only operation is attempted by another client."""

    def __init__(self, client_id: str, operation: str):
        self.client_id = client_id
        self.operation = operation
        super().__init__(f"Client '{client_id}' may not {operation}: not the match host")


class MatchNotFoundError(TeamChallengeError):
    """Raised when a match id or join code does not resolve to a stored match."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Match not found: {key}")


class StaleMatchError(TeamChallengeError):
    """Raised when a write loses the optimistic version check."""

    def __init__(self, match_id: str, expected_version: int):
        self.match_id = match_id
        self.expected_version = expected_version
        super().__init__(
            f"Match '{match_id}' changed since version {expected_version}"
        )


class EmptyTeamError(TeamChallengeError):
    """Raised when a match is started while a team has no members."""

    def __init__(self, match_id: str, teams: list):
        self.match_id = match_id
        self.teams = teams
        super().__init__(f"Match '{match_id}' cannot start: no members on team(s) {teams}")


class FeedbackGenerationError(TeamChallengeError):
    """Raised by feedback generators when the external service fails."""

    def __init__(self, reason: str, raw_output: Any = None):
        self.reason = reason
        self.raw_output = raw_output
        super().__init__(f"Feedback generation failed: {reason}")

    def format_error_log(self) -> str:
        return _format_error_block(
            error_type="FEEDBACK_GENERATION_FAILURE",
            subject="feedback generator",
            details=[self.reason],
            payload={"raw_output": repr(self.raw_output)},
        )


def _format_error_block(
    error_type: str,
    subject: str,
    details: list,
    payload: Dict[str, Any],
) -> str:
    """Format a structured, multi-line error block for the log."""
    from datetime import datetime, timezone

    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"

    lines = [
        "",
        "=" * 64,
        " ENGINE ERROR — MATCH STATE LEFT UNCHANGED",
        "=" * 64,
        f" Timestamp:    {timestamp}",
        f" Error Type:   {error_type}",
        f" Subject:      {subject}",
        "",
        " ── PAYLOAD " + "─" * 52,
        _indent_json(payload),
    ]

    if details:
        lines.append("")
        lines.append(" ── DETAILS " + "─" * 52)
        for detail in details:
            lines.append(f" • {detail}")

    lines.append("")
    lines.append("=" * 64)
    lines.append("")

    return "\n".join(lines)


def _indent_json(data: Dict[str, Any], indent: int = 2) -> str:
    """Format JSON with indentation for error logs."""
    try:
        formatted = json.dumps(data, indent=indent, default=str)
        return "\n".join(" " + line for line in formatted.split("\n"))
    except (TypeError, ValueError):
        return f" {repr(data)}"
