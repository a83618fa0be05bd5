# Area: Shared
"""
team_challenge.cli — Command-line interface
===========================================

Usage:
    team-challenge init-db                         # Create the database schema
    team-challenge demo                            # Play a scripted two-team match
    team-challenge demo --questions questions.json --seed 7
    team-challenge show ABC123                     # Print a match by its code
    team-challenge purge --max-idle 3600           # Delete abandoned matches

Settings come from ``--config``, then environment variables (a ``.env``
file is honoured), e.g. TEAM_CHALLENGE_DB=/tmp/tc.db.
"""

import argparse
import logging
import os
import random
import sys
import tempfile
from typing import Any, Dict, List

from ._config import load_config, validate_config
from ._driver import FALLBACK_FEEDBACK, MatchDriver, JsonFileQuestionSource, StaticQuestionSource
from ._driver.question_source import FALLBACK_QUESTIONS
from ._engine import MatchPhase, Question, QuestionKind
from ._shared import setup_logging
from ._store import MatchStore, init_database
from .errors import TeamChallengeError


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="team-challenge",
        description="Team Challenge - turn-based team quiz matches",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  team-challenge init-db
  team-challenge demo --seed 7
  team-challenge show ABC123
  TEAM_CHALLENGE_DB=/tmp/tc.db team-challenge purge --max-idle 3600
        """,
    )
    parser.add_argument("--config", type=str, help="Path to JSON config file")
    parser.add_argument(
        "--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )

    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("init-db", help="Create the database schema")

    demo = commands.add_parser("demo", help="Play a scripted match between two teams")
    demo.add_argument("--questions", type=str, help="JSON file of question records")
    demo.add_argument("--seed", type=int, default=None, help="Random seed for the players")
    demo.add_argument(
        "--accuracy", type=float, default=0.6,
        help="Chance a team answers correctly (default: 0.6)",
    )

    show = commands.add_parser("show", help="Show a match by its join code")
    show.add_argument("code", type=str)

    purge = commands.add_parser("purge", help="Delete abandoned unfinished matches")
    purge.add_argument(
        "--max-idle", type=int, default=None,
        help="Idle seconds before a match counts as abandoned",
    )

    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Main CLI entry point."""
    args = parse_args(argv)
    config = load_config(args.config)

    try:
        validate_config(config)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    setup_logging(log_file_path=config["log_file"], level=getattr(logging, args.log_level))

    try:
        if args.command == "init-db":
            init_database(config["db_path"])
            print(f"Database ready: {config['db_path']}")
            return 0
        if args.command == "demo":
            return run_demo(config, args.questions, args.seed, args.accuracy)
        if args.command == "show":
            return show_match(config, args.code)
        if args.command == "purge":
            max_idle = args.max_idle if args.max_idle is not None else config["max_idle_seconds"]
            purged = MatchStore(config["db_path"]).purge_abandoned(max_idle)
            print(f"Purged {len(purged)} match(es)")
            return 0
    except TeamChallengeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


def show_match(config: Dict[str, Any], code: str) -> int:
    store = MatchStore(config["db_path"])
    row = store.get_by_code(code)
    if row is None:
        print(f"No active match with code {code.upper()}", file=sys.stderr)
        return 1

    print(f"{row['name']}  [{row['code']}]  {row['room_status']}")
    print(f"  Turn: team {row['current_turn_team_id']}, question {row['current_question_index']}")
    for team in row["teams"]:
        score = (row.get("team_scores") or {}).get(str(team), 0)
        members = [
            p["display_name"] or p["user_id"]
            for p in store.list_participants(row["id"])
            if p["team_number"] == team
        ]
        print(f"  Team {team}: {score} point(s)  {', '.join(members) or '-'}")
    return 0


def run_demo(config: Dict[str, Any], questions_path, seed, accuracy: float) -> int:
    """
    Play a whole match in-process: one host and one guest per team,
    every turn the active team agrees on an answer that is right with
    probability ``accuracy``.
    """
    rng = random.Random(seed)
    if questions_path:
        source = JsonFileQuestionSource(questions_path)
    else:
        source = StaticQuestionSource([Question.from_record(r) for r in FALLBACK_QUESTIONS])
    pool_size = len(source.fetch(10_000))
    teams = list(config["teams"])
    qpt = min(int(config["questions_per_team"]), pool_size // len(teams))
    if qpt < 1:
        print(f"Error: need at least {len(teams)} questions, got {pool_size}", file=sys.stderr)
        return 1

    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)
    store = MatchStore(db_path)
    host = MatchDriver(store, "host", question_source=source, config=config)
    players: Dict[int, List[MatchDriver]] = {teams[0]: [host]}
    try:
        match = host.create_match("Demo match", teams=teams, questions_per_team=qpt,
                                  display_name="Host")
        for team in teams[1:]:
            guest = MatchDriver(store, f"guest-{team}", config=config)
            guest.join_match(match["code"], display_name=f"Guest {team}", team_number=team)
            players[team] = [guest]

        state = host.start_match(match["id"])
        print(f"Match {match['code']}: {len(teams)} teams, {qpt} question(s) each")

        while state.phase is MatchPhase.IN_PROGRESS:
            question = state.active_question.question
            answer = _scripted_answer(question, rng.random() < accuracy)
            for player in players[state.active_team]:
                player.submit_answer(match["id"], answer)
            resolution = host.tick(match["id"])
            if resolution is None:
                print("Error: match did not advance", file=sys.stderr)
                return 1
            tag = "steal " if resolution.is_steal else ""
            verdict = "correct" if resolution.is_correct else "wrong"
            print(f"  Team {state.active_team} {tag}{verdict}: {question.prompt[:60]}")
            state = resolution.state

        print("Final scores: " + ", ".join(
            f"team {team} = {state.score_of(team)}" for team in state.teams
        ))
        feedback = host.wait_for_feedback(match["id"], timeout=120) or FALLBACK_FEEDBACK
        print(f"Feedback: {feedback['summary']}")
        return 0
    finally:
        for drivers in players.values():
            for driver in drivers:
                driver.close()
        os.unlink(db_path)


def _scripted_answer(question: Question, correct: bool) -> Any:
    if correct:
        return question.correct_answer
    if question.kind is QuestionKind.SINGLE_CHOICE:
        return (int(question.correct_answer) + 1) % max(len(question.options), 2)
    if question.kind is QuestionKind.MULTI_CHOICE:
        return []
    return "no idea"
