# Area: Driver
"""
team_challenge._driver.driver — Match driver
============================================

The glue between the pure turn engine and the shared store. One
MatchDriver runs per client; the client whose id created the match is
its host. Every client may join, pick a team and submit answers. Only
the host advances turns:

    tick() -> consensus reached?  -> resolve(agreed answer) -> commit
           -> countdown expired?  -> resolve(PASS)          -> commit

Commits carry the version the host read, so a turn computed from a
stale snapshot is dropped instead of overwriting a newer one. When a
match finishes, feedback is generated on a background worker and
attached to the finished match exactly once.
"""

from __future__ import annotations

import logging
import random
import string
import threading
import uuid
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import replace
from typing import Any, Callable, Dict, Optional, Sequence

from .._config import DEFAULT_CONFIG
from .._engine import (
    PASS,
    MatchPhase,
    MatchState,
    TurnResolution,
    check_consensus,
    resolve,
    seed_match,
    split_question_pool,
    state_from_row,
    state_to_row,
    submit_answer,
)
from .._shared.logging_config import log_engine_error
from .._store.change_feed import Change
from .._store.store import MatchStore
from ..errors import (
    EmptyTeamError,
    InvalidTransitionError,
    MatchNotFoundError,
    NotHostError,
    QuestionDataError,
    StaleMatchError,
)
from .countdown import QuestionCountdown
from .feedback import FeedbackGenerator, build_feedback_context, generate_feedback_safe
from .question_source import QuestionSource
from .view import ClientView, turn_key_of

logger = logging.getLogger("team_challenge.driver")

CODE_ALPHABET = string.ascii_uppercase + string.digits
CODE_LENGTH = 6
MAX_CODE_ATTEMPTS = 20

# Columns a turn transition rewrites; decks are written once at start
TURN_COLUMNS = (
    "room_status",
    "current_turn_team_id",
    "current_question_index",
    "current_question",
    "current_answers",
    "team_scores",
)


class MatchDriver:
    """
    Per-client driver for team matches.

    Attributes:
        store: Shared MatchStore
        client_id: Id of the user this driver acts for
        question_source: Where start_match() draws its pool from
        feedback_generator: Post-match debrief generator (None -> fallback)
        countdown: Local per-question countdowns
        views: match id -> ClientView for attached matches
    """

    def __init__(
        self,
        store: MatchStore,
        client_id: str,
        question_source: Optional[QuestionSource] = None,
        feedback_generator: Optional[FeedbackGenerator] = None,
        config: Optional[Dict[str, Any]] = None,
        executor: Optional[Executor] = None,
    ):
        self.store = store
        self.client_id = client_id
        self.question_source = question_source
        self.feedback_generator = feedback_generator
        self.config: Dict[str, Any] = {**DEFAULT_CONFIG, **(config or {})}
        self.countdown = QuestionCountdown()
        self.views: Dict[str, ClientView] = {}

        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="team-challenge-feedback"
        )
        self._feedback_jobs: Dict[str, Future] = {}
        self._unsubscribers: Dict[str, Callable[[], None]] = {}
        # Guards views and feedback jobs; changes may be published from the worker
        self._lock = threading.RLock()

    # ── Lobby ──────────────────────────────────────────────

    def create_match(
        self,
        name: str,
        teams: Optional[Sequence[int]] = None,
        questions_per_team: Optional[int] = None,
        time_per_question: Optional[int] = None,
        display_name: str = "",
    ) -> Dict[str, Any]:
        """
        Create a match hosted by this client and join its first team.

        Returns:
            The stored match row

        Raises:
            ValueError: If the team list or limits are invalid
        """
        teams = list(teams if teams is not None else self.config["teams"])
        qpt = int(questions_per_team or self.config["questions_per_team"])
        tpq = int(time_per_question or self.config["time_per_question"])
        if len(teams) < 2 or len(set(teams)) != len(teams):
            raise ValueError(f"Need at least two distinct teams, got {teams}")
        if qpt < 1 or tpq < 1:
            raise ValueError("questions_per_team and time_per_question must be positive")

        match_id = str(uuid.uuid4())
        code = self._new_code()
        row = self.store.create_match(match_id, name, code, self.client_id, teams, qpt, tpq)
        self.store.add_participant(match_id, self.client_id, display_name, teams[0])
        logger.info(f"[{match_id}] Created match '{name}' (code {code}, teams {teams})")
        return row

    def join_match(
        self,
        code: str,
        display_name: str = "",
        team_number: Optional[int] = None,
    ) -> Dict[str, Any]:
        """
        Join an active match by its code. Joining twice is a no-op.

        Raises:
            MatchNotFoundError: If no active match has this code
            ValueError: If team_number is not one of the match's teams
        """
        row = self.store.get_by_code(code)
        if row is None:
            raise MatchNotFoundError(code)
        self._check_team(row, team_number)
        if self.store.add_participant(row["id"], self.client_id, display_name, team_number):
            logger.info(f"[{row['id']}] {self.client_id} joined (team {team_number})")
        return row

    def leave_match(self, match_id: str) -> bool:
        """Leave a match; any pending answer of this client is withdrawn."""
        self.detach(match_id)
        row = self.store.get_match(match_id)
        if row and self.client_id in (row.get("current_answers") or {}):
            self.store.drop_answer(match_id, self.client_id)
        return self.store.remove_participant(match_id, self.client_id)

    def assign_team(self, match_id: str, user_id: str, team_number: Optional[int]) -> bool:
        """
        Move a participant to a team (None = unassigned).

        Anyone may move themselves; the host may move anyone. Teams are
        fixed once the match has started.

        Raises:
            NotHostError: If a non-host moves someone else
            InvalidTransitionError: If the match is not in the lobby
        """
        row = self._require(match_id)
        if user_id != self.client_id and not self._is_host(row):
            raise NotHostError(self.client_id, "assign other participants")
        if row["room_status"] != MatchPhase.LOBBY.value:
            raise InvalidTransitionError(phase=row["room_status"], event="ASSIGN_TEAM")
        self._check_team(row, team_number)
        return self.store.assign_team(match_id, user_id, team_number)

    def delete_match(self, match_id: str) -> bool:
        """
        Delete a match. Attached clients see the deletion and close.

        Raises:
            NotHostError: If this client did not create the match
        """
        row = self._require(match_id)
        if not self._is_host(row):
            raise NotHostError(self.client_id, "delete the match")
        self.countdown.cancel(match_id)
        deleted = self.store.delete_match(match_id, self.client_id)
        if deleted:
            logger.info(f"[{match_id}] Match deleted")
        return deleted

    # ── Subscription ───────────────────────────────────────

    def attach(self, match_id: str) -> ClientView:
        """Subscribe to a match and keep a derived view of it."""
        with self._lock:
            if match_id in self.views:
                return self.views[match_id]
            view = ClientView(self.client_id, self._require(match_id))
            self.views[match_id] = view
            self._unsubscribers[match_id] = self.store.subscribe(match_id, self._on_change)
            self._sync_countdown(match_id, view.row)
            return view

    def detach(self, match_id: str) -> None:
        with self._lock:
            unsubscribe = self._unsubscribers.pop(match_id, None)
            if unsubscribe:
                unsubscribe()
            self.views.pop(match_id, None)
            self.countdown.cancel(match_id)

    def _on_change(self, change: Change) -> None:
        with self._lock:
            view = self.views.get(change.match_id)
            if view is None or not view.apply(change):
                return
            if view.closed:
                self.countdown.cancel(change.match_id)
            else:
                self._sync_countdown(change.match_id, view.row)

    def _sync_countdown(self, match_id: str, row: Optional[Dict[str, Any]]) -> None:
        """Restart the countdown when the row shows a new turn."""
        with self._lock:
            if not row or row.get("room_status") != MatchPhase.IN_PROGRESS.value:
                self.countdown.cancel(match_id)
                return
            key = turn_key_of(row)
            if self.countdown.turn_key(match_id) != key:
                self.countdown.start(match_id, key, int(row.get("time_per_question") or 60))

    # ── Play ───────────────────────────────────────────────

    def get_state(self, match_id: str) -> MatchState:
        """
        Current snapshot of a match.

        Raises:
            MatchNotFoundError: If the match does not exist
            QuestionDataError: If a stored question is malformed
        """
        return state_from_row(self._require(match_id))

    def start_match(self, match_id: str) -> MatchState:
        """
        Draw the question pool, deal the decks and put the first question
        on the table.

        Raises:
            NotHostError: If this client is not the host
            InvalidTransitionError: If the match already started
            EmptyTeamError: If a team has no members
            QuestionDataError: If the pool is too small or malformed
            StaleMatchError: If the match changed while starting
            ValueError: If no question source is configured
        """
        row = self._require(match_id)
        if not self._is_host(row):
            raise NotHostError(self.client_id, "start the match")
        state = state_from_row(row)
        if state.phase is not MatchPhase.LOBBY:
            raise InvalidTransitionError(phase=state.phase.value, event="START")

        empty = [team for team in state.teams if not self.store.roster(match_id, team)]
        if empty:
            raise EmptyTeamError(match_id, empty)
        if self.question_source is None:
            raise ValueError("No question source configured")

        pool = self.question_source.fetch(len(state.teams) * state.questions_per_team)
        decks = split_question_pool(pool, state.teams, state.questions_per_team)
        started = seed_match(state, decks)

        fields = {column: value for column, value in state_to_row(started).items()
                  if column in TURN_COLUMNS or column == "team_questions"}
        if not self.store.update_match(match_id, fields, expected_version=state.version):
            raise StaleMatchError(match_id, state.version)

        started = replace(started, version=state.version + 1)
        self._sync_countdown(match_id, self.store.get_match(match_id))
        logger.info(
            f"[{match_id}] Match started: {len(pool)} questions, "
            f"team {started.active_team} first"
        )
        return started

    def submit_answer(self, match_id: str, answer: Any) -> Dict[str, Any]:
        """
        Record this client's answer for the question on the table.

        Resubmitting overwrites the previous answer.

        Returns:
            The updated match row

        Raises:
            InvalidTransitionError: If the match is not in progress
            NotOnActiveTeamError: If this client is not on the active team
            StaleMatchError: If the turn moved on before the answer landed
        """
        if answer is PASS:
            raise ValueError("PASS is reserved for timeouts")
        row = self._require(match_id)
        state = state_from_row(row)
        roster = self.store.roster(match_id, state.active_team)
        submit_answer(state, roster, self.client_id, answer)

        if isinstance(answer, (tuple, set, frozenset)):
            answer = sorted(answer) if isinstance(answer, (set, frozenset)) else list(answer)
        row = self.store.merge_answer(
            match_id, self.client_id, answer, expected_turn=turn_key_of(row),
        )
        if row is None:
            raise MatchNotFoundError(match_id)
        logger.debug(f"[{match_id}] {self.client_id} answered {answer!r}")
        return row

    def tick(self, match_id: str) -> Optional[TurnResolution]:
        """
        Host step: advance the match if the active team agreed or time ran out.

        Non-hosts, finished matches and unchanged turns return None.
        """
        row = self.store.get_match(match_id)
        if row is None or not self._is_host(row):
            return None
        if row["room_status"] != MatchPhase.IN_PROGRESS.value:
            return None

        try:
            state = state_from_row(row)
        except QuestionDataError as e:
            log_engine_error(e, match_id=match_id)
            return None

        self._sync_countdown(match_id, row)
        roster = self.store.roster(match_id, state.active_team)
        question = state.active_question.question if state.active_question else None
        consensus = check_consensus(roster, state.answers, question)
        if consensus.reached:
            logger.info(f"[{match_id}] Team {state.active_team} agreed on {consensus.value!r}")
            return self._advance(state, consensus.value)

        if self.countdown.is_expired(match_id, turn_key_of(row)):
            logger.info(f"[{match_id}] Time up for team {state.active_team}")
            return self._advance(state, PASS)
        return None

    def advance(self, match_id: str, answer: Any) -> Optional[TurnResolution]:
        """
        Resolve the current turn with ``answer`` (or PASS) and commit it.

        Returns:
            The resolution, or None when nothing was committed

        Raises:
            NotHostError: If this client is not the host
        """
        row = self._require(match_id)
        if not self._is_host(row):
            raise NotHostError(self.client_id, "advance the match")
        try:
            state = state_from_row(row)
        except QuestionDataError as e:
            log_engine_error(e, match_id=match_id)
            return None
        return self._advance(state, answer)

    def _advance(self, state: MatchState, answer: Any) -> Optional[TurnResolution]:
        match_id = state.match_id
        try:
            resolution = resolve(state, answer)
        except QuestionDataError as e:
            log_engine_error(e, match_id=match_id)
            return None
        except InvalidTransitionError as e:
            logger.warning(f"[{match_id}] Turn not resolved: {e}")
            return None

        row = state_to_row(resolution.state)
        fields = {column: row[column] for column in TURN_COLUMNS}
        if resolution.finished:
            fields["is_active"] = 0

        if not self.store.update_match(match_id, fields, expected_version=state.version):
            logger.warning(
                f"[{match_id}] Match changed since version {state.version}, "
                "turn dropped"
            )
            return None

        next_state = resolution.state
        logger.info(
            f"[{match_id}] {resolution.outcome.value}: team {state.active_team} -> "
            f"team {next_state.active_team}, index {next_state.question_index}, "
            f"scores {next_state.scores}"
        )

        if resolution.finished:
            self.countdown.cancel(match_id)
            logger.info(f"[{match_id}] Match finished, final scores {next_state.scores}")
            self._request_feedback(next_state)
        else:
            self._sync_countdown(match_id, self.store.get_match(match_id))
        return resolution

    # ── Feedback ───────────────────────────────────────────

    def _request_feedback(self, state: MatchState) -> Future:
        ctx = build_feedback_context(state)
        with self._lock:
            future = self._executor.submit(self._generate_and_attach, ctx)
            self._feedback_jobs[state.match_id] = future
        future.add_done_callback(lambda done: self._forget_job(state.match_id, done))
        return future

    def _forget_job(self, match_id: str, future: Future) -> None:
        with self._lock:
            if self._feedback_jobs.get(match_id) is future:
                del self._feedback_jobs[match_id]

    def _generate_and_attach(self, ctx) -> Dict[str, Any]:
        feedback = generate_feedback_safe(self.feedback_generator, ctx)
        if self.store.attach_feedback(ctx["match_id"], feedback):
            logger.info(f"[{ctx['match_id']}] Feedback attached")
        else:
            logger.info(f"[{ctx['match_id']}] Feedback already present, result discarded")
        return feedback

    def retry_feedback(self, match_id: str) -> Optional[Future]:
        """
        Request feedback again for a finished match that has none.

        Returns:
            The background job, or None if there is nothing to do
        """
        row = self._require(match_id)
        if not self._is_host(row):
            raise NotHostError(self.client_id, "request feedback")
        if row["room_status"] != MatchPhase.FINISHED.value or row.get("feedback"):
            return None
        with self._lock:
            pending = self._feedback_jobs.get(match_id)
        if pending is not None and not pending.done():
            return pending
        return self._request_feedback(state_from_row(row))

    def wait_for_feedback(
        self, match_id: str, timeout: Optional[float] = None
    ) -> Optional[Dict[str, Any]]:
        """
        Block until this driver's feedback job for a match completes.

        Returns:
            The generated feedback, or the stored feedback once the job
            has already finished; None when neither exists
        """
        with self._lock:
            future = self._feedback_jobs.get(match_id)
        if future is not None:
            return future.result(timeout=timeout)
        row = self.store.get_match(match_id)
        return row.get("feedback") if row else None

    def close(self) -> None:
        """Detach from every match and stop the feedback worker."""
        for match_id in list(self._unsubscribers):
            self.detach(match_id)
        if self._owns_executor:
            self._executor.shutdown(wait=True)

    # ── Helpers ────────────────────────────────────────────

    def _require(self, match_id: str) -> Dict[str, Any]:
        row = self.store.get_match(match_id)
        if row is None:
            raise MatchNotFoundError(match_id)
        return row

    def _is_host(self, row: Dict[str, Any]) -> bool:
        return row.get("created_by") == self.client_id

    @staticmethod
    def _check_team(row: Dict[str, Any], team_number: Optional[int]) -> None:
        if team_number is not None and team_number not in (row.get("teams") or []):
            raise ValueError(f"Team {team_number} is not part of this match")

    def _new_code(self) -> str:
        for _ in range(MAX_CODE_ATTEMPTS):
            code = "".join(random.choices(CODE_ALPHABET, k=CODE_LENGTH))
            if not self.store.code_exists(code):
                return code
        raise RuntimeError("Could not allocate a unique match code")
