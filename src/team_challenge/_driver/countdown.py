# Area: Driver
"""
team_challenge._driver.countdown — Per-question countdown
=========================================================

Tracks the local countdown for the question currently on the table in
each match. A countdown is tied to a turn key (phase, active team,
question index, question id) so a stale countdown never fires for a
question that has already moved on.

Change notifications may arrive on the feedback worker thread, so every
access goes through one lock.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Dict, Hashable, Optional

logger = logging.getLogger("team_challenge.countdown")


class QuestionCountdown:
    """
    Countdown deadlines keyed by match id.

    Each entry stores the turn key it was started for and the monotonic
    timestamp at which it expires.
    """

    def __init__(self) -> None:
        self._deadlines: Dict[str, dict] = {}
        self._lock = threading.Lock()

    def start(self, match_id: str, turn_key: Hashable, seconds: float) -> None:
        """Start (or restart) the countdown for a match."""
        expires_at = time.monotonic() + seconds
        with self._lock:
            self._deadlines[match_id] = {
                "turn_key": turn_key,
                "expires_at": expires_at,
            }
        logger.debug("Countdown set: %s %s (%.1fs)", match_id, turn_key, seconds)

    def turn_key(self, match_id: str) -> Optional[Hashable]:
        with self._lock:
            entry = self._deadlines.get(match_id)
        return entry["turn_key"] if entry else None

    def remaining(self, match_id: str) -> Optional[float]:
        """Seconds left, 0 when expired, None when no countdown is running."""
        with self._lock:
            entry = self._deadlines.get(match_id)
        if entry is None:
            return None
        return max(0.0, entry["expires_at"] - time.monotonic())

    def is_expired(self, match_id: str, turn_key: Hashable) -> bool:
        """True if the countdown for ``turn_key`` in this match has run out."""
        with self._lock:
            entry = self._deadlines.get(match_id)
        if entry is None or entry["turn_key"] != turn_key:
            return False
        return time.monotonic() >= entry["expires_at"]

    def cancel(self, match_id: str) -> None:
        """Cancel a match's countdown. No-op if not found."""
        with self._lock:
            if self._deadlines.pop(match_id, None) is not None:
                logger.debug("Countdown cancelled for %s", match_id)

    def clear(self) -> None:
        """Remove all countdowns."""
        with self._lock:
            self._deadlines.clear()
