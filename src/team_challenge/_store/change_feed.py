# Area: Store
"""
team_challenge._store.change_feed — Match change notifications
==============================================================

In-process fan-out of row changes, keyed by match id. Subscribers get
every INSERT/UPDATE/DELETE on the match row and on its participants,
in the order the writes were committed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger("team_challenge.store.feed")


@dataclass(frozen=True)
class Change:
    """One committed change."""
    table: str                      # "team_matches" or "match_participants"
    event: str                      # "INSERT", "UPDATE" or "DELETE"
    match_id: str
    row: Optional[Dict[str, Any]]   # New row; None after a match DELETE


ChangeHandler = Callable[[Change], None]


class ChangeFeed:
    """Subscribe-to-changes registry keyed by match id."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, List[ChangeHandler]] = {}

    def subscribe(self, match_id: str, handler: ChangeHandler) -> Callable[[], None]:
        """
        Register ``handler`` for changes to ``match_id``.

        Returns:
            A function that removes the subscription
        """
        self._subscribers.setdefault(match_id, []).append(handler)
        logger.debug(f"[{match_id}] Subscribed {handler!r}")

        def unsubscribe() -> None:
            handlers = self._subscribers.get(match_id, [])
            if handler in handlers:
                handlers.remove(handler)
            if not handlers:
                self._subscribers.pop(match_id, None)

        return unsubscribe

    def publish(self, change: Change) -> None:
        """Deliver a change to every subscriber of its match."""
        for handler in list(self._subscribers.get(change.match_id, [])):
            try:
                handler(change)
            except Exception:
                logger.error(
                    f"[{change.match_id}] Subscriber failed on {change.table} {change.event}",
                    exc_info=True,
                )

    def subscriber_count(self, match_id: str) -> int:
        return len(self._subscribers.get(match_id, []))
