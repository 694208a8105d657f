from datetime import datetime
from typing import List, NamedTuple, Optional

from flask import current_app

from wordrank import store
from wordrank.models import utcnow
from .ranking import LeaderboardEntry, assign_ranks, order_standings, rank_standings
from .windows import WindowKind, window_start


class Leaderboard(NamedTuple):
    window: WindowKind
    since: Optional[datetime]
    entries: List[LeaderboardEntry]

    def to_dict(self):
        return {
            'window': self.window.value,
            'since': self.since.isoformat() if self.since else None,
            'entries': [e.to_dict() for e in self.entries],
        }


def build_leaderboard(window: WindowKind, limit: int, now: Optional[datetime] = None) -> Leaderboard:
    """Rank every player with at least one qualifying event in ``window``.

    ``now`` defaults to the current server time; the window bounds are taken
    from it on each call. Store failures propagate as ``DataUnavailable``.
    """
    now = now or utcnow()
    since = window_start(window, now)
    standings = store.sum_scores_for_window(window, since)
    entries = rank_standings(standings, limit)
    current_app.logger.info(
        f"[leaderboard] window={window.value} since={since} qualifying={len(standings)} returned={len(entries)}"
    )
    return Leaderboard(window=window, since=since, entries=entries)


def player_standing(window: WindowKind, player_id: int, now: Optional[datetime] = None) -> Optional[LeaderboardEntry]:
    now = now or utcnow()
    standings = store.sum_scores_for_window(window, window_start(window, now))
    for entry in assign_ranks(order_standings(standings)):
        if entry.player_id == player_id:
            return entry
    return None
