from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, NamedTuple


class Standing(NamedTuple):
    """A player's aggregate over one window, before ranking."""
    player_id: int
    display_name: str
    score: int
    first_scored_at: datetime


@dataclass(frozen=True)
class LeaderboardEntry:
    rank: int
    player_id: int
    display_name: str
    score: int

    def to_dict(self):
        return {
            'rank': self.rank,
            'player_id': self.player_id,
            'display_name': self.display_name,
            'score': self.score,
        }


def standing_sort_key(standing: Standing):
    # Higher score first, then the earlier first qualifying event, then id.
    return (-standing.score, standing.first_scored_at, standing.player_id)


def order_standings(standings: Iterable[Standing]) -> List[Standing]:
    return sorted(standings, key=standing_sort_key)


def assign_ranks(ordered: List[Standing]) -> List[LeaderboardEntry]:
    """Standard competition ranking (1, 2, 2, 4) over an already-ordered list."""
    entries = []
    rank = 0
    previous_score = None
    for position, standing in enumerate(ordered, start=1):
        if standing.score != previous_score:
            rank = position
            previous_score = standing.score
        entries.append(LeaderboardEntry(
            rank=rank,
            player_id=standing.player_id,
            display_name=standing.display_name,
            score=standing.score,
        ))
    return entries


def rank_standings(standings: Iterable[Standing], limit: int) -> List[LeaderboardEntry]:
    """Order, rank and cap. Ranks are computed before the cap so a cut tie group keeps its rank."""
    if limit <= 0:
        return []
    return assign_ranks(order_standings(standings))[:limit]
