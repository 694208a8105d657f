from datetime import datetime, timedelta
import random

from wordrank.services.leaderboard.ranking import Standing, rank_standings
from wordrank.services.leaderboard.windows import WindowKind, window_start

T0 = datetime(2026, 10, 14, 12, 0, 0)


def _standing(pid, score, minutes=0):
    return Standing(player_id=pid, display_name=f'p{pid}', score=score,
                    first_scored_at=T0 + timedelta(minutes=minutes))


def test_competition_ranking_shares_rank_and_skips():
    entries = rank_standings([_standing(1, 50), _standing(2, 50, 1), _standing(3, 30)], limit=10)
    assert [e.rank for e in entries] == [1, 1, 3]
    assert [e.score for e in entries] == [50, 50, 30]


def test_two_way_tie_at_second_place():
    entries = rank_standings(
        [_standing(1, 90), _standing(2, 40), _standing(3, 40, 5), _standing(4, 10)], limit=10
    )
    assert [e.rank for e in entries] == [1, 2, 2, 4]


def test_ties_ordered_by_earliest_event_then_id():
    standings = [
        _standing(9, 20, minutes=5),
        _standing(3, 20, minutes=10),
        _standing(7, 20, minutes=5),
        _standing(1, 25, minutes=30),
    ]
    entries = rank_standings(standings, limit=10)
    assert [e.player_id for e in entries] == [1, 7, 9, 3]


def test_order_is_independent_of_input_order():
    standings = [_standing(pid, score=pid % 4, minutes=pid % 3) for pid in range(1, 30)]
    expected = rank_standings(standings, limit=100)
    shuffled = list(standings)
    random.Random(7).shuffle(shuffled)
    assert rank_standings(shuffled, limit=100) == expected
    # strict total order: no two entries compare equal on the sort key
    keys = [(-e.score, e.player_id) for e in expected]
    assert len(set(keys)) == len(keys)


def test_limit_caps_result_length():
    standings = [_standing(pid, 100 - pid) for pid in range(1, 21)]
    assert len(rank_standings(standings, limit=10)) == 10
    assert len(rank_standings(standings[:3], limit=10)) == 3
    assert rank_standings(standings, limit=0) == []


def test_rank_survives_cut_through_tie_group():
    standings = [_standing(1, 10), _standing(2, 5, 1), _standing(3, 5, 2), _standing(4, 5, 3)]
    entries = rank_standings(standings, limit=3)
    assert [e.rank for e in entries] == [1, 2, 2]


def test_entry_serialization():
    entry = rank_standings([_standing(5, 12)], limit=1)[0]
    assert entry.to_dict() == {'rank': 1, 'player_id': 5, 'display_name': 'p5', 'score': 12}


def test_weekly_window_starts_monday_midnight():
    wednesday = datetime(2026, 10, 14, 15, 30, 12)
    assert window_start(WindowKind.WEEKLY, wednesday) == datetime(2026, 10, 12, 0, 0, 0)
    monday = datetime(2026, 10, 12, 0, 0, 0)
    assert window_start(WindowKind.WEEKLY, monday) == monday


def test_monthly_window_starts_first_of_month():
    assert window_start(WindowKind.MONTHLY, datetime(2026, 10, 19, 8, 0)) == datetime(2026, 10, 1)


def test_challenge_window_is_unbounded():
    assert window_start(WindowKind.CHALLENGE, T0) is None


def test_window_kind_parse():
    assert WindowKind.parse('Weekly') is WindowKind.WEEKLY
    assert WindowKind.parse('yearly') is None
    assert WindowKind.parse(None) is None
