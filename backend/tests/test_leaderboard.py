from datetime import datetime, timedelta
from unittest import mock

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Query

from wordrank import db
from wordrank.errors import DataUnavailable
from wordrank.models import ScoreEvent, utcnow
from wordrank.services.leaderboard.aggregator import build_leaderboard, player_standing
from wordrank.services.leaderboard.windows import WindowKind, window_start

NOW = datetime(2026, 10, 14, 12, 0, 0)  # a Wednesday
WEEK_START = datetime(2026, 10, 12, 0, 0, 0)


def _event(player, points, at, is_challenge=False):
    db.session.add(ScoreEvent(player_id=player.id, points=points, created_at=at, is_challenge=is_challenge))
    db.session.commit()


def test_events_in_week_count_toward_weekly_and_challenge(make_player):
    p = make_player()
    _event(p, 10, NOW - timedelta(hours=2), is_challenge=True)
    _event(p, 20, NOW - timedelta(hours=1), is_challenge=True)

    weekly = build_leaderboard(WindowKind.WEEKLY, 10, now=NOW)
    challenge = build_leaderboard(WindowKind.CHALLENGE, 10, now=NOW)
    assert [(e.player_id, e.score) for e in weekly.entries] == [(p.id, 30)]
    assert [(e.player_id, e.score) for e in challenge.entries] == [(p.id, 30)]


def test_event_just_before_week_start_is_excluded_from_weekly(make_player):
    p = make_player()
    _event(p, 15, WEEK_START - timedelta(seconds=1), is_challenge=True)

    assert build_leaderboard(WindowKind.WEEKLY, 10, now=NOW).entries == []
    assert [e.score for e in build_leaderboard(WindowKind.CHALLENGE, 10, now=NOW).entries] == [15]
    # still inside the calendar month
    assert [e.score for e in build_leaderboard(WindowKind.MONTHLY, 10, now=NOW).entries] == [15]


def test_event_at_week_start_is_included(make_player):
    p = make_player()
    _event(p, 5, WEEK_START)
    assert [e.score for e in build_leaderboard(WindowKind.WEEKLY, 10, now=NOW).entries] == [5]


def test_challenge_only_counts_flagged_events(make_player):
    p = make_player()
    _event(p, 40, NOW - timedelta(minutes=5), is_challenge=False)
    _event(p, 7, NOW - timedelta(minutes=4), is_challenge=True)
    assert [e.score for e in build_leaderboard(WindowKind.CHALLENGE, 10, now=NOW).entries] == [7]
    assert [e.score for e in build_leaderboard(WindowKind.WEEKLY, 10, now=NOW).entries] == [47]


def test_players_without_qualifying_events_are_excluded(make_player):
    a = make_player('a@example.com', display_name='A')
    make_player('b@example.com', display_name='B')
    _event(a, 3, NOW - timedelta(minutes=1))
    entries = build_leaderboard(WindowKind.WEEKLY, 10, now=NOW).entries
    assert [e.player_id for e in entries] == [a.id]


def test_tie_break_by_earliest_event_then_id(make_player):
    a = make_player('a@example.com', display_name='A')
    b = make_player('b@example.com', display_name='B')
    c = make_player('c@example.com', display_name='C')
    _event(c, 50, NOW - timedelta(hours=3))
    _event(b, 50, NOW - timedelta(hours=2))
    _event(a, 30, NOW - timedelta(hours=4))

    entries = build_leaderboard(WindowKind.WEEKLY, 10, now=NOW).entries
    assert [e.player_id for e in entries] == [c.id, b.id, a.id]
    assert [e.rank for e in entries] == [1, 1, 3]


def test_repeated_reads_are_identical(make_player):
    players = [make_player(f'p{i}@example.com', display_name=f'P{i}') for i in range(5)]
    for i, p in enumerate(players):
        _event(p, (i % 2) * 10, NOW - timedelta(minutes=10))
    first = build_leaderboard(WindowKind.WEEKLY, 10, now=NOW).to_dict()
    second = build_leaderboard(WindowKind.WEEKLY, 10, now=NOW).to_dict()
    assert first == second


def test_inactive_players_are_left_off(make_player):
    a = make_player('a@example.com', display_name='A')
    b = make_player('b@example.com', display_name='B', is_active=False)
    _event(a, 1, NOW - timedelta(minutes=1))
    _event(b, 100, NOW - timedelta(minutes=1))
    assert [e.player_id for e in build_leaderboard(WindowKind.WEEKLY, 10, now=NOW).entries] == [a.id]


def test_player_standing(make_player):
    a = make_player('a@example.com', display_name='A')
    b = make_player('b@example.com', display_name='B')
    _event(a, 10, NOW - timedelta(minutes=2))
    _event(b, 20, NOW - timedelta(minutes=1))
    assert player_standing(WindowKind.WEEKLY, a.id, now=NOW).rank == 2
    assert player_standing(WindowKind.CHALLENGE, a.id, now=NOW) is None


def test_store_failure_surfaces_as_data_unavailable(flask_app):
    with mock.patch.object(Query, 'all', side_effect=OperationalError('SELECT', {}, Exception('down'))):
        with pytest.raises(DataUnavailable):
            build_leaderboard(WindowKind.WEEKLY, 10, now=NOW)


# ---- HTTP ----

def test_leaderboard_endpoint_shape(client, make_player):
    p = make_player()
    _event(p, 12, utcnow(), is_challenge=True)
    for window in ('weekly', 'monthly', 'challenge'):
        res = client.get(f'/api/leaderboard/{window}')
        assert res.status_code == 200
        body = res.get_json()
        assert body['window'] == window
        assert body['entries'] == [{'rank': 1, 'player_id': p.id, 'display_name': 'Alice', 'score': 12}]
    assert client.get('/api/leaderboard/challenge').get_json()['since'] is None
    expected_since = window_start(WindowKind.MONTHLY, utcnow()).isoformat()
    assert client.get('/api/leaderboard/monthly').get_json()['since'] == expected_since


def test_leaderboard_endpoint_respects_limit(client, make_player):
    for i in range(5):
        p = make_player(f'p{i}@example.com', display_name=f'P{i}')
        _event(p, 10 + i, utcnow())
    body = client.get('/api/leaderboard/weekly?limit=2').get_json()
    assert [e['score'] for e in body['entries']] == [14, 13]


def test_leaderboard_endpoint_rejects_bad_input(client):
    assert client.get('/api/leaderboard/yearly').status_code == 404
    res = client.get('/api/leaderboard/weekly?limit=abc')
    assert res.status_code == 400
    assert 'error' in res.get_json()
    assert client.get('/api/leaderboard/weekly?limit=0').status_code == 400
    assert client.get('/api/leaderboard/weekly?limit=100000').status_code == 400


def test_leaderboard_endpoint_hides_store_diagnostics(client):
    with mock.patch.object(Query, 'all', side_effect=OperationalError('SELECT secret_sql', {}, Exception('down'))):
        res = client.get('/api/leaderboard/weekly')
    assert res.status_code == 500
    assert res.get_json() == {'error': 'Data temporarily unavailable'}
