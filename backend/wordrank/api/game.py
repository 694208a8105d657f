from flask import Blueprint, current_app, jsonify

from wordrank import store
from wordrank.api import MAX_DB_INTEGER, int_arg, json_body
from wordrank.errors import ValidationFailure
from wordrank.services.auth.guard import player_required
from wordrank.services.games.scoring import record_score
from wordrank.services.leaderboard.aggregator import player_standing
from wordrank.services.leaderboard.windows import WindowKind

game = Blueprint('game', __name__)


@game.route('/game/complete', methods=['POST'])
@player_required
def complete_game(principal):
    data = json_body()
    if data.get('score') is None:
        raise ValidationFailure('Missing required fields: score')
    points = int_arg(data.get('score'), 'score', minimum=0,
                     maximum=int(current_app.config.get('MAX_SCORE_POINTS', MAX_DB_INTEGER)))
    subject_id = int_arg(data.get('subject_id'), 'subject_id', minimum=1, maximum=MAX_DB_INTEGER)
    is_challenge = data.get('is_challenge', False)
    if not isinstance(is_challenge, bool):
        raise ValidationFailure('is_challenge must be a boolean')

    event = record_score(principal.id, points, is_challenge=is_challenge, subject_id=subject_id)
    return jsonify({'success': True, 'final_score': points, 'event': event.to_dict()}), 201


@game.route('/player/stats', methods=['GET'])
@player_required
def player_stats(principal):
    player = store.find_player_by_id(principal.id)
    recent = store.recent_score_events(principal.id, limit=10)
    standings = {}
    for window in WindowKind:
        entry = player_standing(window, principal.id)
        standings[window.value] = entry.to_dict() if entry else None
    return jsonify({
        'stats': {
            'total_score': player.total_score if player else 0,
            'games_played': player.games_played if player else 0,
        },
        'standings': standings,
        'recent_games': [e.to_dict() for e in recent],
    })
