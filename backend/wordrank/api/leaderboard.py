from flask import Blueprint, current_app, jsonify, request

from wordrank.api import int_arg
from wordrank.errors import NotFound
from wordrank.services.leaderboard.aggregator import build_leaderboard
from wordrank.services.leaderboard.windows import WindowKind

leaderboard = Blueprint('leaderboard', __name__)


def _default_limit(window: WindowKind) -> int:
    cfg = current_app.config
    if window is WindowKind.CHALLENGE:
        return int(cfg.get('CHALLENGE_DEFAULT_LIMIT', 1000))
    return int(cfg.get('LEADERBOARD_DEFAULT_LIMIT', 10))


@leaderboard.route('/<string:window_name>', methods=['GET'])
def get_leaderboard(window_name):
    window = WindowKind.parse(window_name)
    if window is None:
        raise NotFound('Unknown leaderboard')
    limit = int_arg(
        request.args.get('limit'), 'limit',
        default=_default_limit(window),
        minimum=1,
        maximum=int(current_app.config.get('LEADERBOARD_MAX_LIMIT', 1000)),
    )
    board = build_leaderboard(window, limit)
    return jsonify(board.to_dict())
