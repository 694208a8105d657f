from typing import Optional

from flask import current_app

from wordrank import socketio, store
from wordrank.models import ScoreEvent
from wordrank.services.leaderboard.windows import WindowKind


def record_score(player_id: int, points: int, is_challenge: bool = False,
                 subject_id: Optional[int] = None) -> ScoreEvent:
    """Append a finished game's points and notify listeners.

    Weekly and monthly boards change on every event; the challenge board
    only when the event is challenge-flagged.
    """
    event = store.append_score_event(player_id, points, is_challenge=is_challenge, subject_id=subject_id)
    current_app.logger.info(
        f"[score] player={player_id} points={points} challenge={is_challenge} event={event.id}"
    )

    windows = [WindowKind.WEEKLY, WindowKind.MONTHLY]
    if is_challenge:
        windows.append(WindowKind.CHALLENGE)
    for window in windows:
        socketio.emit('leaderboard_update', {'window': window.value}, to=f"leaderboard:{window.value}", namespace='/ws')
    socketio.emit('score_recorded', event.to_dict(), to=f"player:{player_id}", namespace='/ws')
    return event
