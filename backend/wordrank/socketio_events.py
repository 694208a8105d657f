from flask import current_app
from flask_login import current_user
from flask_socketio import emit, join_room, leave_room

from wordrank import socketio
from wordrank.services.auth.principals import PrincipalKind
from wordrank.services.leaderboard.windows import WindowKind


def handle_connect():
    # The handshake carries the browser's cookies, so Flask-Login's request
    # loader can resolve the principal here.
    principal = current_user
    if principal.kind is PrincipalKind.PLAYER:
        join_room(f"player:{principal.id}")
    current_app.logger.info(f"[ws-connect] principal={principal.kind.value}")
    emit('connected', {'message': 'Connected to /ws', 'principal': principal.kind.value})


def handle_join_leaderboard(data):
    window = WindowKind.parse((data or {}).get('window'))
    if window is None:
        emit('error', {'message': 'window must be weekly, monthly or challenge'})
        return
    room = f"leaderboard:{window.value}"
    join_room(room)
    emit('joined', {'room': room})


def handle_leave_leaderboard(data):
    window = WindowKind.parse((data or {}).get('window'))
    if window is None:
        emit('error', {'message': 'window must be weekly, monthly or challenge'})
        return
    room = f"leaderboard:{window.value}"
    leave_room(room)
    emit('left', {'room': room})


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    handlers = {
        'connect': handle_connect,
        'join_leaderboard': handle_join_leaderboard,
        'leave_leaderboard': handle_leave_leaderboard,
        'ping': handle_ping,
    }
    namespaces = ['/ws', '/'] if testing else ['/ws']
    for namespace in namespaces:
        for event, handler in handlers.items():
            socketio.on_event(event, handler, namespace=namespace)
