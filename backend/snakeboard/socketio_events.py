from flask_socketio import join_room, leave_room, emit
from flask import current_app
from snakeboard.services.errors import ServerFault
from snakeboard.services.leaderboard import get_leaderboard

LEADERBOARD_ROOM = 'leaderboard'


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def handle_subscribe_leaderboard(data=None):
    join_room(LEADERBOARD_ROOM)
    try:
        top5 = get_leaderboard().top()
    except ServerFault as exc:
        current_app.logger.error(f"[ws-subscribe] {type(exc).__name__}: {exc}")
        emit('error', {'message': 'leaderboard unavailable'})
        return
    emit('subscribed', {'room': LEADERBOARD_ROOM, 'top5': top5})


def handle_unsubscribe_leaderboard(data=None):
    leave_room(LEADERBOARD_ROOM)
    emit('unsubscribed', {'room': LEADERBOARD_ROOM})


def handle_ping(data=None):
    emit('pong', data or {})


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    from snakeboard import socketio

    handlers = {
        'connect': handle_connect,
        'subscribe_leaderboard': handle_subscribe_leaderboard,
        'unsubscribe_leaderboard': handle_unsubscribe_leaderboard,
        'ping': handle_ping,
    }
    namespaces = ['/ws', '/'] if testing else ['/ws']
    for namespace in namespaces:
        for event, handler in handlers.items():
            socketio.on_event(event, handler, namespace=namespace)
