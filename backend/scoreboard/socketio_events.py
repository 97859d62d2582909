from flask_socketio import join_room, emit
from scoreboard import socketio
from scoreboard.runtime import NAMESPACE, SCOREBOARD_ROOM, get_board


def handle_connect():
    # Every display shares one board, so every socket joins the same room
    join_room(SCOREBOARD_ROOM)
    emit('connected', {'message': f'Connected to {NAMESPACE}', 'room': SCOREBOARD_ROOM})
    emit('state_update', get_board().state.to_dict())


def handle_visibility_change(data):
    visible = (data or {}).get('visible')
    if not isinstance(visible, bool):
        emit('error', {'message': 'visible must be true or false'})
        return
    scheduler = get_board().scheduler
    scheduler.on_visibility_change(visible)
    emit('visibility_ack', {'visible': visible, 'reconciling': scheduler.is_reconciling})


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers() -> None:
    """Register Socket.IO event handlers on the '/ws' namespace."""
    socketio.on_event('connect', handle_connect, namespace=NAMESPACE)
    socketio.on_event('visibility_change', handle_visibility_change, namespace=NAMESPACE)
    socketio.on_event('ping', handle_ping, namespace=NAMESPACE)
