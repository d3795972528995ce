from functools import wraps
from typing import Dict

from flask import current_app, request
from flask_socketio import emit, join_room, leave_room

from frenzy import coordinator, socketio
from frenzy.errors import GameError

# Each connection belongs to at most one room at a time
_sid_to_room: Dict[str, str] = {}


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _payload(data) -> dict:
    return data if isinstance(data, dict) else {}


def _room_id_from(data):
    room_id = _payload(data).get('roomId')
    if not isinstance(room_id, str) or not room_id.strip():
        return None
    return room_id.strip().lower()


def reports_game_errors(handler):
    """Send GameError messages back to the originating connection only."""
    @wraps(handler)
    def wrapper(*args, **kwargs):
        try:
            return handler(*args, **kwargs)
        except GameError as exc:
            current_app.logger.info(f"[error] sid={_get_sid()} event={handler.__name__} {type(exc).__name__}: {exc.message}")
            emit('error', exc.message)
    return wrapper


def _leave_previous_room(sid: str, previous_room_id, current_room_id: str) -> None:
    # Runs only after the new room has admitted the connection
    if previous_room_id and previous_room_id != current_room_id:
        leave_room(previous_room_id)
        coordinator.remove_player(sid, room_id=previous_room_id)


def handle_connect():
    current_app.logger.info(f"[connect] sid={_get_sid()}")


def handle_disconnect(reason=None):
    sid = _get_sid()
    current_app.logger.info(f"[disconnect] sid={sid} reason={reason}")
    _sid_to_room.pop(sid, None)
    coordinator.remove_player(sid)


@reports_game_errors
def handle_create_room(data):
    username = _payload(data).get('username')
    if not isinstance(username, str) or not username.strip():
        emit('error', 'username is required')
        return
    sid = _get_sid()
    previous_room_id = _sid_to_room.get(sid)

    def _admit(room_id: str) -> None:
        join_room(room_id)
        _sid_to_room[sid] = room_id
        emit('room-created', room_id)

    room = coordinator.create_room(sid, username.strip(), on_admit=_admit)
    _leave_previous_room(sid, previous_room_id, room.room_id)


@reports_game_errors
def handle_join_room(data):
    room_id = _room_id_from(data)
    username = _payload(data).get('username')
    if not room_id:
        emit('error', 'roomId is required')
        return
    if not isinstance(username, str) or not username.strip():
        emit('error', 'username is required')
        return
    sid = _get_sid()
    previous_room_id = _sid_to_room.get(sid)

    def _admit(joined_room_id: str) -> None:
        join_room(joined_room_id)
        _sid_to_room[sid] = joined_room_id

    coordinator.join_room(room_id, sid, username.strip(), on_admit=_admit)
    _leave_previous_room(sid, previous_room_id, room_id)


@reports_game_errors
def handle_start_game(data):
    room_id = _room_id_from(data)
    if not room_id:
        emit('error', 'roomId is required')
        return
    coordinator.start_game(room_id, _get_sid())


@reports_game_errors
def handle_submit_answer(data):
    room_id = _room_id_from(data)
    if not room_id:
        emit('error', 'roomId is required')
        return
    answer = _payload(data).get('answer')
    coordinator.submit_answer(room_id, _get_sid(), '' if answer is None else str(answer))


def handle_unexpected_error(exc):
    # A failure in one room must never take the gateway down
    current_app.logger.exception(f"[socket-error] sid={_get_sid()}: {exc}")
    emit('error', 'Internal server error.')


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register the Socket.IO event handlers on ``namespace``.

    Wire event names are kebab-case to stay compatible with existing clients.
    """
    _sid_to_room.clear()
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('create-room', handle_create_room, namespace=namespace)
    socketio.on_event('join-room', handle_join_room, namespace=namespace)
    socketio.on_event('start-game', handle_start_game, namespace=namespace)
    socketio.on_event('submit-answer', handle_submit_answer, namespace=namespace)
    socketio.on_error(namespace)(handle_unexpected_error)
