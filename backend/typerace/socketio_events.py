from functools import wraps

from flask import current_app, request
from flask_socketio import emit, join_room, leave_room

from typerace import socketio
from typerace.services.race import InvalidPayload, RaceError, channel_for


def _get_sid() -> str:
    # request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _store():
    return current_app.extensions['race_store']


def _room_id(data) -> str:
    room_id = data.get('roomId') if isinstance(data, dict) else None
    if not isinstance(room_id, str) or not room_id:
        raise InvalidPayload('roomId is required')
    return room_id


def _race_event(event):
    """Run a race handler; a rejected action is logged and otherwise dropped."""
    def decorator(handler):
        @wraps(handler)
        def wrapper(data=None):
            try:
                handler(data if isinstance(data, dict) else {})
            except RaceError as exc:
                room_id = data.get('roomId') if isinstance(data, dict) else None
                current_app.logger.info(
                    f"[rejected] event={event} sid={_get_sid()} room={room_id} reason={exc.reason} detail={exc}"
                )
                if current_app.config.get('EMIT_REJECTIONS'):
                    emit('action_rejected', {'event': event, 'reason': exc.reason, 'roomId': room_id})
        return wrapper
    return decorator


def handle_connect(auth=None):
    current_app.logger.info(f"[connect] sid={_get_sid()}")
    emit('connected', {'sid': _get_sid()})


def handle_disconnect(reason=None):
    sid = _get_sid()
    current_app.logger.info(f"[disconnect] sid={sid} reason={reason}")
    try:
        _store().leave(sid)
    except Exception:
        # Cleanup problems must never reach the transport
        current_app.logger.exception(f"[disconnect-cleanup-failed] sid={sid}")


@_race_event('join_room')
def handle_join_room(data):
    room_id = _room_id(data)
    name = data.get('name')
    # Join the channel first so the joiner receives its own snapshot
    join_room(channel_for(room_id))
    _store().join(room_id, _get_sid(), '' if name is None else str(name))


@_race_event('set_text')
def handle_set_text(data):
    _store().set_text(_room_id(data), data.get('text'), by=_get_sid())


@_race_event('start_game')
def handle_start_game(data):
    _store().start(_room_id(data), by=_get_sid())


@_race_event('update_progress')
def handle_update_progress(data):
    _store().update_progress(
        _room_id(data),
        _get_sid(),
        data.get('progress'),
        data.get('wpm'),
        data.get('accuracy'),
        data.get('isFinished'),
    )


@_race_event('leave_room')
def handle_leave_room(data):
    room_id = _room_id(data)
    leave_room(channel_for(room_id))
    _store().leave(_get_sid(), room_id)


def handle_ping(data=None):
    emit('pong', data or {})


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register the race event handlers on the given namespace."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('join_room', handle_join_room, namespace=namespace)
    socketio.on_event('set_text', handle_set_text, namespace=namespace)
    socketio.on_event('start_game', handle_start_game, namespace=namespace)
    socketio.on_event('update_progress', handle_update_progress, namespace=namespace)
    socketio.on_event('leave_room', handle_leave_room, namespace=namespace)
    socketio.on_event('ping', handle_ping, namespace=namespace)
