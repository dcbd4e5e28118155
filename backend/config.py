import os


def _flag(name, default='0'):
    return os.environ.get(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Comma separated list; '*' allows any origin
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*')
    # Socket.IO namespace the race events are served on
    RACE_NAMESPACE = os.environ.get('RACE_NAMESPACE', '/')
    # Only the host may set text and start/restart. Off: any member may.
    HOST_ONLY_CONTROLS = _flag('HOST_ONLY_CONTROLS')
    # Send 'action_rejected' to the offending socket. Off: rejections are silent.
    EMIT_REJECTIONS = _flag('EMIT_REJECTIONS')
    # Number of per-room lock stripes in the room store
    ROOM_LOCK_STRIPES = int(os.environ.get('ROOM_LOCK_STRIPES', '64'))
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    SOCKETIO_LOGGER = _flag('SOCKETIO_LOGGER')
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', '3000'))
