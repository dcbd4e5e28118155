import logging

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO

from config import Config

# Handle each connection's events inline, one at a time, in arrival order
socketio = SocketIO(async_mode=None, async_handlers=False)


def log_level(value):
    level = getattr(logging, str(value or 'INFO').strip().upper(), None)
    return level if isinstance(level, int) else logging.INFO


def _origins(value):
    if not value or value.strip() == '*':
        return '*'
    return [o.strip() for o in value.split(',') if o.strip()]


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    # Player order in snapshots is join order; keep it in HTTP responses too
    flask_app.json.sort_keys = False
    flask_app.logger.setLevel(log_level(flask_app.config.get('LOG_LEVEL')))

    allowed_origins = _origins(flask_app.config.get('CORS_ORIGINS', '*'))
    CORS(flask_app, origins=allowed_origins)
    socketio.init_app(
        flask_app,
        cors_allowed_origins=allowed_origins,
        logger=flask_app.config.get('SOCKETIO_LOGGER', False),
        engineio_logger=flask_app.config.get('SOCKETIO_LOGGER', False),
    )

    # One room table per application; handlers reach it through current_app
    from typerace.services.race import RoomStore, SocketIOBroadcaster
    namespace = flask_app.config.get('RACE_NAMESPACE', '/')
    flask_app.extensions['race_store'] = RoomStore(
        broadcaster=SocketIOBroadcaster(socketio, namespace=namespace),
        host_only=flask_app.config.get('HOST_ONLY_CONTROLS', False),
        lock_stripes=flask_app.config.get('ROOM_LOCK_STRIPES', 64),
    )

    from typerace.main import main
    flask_app.register_blueprint(main)

    from typerace.api.rooms import rooms
    flask_app.register_blueprint(rooms, url_prefix='/api/rooms')

    from typerace.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace=namespace)

    return flask_app
