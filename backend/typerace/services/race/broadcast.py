import logging

logger = logging.getLogger(__name__)

ROOM_STATE_EVENT = 'room_state'


def channel_for(room_id: str) -> str:
    """Socket.IO room name that carries broadcasts for a race room."""
    return f"race:{room_id}"


class SocketIOBroadcaster:
    """Sends full room snapshots to every socket joined to the room's channel."""

    def __init__(self, socketio, namespace='/'):
        self.socketio = socketio
        self.namespace = namespace

    def publish(self, room_id: str, snapshot: dict) -> None:
        # Fire-and-forget: no acknowledgement is requested
        self.socketio.emit(ROOM_STATE_EVENT, snapshot, to=channel_for(room_id), namespace=self.namespace)
        logger.debug(f"[broadcast] room={room_id} status={snapshot.get('status')} players={len(snapshot.get('players', {}))}")
