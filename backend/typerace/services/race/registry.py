import threading
from typing import Dict, Set


class ConnectionRegistry:
    """Which rooms each live connection has joined.

    A connection normally sits in one room, but nothing stops a client from
    joining a second one, so memberships are kept as a set.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._rooms: Dict[str, Set[str]] = {}

    def bind(self, connection_id: str, room_id: str) -> None:
        with self._guard:
            self._rooms.setdefault(connection_id, set()).add(room_id)

    def unbind(self, connection_id: str, room_id: str) -> None:
        with self._guard:
            rooms = self._rooms.get(connection_id)
            if rooms is None:
                return
            rooms.discard(room_id)
            if not rooms:
                del self._rooms[connection_id]

    def rooms_for(self, connection_id: str) -> Set[str]:
        with self._guard:
            return set(self._rooms.get(connection_id, ()))

    def __contains__(self, connection_id) -> bool:
        with self._guard:
            return connection_id in self._rooms

    def __len__(self) -> int:
        with self._guard:
            return len(self._rooms)
