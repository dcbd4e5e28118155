"""Process-wide room table.

Every mutating operation runs inside the exclusive section of its room id and
publishes the full room snapshot before leaving it, so all members of a room
see its broadcasts in the order the mutations happened. Rooms are created on
first join and dropped as soon as their last player leaves.
"""
import logging
import threading
from contextlib import contextmanager
from typing import Dict, List, Optional

from typerace.models import Player, Room
from . import ranking, state_machine
from .exceptions import InvalidPayload, RoomNotFound
from .metrics import now_ms
from .registry import ConnectionRegistry

logger = logging.getLogger(__name__)


class RoomStore:

    def __init__(self, broadcaster=None, clock=None, host_only=False,
                 lock_stripes=64, registry: Optional[ConnectionRegistry] = None):
        self.broadcaster = broadcaster
        self.registry = registry if registry is not None else ConnectionRegistry()
        self.host_only = host_only
        self._clock = clock or now_ms
        self._rooms: Dict[str, Room] = {}
        # Same room id -> same lock; unrelated rooms rarely share one
        self._stripes = [threading.Lock() for _ in range(max(1, int(lock_stripes)))]

    @contextmanager
    def _exclusive(self, room_id: str):
        with self._stripes[hash(room_id) % len(self._stripes)]:
            yield

    def _publish(self, room: Room) -> dict:
        snapshot = room.to_dict()
        if self.broadcaster is not None:
            self.broadcaster.publish(room.id, snapshot)
        return snapshot

    def _require_room(self, room_id: str) -> Room:
        room = self._rooms.get(room_id)
        if room is None:
            raise RoomNotFound(room_id)
        return room

    # ---- membership ----

    def join(self, room_id: str, connection_id: str, name: str) -> dict:
        if not isinstance(room_id, str) or not room_id:
            raise InvalidPayload('roomId is required')
        with self._exclusive(room_id):
            room = self._rooms.get(room_id)
            if room is None:
                room = self._rooms[room_id] = Room(room_id)
                logger.info(f"[room-create] room={room_id}")
            room.add_player(Player(connection_id, name))
            self.registry.bind(connection_id, room_id)
            logger.info(f"[join] room={room_id} player={connection_id} name={name!r} players={len(room)}")
            return self._publish(room)

    def leave(self, connection_id: str, room_id: Optional[str] = None) -> List[str]:
        """Remove a connection from one room, or from every room it joined.

        Returns the ids of the rooms the player was actually removed from.
        """
        if room_id is not None:
            targets = [room_id]
        else:
            targets = sorted(self.registry.rooms_for(connection_id))
        left = []
        for rid in targets:
            with self._exclusive(rid):
                self.registry.unbind(connection_id, rid)
                room = self._rooms.get(rid)
                if room is None or not room.remove_player(connection_id):
                    continue
                left.append(rid)
                if room.is_empty():
                    # Nobody left to notify
                    del self._rooms[rid]
                    logger.info(f"[room-delete] room={rid}")
                else:
                    logger.info(f"[leave] room={rid} player={connection_id} players={len(room)}")
                    self._publish(room)
        return left

    # ---- lifecycle ----

    def set_text(self, room_id: str, text: str, by: Optional[str] = None) -> dict:
        if not isinstance(text, str):
            raise InvalidPayload('text must be a string')
        with self._exclusive(room_id):
            room = self._require_room(room_id)
            if self.host_only:
                state_machine.require_host(room, by)
            state_machine.set_text(room, text)
            logger.info(f"[set-text] room={room_id} length={len(text)}")
            return self._publish(room)

    def start(self, room_id: str, by: Optional[str] = None) -> dict:
        with self._exclusive(room_id):
            room = self._require_room(room_id)
            if self.host_only:
                state_machine.require_host(room, by)
            restart = room.start_time is not None
            state_machine.start(room, self._clock())
            logger.info(f"[{'restart' if restart else 'start'}] room={room_id} players={len(room)} start_time={room.start_time}")
            return self._publish(room)

    def update_progress(self, room_id: str, connection_id: str, progress, wpm,
                        accuracy, is_finished) -> dict:
        progress, wpm, accuracy, is_finished = state_machine.coerce_progress(
            progress, wpm, accuracy, is_finished
        )
        with self._exclusive(room_id):
            room = self._require_room(room_id)
            finished = state_machine.apply_progress(
                room, connection_id, progress, wpm, accuracy, is_finished, self._clock()
            )
            if finished:
                logger.info(f"[finish] room={room_id} players={len(room)}")
            return self._publish(room)

    # ---- read access ----

    def get(self, room_id: str) -> Optional[dict]:
        with self._exclusive(room_id):
            room = self._rooms.get(room_id)
            return room.to_dict() if room is not None else None

    def results(self, room_id: str) -> dict:
        with self._exclusive(room_id):
            room = self._require_room(room_id)
            return {
                'roomId': room.id,
                'status': room.status,
                'standings': ranking.standings(room),
            }

    def list_rooms(self) -> List[dict]:
        summaries = []
        for room_id in list(self._rooms):
            with self._exclusive(room_id):
                room = self._rooms.get(room_id)
                if room is not None:
                    summaries.append(room.summary())
        return summaries

    def __contains__(self, room_id) -> bool:
        return room_id in self._rooms

    def __len__(self) -> int:
        return len(self._rooms)
