"""Race exceptions.

Raised by the store and the state machine, caught by the Socket.IO layer,
which drops the offending event.
"""


class RaceError(Exception):
    """Base class for every rejected race action."""
    reason = 'rejected'


class RoomNotFound(RaceError):
    reason = 'room_not_found'

    def __init__(self, room_id):
        self.room_id = room_id
        super().__init__(f"Room {room_id} not found")


class PlayerNotFound(RaceError):
    reason = 'player_not_found'

    def __init__(self, room_id, player_id):
        self.room_id = room_id
        self.player_id = player_id
        super().__init__(f"Player {player_id} is not in room {room_id}")


class InvalidTransition(RaceError):
    """The action is not allowed in the room's current status."""
    reason = 'invalid_transition'

    def __init__(self, room_id, status, action):
        self.room_id = room_id
        self.status = status
        self.action = action
        super().__init__(f"Cannot {action} room {room_id} while {status}")


class NotHost(RaceError):
    reason = 'not_host'

    def __init__(self, room_id, player_id):
        self.room_id = room_id
        self.player_id = player_id
        super().__init__(f"{player_id} is not the host of room {room_id}")


class InvalidPayload(RaceError):
    reason = 'invalid_payload'
