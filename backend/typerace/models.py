from typing import Dict, List, Optional

WAITING = 'waiting'
PLAYING = 'playing'
FINISHED = 'finished'
STATUSES = (WAITING, PLAYING, FINISHED)


class Player:
    def __init__(self, id: str, name: str):
        self.id = id
        self.name = name
        self.reset()

    def reset(self) -> None:
        self.progress = 0
        self.wpm = 0
        self.accuracy = 100
        self.is_finished = False
        self.finish_time: Optional[int] = None

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'progress': self.progress,
            'wpm': self.wpm,
            'accuracy': self.accuracy,
            'isFinished': self.is_finished,
            'finishTime': self.finish_time,
        }


class Room:
    """In-memory state of one race room.

    Players are kept in an explicit join-order sequence next to the id lookup;
    the host is whoever sits at the front of that sequence.
    """

    def __init__(self, id: str):
        self.id = id
        self.text = ''
        self.status = WAITING  # waiting, playing, finished
        self.start_time: Optional[int] = None
        self._order: List[str] = []
        self._players: Dict[str, Player] = {}

    @property
    def host_id(self) -> Optional[str]:
        return self._order[0] if self._order else None

    @property
    def players(self) -> List[Player]:
        return [self._players[pid] for pid in self._order]

    def get_player(self, player_id: str) -> Optional[Player]:
        return self._players.get(player_id)

    def add_player(self, player: Player) -> None:
        # Rejoin replaces the player in place and keeps the join position
        if player.id not in self._players:
            self._order.append(player.id)
        self._players[player.id] = player

    def remove_player(self, player_id: str) -> bool:
        if self._players.pop(player_id, None) is None:
            return False
        self._order.remove(player_id)
        return True

    def is_empty(self) -> bool:
        return not self._order

    def all_finished(self) -> bool:
        return all(p.is_finished for p in self._players.values())

    def __contains__(self, player_id) -> bool:
        return player_id in self._players

    def __len__(self) -> int:
        return len(self._order)

    def to_dict(self):
        return {
            'id': self.id,
            'text': self.text,
            'status': self.status,
            'players': {p.id: p.to_dict() for p in self.players},
            'startTime': self.start_time,
        }

    def summary(self):
        return {
            'id': self.id,
            'status': self.status,
            'playerCount': len(self),
        }
