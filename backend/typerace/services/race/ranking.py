"""Final standings for a room."""
from typing import List

from typerace.models import Player, Room
from .metrics import round_half_up


def _standing_key(indexed):
    join_index, player = indexed
    if player.is_finished:
        return (0, player.finish_time or 0, join_index)
    return (1, -player.wpm, -player.accuracy, join_index)


def order_players(room: Room) -> List[Player]:
    """Finished players by finish time, then the rest by speed and accuracy.

    Ties fall back to join order.
    """
    ranked = sorted(enumerate(room.players), key=_standing_key)
    return [player for _, player in ranked]


def completion_percent(progress: int, text: str) -> int:
    if not text:
        return 0
    return round_half_up(100 * progress / len(text))


def standings(room: Room) -> List[dict]:
    rows = []
    for rank, player in enumerate(order_players(room), start=1):
        elapsed = None
        if player.finish_time is not None and room.start_time is not None:
            elapsed = player.finish_time - room.start_time
        row = player.to_dict()
        row.update({
            'rank': rank,
            'elapsedMs': elapsed,
            'completion': completion_percent(player.progress, room.text),
        })
        rows.append(row)
    return rows
