"""Lifecycle rules for a single room.

These functions mutate a ``Room`` in place and raise a ``RaceError`` when an
action is not allowed. They know nothing about locking or broadcasting; the
store wraps every call in the room's exclusive section.

Lifecycle: waiting -> playing -> finished -> playing (restart) -> ...
"""
from typing import Optional, Tuple

from typerace.models import FINISHED, PLAYING, WAITING, Room
from .exceptions import InvalidPayload, InvalidTransition, NotHost, PlayerNotFound


def require_host(room: Room, by: Optional[str]) -> None:
    if by is None or by != room.host_id:
        raise NotHost(room.id, by)


def set_text(room: Room, text: str) -> None:
    if room.status != WAITING:
        raise InvalidTransition(room.id, room.status, 'set text on')
    room.text = text


def start(room: Room, now: int) -> None:
    """Start or restart the race.

    Accepted from waiting and from finished. Empty text is allowed.
    """
    if room.status == PLAYING:
        raise InvalidTransition(room.id, room.status, 'start')
    room.status = PLAYING
    room.start_time = now
    for player in room.players:
        player.reset()


def apply_progress(room: Room, player_id: str, progress: int, wpm: int,
                   accuracy: int, is_finished: bool, now: int) -> bool:
    """Record a progress report and re-check completion.

    Returns True when this report finished the race for the whole room.
    """
    player = room.get_player(player_id)
    if player is None:
        raise PlayerNotFound(room.id, player_id)

    # No monotonicity check: reported values are trusted as-is
    player.progress = progress
    player.wpm = wpm
    player.accuracy = accuracy

    # Latch: once finished, later reports cannot unset it or move finishTime
    if is_finished and not player.is_finished:
        player.is_finished = True
        player.finish_time = now

    if room.status == PLAYING and room.all_finished():
        room.status = FINISHED
        return True
    return False


def _to_int(name, value) -> int:
    if value is None or isinstance(value, str) and not value.strip():
        raise InvalidPayload(f"{name} is required")
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        raise InvalidPayload(f"{name} must be a number, got {value!r}")


def _to_bool(name, value) -> bool:
    if value is None:
        return False
    if isinstance(value, (bool, int)):
        return bool(value)
    raise InvalidPayload(f"{name} must be a boolean, got {value!r}")


def coerce_progress(progress, wpm, accuracy, is_finished) -> Tuple[int, int, int, bool]:
    """Normalize the numeric fields of an update_progress payload."""
    accuracy = max(0, min(100, _to_int('accuracy', accuracy)))
    return (
        _to_int('progress', progress),
        _to_int('wpm', wpm),
        accuracy,
        _to_bool('isFinished', is_finished),
    )
