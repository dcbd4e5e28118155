"""Client-side progress measurement.

The relay trusts whatever a client reports; this module is the reference
computation a client runs against the shared text before sending
``update_progress``. "wpm" is really correct characters per minute, which
works the same for CJK and Latin text.
"""
import math
import time
from dataclasses import dataclass
from typing import Callable, Optional


def now_ms() -> int:
    return int(time.time() * 1000)


# Full-width ASCII forms (U+FF01..U+FF5E) sit 0xFEE0 above their ASCII twins
_NORMALIZE = {cp: cp - 0xFEE0 for cp in range(0xFF01, 0xFF5F)}
_NORMALIZE.update({
    0x3000: ' ',   # ideographic space
    0x2018: "'",
    0x2019: "'",
    0x201C: '"',
    0x201D: '"',
})


def normalize(text: str) -> str:
    return text.translate(_NORMALIZE)


def round_half_up(value: float) -> int:
    # Matches JavaScript's Math.round, unlike Python's round()
    return int(math.floor(value + 0.5))


def count_correct(typed: str, target: str) -> int:
    return sum(1 for a, b in zip(normalize(typed), normalize(target)) if a == b)


@dataclass
class ProgressReport:
    progress: int
    wpm: int
    accuracy: int
    is_finished: bool

    def to_payload(self, room_id: str) -> dict:
        return {
            'roomId': room_id,
            'progress': self.progress,
            'wpm': self.wpm,
            'accuracy': self.accuracy,
            'isFinished': self.is_finished,
        }


def measure(typed: str, target: str, elapsed_ms: float) -> ProgressReport:
    correct = count_correct(typed, target)
    elapsed_minutes = elapsed_ms / 60000
    speed = round_half_up(correct / elapsed_minutes) if elapsed_minutes > 0 else 0
    accuracy = round_half_up(100 * correct / len(typed)) if typed else 100
    return ProgressReport(
        progress=len(typed),
        wpm=speed,
        accuracy=accuracy,
        is_finished=len(typed) == len(target),
    )


class TypingSession:
    """Tracks one player's input for one race.

    The clock starts on the first keystroke. Input longer than the target is
    refused, the way the typing box refuses it.
    """

    def __init__(self, target: str, clock: Optional[Callable[[], int]] = None):
        self.target = target
        self.typed = ''
        self.started_at: Optional[int] = None
        self._clock = clock or now_ms

    def update(self, value: str) -> Optional[ProgressReport]:
        """Replace the current input; returns a report once typing has begun."""
        if len(value) > len(self.target):
            return None
        self.typed = value
        if self.started_at is None:
            if not value:
                return None
            self.started_at = self._clock()
        return measure(self.typed, self.target, self._clock() - self.started_at)
