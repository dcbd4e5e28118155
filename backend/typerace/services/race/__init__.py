"""Race domain services: room store, lifecycle rules, metrics and ranking.

Transport concerns (Socket.IO handlers, HTTP routes) import from here; nothing
in this package imports Flask.
"""

from .broadcast import SocketIOBroadcaster, channel_for
from .exceptions import (
    InvalidPayload,
    InvalidTransition,
    NotHost,
    PlayerNotFound,
    RaceError,
    RoomNotFound,
)
from .registry import ConnectionRegistry
from .store import RoomStore

__all__ = [
    'ConnectionRegistry',
    'InvalidPayload',
    'InvalidTransition',
    'NotHost',
    'PlayerNotFound',
    'RaceError',
    'RoomNotFound',
    'RoomStore',
    'SocketIOBroadcaster',
    'channel_for',
]
