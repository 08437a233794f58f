"""Room domain services: membership registry and turn relay.

Nothing in here knows about Socket.IO. The socket handlers translate wire
events into these calls and turn the results into emits, which keeps
transport concerns out of the room bookkeeping.
"""

from .errors import (
    RoomError,
    RoomNotFound,
    RoomFull,
    NotHost,
    NotEnoughPlayers,
    NotYourTurn,
    InvalidRequest,
)
from .registry import RoomRegistry, Departure
from .relay import TurnRelay, DiceRoll, PieceMove, roll_die

__all__ = [
    'RoomError', 'RoomNotFound', 'RoomFull', 'NotHost', 'NotEnoughPlayers',
    'NotYourTurn', 'InvalidRequest', 'RoomRegistry', 'Departure', 'TurnRelay',
    'DiceRoll', 'PieceMove', 'roll_die',
]
