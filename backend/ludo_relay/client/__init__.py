"""Client side of the relay: one game API, online or offline.

``RemoteSession`` talks to the relay over Socket.IO, ``LocalSession``
simulates a room with a bot opponent, and ``GameClient`` picks between
them.
"""

from .base import (
    GameSession,
    GameState,
    SessionError,
    SessionTimeout,
    SessionUnavailable,
)
from .local import BotDelays, LocalSession
from .remote import RemoteSession
from .game_client import GameClient
from .play import format_event, play_game

__all__ = [
    'GameSession', 'GameState', 'SessionError', 'SessionTimeout',
    'SessionUnavailable', 'BotDelays', 'LocalSession', 'RemoteSession',
    'GameClient', 'format_event', 'play_game',
]
