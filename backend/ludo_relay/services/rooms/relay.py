import random
from dataclasses import dataclass
from typing import Callable, Optional

from ludo_relay.models import Player, Room
from .errors import NotEnoughPlayers, NotHost, NotYourTurn
from .registry import RoomRegistry


def roll_die() -> int:
    return random.randint(1, 6)


def next_turn(current: int, value: int, player_count: int) -> int:
    """Turn index after a roll: a 6 keeps the turn, anything else passes it on."""
    if value == 6:
        return current
    return (current + 1) % player_count


@dataclass
class DiceRoll:
    room: Room
    player: Player
    value: int

    def to_dict(self):
        return {
            'value': self.value,
            'playerId': self.player.connection_id,
            'playerName': self.player.display_name,
            'currentPlayer': self.room.current_player_index,
        }


@dataclass
class PieceMove:
    room: Room
    connection_id: str
    piece_id: object
    player: Optional[Player] = None

    def to_dict(self):
        return {
            'playerId': self.connection_id,
            'pieceId': self.piece_id,
            'playerName': self.player.display_name if self.player else None,
        }


class TurnRelay:
    """Decides whose turn it is and relays rolls and moves for a room.

    The extra roll on a 6 is the only board-game rule applied here; piece
    positions and move legality are left to the clients.
    """

    def __init__(self, registry: RoomRegistry, min_players: int = 2,
                 roller: Callable[[], int] = roll_die):
        self.registry = registry
        self.min_players = min_players
        self.roller = roller

    def start_game(self, room_id, connection_id: str) -> Room:
        room = self.registry.get(room_id)
        if room.host_connection_id != connection_id:
            raise NotHost()
        if len(room.players) < self.min_players:
            raise NotEnoughPlayers(f'Need at least {self.min_players} players')
        room.started = True
        room.current_player_index = 0
        return room

    def roll_dice(self, room_id, connection_id: str) -> DiceRoll:
        room = self.registry.get(room_id)
        idx = room.index_of(connection_id)
        if not room.started or idx == -1 or idx != room.current_player_index:
            raise NotYourTurn()
        value = self.roller()
        room.current_player_index = next_turn(idx, value, len(room.players))
        return DiceRoll(room=room, player=room.players[idx], value=value)

    def move_piece(self, room_id, connection_id: str, piece_id) -> PieceMove:
        room = self.registry.get(room_id)
        return PieceMove(
            room=room,
            connection_id=connection_id,
            piece_id=piece_id,
            player=room.find_player(connection_id),
        )
