from dataclasses import dataclass
from typing import Dict, List, Optional, Set

from ludo_relay.models import Player, Room, generate_room_code
from .errors import RoomFull, RoomNotFound


@dataclass
class Departure:
    """Outcome of removing a player from a room."""

    room: Room
    player: Player
    room_deleted: bool
    host_changed: bool = False


def normalize_room_id(room_id) -> str:
    return str(room_id or '').strip().upper()


class RoomRegistry:
    """In-memory registry of active rooms and connections.

    One instance is created per app and handed to the socket handlers. All
    state lives in process memory and is lost on restart.
    """

    def __init__(self, max_players: int = 4, code_length: int = 6):
        self.max_players = max_players
        self.code_length = code_length
        self._rooms: Dict[str, Room] = {}
        self._connections: Set[str] = set()

    # ---- connections ----

    def connect(self, connection_id: str) -> None:
        self._connections.add(connection_id)

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    @property
    def room_count(self) -> int:
        return len(self._rooms)

    # ---- rooms ----

    def get(self, room_id) -> Room:
        room = self._rooms.get(normalize_room_id(room_id))
        if room is None:
            raise RoomNotFound()
        return room

    def create(self, connection_id: str, display_name: str) -> Room:
        code = generate_room_code(self._rooms, length=self.code_length)
        room = Room(id=code, host_connection_id=connection_id)
        room.players.append(Player(connection_id=connection_id, display_name=display_name))
        self._rooms[code] = room
        return room

    def join(self, room_id, connection_id: str, display_name: str) -> Room:
        room = self.get(room_id)
        # A connection holds one seat per room; joining again is a no-op
        if room.index_of(connection_id) != -1:
            return room
        if len(room.players) >= self.max_players:
            raise RoomFull()
        room.players.append(Player(connection_id=connection_id, display_name=display_name))
        return room

    def leave(self, room_id, connection_id: str) -> Optional[Departure]:
        room = self._rooms.get(normalize_room_id(room_id))
        if room is None:
            return None
        return self._remove(room, connection_id)

    def disconnect(self, connection_id: str) -> List[Departure]:
        self._connections.discard(connection_id)
        departures = []
        for room in list(self._rooms.values()):
            departure = self._remove(room, connection_id)
            if departure:
                departures.append(departure)
        return departures

    def _remove(self, room: Room, connection_id: str) -> Optional[Departure]:
        idx = room.index_of(connection_id)
        if idx == -1:
            return None
        player = room.players.pop(idx)

        if not room.players:
            self._rooms.pop(room.id, None)
            return Departure(room=room, player=player, room_deleted=True)

        # Keep the turn pointer on the same player, or on whoever took the
        # departed player's seat
        if idx < room.current_player_index:
            room.current_player_index -= 1
        if room.current_player_index >= len(room.players):
            room.current_player_index = 0

        host_changed = room.host_connection_id == connection_id
        if host_changed:
            room.host_connection_id = room.players[0].connection_id
        return Departure(room=room, player=player, room_deleted=False, host_changed=host_changed)
