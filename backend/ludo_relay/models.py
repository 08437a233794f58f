from dataclasses import dataclass, field
from typing import List, Optional
import string
import random

ROOM_CODE_ALPHABET = string.ascii_uppercase + string.digits


@dataclass
class Player:
    connection_id: str
    display_name: str
    is_bot: bool = False

    def to_dict(self):
        data = {
            'id': self.connection_id,
            'name': self.display_name,
        }
        if self.is_bot:
            data['isBot'] = True
        return data


@dataclass
class Room:
    id: str
    host_connection_id: str
    players: List[Player] = field(default_factory=list)
    started: bool = False
    current_player_index: int = 0

    def index_of(self, connection_id: str) -> int:
        """Return the seat index of a connection, or -1 if it is not a member."""
        for idx, p in enumerate(self.players):
            if p.connection_id == connection_id:
                return idx
        return -1

    def find_player(self, connection_id: str) -> Optional[Player]:
        idx = self.index_of(connection_id)
        return self.players[idx] if idx != -1 else None

    def roster(self):
        return [p.to_dict() for p in self.players]


def generate_room_code(taken=(), length=6):
    """Generate a short room code not present in ``taken``."""
    while True:
        code = ''.join(random.choices(ROOM_CODE_ALPHABET, k=length))
        if code not in taken:
            return code
