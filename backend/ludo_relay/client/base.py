from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from ludo_relay.services.rooms import (
    InvalidRequest,
    NotEnoughPlayers,
    NotHost,
    NotYourTurn,
    RoomError,
    RoomFull,
    RoomNotFound,
)

# Events a session reports to its listeners, named as on the wire
SERVER_EVENTS = (
    'roomCreated',
    'roomJoined',
    'playerJoined',
    'playerLeft',
    'gameStarted',
    'diceRolled',
    'pieceMoved',
    'error',
)

Listener = Callable[[str, Dict[str, Any]], None]


class SessionError(Exception):
    """The session could not carry out a request."""


class SessionUnavailable(SessionError):
    """No relay is reachable, or the request is impossible in this mode."""


class SessionTimeout(SessionUnavailable):
    """The relay did not answer in time."""


_ERRORS_BY_MESSAGE = {
    cls.message: cls
    for cls in (RoomNotFound, RoomFull, NotHost, NotEnoughPlayers, NotYourTurn)
}


def error_from_message(message: str) -> RoomError:
    """Rebuild a room error from the text of an ``error`` event."""
    cls = _ERRORS_BY_MESSAGE.get(message)
    if cls is None:
        if message and message.startswith('Need at least'):
            return NotEnoughPlayers(message)
        return InvalidRequest(message)
    return cls(message)


@dataclass
class GameState:
    room_id: Optional[str] = None
    player_id: Optional[str] = None
    players: List[Dict[str, Any]] = field(default_factory=list)
    current_player: int = 0
    game_started: bool = False
    dice_value: int = 1

    @property
    def my_index(self) -> int:
        for idx, p in enumerate(self.players):
            if p.get('id') == self.player_id:
                return idx
        return -1

    @property
    def can_roll(self) -> bool:
        return self.game_started and self.my_index != -1 and self.current_player == self.my_index

    @property
    def current_player_name(self) -> Optional[str]:
        if 0 <= self.current_player < len(self.players):
            return self.players[self.current_player].get('name')
        return None

    def apply(self, event: str, data: Dict[str, Any]) -> None:
        """Fold a server event into the local view of the game."""
        if event in ('roomCreated', 'roomJoined'):
            self.room_id = data.get('roomId')
            self.player_id = data.get('playerId')
            self.players = list(data.get('players') or [])
        elif event in ('playerJoined', 'playerLeft'):
            self.players = list(data.get('players') or [])
        elif event == 'gameStarted':
            self.game_started = True
            self.current_player = data.get('currentPlayer', 0)
            if data.get('players'):
                self.players = list(data['players'])
        elif event == 'diceRolled':
            self.dice_value = data.get('value', self.dice_value)
            self.current_player = data.get('currentPlayer', self.current_player)


class GameSession:
    """Client-facing game API shared by the online and offline backends.

    Subclasses implement the ``_create``/``_join``/``_start``/``_roll``/
    ``_move``/``_leave`` hooks; this class keeps the state and fans events
    out to listeners.
    """

    online = False

    def __init__(self):
        self.state = GameState()
        self._listeners: List[Listener] = []

    # ---- listeners ----

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def _dispatch(self, event: str, data: Dict[str, Any]) -> None:
        self.state.apply(event, data)
        for listener in list(self._listeners):
            listener(event, data)

    # ---- lifecycle ----

    def connect(self) -> None:
        pass

    def close(self) -> None:
        pass

    # ---- game API ----

    def create_room(self, player_name: str) -> GameState:
        player_name = (player_name or '').strip()
        if not player_name:
            raise InvalidRequest('Please enter your name')
        self._create(player_name)
        return self.state

    def join_room(self, room_code: str, player_name: str) -> GameState:
        player_name = (player_name or '').strip()
        room_code = (room_code or '').strip()
        if not player_name or not room_code:
            raise InvalidRequest('Please enter your name and room code')
        self._join(room_code, player_name)
        return self.state

    def start_game(self) -> None:
        self._start()

    def roll_dice(self) -> None:
        if not self.state.can_roll:
            raise NotYourTurn()
        self._roll()

    def move_piece(self, piece_id, owner_index: Optional[int] = None) -> None:
        if not self.state.can_roll:
            raise NotYourTurn()
        if owner_index is not None and owner_index != self.state.my_index:
            raise InvalidRequest("That's not your piece!")
        self._move(piece_id)

    def leave_room(self) -> None:
        if self.state.room_id is not None:
            self._leave()
        self.state = GameState()

    def _create(self, player_name: str) -> None:
        raise NotImplementedError

    def _join(self, room_code: str, player_name: str) -> None:
        raise NotImplementedError

    def _start(self) -> None:
        raise NotImplementedError

    def _roll(self) -> None:
        raise NotImplementedError

    def _move(self, piece_id) -> None:
        raise NotImplementedError

    def _leave(self) -> None:
        raise NotImplementedError
