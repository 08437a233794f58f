import logging
import time
from typing import List, Optional

from .base import GameSession, GameState, Listener, SessionTimeout, SessionUnavailable
from .local import LocalSession
from .remote import RemoteSession

logger = logging.getLogger(__name__)


class GameClient:
    """One entry point for playing, online when the relay answers and offline otherwise.

    Call sites never branch on connectivity: the client holds a single
    ``GameSession`` and swaps in a ``LocalSession`` when the relay cannot
    be reached or does not answer a room creation in time.
    """

    def __init__(self, server_url: Optional[str] = None, connect_timeout: float = 8,
                 request_timeout: float = 10, offline: bool = False, sleep=None,
                 remote_factory=RemoteSession, local_factory=LocalSession):
        self.server_url = server_url
        self.connect_timeout = connect_timeout
        self.request_timeout = request_timeout
        self.offline = offline
        self.sleep = sleep or time.sleep
        self.remote_factory = remote_factory
        self.local_factory = local_factory
        self.session: Optional[GameSession] = None
        self._listeners: List[Listener] = []

    @property
    def online(self) -> bool:
        return bool(self.session and self.session.online)

    @property
    def state(self) -> GameState:
        return self.session.state if self.session else GameState()

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)
        if self.session:
            self.session.subscribe(listener)

    def _notify(self, event: str, data: dict) -> None:
        for listener in list(self._listeners):
            listener(event, data)

    def _use(self, session: GameSession) -> GameSession:
        for listener in self._listeners:
            session.subscribe(listener)
        self.session = session
        return session

    def _go_offline(self, reason: str) -> GameSession:
        logger.warning("[offline] %s", reason)
        if self.session is not None:
            self.session.close()
        session = self._use(self.local_factory(sleep=self.sleep))
        self._notify('offline', {'message': reason})
        return session

    def connect(self) -> GameSession:
        if self.offline or not self.server_url:
            return self._go_offline('Offline mode - local games only')
        remote = self.remote_factory(
            self.server_url,
            connect_timeout=self.connect_timeout,
            request_timeout=self.request_timeout,
        )
        try:
            remote.connect()
        except SessionUnavailable as exc:
            return self._go_offline(f'{exc}. Using offline mode.')
        self._use(remote)
        self._notify('online', {'message': 'Connected! Online multiplayer ready!'})
        return remote

    def _session(self) -> GameSession:
        return self.session or self.connect()

    def create_room(self, player_name: str) -> GameState:
        session = self._session()
        try:
            return session.create_room(player_name)
        except SessionTimeout as exc:
            local = self._go_offline(f'{exc}. Creating local room...')
            return local.create_room(player_name)

    def join_room(self, room_code: str, player_name: str) -> GameState:
        # No fallback: a local session has no room to join
        return self._session().join_room(room_code, player_name)

    def start_game(self) -> None:
        self._session().start_game()

    def roll_dice(self) -> None:
        self._session().roll_dice()

    def move_piece(self, piece_id, owner_index: Optional[int] = None) -> None:
        self._session().move_piece(piece_id, owner_index=owner_index)

    def leave_room(self) -> None:
        if self.session:
            self.session.leave_room()

    def close(self) -> None:
        if self.session:
            self.session.close()
