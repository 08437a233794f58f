import logging
import threading
from functools import partial

import socketio
from socketio.exceptions import ConnectionError as SocketIOConnectionError

from ludo_relay.services.rooms import InvalidRequest, RoomFull, RoomNotFound

from .base import (
    SERVER_EVENTS,
    GameSession,
    SessionTimeout,
    SessionUnavailable,
    error_from_message,
)

logger = logging.getLogger(__name__)

# Reply that completes each blocking request, and the errors it may answer with
REPLY_EVENTS = {
    'createRoom': 'roomCreated',
    'joinRoom': 'roomJoined',
}
REPLY_ERRORS = {
    'createRoom': (InvalidRequest,),
    'joinRoom': (RoomNotFound, RoomFull, InvalidRequest),
}


class RemoteSession(GameSession):
    """Game session backed by the Socket.IO relay."""

    online = True

    def __init__(self, server_url: str, connect_timeout: float = 8, request_timeout: float = 10, sio=None):
        super().__init__()
        self.server_url = server_url
        self.connect_timeout = connect_timeout
        self.request_timeout = request_timeout
        self.sio = sio or socketio.Client(
            reconnection=True,
            reconnection_attempts=3,
            reconnection_delay=1,
        )
        self._reply = threading.Event()
        self._reply_error = None
        self._pending = None
        for event in SERVER_EVENTS:
            self.sio.on(event, partial(self._on_event, event))
        self.sio.on('disconnect', self._on_disconnect)

    @property
    def connected(self) -> bool:
        return bool(self.sio.connected)

    def connect(self) -> None:
        try:
            self.sio.connect(
                self.server_url,
                transports=['websocket', 'polling'],
                wait_timeout=self.connect_timeout,
            )
        except SocketIOConnectionError as exc:
            raise SessionUnavailable(f'Connection failed: {exc}') from exc
        logger.info("[connected] server=%s", self.server_url)

    def close(self) -> None:
        if self.connected:
            self.sio.disconnect()

    def _on_event(self, event: str, data=None) -> None:
        data = data if isinstance(data, dict) else {}
        self._dispatch(event, data)
        pending = self._pending
        if pending is None:
            return
        if event == REPLY_EVENTS[pending]:
            self._pending = None
            self._reply.set()
        elif event == 'error':
            error = error_from_message(data.get('message', ''))
            # Late errors from fire-and-forget emits are not this request's answer
            if isinstance(error, REPLY_ERRORS[pending]):
                self._pending = None
                self._reply_error = error
                self._reply.set()

    def _on_disconnect(self, *args) -> None:
        logger.info("[disconnected] server=%s", self.server_url)

    def _request(self, event: str, payload: dict) -> None:
        """Emit a request and block until its reply or an error comes back."""
        if not self.connected:
            raise SessionUnavailable('Not connected to server')
        self._reply.clear()
        self._reply_error = None
        self._pending = event
        self.sio.emit(event, payload)
        if not self._reply.wait(self.request_timeout):
            self._pending = None
            raise SessionTimeout(f'Server timeout waiting for {event}')
        if self._reply_error is not None:
            raise self._reply_error

    def _create(self, player_name: str) -> None:
        self._request('createRoom', {'playerName': player_name})

    def _join(self, room_code: str, player_name: str) -> None:
        self._request('joinRoom', {'roomId': room_code, 'playerName': player_name})

    def _ids(self) -> dict:
        return {'roomId': self.state.room_id, 'playerId': self.state.player_id}

    def _start(self) -> None:
        self.sio.emit('startGame', self._ids())

    def _roll(self) -> None:
        self.sio.emit('rollDice', self._ids())

    def _move(self, piece_id) -> None:
        self.sio.emit('movePiece', dict(self._ids(), pieceId=piece_id))

    def _leave(self) -> None:
        self.sio.emit('leaveRoom', self._ids())
