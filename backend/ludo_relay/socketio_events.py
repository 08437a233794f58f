from functools import partial

from flask import current_app, request
from flask_socketio import emit, join_room, leave_room

from ludo_relay import socketio
from ludo_relay.services.rooms import (
    InvalidRequest,
    RoomError,
    RoomRegistry,
    TurnRelay,
)


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _payload(data) -> dict:
    """Event payload as a dict; anything else is treated as empty."""
    return data if isinstance(data, dict) else {}


def _player_name(data) -> str:
    name = _payload(data).get('playerName')
    name = str(name).strip() if name is not None else ''
    if not name:
        raise InvalidRequest('playerName is required')
    return name


def _reject(event: str, exc: RoomError) -> None:
    """Report a failed request to the sender only; the connection stays open."""
    current_app.logger.info(f"[rejected] event={event} sid={_get_sid()} reason={exc}")
    emit('error', {'message': str(exc)})


def _broadcast_departures(departures) -> None:
    for departure in departures:
        room = departure.room
        if departure.room_deleted:
            current_app.logger.info(f"[room-deleted] room={room.id}")
            continue
        if departure.host_changed:
            current_app.logger.info(f"[host-changed] room={room.id} host={room.host_connection_id}")
        emit('playerLeft', {
            'players': room.roster(),
            'playerName': departure.player.display_name,
        }, to=room.id, include_self=False)


def handle_connect(registry: RoomRegistry, auth=None):
    registry.connect(_get_sid())
    current_app.logger.info(f"[connect] sid={_get_sid()}")


def handle_disconnect(registry: RoomRegistry, reason=None):
    sid = _get_sid()
    current_app.logger.info(f"[disconnect] sid={sid}")
    _broadcast_departures(registry.disconnect(sid))


def handle_create_room(registry: RoomRegistry, data=None):
    try:
        name = _player_name(data)
    except RoomError as exc:
        _reject('createRoom', exc)
        return
    sid = _get_sid()
    room = registry.create(sid, name)
    join_room(room.id)
    emit('roomCreated', {
        'roomId': room.id,
        'playerId': sid,
        'players': room.roster(),
    })
    current_app.logger.info(f"[room-created] room={room.id} by={name}")


def handle_join_room(registry: RoomRegistry, data=None):
    sid = _get_sid()
    room_id = _payload(data).get('roomId')
    try:
        name = _player_name(data)
        rejoin = registry.get(room_id).index_of(sid) != -1
        room = registry.join(room_id, sid, name)
    except RoomError as exc:
        _reject('joinRoom', exc)
        return
    join_room(room.id)
    emit('roomJoined', {
        'roomId': room.id,
        'playerId': sid,
        'players': room.roster(),
    })
    if rejoin:
        return
    emit('playerJoined', {
        'players': room.roster(),
        'playerName': name,
    }, to=room.id, include_self=False)
    current_app.logger.info(f"[room-joined] room={room.id} player={name} size={len(room.players)}")


def handle_start_game(relay: TurnRelay, data=None):
    try:
        room = relay.start_game(_payload(data).get('roomId'), _get_sid())
    except RoomError as exc:
        _reject('startGame', exc)
        return
    emit('gameStarted', {
        'currentPlayer': room.current_player_index,
        'players': room.roster(),
    }, to=room.id)
    current_app.logger.info(f"[game-started] room={room.id} players={len(room.players)}")


def handle_roll_dice(relay: TurnRelay, data=None):
    try:
        roll = relay.roll_dice(_payload(data).get('roomId'), _get_sid())
    except RoomError as exc:
        _reject('rollDice', exc)
        return
    emit('diceRolled', roll.to_dict(), to=roll.room.id)
    current_app.logger.info(
        f"[dice-rolled] room={roll.room.id} player={roll.player.display_name} "
        f"value={roll.value} next={roll.room.current_player_index}"
    )


def handle_move_piece(relay: TurnRelay, data=None):
    data = _payload(data)
    try:
        move = relay.move_piece(data.get('roomId'), _get_sid(), data.get('pieceId'))
    except RoomError as exc:
        _reject('movePiece', exc)
        return
    emit('pieceMoved', move.to_dict(), to=move.room.id, include_self=False)
    current_app.logger.info(f"[piece-moved] room={move.room.id} sid={move.connection_id} piece={move.piece_id}")


def handle_leave_room(registry: RoomRegistry, data=None):
    room_id = _payload(data).get('roomId')
    departure = registry.leave(room_id, _get_sid())
    if departure is None:
        return
    leave_room(departure.room.id)
    _broadcast_departures([departure])


def register_socketio_handlers(registry: RoomRegistry, relay: TurnRelay) -> None:
    """Register Socket.IO event handlers on the default namespace.

    Handlers are bound to the given registry and relay, so every app
    instance relays for its own set of rooms.
    """
    socketio.on_event('connect', partial(handle_connect, registry))
    socketio.on_event('disconnect', partial(handle_disconnect, registry))
    socketio.on_event('createRoom', partial(handle_create_room, registry))
    socketio.on_event('joinRoom', partial(handle_join_room, registry))
    socketio.on_event('startGame', partial(handle_start_game, relay))
    socketio.on_event('rollDice', partial(handle_roll_dice, relay))
    socketio.on_event('movePiece', partial(handle_move_piece, relay))
    socketio.on_event('leaveRoom', partial(handle_leave_room, registry))
