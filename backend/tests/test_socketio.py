from conftest import received


def _create(sio_client, name='Alice'):
    sio_client.emit('createRoom', {'playerName': name})
    return received(sio_client, 'roomCreated')[0]


def _join(sio_client, room_id, name):
    sio_client.emit('joinRoom', {'roomId': room_id, 'playerName': name})
    return received(sio_client, 'roomJoined')


def test_create_room_replies_with_code_and_roster(connect):
    alice = connect()
    created = _create(alice)
    assert len(created['roomId']) == 6
    assert created['roomId'].isupper() or created['roomId'].isdigit()
    assert created['players'] == [{'id': created['playerId'], 'name': 'Alice'}]


def test_create_room_requires_name(connect, registry):
    alice = connect()
    alice.emit('createRoom', {})
    errors = received(alice, 'error')
    assert errors == [{'message': 'playerName is required'}]
    assert registry.room_count == 0


def test_two_player_scenario(connect, dice):
    alice, bob = connect(), connect()
    room_id = _create(alice)['roomId']

    joined = _join(bob, room_id, 'Bob')
    assert [p['name'] for p in joined[0]['players']] == ['Alice', 'Bob']
    bob_id = joined[0]['playerId']
    notices = received(alice, 'playerJoined')
    assert notices[0]['playerName'] == 'Bob'
    assert [p['name'] for p in notices[0]['players']] == ['Alice', 'Bob']

    alice.emit('startGame', {'roomId': room_id})
    started = received(alice, 'gameStarted')
    assert started[0]['currentPlayer'] == 0
    assert received(bob, 'gameStarted')[0]['currentPlayer'] == 0

    dice.push(6, 3)
    alice.emit('rollDice', {'roomId': room_id})
    rolled = received(alice, 'diceRolled')
    assert rolled[0]['value'] == 6
    assert rolled[0]['currentPlayer'] == 0
    assert rolled[0]['playerName'] == 'Alice'

    # Still Alice's turn after the 6
    bob.emit('rollDice', {'roomId': room_id})
    assert received(bob, 'error')[-1] == {'message': 'Not your turn'}

    alice.emit('rollDice', {'roomId': room_id})
    rolled = received(alice, 'diceRolled')
    assert rolled[0]['value'] == 3
    assert rolled[0]['currentPlayer'] == 1

    dice.push(2)
    bob.emit('rollDice', {'roomId': room_id})
    rolled = received(bob, 'diceRolled')
    assert rolled[-1]['playerId'] == bob_id
    assert rolled[-1]['value'] == 2
    assert rolled[-1]['currentPlayer'] == 0


def test_join_unknown_room_reports_error(connect):
    bob = connect()
    bob.emit('joinRoom', {'roomId': 'NOPE00', 'playerName': 'Bob'})
    assert received(bob, 'error') == [{'message': 'Room not found'}]


def test_join_accepts_lowercase_code(connect):
    alice, bob = connect(), connect()
    room_id = _create(alice)['roomId']
    joined = _join(bob, f'  {room_id.lower()} ', 'Bob')
    assert joined[0]['roomId'] == room_id


def test_fifth_player_is_rejected(connect):
    host = connect()
    room_id = _create(host, 'P1')['roomId']
    for n in range(2, 5):
        assert _join(connect(), room_id, f'P{n}')
    late = connect()
    late.emit('joinRoom', {'roomId': room_id, 'playerName': 'P5'})
    assert received(late, 'error') == [{'message': 'Room is full'}]


def test_start_game_rules(connect):
    alice, bob = connect(), connect()
    room_id = _create(alice)['roomId']

    alice.emit('startGame', {'roomId': room_id})
    assert received(alice, 'error') == [{'message': 'Need at least 2 players'}]

    _join(bob, room_id, 'Bob')
    bob.emit('startGame', {'roomId': room_id})
    assert received(bob, 'error') == [{'message': 'Only host can start game'}]

    alice.emit('startGame', {'roomId': 'NOPE00'})
    assert received(alice, 'error')[-1] == {'message': 'Room not found'}


def test_move_piece_is_forwarded_to_others_only(connect):
    alice, bob = connect(), connect()
    room_id = _create(alice)['roomId']
    _join(bob, room_id, 'Bob')
    alice.get_received()

    alice.emit('movePiece', {'roomId': room_id, 'pieceId': 2})
    moved = received(bob, 'pieceMoved')
    assert moved[0]['pieceId'] == 2
    assert moved[0]['playerName'] == 'Alice'
    assert received(alice, 'pieceMoved') == []


def test_host_leaving_hands_over_host(connect):
    alice, bob, carol = connect(), connect(), connect()
    room_id = _create(alice)['roomId']
    _join(bob, room_id, 'Bob')
    _join(carol, room_id, 'Carol')
    bob.get_received()

    alice.emit('leaveRoom', {'roomId': room_id})
    left = received(bob, 'playerLeft')
    assert left[0]['playerName'] == 'Alice'
    assert [p['name'] for p in left[0]['players']] == ['Bob', 'Carol']

    bob.emit('startGame', {'roomId': room_id})
    assert received(carol, 'gameStarted')[0]['currentPlayer'] == 0


def test_disconnect_removes_player(connect, registry):
    alice, bob = connect(), connect()
    room_id = _create(alice)['roomId']
    _join(bob, room_id, 'Bob')
    bob.get_received()

    alice.disconnect()
    left = received(bob, 'playerLeft')
    assert left[0]['playerName'] == 'Alice'
    assert registry.get(room_id).host_connection_id == left[0]['players'][0]['id']


def test_last_member_leaving_deletes_room(connect, registry):
    alice = connect()
    room_id = _create(alice)['roomId']
    assert registry.room_count == 1
    alice.emit('leaveRoom', {'roomId': room_id})
    assert registry.room_count == 0
    # leaving twice is harmless
    alice.emit('leaveRoom', {'roomId': room_id})
    assert received(alice, 'error') == []


def test_repeated_join_does_not_leave_ghost_seats(connect, registry):
    alice, bob = connect(), connect()
    room_id = _create(alice)['roomId']
    _join(bob, room_id, 'Bob')
    again = _join(bob, room_id, 'Bob')
    assert [p['name'] for p in again[0]['players']] == ['Alice', 'Bob']
    assert len(received(alice, 'playerJoined')) == 1

    bob.disconnect()
    alice.disconnect()
    assert registry.room_count == 0
    assert registry.connection_count == 0


def test_non_dict_payloads_are_rejected_cleanly(connect, registry):
    alice = connect()
    alice.emit('createRoom', 'Alice')
    assert received(alice, 'error') == [{'message': 'playerName is required'}]
    alice.emit('joinRoom', 'ABC123')
    assert received(alice, 'error') == [{'message': 'playerName is required'}]
    alice.emit('rollDice', 'ABC123')
    assert received(alice, 'error') == [{'message': 'Room not found'}]
    alice.emit('leaveRoom', ['ABC123'])
    assert received(alice, 'error') == []
    assert registry.room_count == 0
