from ludo_relay.services.rooms import RoomError
from .base import SessionError


def format_event(event: str, data: dict) -> str:
    """Render a session event as one line of terminal output."""
    data = data or {}
    if event == 'roomCreated':
        return f"Room {data.get('roomId')} created!"
    if event == 'roomJoined':
        return f"Joined room {data.get('roomId')}!"
    if event == 'playerJoined':
        return f"{data.get('playerName')} joined!"
    if event == 'playerLeft':
        return f"{data.get('playerName')} left"
    if event == 'gameStarted':
        return 'Game Started!'
    if event == 'diceRolled':
        return f"{data.get('playerName')} rolled {data.get('value')}"
    if event == 'pieceMoved':
        return f"{data.get('playerName')} moved a piece"
    if event == 'error':
        return f"error: {data.get('message')}"
    return data.get('message') or event


def play_game(client, player_name: str, rolls: int = 6, room_code=None, echo=print) -> int:
    """Drive a short game from the terminal and return the number of rolls made."""
    client.subscribe(lambda event, data: echo(format_event(event, data)))
    made = 0
    try:
        client.connect()
        if room_code:
            client.join_room(room_code, player_name)
        else:
            client.create_room(player_name)

        if client.online:
            state = client.state
            echo(f"Share room code {state.room_id}; {len(state.players)} player(s) in the room")
            return made

        client.start_game()
        while made < rolls and client.state.can_roll:
            client.roll_dice()
            made += 1
    except (RoomError, SessionError) as exc:
        echo(f'error: {exc}')
    finally:
        client.leave_room()
        client.close()
    return made
