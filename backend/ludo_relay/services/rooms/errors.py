class RoomError(Exception):
    """Base class for errors reported back to the requesting connection."""

    message = 'Room error'

    def __init__(self, message=None):
        super().__init__(message or self.message)


class RoomNotFound(RoomError):
    message = 'Room not found'


class RoomFull(RoomError):
    message = 'Room is full'


class NotHost(RoomError):
    message = 'Only host can start game'


class NotEnoughPlayers(RoomError):
    message = 'Need at least 2 players'


class NotYourTurn(RoomError):
    message = 'Not your turn'


class InvalidRequest(RoomError):
    message = 'Invalid request'
