"""Recoverable failures raised by the room coordinator.

None of these are fatal: the socket gateway turns the first three into an
``error`` event for the originating connection, and the coordinator handles
``PersistenceFailure`` itself.
"""


class GameError(Exception):
    message = 'Something went wrong.'

    def __init__(self, message=None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class RoomNotFound(GameError):
    message = 'Room is full or does not exist.'


class RoomFull(GameError):
    message = 'Room is full or does not exist.'


class Unauthorized(GameError):
    message = 'Only the host can start the game once both players have joined.'


class PersistenceFailure(GameError):
    message = 'Failed to save game result.'
