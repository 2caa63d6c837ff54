"""Error taxonomy for room and lobby actions.

Every ``GameError`` carries a message that is safe to send back to the
client as-is. Anything else raised while handling an action is treated as
an internal error by the session gateway.
"""


class GameError(Exception):
    """Base class for errors reported to the originating connection."""

    default_message = 'Invalid action'

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


# ---- Validation errors ----

class InvalidActionError(GameError):
    default_message = 'Invalid request'


class InvalidModeError(InvalidActionError):
    default_message = 'Invalid game mode'


class InvalidGuessError(InvalidActionError):
    default_message = 'Invalid guess'


class GuessLengthError(InvalidActionError):
    def __init__(self, expected: int):
        self.expected = expected
        super().__init__(f'Guess must be {expected} letters')


class UnknownWordError(InvalidActionError):
    def __init__(self, mode: str):
        label = {'countries': 'country', 'cities': 'capital city'}.get(mode, 'location')
        super().__init__(f'Invalid {label}')


class InvalidMessageError(InvalidActionError):
    default_message = 'Invalid message'


# ---- State errors ----

class StateError(GameError):
    pass


class RoomNotFoundError(StateError):
    default_message = 'Room not found'


class NotInRoomError(StateError):
    default_message = 'You are not in a room'


class AlreadyInRoomError(StateError):
    default_message = 'You are already in a room'


class NoMoreHintsError(StateError):
    default_message = 'No more hints available'


class DuplicateParticipantError(StateError):
    default_message = 'You have already joined this room'


class UnknownParticipantError(StateError):
    default_message = 'You are not a participant in this room'


class WordPoolError(Exception):
    """Raised at startup when the location dataset cannot be used."""
