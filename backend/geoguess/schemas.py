"""
Socket payload schemas.

Each client action is a pydantic model tagged by ``kind`` (the Socket.IO
event name it arrives on); ``parse_action`` validates a raw payload into
the matching model before it reaches any room logic. Free-text fields are
kept loose here and checked by the domain objects, so the client gets the
same error message whichever layer rejects it.
"""

from enum import Enum
from typing import Annotated, Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from geoguess.errors import InvalidActionError


# =============================================================================
# Enums
# =============================================================================

class ClientEvent(str, Enum):
    """Events a client may emit."""
    LOBBY_CHAT_MESSAGE = "lobby_chat_message"
    CREATE_ROOM = "create_room"
    JOIN_ROOM = "join_room"
    CHAT_MESSAGE = "chat_message"
    REQUEST_HINT = "request_hint"
    MAKE_GUESS = "make_guess"


class ServerEvent(str, Enum):
    """Events the server emits."""
    LOBBY_MESSAGES = "lobby_messages"
    LOBBY_CHAT_MESSAGE = "lobby_chat_message"
    ROOM_CREATED = "room_created"
    JOINED = "joined"
    PARTICIPANT_JOINED = "participant_joined"
    CHAT_MESSAGE = "chat_message"
    HINT = "hint"
    FEEDBACK = "feedback"
    GAME_OVER = "game_over"
    PARTICIPANT_LEFT = "participant_left"
    ERROR_MESSAGE = "error_message"


# =============================================================================
# Client actions
# =============================================================================

class _Action(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


class LobbyChatAction(_Action):
    kind: Literal["lobby_chat_message"] = "lobby_chat_message"
    text: Any = None


class CreateRoomAction(_Action):
    kind: Literal["create_room"] = "create_room"
    mode: Any = None
    avatar_style: Optional[str] = Field(default=None, alias="avatarStyle")
    avatar_options: Optional[Dict[str, Any]] = Field(default=None, alias="avatarOptions")


class JoinRoomAction(_Action):
    kind: Literal["join_room"] = "join_room"
    code: Optional[str] = None
    avatar_style: Optional[str] = Field(default=None, alias="avatarStyle")
    avatar_options: Optional[Dict[str, Any]] = Field(default=None, alias="avatarOptions")


class RoomChatAction(_Action):
    kind: Literal["chat_message"] = "chat_message"
    text: Any = None


class RequestHintAction(_Action):
    kind: Literal["request_hint"] = "request_hint"


class MakeGuessAction(_Action):
    kind: Literal["make_guess"] = "make_guess"
    guess: Any = None


ClientAction = Annotated[
    Union[
        LobbyChatAction,
        CreateRoomAction,
        JoinRoomAction,
        RoomChatAction,
        RequestHintAction,
        MakeGuessAction,
    ],
    Field(discriminator="kind"),
]

_action_adapter = TypeAdapter(ClientAction)

# Actions whose payload may be sent as a bare value instead of an object
_BARE_FIELD = {
    ClientEvent.LOBBY_CHAT_MESSAGE.value: "text",
    ClientEvent.CHAT_MESSAGE.value: "text",
    ClientEvent.MAKE_GUESS.value: "guess",
}


def describe_validation_error(exc: ValidationError, kind: str = None) -> str:
    """Turn the first pydantic error into a short client-facing message."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    loc = ".".join(str(part) for part in first.get("loc", ()) if part not in ("kind", kind))
    if loc:
        return f"Invalid {loc}"
    return "Invalid request"


def parse_action(kind: str, data: Any = None):
    """Validate the raw payload of event ``kind`` into a ``ClientAction``."""
    if data is None:
        payload: Dict[str, Any] = {}
    elif isinstance(data, dict):
        payload = dict(data)
    elif kind in _BARE_FIELD:
        payload = {_BARE_FIELD[kind]: data}
    else:
        raise InvalidActionError("Malformed payload")
    payload["kind"] = kind
    try:
        return _action_adapter.validate_python(payload)
    except ValidationError as exc:
        raise InvalidActionError(describe_validation_error(exc, kind)) from exc
