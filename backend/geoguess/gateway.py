import logging
from typing import Optional

from flask_socketio import close_room, join_room

from geoguess.errors import (
    AlreadyInRoomError,
    GameError,
    InvalidActionError,
    NotInRoomError,
    RoomNotFoundError,
)
from geoguess.models import Room
from geoguess.schemas import (
    CreateRoomAction,
    JoinRoomAction,
    LobbyChatAction,
    MakeGuessAction,
    RequestHintAction,
    RoomChatAction,
    ServerEvent,
    parse_action,
)


GENERIC_ERROR_MESSAGE = 'Something went wrong. Please try again.'


class SocketTransport:
    """Addressing helpers over a Flask-SocketIO server for one namespace.

    A game room maps 1:1 onto a Socket.IO room named after the room code.
    """

    def __init__(self, socketio, namespace: str = '/'):
        self.socketio = socketio
        self.namespace = namespace

    def unicast(self, sid: str, event: str, payload) -> None:
        self.socketio.emit(event, payload, to=sid, namespace=self.namespace)

    def broadcast_room(self, code: str, event: str, payload, skip_sid: Optional[str] = None) -> None:
        self.socketio.emit(event, payload, to=code, skip_sid=skip_sid, namespace=self.namespace)

    def broadcast_all(self, event: str, payload) -> None:
        self.socketio.emit(event, payload, namespace=self.namespace)

    def subscribe(self, sid: str, code: str) -> None:
        join_room(code, sid=sid, namespace=self.namespace)

    def close(self, code: str) -> None:
        close_room(code, namespace=self.namespace)


class SessionGateway:
    """Controller for a single connection.

    Binds the connection to at most one open room, validates every client
    action and turns it into room operations plus broadcasts. Rejected
    actions always produce an ``error_message`` to this connection only.
    """

    def __init__(self, sid: str, registry, lobby, transport: SocketTransport, logger: Optional[logging.Logger] = None):
        self.sid = sid
        self.registry = registry
        self.lobby = lobby
        self.transport = transport
        self.logger = logger or logging.getLogger(__name__)
        self._room: Optional[Room] = None
        self._handlers = {
            LobbyChatAction: self._on_lobby_chat,
            CreateRoomAction: self._on_create_room,
            JoinRoomAction: self._on_join_room,
            RoomChatAction: self._on_room_chat,
            RequestHintAction: self._on_request_hint,
            MakeGuessAction: self._on_make_guess,
        }

    @property
    def room(self) -> Optional[Room]:
        """The bound room, or None once it has finished or been removed."""
        if self._room is not None and not self._room.is_open:
            self._room = None
        return self._room

    # ---- action boundary ----

    def dispatch(self, kind: str, data=None) -> None:
        try:
            action = parse_action(kind, data)
            self._handlers[type(action)](action)
        except GameError as exc:
            self.logger.info(f"[action-rejected] sid={self.sid} action={kind} reason={exc.message}")
            self._error(exc.message)
        except Exception:
            self.logger.exception(f"[action-error] sid={self.sid} action={kind}")
            self._error(GENERIC_ERROR_MESSAGE)

    def disconnect(self) -> None:
        room = self.room
        self._room = None
        if room is None:
            return
        with room.lock:
            if self.sid not in room:
                return
            try:
                self.transport.broadcast_room(room.code, ServerEvent.PARTICIPANT_LEFT.value, {'id': self.sid}, skip_sid=self.sid)
            except Exception:
                self.logger.exception(f"[room-leave-error] code={room.code} sid={self.sid}")
            room.remove_participant(self.sid)
            self.logger.info(f"[room-leave] code={room.code} sid={self.sid} remaining={len(room)}")
            if not room.is_open:
                self.logger.info(f"[room-removed] code={room.code} reason=empty")

    # ---- helpers ----

    def _error(self, message: str) -> None:
        self.transport.unicast(self.sid, ServerEvent.ERROR_MESSAGE.value, {'message': message})

    def _require_room(self) -> Room:
        room = self.room
        if room is None:
            raise NotInRoomError()
        return room

    def _bind(self, room: Room) -> None:
        self._room = room
        self.transport.subscribe(self.sid, room.code)

    # ---- handlers ----

    def _on_lobby_chat(self, action: LobbyChatAction) -> None:
        self.lobby.post(self.sid, action.text)

    def _on_create_room(self, action: CreateRoomAction) -> None:
        if self.room is not None:
            raise AlreadyInRoomError()
        code, room = self.registry.create(action.mode)
        self.logger.info(f"[room-create] code={code} mode={room.mode} sid={self.sid}")
        self.logger.debug(f"[room-create] code={code} answer={room.answer}")
        with room.lock:
            payload = room.add_participant(self.sid, action.avatar_style, action.avatar_options)
            self._bind(room)
            self.transport.unicast(self.sid, ServerEvent.ROOM_CREATED.value, {'code': code})
            self.transport.unicast(self.sid, ServerEvent.JOINED.value, payload)

    def _on_join_room(self, action: JoinRoomAction) -> None:
        if not action.code or not action.code.strip():
            raise InvalidActionError('Room code is required')
        if self.room is not None:
            raise AlreadyInRoomError()
        room = self.registry.get(action.code)
        if room is None:
            raise RoomNotFoundError()
        with room.lock:
            payload = room.add_participant(self.sid, action.avatar_style, action.avatar_options)
            self._bind(room)
            self.transport.unicast(self.sid, ServerEvent.JOINED.value, payload)
            self.transport.broadcast_room(
                room.code,
                ServerEvent.PARTICIPANT_JOINED.value,
                room.participants[self.sid].to_dict(),
                skip_sid=self.sid,
            )
        self.logger.info(f"[room-join] code={room.code} sid={self.sid} participants={len(room)}")

    def _on_room_chat(self, action: RoomChatAction) -> None:
        room = self._require_room()
        with room.lock:
            message = room.post_chat_message(self.sid, action.text)
            self.transport.broadcast_room(room.code, ServerEvent.CHAT_MESSAGE.value, message.to_dict())

    def _on_request_hint(self, action: RequestHintAction) -> None:
        room = self._require_room()
        with room.lock:
            hint = room.request_hint()
            self.transport.broadcast_room(room.code, ServerEvent.HINT.value, hint)
        self.logger.info(f"[room-hint] code={room.code} sid={self.sid} index={hint['index']}")

    def _on_make_guess(self, action: MakeGuessAction) -> None:
        room = self._require_room()
        with room.lock:
            result = room.submit_guess(self.sid, action.guess)
            self.transport.broadcast_room(room.code, ServerEvent.FEEDBACK.value, result.to_dict())
            if not result.is_game_over:
                return
            self.transport.broadcast_room(room.code, ServerEvent.GAME_OVER.value, room.game_over_payload())
            # The code may be handed out again; nobody should still be listening on it
            self.transport.close(room.code)
        self._room = None
        self.logger.info(f"[game-over] code={room.code} winner={result.winner_id}")
