import threading
import time
from collections import deque
from dataclasses import asdict, dataclass
from typing import Any, Dict, List

from geoguess.errors import InvalidMessageError


SENDER_DISPLAY_LENGTH = 5


@dataclass(frozen=True)
class ChatMessage:
    user: str
    text: str
    timestamp: int  # ms since epoch

    @classmethod
    def create(cls, sender_id: str, text: str) -> 'ChatMessage':
        return cls(
            user=str(sender_id)[:SENDER_DISPLAY_LENGTH],
            text=text,
            timestamp=int(time.time() * 1000),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def clean_message_text(text, max_length: int) -> str:
    if not isinstance(text, str):
        raise InvalidMessageError()
    text = text.strip()
    if not text:
        raise InvalidMessageError('Message cannot be empty')
    if len(text) > max_length:
        raise InvalidMessageError(f'Message must be at most {max_length} characters')
    return text


class ChatLog:
    """Bounded, ordered chat history; the oldest entry is dropped first."""

    def __init__(self, capacity: int):
        if capacity < 1:
            raise ValueError('chat log capacity must be positive')
        self.capacity = capacity
        self._messages = deque(maxlen=capacity)

    def append(self, message: ChatMessage) -> ChatMessage:
        self._messages.append(message)
        return message

    def to_list(self) -> List[Dict[str, Any]]:
        return [m.to_dict() for m in self._messages]

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self):
        return iter(list(self._messages))


class LobbyBroadcaster:
    """Room-independent chat channel shared by every connection.

    ``transport`` only needs ``broadcast_all(event, payload)``.
    """

    def __init__(self, transport, capacity: int = 50, max_length: int = 500):
        self._transport = transport
        self._log = ChatLog(capacity)
        self._max_length = max_length
        self._lock = threading.Lock()

    def history(self) -> List[Dict[str, Any]]:
        with self._lock:
            return self._log.to_list()

    def post(self, sender_id: str, text) -> ChatMessage:
        message = ChatMessage.create(sender_id, clean_message_text(text, self._max_length))
        # Append and broadcast under one lock so every client sees log order
        with self._lock:
            self._log.append(message)
            self._transport.broadcast_all('lobby_chat_message', message.to_dict())
        return message

    def __len__(self) -> int:
        return len(self._log)
