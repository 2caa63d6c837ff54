import random
import threading
from functools import partial
from typing import Dict, List, Optional, Tuple

from geoguess.errors import InvalidModeError
from geoguess.models import Room, generate_room_code
from . import MODES
from .words import WordPool


class RoomRegistry:
    """Owns every live room, keyed by its code.

    Rooms remove themselves through ``_release`` when they finish or empty
    out; ``delete`` is the explicit, idempotent path.
    """

    def __init__(
        self,
        word_pool: WordPool,
        code_length: int = 6,
        max_attempts: int = 6,
        chat_capacity: int = 50,
        max_message_length: int = 500,
        validate_guesses: bool = True,
        rng: Optional[random.Random] = None,
    ):
        self.word_pool = word_pool
        self.code_length = code_length
        self.max_attempts = max_attempts
        self.chat_capacity = chat_capacity
        self.max_message_length = max_message_length
        self.validate_guesses = validate_guesses
        self._rng = rng or random.Random()
        self._rooms: Dict[str, Room] = {}
        self._lock = threading.Lock()

    def create(self, mode: str) -> Tuple[str, Room]:
        if mode not in MODES:
            raise InvalidModeError()
        answer = self.word_pool.draw(mode)
        with self._lock:
            code = generate_room_code(self._rooms, length=self.code_length, rng=self._rng)
            room = Room(
                code=code,
                mode=mode,
                answer=answer,
                max_attempts=self.max_attempts,
                chat_capacity=self.chat_capacity,
                max_message_length=self.max_message_length,
                is_known_word=partial(self.word_pool.contains, mode) if self.validate_guesses else None,
                on_removed=self._release,
                rng=self._rng,
            )
            self._rooms[code] = room
        return code, room

    def get(self, code) -> Optional[Room]:
        if not isinstance(code, str):
            return None
        with self._lock:
            return self._rooms.get(code.strip().upper())

    def delete(self, code) -> None:
        if not isinstance(code, str):
            return
        with self._lock:
            room = self._rooms.pop(code.strip().upper(), None)
        if room is not None:
            room.close()

    def _release(self, room: Room) -> None:
        # Only drop the entry if it still points at this room instance
        with self._lock:
            if self._rooms.get(room.code) is room:
                del self._rooms[room.code]

    def codes(self) -> List[str]:
        with self._lock:
            return list(self._rooms)

    def __contains__(self, code) -> bool:
        return self.get(code) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._rooms)
