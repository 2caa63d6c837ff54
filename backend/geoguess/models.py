import enum
import random
import string
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from geoguess.errors import (
    DuplicateParticipantError,
    GuessLengthError,
    InvalidGuessError,
    NoMoreHintsError,
    RoomNotFoundError,
    UnknownParticipantError,
    UnknownWordError,
)
from geoguess.services.games.evaluation import LetterFeedback, evaluate_guess
from geoguess.services.games.hints import location_clue
from geoguess.services.games.lobby import ChatLog, ChatMessage, clean_message_text
from geoguess.services.games.words import normalize_name


CODE_ALPHABET = string.ascii_uppercase + string.digits
SEED_ALPHABET = string.ascii_lowercase + string.digits


def generate_room_code(taken, length=6, rng=None):
    """Generate a short room code that is not in ``taken``."""
    rng = rng or random
    while True:
        code = ''.join(rng.choices(CODE_ALPHABET, k=length))
        if code not in taken:
            return code


def generate_avatar_seed(rng=None, length=8):
    rng = rng or random
    return ''.join(rng.choices(SEED_ALPHABET, k=length))


class RoomStatus(enum.Enum):
    OPEN = 'open'
    FINISHED = 'finished'
    REMOVED = 'removed'


@dataclass
class Avatar:
    seed: str
    style: Optional[str] = None
    options: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self):
        return {
            'seed': self.seed,
            'style': self.style,
            'options': self.options,
        }


@dataclass
class Participant:
    id: str
    avatar: Avatar
    guesses: List[str] = field(default_factory=list)

    @property
    def attempts(self) -> int:
        return len(self.guesses)

    def to_dict(self):
        return {'id': self.id, **self.avatar.to_dict()}


@dataclass
class GuessResult:
    guess: str
    feedback: List[LetterFeedback]
    player: str
    is_game_over: bool
    winner_id: Optional[str] = None

    def to_dict(self):
        return {
            'guess': self.guess,
            'feedback': [f.value for f in self.feedback],
            'player': self.player,
        }


class Room:
    """One game session: a hidden answer shared by a set of participants.

    Lifecycle is OPEN -> FINISHED -> REMOVED (a guess ended the game) or
    OPEN -> REMOVED (the last participant left). ``on_removed`` is called
    exactly once, when the room reaches REMOVED.

    ``lock`` guards every read-modify-write of the room; callers that
    broadcast the outcome of an operation should hold it across the
    operation and the broadcast so members observe mutation order.
    """

    def __init__(
        self,
        code: str,
        mode: str,
        answer: str,
        max_attempts: int = 6,
        chat_capacity: int = 50,
        max_message_length: int = 500,
        is_known_word: Optional[Callable[[str], bool]] = None,
        on_removed: Optional[Callable[['Room'], None]] = None,
        rng: Optional[random.Random] = None,
    ):
        self.code = code
        self.mode = mode
        self.answer = answer
        self.max_attempts = max_attempts
        self.participants: Dict[str, Participant] = {}
        self.revealed = set()
        self.messages = ChatLog(chat_capacity)
        self.status = RoomStatus.OPEN
        self.winner_id: Optional[str] = None
        self.lock = threading.RLock()
        self._max_message_length = max_message_length
        self._is_known_word = is_known_word
        self._on_removed = on_removed
        self._rng = rng or random.Random()

    @property
    def word_length(self) -> int:
        return len(self.answer)

    @property
    def is_open(self) -> bool:
        return self.status is RoomStatus.OPEN

    @property
    def location_hint(self) -> str:
        return location_clue(self.answer)

    def __contains__(self, participant_id) -> bool:
        return participant_id in self.participants

    def __len__(self) -> int:
        return len(self.participants)

    # ---- lifecycle ----

    def _require_open(self) -> None:
        if not self.is_open:
            raise RoomNotFoundError()

    def _finish(self, winner_id: Optional[str]) -> None:
        self.status = RoomStatus.FINISHED
        self.winner_id = winner_id
        self._remove()

    def _remove(self) -> None:
        if self.status is RoomStatus.REMOVED:
            return
        self.status = RoomStatus.REMOVED
        if self._on_removed:
            self._on_removed(self)

    def close(self) -> None:
        """Tear the room down without an outcome."""
        with self.lock:
            self._remove()

    # ---- serializers ----

    def avatars(self) -> Dict[str, Dict[str, Any]]:
        return {pid: p.avatar.to_dict() for pid, p in self.participants.items()}

    def join_payload(self, participant_id: str) -> Dict[str, Any]:
        return {
            'code': self.code,
            'wordLength': self.word_length,
            'maxAttempts': self.max_attempts,
            'avatars': self.avatars(),
            'yourId': participant_id,
            'locationHint': self.location_hint,
            'messages': self.messages.to_list(),
        }

    def game_over_payload(self) -> Dict[str, Any]:
        return {
            'winner': self.winner_id,
            'answer': self.answer,
            'locationHint': self.location_hint,
        }

    # ---- operations ----

    def add_participant(self, participant_id: str, style: Optional[str] = None, options=None) -> Dict[str, Any]:
        with self.lock:
            self._require_open()
            if participant_id in self.participants:
                raise DuplicateParticipantError()
            avatar = Avatar(seed=generate_avatar_seed(self._rng), style=style, options=dict(options or {}))
            self.participants[participant_id] = Participant(id=participant_id, avatar=avatar)
            return self.join_payload(participant_id)

    def remove_participant(self, participant_id: str) -> bool:
        with self.lock:
            if not self.is_open or participant_id not in self.participants:
                return False
            del self.participants[participant_id]
            if not self.participants:
                self._remove()
            return True

    def request_hint(self) -> Dict[str, Any]:
        with self.lock:
            self._require_open()
            available = [i for i in range(self.word_length) if i not in self.revealed]
            if not available:
                raise NoMoreHintsError()
            index = self._rng.choice(available)
            self.revealed.add(index)
            return {
                'index': index,
                'letter': self.answer[index],
                'locationHint': self.location_hint,
            }

    def submit_guess(self, participant_id: str, raw_guess) -> GuessResult:
        with self.lock:
            self._require_open()
            participant = self.participants.get(participant_id)
            if participant is None:
                raise UnknownParticipantError()
            if not isinstance(raw_guess, str):
                raise InvalidGuessError()
            guess = normalize_name(raw_guess)
            if not guess:
                raise InvalidGuessError()
            if len(guess) != self.word_length:
                raise GuessLengthError(self.word_length)
            if self._is_known_word and not self._is_known_word(guess):
                raise UnknownWordError(self.mode)

            participant.guesses.append(guess)
            feedback = evaluate_guess(guess, self.answer)
            won = guess == self.answer
            game_over = won or participant.attempts >= self.max_attempts
            winner_id = participant_id if won else None
            if game_over:
                self._finish(winner_id)
            return GuessResult(
                guess=guess,
                feedback=feedback,
                player=participant_id,
                is_game_over=game_over,
                winner_id=winner_id,
            )

    def post_chat_message(self, participant_id: str, text) -> ChatMessage:
        with self.lock:
            self._require_open()
            if participant_id not in self.participants:
                raise UnknownParticipantError()
            message = ChatMessage.create(participant_id, clean_message_text(text, self._max_message_length))
            return self.messages.append(message)
