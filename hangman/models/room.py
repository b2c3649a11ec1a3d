from enum import Enum
from uuid import UUID, uuid4

from pydantic import Field

from hangman.models.time_stamp_mixin import TimeStampMixin


class GameStatus(str, Enum):
    WAITING = "waiting"
    WORD_SETTING = "word_setting"
    GUESSING = "guessing"
    ROUND_FINISHED = "round_finished"
    GAME_FINISHED = "game_finished"


class Room(TimeStampMixin):
    id: UUID = Field(default_factory=uuid4)
    room_code: str
    game_status: GameStatus = GameStatus.WAITING
    round_number: int = Field(default=1, ge=1)

    # Only meaningful outside WAITING.
    word_giver_id: UUID | None = None
    guesser_id: UUID | None = None

    # Only set during WORD_SETTING/GUESSING of the current round.
    current_word: str | None = None
    hint: str | None = None

    max_guesses: int = Field(default=6, ge=1)
