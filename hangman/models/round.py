from datetime import datetime
from enum import Enum
from uuid import UUID, uuid4

from pydantic import Field

from hangman.models.time_stamp_mixin import TimeStampMixin


class RoundStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    WON = "won"
    LOST = "lost"


class Round(TimeStampMixin):
    id: UUID = Field(default_factory=uuid4)
    room_id: UUID
    round_number: int = Field(ge=1)
    word_giver_id: UUID
    guesser_id: UUID
    word: str
    hint: str | None = None

    # Insertion order is display order.
    guessed_letters: list[str] = Field(default_factory=list)
    wrong_guesses: int = Field(default=0, ge=0)
    max_guesses: int = Field(ge=1)

    status: RoundStatus = RoundStatus.IN_PROGRESS
    points_awarded: int = Field(default=0, ge=0)
    completed_at: datetime | None = None
