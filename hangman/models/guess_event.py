from datetime import datetime
from uuid import UUID, uuid4

from pydantic import Field

from hangman.models.time_stamp_mixin import utc_now
from hangman.schemas.common import CamelModel


class GuessEvent(CamelModel):
    id: UUID = Field(default_factory=uuid4)
    room_id: UUID
    player_id: UUID
    letter: str = Field(min_length=1, max_length=1)
    is_correct: bool
    timestamp: datetime = Field(default_factory=utc_now)
