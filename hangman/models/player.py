from datetime import datetime
from uuid import UUID, uuid4

from pydantic import Field

from hangman.models.time_stamp_mixin import utc_now
from hangman.schemas.common import CamelModel


class Player(CamelModel):
    id: UUID = Field(default_factory=uuid4)
    room_id: UUID
    name: str
    score: int = Field(default=0, ge=0)
    is_online: bool = Field(default=True)
    is_creator: bool = Field(default=False)
    joined_at: datetime = Field(default_factory=utc_now)
    last_seen: datetime = Field(default_factory=utc_now)
