from datetime import UTC, datetime

from pydantic import Field

from hangman.schemas.common import CamelModel


def utc_now() -> datetime:
    return datetime.now(UTC)


class TimeStampMixin(CamelModel):
    created_at: datetime = Field(default_factory=utc_now)
