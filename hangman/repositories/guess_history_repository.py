from uuid import UUID

from hangman.core.error import DomainErrorCode
from hangman.models.guess_event import GuessEvent
from hangman.repositories.base_repository import BaseRepository


class GuessHistoryRepository(BaseRepository[GuessEvent]):
    """Append-only guess log, scoped to the round currently on display."""

    def __init__(self) -> None:
        super().__init__(GuessEvent, DomainErrorCode.GUESS_EVENT_NOT_FOUND)

    def add(self, event: GuessEvent) -> GuessEvent:
        return self.create(event)

    def get_by_room(self, room_id: UUID) -> list[GuessEvent]:
        return sorted(self.filter(room_id=room_id), key=lambda e: e.timestamp)

    def clear(self, room_id: UUID) -> int:
        events = self.filter(room_id=room_id)
        for event in events:
            self.delete(event.id)
        return len(events)
