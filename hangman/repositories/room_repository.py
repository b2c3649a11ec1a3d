import logging
import secrets
import string
from typing import Any
from uuid import UUID

from hangman.core.config import settings
from hangman.core.error import DomainErrorCode, HangmanDomainError
from hangman.models.room import Room
from hangman.repositories.base_repository import BaseRepository

logger = logging.getLogger(__name__)

ROOM_CODE_ALPHABET = string.ascii_uppercase + string.digits


class RoomRepository(BaseRepository[Room]):
    def __init__(self) -> None:
        super().__init__(Room, DomainErrorCode.ROOM_NOT_FOUND)
        self._room_codes: dict[str, UUID] = {}

    @staticmethod
    def generate_room_code(length: int | None = None) -> str:
        length = length or settings.ROOM_CODE_LENGTH
        return "".join(secrets.choice(ROOM_CODE_ALPHABET) for _ in range(length))

    def create(self, entity: Room) -> Room:
        if entity.room_code in self._room_codes:
            raise HangmanDomainError(
                code=DomainErrorCode.ROOM_CODE_EXHAUSTED,
                message=f"Room code {entity.room_code} is already in use",
                details={"room_code": entity.room_code},
            )
        created = super().create(entity)
        self._room_codes[created.room_code] = created.id
        return created

    def create_with_room_code(self, **fields: Any) -> Room:
        for _ in range(settings.ROOM_CODE_MAX_ATTEMPTS):
            room_code = self.generate_room_code()
            if room_code not in self._room_codes:
                return self.create(Room(room_code=room_code, **fields))
            logger.debug("Room code collision on %s, retrying", room_code)

        raise HangmanDomainError(
            code=DomainErrorCode.ROOM_CODE_EXHAUSTED,
            message="Could not allocate a room code",
            details={"attempts": settings.ROOM_CODE_MAX_ATTEMPTS},
        )

    def get_by_code(self, room_code: str) -> Room | None:
        room_id = self._room_codes.get(room_code)
        if room_id is None:
            return None
        return self.get_by_uuid(room_id)

    def update(self, uuid: UUID, **fields: Any) -> Room | None:
        previous = self.get_by_uuid(uuid)
        updated = super().update(uuid, **fields)
        if previous is not None and updated is not None:
            if previous.room_code != updated.room_code:
                del self._room_codes[previous.room_code]
                self._room_codes[updated.room_code] = updated.id
        return updated

    def delete(self, uuid: UUID) -> bool:
        room = self.get_by_uuid(uuid)
        if room is not None:
            self._room_codes.pop(room.room_code, None)
        return super().delete(uuid)
