from uuid import UUID

from hangman.core.error import DomainErrorCode
from hangman.models.round import Round, RoundStatus
from hangman.repositories.base_repository import BaseRepository


class RoundRepository(BaseRepository[Round]):
    def __init__(self) -> None:
        super().__init__(Round, DomainErrorCode.ROUND_NOT_FOUND)

    def get_by_room(self, room_id: UUID) -> list[Round]:
        return sorted(self.filter(room_id=room_id), key=lambda r: r.round_number)

    def get_round(self, room_id: UUID, round_number: int) -> Round | None:
        return self.filter_one(room_id=room_id, round_number=round_number)

    def get_current_round(self, room_id: UUID) -> Round | None:
        for game_round in self.get_by_room(room_id):
            if game_round.status == RoundStatus.IN_PROGRESS:
                return game_round
        return None

    def delete_by_room(self, room_id: UUID) -> int:
        rounds = self.filter(room_id=room_id)
        for game_round in rounds:
            self.delete(game_round.id)
        return len(rounds)
