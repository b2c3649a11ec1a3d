from uuid import UUID

from hangman.core.error import DomainErrorCode
from hangman.models.player import Player
from hangman.models.time_stamp_mixin import utc_now
from hangman.repositories.base_repository import BaseRepository


class PlayerRepository(BaseRepository[Player]):
    def __init__(self) -> None:
        super().__init__(Player, DomainErrorCode.PLAYER_NOT_FOUND)

    def get_by_room(self, room_id: UUID) -> list[Player]:
        # sorted() is stable, so equal timestamps keep insertion order.
        return sorted(self.filter(room_id=room_id), key=lambda p: p.joined_at)

    def get_by_name(self, room_id: UUID, name: str) -> Player | None:
        return self.filter_one(room_id=room_id, name=name)

    def update_online_status(self, player_id: UUID, is_online: bool) -> Player | None:
        return self.update(player_id, is_online=is_online, last_seen=utc_now())

    def delete_by_room(self, room_id: UUID) -> int:
        players = self.filter(room_id=room_id)
        for player in players:
            self.delete(player.id)
        return len(players)
