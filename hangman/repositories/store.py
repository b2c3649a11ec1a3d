import logging
from uuid import UUID

from hangman.repositories.guess_history_repository import GuessHistoryRepository
from hangman.repositories.player_repository import PlayerRepository
from hangman.repositories.room_repository import RoomRepository
from hangman.repositories.round_repository import RoundRepository
from hangman.schemas.game_state import GameState
from hangman.services.snapshot_service import assemble_game_state

logger = logging.getLogger(__name__)


class GameStore:
    """Authoritative in-memory state for every room in the process."""

    def __init__(
        self,
        room_repository: RoomRepository | None = None,
        player_repository: PlayerRepository | None = None,
        round_repository: RoundRepository | None = None,
        history_repository: GuessHistoryRepository | None = None,
    ):
        self.rooms = room_repository or RoomRepository()
        self.players = player_repository or PlayerRepository()
        self.rounds = round_repository or RoundRepository()
        self.history = history_repository or GuessHistoryRepository()

    def delete_room(self, room_id: UUID) -> bool:
        room = self.rooms.get_by_uuid(room_id)
        if room is None:
            return False

        self.history.clear(room_id)
        self.rounds.delete_by_room(room_id)
        self.players.delete_by_room(room_id)
        self.rooms.delete(room_id)
        logger.info("Room %s deleted", room.room_code)
        return True

    def get_game_state(self, room_code: str) -> GameState | None:
        room = self.rooms.get_by_code(room_code)
        if room is None:
            return None

        return assemble_game_state(
            room=room,
            players=self.players.get_by_room(room.id),
            history=self.history.get_by_room(room.id),
            rounds=self.rounds.get_by_room(room.id),
        )
