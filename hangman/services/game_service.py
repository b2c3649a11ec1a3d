import logging
from uuid import UUID

from hangman.core.config import settings
from hangman.core.error import DomainErrorCode, HangmanDomainError
from hangman.models.guess_event import GuessEvent
from hangman.models.player import Player
from hangman.models.room import GameStatus, Room
from hangman.models.round import Round, RoundStatus
from hangman.models.time_stamp_mixin import utc_now
from hangman.repositories.store import GameStore
from hangman.schemas.game_state import FinalResult, GameState, PlayerRanking, RoundEndCheck
from hangman.services import rules

logger = logging.getLogger(__name__)


class GameService:
    """Command semantics of a hangman duel room.

    Methods are synchronous: each one reads the store, checks phase and role
    preconditions, applies the rules and writes the result back. A rejected
    command raises ``HangmanDomainError`` before anything is written.
    """

    def __init__(self, store: GameStore):
        self.store = store

    def _get_room(self, room_id: UUID) -> Room:
        return self.store.rooms.filter_one_or_raise(id=room_id)

    def _get_room_by_code(self, room_code: str) -> Room:
        room = self.store.rooms.get_by_code(room_code)
        if room is None:
            raise HangmanDomainError(
                code=DomainErrorCode.ROOM_NOT_FOUND,
                message="Room not found",
                details={"room_code": room_code},
            )
        return room

    def create_room(self, player_name: str) -> tuple[Room, Player]:
        room = self.store.rooms.create_with_room_code(
            max_guesses=settings.DEFAULT_MAX_GUESSES
        )
        player = self.store.players.create(
            Player(room_id=room.id, name=player_name, is_creator=True)
        )
        logger.info("Room %s created by %s", room.room_code, player.name)
        return room, player

    def join_room(self, room_code: str, player_name: str) -> tuple[Room, Player]:
        room = self._get_room_by_code(room_code)

        players = self.store.players.get_by_room(room.id)
        if len(players) >= settings.MAX_PLAYERS_PER_ROOM:
            raise HangmanDomainError(
                code=DomainErrorCode.ROOM_IS_FULL,
                message="Room is full",
                details={
                    "room_code": room.room_code,
                    "max_players": settings.MAX_PLAYERS_PER_ROOM,
                },
            )

        if any(player.name == player_name for player in players):
            raise HangmanDomainError(
                code=DomainErrorCode.PLAYER_NAME_TAKEN,
                message="Player name already taken in this room",
                details={"room_code": room.room_code, "name": player_name},
            )

        player = self.store.players.create(
            Player(room_id=room.id, name=player_name, is_creator=not players)
        )
        logger.info("Player %s joined room %s", player.name, room.room_code)
        return room, player

    def rejoin_room(self, room_code: str, player_name: str) -> tuple[Room, Player]:
        room = self._get_room_by_code(room_code)

        player = self.store.players.get_by_name(room.id, player_name)
        if player is None:
            raise HangmanDomainError(
                code=DomainErrorCode.PLAYER_NOT_FOUND,
                message="Player not found in this room",
                details={"room_code": room.room_code, "name": player_name},
            )

        player = self.store.players.update_online_status(player.id, True)
        logger.info("Player %s rejoined room %s", player.name, room.room_code)
        return room, player

    def start_game(
        self, room_id: UUID, player_id: UUID, max_guesses: int | None = None
    ) -> Room:
        room = self._get_room(room_id)

        if room.game_status != GameStatus.WAITING:
            raise HangmanDomainError(
                code=DomainErrorCode.GAME_ALREADY_STARTED,
                message="Game has already started",
                details={"room_code": room.room_code, "status": room.game_status.value},
            )

        players = self.store.players.get_by_room(room.id)
        if len(players) < settings.MIN_PLAYERS_TO_START:
            raise HangmanDomainError(
                code=DomainErrorCode.NOT_ENOUGH_PLAYERS,
                message="Need 2 players to start",
                details={"current_players": len(players)},
            )

        if max_guesses is None:
            max_guesses = settings.DEFAULT_MAX_GUESSES
        else:
            player = self.store.players.filter_one_or_raise(id=player_id, room_id=room.id)
            if not player.is_creator:
                raise HangmanDomainError(
                    code=DomainErrorCode.NOT_ROOM_CREATOR,
                    message="Only the room creator can set the difficulty",
                    details={"player_id": str(player_id)},
                )
            if not settings.MIN_MAX_GUESSES <= max_guesses <= settings.MAX_MAX_GUESSES:
                raise HangmanDomainError(
                    code=DomainErrorCode.INVALID_DIFFICULTY,
                    message=(
                        f"Max guesses must be between {settings.MIN_MAX_GUESSES}"
                        f" and {settings.MAX_MAX_GUESSES}"
                    ),
                    details={"max_guesses": max_guesses},
                )

        roles = rules.determine_roles(players, 1)
        room = self.store.rooms.update(
            room.id,
            game_status=GameStatus.WORD_SETTING,
            round_number=1,
            word_giver_id=roles.word_giver_id,
            guesser_id=roles.guesser_id,
            max_guesses=max_guesses,
        )
        logger.info("Game started in room %s (max guesses %d)", room.room_code, max_guesses)
        return room

    def set_word(
        self, room_id: UUID, player_id: UUID, word: str, hint: str | None = None
    ) -> Round:
        room = self._get_room(room_id)

        if room.game_status != GameStatus.WORD_SETTING:
            raise HangmanDomainError(
                code=DomainErrorCode.NOT_WORD_SETTING_PHASE,
                message="Not accepting a word right now",
                details={"status": room.game_status.value},
            )

        if room.word_giver_id != player_id:
            raise HangmanDomainError(
                code=DomainErrorCode.NOT_WORD_GIVER,
                message="Not your turn to set the word",
                details={"player_id": str(player_id)},
            )

        word = word.upper()
        game_round = self.store.rounds.create(
            Round(
                room_id=room.id,
                round_number=room.round_number,
                word_giver_id=room.word_giver_id,
                guesser_id=room.guesser_id,
                word=word,
                hint=hint,
                max_guesses=room.max_guesses,
            )
        )
        self.store.rooms.update(
            room.id,
            game_status=GameStatus.GUESSING,
            current_word=word,
            hint=hint,
        )
        self.store.history.clear(room.id)
        logger.info(
            "Word set for round %d in room %s (%d letters)",
            game_round.round_number,
            room.room_code,
            len(word),
        )
        return game_round

    def guess_letter(self, room_id: UUID, player_id: UUID, letter: str) -> RoundEndCheck:
        room = self._get_room(room_id)

        if room.game_status != GameStatus.GUESSING:
            raise HangmanDomainError(
                code=DomainErrorCode.NOT_GUESSING_PHASE,
                message="Not accepting guesses right now",
                details={"status": room.game_status.value},
            )

        game_round = self.store.rounds.get_current_round(room.id)
        if game_round is None:
            raise HangmanDomainError(
                code=DomainErrorCode.ROUND_NOT_FOUND,
                message="No round in progress",
                details={"room_code": room.room_code},
            )

        if room.guesser_id != player_id:
            raise HangmanDomainError(
                code=DomainErrorCode.NOT_GUESSER,
                message="Not your turn to guess",
                details={"player_id": str(player_id)},
            )

        outcome = rules.apply_guess(game_round, letter)
        game_round = self.store.rounds.update(
            game_round.id,
            guessed_letters=outcome.guessed_letters,
            wrong_guesses=outcome.wrong_guesses,
        )
        self.store.history.add(
            GuessEvent(
                room_id=room.id,
                player_id=player_id,
                letter=outcome.letter,
                is_correct=outcome.is_correct,
            )
        )

        guesser = self.store.players.get_by_uuid(player_id)
        check = rules.evaluate_round(game_round, guesser.name if guesser else None)
        if not check.round_ended:
            return check

        self.store.rounds.update(
            game_round.id,
            status=check.status,
            points_awarded=check.points_awarded,
            completed_at=utc_now(),
        )
        if check.status == RoundStatus.WON and guesser is not None:
            self.store.players.update(guesser.id, score=guesser.score + check.points_awarded)
        self.store.rooms.update(room.id, game_status=GameStatus.ROUND_FINISHED)
        logger.info(
            "Round %d in room %s ended: %s",
            game_round.round_number,
            room.room_code,
            check.status.value,
        )
        return check

    def start_round(self, room_id: UUID) -> Room:
        room = self._get_room(room_id)

        if room.game_status != GameStatus.ROUND_FINISHED:
            raise HangmanDomainError(
                code=DomainErrorCode.ROUND_NOT_FINISHED,
                message="Round is not finished",
                details={"status": room.game_status.value},
            )

        round_number = room.round_number + 1
        roles = rules.determine_roles(self.store.players.get_by_room(room.id), round_number)
        room = self.store.rooms.update(
            room.id,
            game_status=GameStatus.WORD_SETTING,
            round_number=round_number,
            word_giver_id=roles.word_giver_id,
            guesser_id=roles.guesser_id,
            current_word=None,
            hint=None,
        )
        logger.info("Round %d started in room %s", round_number, room.room_code)
        return room

    def end_game(self, room_id: UUID) -> FinalResult:
        room = self._get_room(room_id)

        result = rules.determine_final_result(
            self.store.players.get_by_room(room.id),
            self.store.rounds.get_by_room(room.id),
        )
        self.store.rooms.update(room.id, game_status=GameStatus.GAME_FINISHED)

        if result.is_draw:
            logger.info("Game in room %s ended in a draw", room.room_code)
        else:
            logger.info(
                "Game in room %s ended, winner: %s",
                room.room_code,
                result.winner.name if result.winner else None,
            )
        return result

    def mark_offline(self, player_id: UUID) -> Player | None:
        player = self.store.players.update_online_status(player_id, False)
        if player is not None:
            logger.info("Player %s went offline", player.name)
        return player

    def find_room(self, room_code: str) -> Room | None:
        return self.store.rooms.get_by_code(room_code)

    def find_game_state(self, room_code: str) -> GameState | None:
        return self.store.get_game_state(room_code)

    def get_game_state(self, room_code: str) -> GameState:
        state = self.store.get_game_state(room_code)
        if state is None:
            raise HangmanDomainError(
                code=DomainErrorCode.ROOM_NOT_FOUND,
                message="Room not found",
                details={"room_code": room_code},
            )
        return state

    def get_rankings(self, room_code: str) -> list[PlayerRanking]:
        room = self._get_room_by_code(room_code)
        return rules.rank_players(
            self.store.players.get_by_room(room.id),
            self.store.rounds.get_by_room(room.id),
        )

    def delete_room(self, room_code: str) -> Room:
        room = self._get_room_by_code(room_code)
        self.store.delete_room(room.id)
        return room
