from typing import Literal
from uuid import UUID

from hangman.models.guess_event import GuessEvent
from hangman.models.player import Player
from hangman.models.room import Room
from hangman.models.round import Round, RoundStatus
from hangman.schemas.common import CamelModel

RoundEndReason = Literal["word_guessed", "max_guesses_reached"]
LetterStatus = Literal["available", "correct", "incorrect"]


class GameState(CamelModel):
    room: Room
    players: list[Player]
    history: list[GuessEvent]
    rounds: list[Round]
    current_round: Round | None = None
    word_display: list[str] | None = None
    letter_statuses: dict[str, LetterStatus] | None = None


class RoleAssignment(CamelModel):
    word_giver_id: UUID
    guesser_id: UUID


class GuessOutcome(CamelModel):
    letter: str
    is_correct: bool
    guessed_letters: list[str]
    wrong_guesses: int


class RoundEndCheck(CamelModel):
    round_ended: bool
    status: RoundStatus = RoundStatus.IN_PROGRESS
    winner: str | None = None
    reason: RoundEndReason | None = None
    points_awarded: int = 0


class PlayerRanking(CamelModel):
    player_id: UUID
    name: str
    score: int
    rounds_as_guesser: int
    wins_as_guesser: int
    win_rate: float


class FinalResult(CamelModel):
    winner: Player | None = None
    is_draw: bool = False
    rankings: list[PlayerRanking]
