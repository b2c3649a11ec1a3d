from collections.abc import Sequence

from hangman.models.guess_event import GuessEvent
from hangman.models.player import Player
from hangman.models.room import Room
from hangman.models.round import Round, RoundStatus
from hangman.schemas.game_state import GameState
from hangman.services.rules import letter_statuses, word_display


def assemble_game_state(
    room: Room,
    players: Sequence[Player],
    history: Sequence[GuessEvent],
    rounds: Sequence[Round],
) -> GameState:
    current_round = next(
        (r for r in rounds if r.status == RoundStatus.IN_PROGRESS),
        None,
    )

    return GameState(
        room=room,
        players=list(players),
        history=list(history),
        rounds=list(rounds),
        current_round=current_round,
        word_display=(
            word_display(current_round.word, current_round.guessed_letters)
            if current_round
            else None
        ),
        letter_statuses=(
            letter_statuses(current_round.word, current_round.guessed_letters)
            if current_round
            else None
        ),
    )
