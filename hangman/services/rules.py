"""Game rules for a hangman duel.

Every function here is pure: it reads records and returns new values or
result objects, and never touches the store. Callers persist the effects.
"""

import string
from collections.abc import Iterable, Sequence
from uuid import UUID

from hangman.core.error import DomainErrorCode, HangmanDomainError
from hangman.models.player import Player
from hangman.models.round import Round, RoundStatus
from hangman.schemas.game_state import (
    FinalResult,
    GuessOutcome,
    LetterStatus,
    PlayerRanking,
    RoleAssignment,
    RoundEndCheck,
)

WIN_RATE_TOLERANCE = 1e-3


def determine_roles(players: Sequence[Player], round_number: int) -> RoleAssignment:
    """Rotate roles over the room's players in join order.

    Round N (1-indexed) gives the word to player ``(N-1) mod count`` and the
    guess to the next one, so two players swap roles every round.
    """
    if len(players) < 2:
        raise HangmanDomainError(
            code=DomainErrorCode.NOT_ENOUGH_PLAYERS,
            message="Need 2 players to start",
            details={"current_players": len(players)},
        )

    word_giver_index = (round_number - 1) % len(players)
    guesser_index = (word_giver_index + 1) % len(players)
    return RoleAssignment(
        word_giver_id=players[word_giver_index].id,
        guesser_id=players[guesser_index].id,
    )


def is_word_complete(word: str, guessed_letters: Iterable[str]) -> bool:
    guessed = {letter.upper() for letter in guessed_letters}
    return all(char.upper() in guessed for char in word)


def word_display(word: str, guessed_letters: Iterable[str]) -> list[str]:
    guessed = {letter.upper() for letter in guessed_letters}
    return [char.upper() if char.upper() in guessed else "_" for char in word]


def letter_status(letter: str, guessed_letters: Sequence[str], word: str) -> LetterStatus:
    letter = letter.upper()
    if letter not in guessed_letters:
        return "available"
    if letter in word.upper():
        return "correct"
    return "incorrect"


def letter_statuses(word: str, guessed_letters: Sequence[str]) -> dict[str, LetterStatus]:
    return {
        letter: letter_status(letter, guessed_letters, word)
        for letter in string.ascii_uppercase
    }


def apply_guess(game_round: Round, letter: str) -> GuessOutcome:
    letter = letter.upper()
    if letter in game_round.guessed_letters:
        raise HangmanDomainError(
            code=DomainErrorCode.LETTER_ALREADY_GUESSED,
            message="Letter already guessed",
            details={"letter": letter, "round_id": str(game_round.id)},
        )

    is_correct = letter in game_round.word.upper()
    wrong_guesses = game_round.wrong_guesses if is_correct else game_round.wrong_guesses + 1
    return GuessOutcome(
        letter=letter,
        is_correct=is_correct,
        guessed_letters=[*game_round.guessed_letters, letter],
        wrong_guesses=wrong_guesses,
    )


def evaluate_round(game_round: Round, guesser_name: str | None = None) -> RoundEndCheck:
    """Decide whether the round is won, lost or still going.

    A complete word wins even when the wrong-guess budget is also spent.
    """
    if is_word_complete(game_round.word, game_round.guessed_letters):
        return RoundEndCheck(
            round_ended=True,
            status=RoundStatus.WON,
            winner=guesser_name,
            reason="word_guessed",
            points_awarded=1,
        )

    if game_round.wrong_guesses >= game_round.max_guesses:
        return RoundEndCheck(
            round_ended=True,
            status=RoundStatus.LOST,
            reason="max_guesses_reached",
            points_awarded=0,
        )

    return RoundEndCheck(round_ended=False)


def guesser_stats(player_id: UUID, rounds: Iterable[Round]) -> tuple[int, int]:
    """Return (rounds played, rounds won) as guesser, finished rounds only."""
    played = 0
    won = 0
    for game_round in rounds:
        if game_round.guesser_id != player_id:
            continue
        if game_round.status == RoundStatus.IN_PROGRESS:
            continue
        played += 1
        if game_round.status == RoundStatus.WON:
            won += 1
    return played, won


def rank_players(players: Sequence[Player], rounds: Sequence[Round]) -> list[PlayerRanking]:
    rankings = []
    for player in players:
        played, won = guesser_stats(player.id, rounds)
        rankings.append(
            PlayerRanking(
                player_id=player.id,
                name=player.name,
                score=player.score,
                rounds_as_guesser=played,
                wins_as_guesser=won,
                win_rate=won / played if played else 0.0,
            )
        )

    # Stable sort keeps join order among exact ties.
    rankings.sort(key=lambda r: (-r.score, -r.win_rate))
    return rankings


def determine_final_result(players: Sequence[Player], rounds: Sequence[Round]) -> FinalResult:
    rankings = rank_players(players, rounds)
    if not rankings:
        return FinalResult(winner=None, is_draw=False, rankings=rankings)

    if len(rankings) > 1:
        first, second = rankings[0], rankings[1]
        if (
            first.score == second.score
            and abs(first.win_rate - second.win_rate) < WIN_RATE_TOLERANCE
        ):
            return FinalResult(winner=None, is_draw=True, rankings=rankings)

    players_by_id = {player.id: player for player in players}
    return FinalResult(
        winner=players_by_id[rankings[0].player_id],
        is_draw=False,
        rankings=rankings,
    )
