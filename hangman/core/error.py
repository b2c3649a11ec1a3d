from enum import Enum
from typing import Any


class DomainErrorCode(str, Enum):
    INVALID_MESSAGE_FORMAT = "INVALID_MESSAGE_FORMAT"
    INVALID_PLAYER_NAME = "INVALID_PLAYER_NAME"
    INVALID_WORD = "INVALID_WORD"
    INVALID_HINT = "INVALID_HINT"
    INVALID_LETTER = "INVALID_LETTER"
    INVALID_DIFFICULTY = "INVALID_DIFFICULTY"

    ROOM_NOT_FOUND = "ROOM_NOT_FOUND"
    ROOM_IS_FULL = "ROOM_IS_FULL"
    ROOM_CODE_EXHAUSTED = "ROOM_CODE_EXHAUSTED"
    ROUND_NOT_FOUND = "ROUND_NOT_FOUND"
    GUESS_EVENT_NOT_FOUND = "GUESS_EVENT_NOT_FOUND"

    PLAYER_NOT_FOUND = "PLAYER_NOT_FOUND"
    PLAYER_NAME_TAKEN = "PLAYER_NAME_TAKEN"
    NOT_IN_ROOM = "NOT_IN_ROOM"

    NOT_ENOUGH_PLAYERS = "NOT_ENOUGH_PLAYERS"
    GAME_ALREADY_STARTED = "GAME_ALREADY_STARTED"
    NOT_ROOM_CREATOR = "NOT_ROOM_CREATOR"
    NOT_WORD_SETTING_PHASE = "NOT_WORD_SETTING_PHASE"
    NOT_WORD_GIVER = "NOT_WORD_GIVER"
    NOT_GUESSING_PHASE = "NOT_GUESSING_PHASE"
    NOT_GUESSER = "NOT_GUESSER"
    LETTER_ALREADY_GUESSED = "LETTER_ALREADY_GUESSED"
    ROUND_NOT_FINISHED = "ROUND_NOT_FINISHED"


class HangmanDomainError(Exception):
    def __init__(
        self,
        code: DomainErrorCode,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.code = code
        self.message = message or code.name
        self.details = details or {}
        super().__init__(self.message)
