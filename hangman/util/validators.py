import re

from hangman.core.config import settings
from hangman.core.error import DomainErrorCode, HangmanDomainError

_LETTERS = re.compile(r"^[A-Za-z]+$")


def validate_player_name(name: str) -> str:
    name = name.strip()

    if not name:
        raise HangmanDomainError(
            code=DomainErrorCode.INVALID_PLAYER_NAME,
            message="Player name is required",
            details={"name": name},
        )

    if len(name) > settings.MAX_PLAYER_NAME_LENGTH:
        raise HangmanDomainError(
            code=DomainErrorCode.INVALID_PLAYER_NAME,
            message=f"Player name must be {settings.MAX_PLAYER_NAME_LENGTH} characters or less",
            details={"name": name, "length": len(name)},
        )

    if any(ord(ch) < 32 for ch in name) or "<" in name or ">" in name:
        raise HangmanDomainError(
            code=DomainErrorCode.INVALID_PLAYER_NAME,
            message="Player name contains invalid characters",
            details={"name": name},
        )

    return name


def validate_word(word: str) -> str:
    word = word.strip()

    if not word:
        raise HangmanDomainError(
            code=DomainErrorCode.INVALID_WORD,
            message="Word is required",
        )

    if len(word) > settings.MAX_WORD_LENGTH:
        raise HangmanDomainError(
            code=DomainErrorCode.INVALID_WORD,
            message=f"Word must be {settings.MAX_WORD_LENGTH} letters or less",
            details={"length": len(word)},
        )

    if not _LETTERS.match(word):
        raise HangmanDomainError(
            code=DomainErrorCode.INVALID_WORD,
            message="Word can only contain the letters A-Z",
        )

    return word.upper()


def validate_hint(hint: str | None) -> str | None:
    if hint is None:
        return None

    hint = hint.strip()
    if not hint:
        return None

    if len(hint) > settings.MAX_HINT_LENGTH:
        raise HangmanDomainError(
            code=DomainErrorCode.INVALID_HINT,
            message=f"Hint must be {settings.MAX_HINT_LENGTH} characters or less",
            details={"length": len(hint)},
        )

    return hint


def validate_letter(letter: str) -> str:
    if len(letter) != 1 or not _LETTERS.match(letter):
        raise HangmanDomainError(
            code=DomainErrorCode.INVALID_LETTER,
            message="Guess must be a single letter",
            details={"letter": letter},
        )
    return letter.upper()


def normalize_room_code(room_code: str) -> str:
    return room_code.strip().upper()
