from fastapi import Depends
from starlette.requests import HTTPConnection

from hangman.core.error import DomainErrorCode, HangmanDomainError
from hangman.models.room import Room
from hangman.repositories.store import GameStore
from hangman.util.validators import normalize_room_code


def get_store(conn: HTTPConnection) -> GameStore:
    return conn.app.state.store


def get_room_by_code(
    room_code: str,
    store: GameStore = Depends(get_store),
) -> Room:
    room = store.rooms.get_by_code(normalize_room_code(room_code))
    if room is None:
        raise HangmanDomainError(
            code=DomainErrorCode.ROOM_NOT_FOUND,
            message="Room not found",
            details={"room_code": room_code},
        )
    return room
