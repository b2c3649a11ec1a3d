from fastapi import Depends
from starlette.requests import HTTPConnection

from hangman.core.session_router import SessionRouter
from hangman.dependencies.repositories import get_store
from hangman.repositories.store import GameStore
from hangman.services.game_service import GameService


def get_game_service(store: GameStore = Depends(get_store)) -> GameService:
    return GameService(store)


def get_session_router(conn: HTTPConnection) -> SessionRouter:
    return conn.app.state.session_router
