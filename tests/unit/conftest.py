import uuid

import pytest
from fastapi import WebSocket
from fastapi.websockets import WebSocketState

from hangman.core.connection_manager import GameConnectionManager
from hangman.core.session_router import SessionRouter
from hangman.repositories.store import GameStore
from hangman.services.game_service import GameService


@pytest.fixture
def room_id():
    return uuid.uuid4()


@pytest.fixture
def player_id():
    return uuid.uuid4()


@pytest.fixture
def store():
    return GameStore()


@pytest.fixture
def game_service(store):
    return GameService(store)


@pytest.fixture
def two_player_room(game_service):
    room, alice = game_service.create_room("alice")
    _, bob = game_service.join_room(room.room_code, "bob")
    return room, alice, bob


@pytest.fixture
def connection_manager():
    manager = GameConnectionManager()

    yield manager
    manager.active_connections.clear()
    manager.sessions.clear()


@pytest.fixture
def session_router(game_service, connection_manager):
    return SessionRouter(game_service, connection_manager)


@pytest.fixture
def make_websocket(mocker):
    def _make() -> WebSocket:
        websocket = mocker.AsyncMock(spec=WebSocket)
        websocket.client_state = WebSocketState.CONNECTED
        return websocket

    return _make
