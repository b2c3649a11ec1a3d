import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from hangman.main import app, init_app_state


@pytest_asyncio.fixture
async def client():
    init_app_state(app)

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client_instance:
        yield client_instance, app.state.session_router.game_service

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def finished_round(client):
    client_instance, game_service = client

    room, alice = game_service.create_room("alice")
    _, bob = game_service.join_room(room.room_code, "bob")
    game_service.start_game(room.id, alice.id)
    game_service.set_word(room.id, alice.id, "HI")
    for letter in ["X", "H", "I"]:
        game_service.guess_letter(room.id, bob.id, letter)

    return client_instance, room
