import pytest
from fastapi.testclient import TestClient

from hangman.main import app, init_app_state


@pytest.fixture
def ws_client():
    init_app_state(app)

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def send():
    def _send(websocket, message_type, payload=None):
        message = {"type": message_type}
        if payload is not None:
            message["payload"] = payload
        websocket.send_json(message)
        return websocket.receive_json()

    return _send
