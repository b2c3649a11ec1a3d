import asyncio
import logging
from dataclasses import dataclass
from typing import Any
from uuid import UUID, uuid4

from fastapi import WebSocket
from fastapi.encoders import jsonable_encoder
from fastapi.websockets import WebSocketState

from hangman.core.config import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlayerSession:
    player_id: UUID
    room_id: UUID
    room_code: str


class GameConnectionManager:
    """Owns the two live tables: connection id -> socket, connection id -> session.

    A connection exists from accept until close; it has a session only while
    it is associated with a player in a room. A send that does not finish
    within `send_timeout` drops the socket from the table; its session stays
    until the transport reports the disconnect.
    """

    def __init__(self, send_timeout: float | None = None) -> None:
        self.send_timeout = settings.WS_SEND_TIMEOUT if send_timeout is None else send_timeout
        self.active_connections: dict[UUID, WebSocket] = {}
        self.sessions: dict[UUID, PlayerSession] = {}

    async def connect(self, websocket: WebSocket) -> UUID:
        await websocket.accept()

        connection_id = uuid4()
        self.active_connections[connection_id] = websocket
        return connection_id

    def disconnect(self, connection_id: UUID) -> PlayerSession | None:
        self.active_connections.pop(connection_id, None)
        return self.sessions.pop(connection_id, None)

    def bind(self, connection_id: UUID, session: PlayerSession) -> None:
        self.sessions[connection_id] = session

    def unbind(self, connection_id: UUID) -> PlayerSession | None:
        return self.sessions.pop(connection_id, None)

    def get_session(self, connection_id: UUID) -> PlayerSession | None:
        return self.sessions.get(connection_id)

    def connections_for_player(self, player_id: UUID) -> list[UUID]:
        return [
            connection_id
            for connection_id, session in self.sessions.items()
            if session.player_id == player_id
        ]

    def get_room_connections(self, room_id: UUID) -> list[UUID]:
        return [
            connection_id
            for connection_id, session in self.sessions.items()
            if session.room_id == room_id
        ]

    def detach_room(self, room_id: UUID) -> list[UUID]:
        detached = self.get_room_connections(room_id)
        for connection_id in detached:
            del self.sessions[connection_id]
        return detached

    async def _send(self, connection_id: UUID, json_message: Any) -> None:
        connection = self.active_connections.get(connection_id)
        if connection is None:
            return
        try:
            if connection.client_state == WebSocketState.CONNECTED:
                await asyncio.wait_for(connection.send_json(json_message), self.send_timeout)
        except TimeoutError:
            self.active_connections.pop(connection_id, None)
            logger.warning(
                "Timed out sending to connection %s after %.1fs, dropping it",
                connection_id,
                self.send_timeout,
            )
        except Exception:
            logger.warning("Failed to send message to connection %s", connection_id)

    async def send_personal_message(self, message: dict, connection_id: UUID) -> None:
        await self._send(connection_id, jsonable_encoder(message))

    async def broadcast(
        self,
        message: dict,
        room_id: UUID,
        exclude_connection_id: UUID | None = None,
    ) -> None:
        json_message = jsonable_encoder(message)
        await asyncio.gather(
            *(
                self._send(connection_id, json_message)
                for connection_id in self.get_room_connections(room_id)
                if connection_id != exclude_connection_id
            )
        )
