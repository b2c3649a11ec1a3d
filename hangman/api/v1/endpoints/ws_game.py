import logging
from uuid import UUID

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, status
from fastapi.websockets import WebSocketState

from hangman.core.config import settings
from hangman.core.session_router import SessionRouter
from hangman.dependencies.services import get_session_router

logger = logging.getLogger(__name__)

router = APIRouter()


class GameWebSocketHandler:
    def __init__(self, websocket: WebSocket, session_router: SessionRouter):
        self.websocket = websocket
        self.session_router = session_router
        self.connection_id: UUID | None = None

    async def handle_connection(self) -> bool:
        result = True
        try:
            self.connection_id = await self.session_router.connect(self.websocket)
            await self.handle_messages()
        except WebSocketDisconnect:
            await self.handle_disconnection()
            result = False
        except Exception as e:
            await self.handle_error(e)
            result = False

        return result

    async def handle_messages(self) -> None:
        while True:
            message = await self.websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", status.WS_1000_NORMAL_CLOSURE))

            raw = message.get("text")
            if raw is None:
                raw = message.get("bytes") or b""

            await self.session_router.handle_raw(self.connection_id, raw)

    async def handle_disconnection(self) -> None:
        if self.connection_id is None:
            return
        await self.session_router.disconnect(self.connection_id)
        self.connection_id = None

    async def handle_error(self, e: Exception) -> None:
        logger.exception("WebSocket handler failed for connection %s", self.connection_id)
        await self.handle_disconnection()
        if self.websocket.client_state == WebSocketState.CONNECTED:
            await self.websocket.close(code=status.WS_1011_INTERNAL_ERROR, reason=str(e))


@router.websocket(settings.WS_PATH)
async def game_websocket(
    websocket: WebSocket,
    session_router: SessionRouter = Depends(get_session_router),
):
    handler = GameWebSocketHandler(websocket, session_router)
    await handler.handle_connection()
