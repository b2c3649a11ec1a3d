import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import AsyncExitStack, asynccontextmanager
from typing import Any
from uuid import UUID

from fastapi import WebSocket

from hangman.core.connection_manager import GameConnectionManager, PlayerSession
from hangman.core.error import DomainErrorCode, HangmanDomainError
from hangman.models.player import Player
from hangman.models.room import Room
from hangman.schemas.ws import (
    EmptyPayload,
    GuessLetterPayload,
    InboundMessage,
    JoinRoomMessage,
    JoinRoomPayload,
    MessageType,
    RejoinRoomMessage,
    RejoinRoomPayload,
    SetWordPayload,
    StartGamePayload,
    decode_message,
    encode_error,
    encode_game_state_update,
)
from hangman.services.game_service import GameService

logger = logging.getLogger(__name__)


class SessionRouter:
    """Routes inbound frames to game commands and fans snapshots back out.

    Each command runs under the lock of every room it touches: the room bound
    to the connection and, for join and rejoin, the target room. Rooms never
    wait on each other; error replies are sent after the locks are released.
    """

    def __init__(
        self,
        game_service: GameService,
        connection_manager: GameConnectionManager,
    ):
        self.game_service = game_service
        self.connection_manager = connection_manager
        self._room_locks: dict[str, asyncio.Lock] = {}

        self.message_handlers = {
            MessageType.JOIN_ROOM: self.handle_join_room,
            MessageType.REJOIN_ROOM: self.handle_rejoin_room,
            MessageType.START_GAME: self.handle_start_game,
            MessageType.SET_WORD: self.handle_set_word,
            MessageType.GUESS_LETTER: self.handle_guess_letter,
            MessageType.START_ROUND: self.handle_start_round,
            MessageType.END_GAME: self.handle_end_game,
            MessageType.LEAVE_ROOM: self.handle_leave_room,
        }

    async def connect(self, websocket: WebSocket) -> UUID:
        connection_id = await self.connection_manager.connect(websocket)
        logger.debug("Connection %s opened", connection_id)
        return connection_id

    async def handle_raw(self, connection_id: UUID, raw: str | bytes) -> None:
        try:
            message = decode_message(raw)
            async with self._locked(connection_id, message):
                await self.dispatch(connection_id, message)
        except HangmanDomainError as e:
            logger.info(
                "Rejected message from connection %s: %s (%s)",
                connection_id,
                e.code.value,
                e.message,
            )
            await self.connection_manager.send_personal_message(
                encode_error(e.message), connection_id
            )
        except Exception:
            logger.exception(
                "Unexpected error while handling message from connection %s",
                connection_id,
            )
            await self.connection_manager.send_personal_message(
                encode_error("Internal server error"), connection_id
            )

    async def dispatch(self, connection_id: UUID, message: InboundMessage) -> None:
        handler = self.message_handlers[MessageType(message.type)]
        await handler(connection_id, message.payload)

    async def disconnect(self, connection_id: UUID) -> None:
        async with self._locked(connection_id):
            session = self.connection_manager.disconnect(connection_id)
            logger.debug("Connection %s closed", connection_id)
            if session is not None:
                await self._leave(session)

    async def close_room(self, room_code: str) -> Room:
        lock = self._room_lock(room_code)
        try:
            async with lock:
                room = self.game_service.delete_room(room_code)
                detached = self.connection_manager.detach_room(room.id)
                logger.info(
                    "Room %s closed, %d connection(s) detached", room.room_code, len(detached)
                )
                return room
        finally:
            if self._room_locks.get(room_code) is lock:
                del self._room_locks[room_code]

    def _room_lock(self, room_code: str) -> asyncio.Lock:
        return self._room_locks.setdefault(room_code, asyncio.Lock())

    def _rooms_touched(
        self, connection_id: UUID, message: InboundMessage | None = None
    ) -> list[str]:
        room_codes = set()

        session = self.connection_manager.get_session(connection_id)
        if session is not None:
            room_codes.add(session.room_code)

        if isinstance(message, JoinRoomMessage | RejoinRoomMessage):
            target = message.payload.room_code
            if target and self.game_service.find_room(target) is not None:
                room_codes.add(target)

        return sorted(room_codes)

    @asynccontextmanager
    async def _locked(
        self, connection_id: UUID, message: InboundMessage | None = None
    ) -> AsyncIterator[None]:
        # Locks are taken in code order; a binding or room that changed while
        # waiting means the wrong set was taken, so start over.
        while True:
            room_codes = self._rooms_touched(connection_id, message)
            async with AsyncExitStack() as stack:
                held = []
                for room_code in room_codes:
                    lock = self._room_lock(room_code)
                    await stack.enter_async_context(lock)
                    held.append((room_code, lock))

                still_valid = self._rooms_touched(connection_id, message) == room_codes and all(
                    self._room_locks.get(room_code) is lock for room_code, lock in held
                )
                if still_valid:
                    yield
                    return

    def _require_session(self, connection_id: UUID) -> PlayerSession:
        session = self.connection_manager.get_session(connection_id)
        if session is None:
            raise HangmanDomainError(
                code=DomainErrorCode.NOT_IN_ROOM,
                message="You are not in a room",
                details={"connection_id": str(connection_id)},
            )
        return session

    async def _broadcast_state(
        self,
        session: PlayerSession,
        exclude_connection_id: UUID | None = None,
        **annotations: Any,
    ) -> None:
        state = self.game_service.find_game_state(session.room_code)
        if state is None:
            logger.debug("Room %s is gone, skipping broadcast", session.room_code)
            return

        await self.connection_manager.broadcast(
            encode_game_state_update(state, **annotations),
            session.room_id,
            exclude_connection_id=exclude_connection_id,
        )

    async def _leave(self, session: PlayerSession) -> None:
        self.game_service.mark_offline(session.player_id)
        await self._broadcast_state(session)

    async def _enter_room(self, connection_id: UUID, room: Room, player: Player) -> None:
        previous = self.connection_manager.unbind(connection_id)
        if previous is not None and previous.player_id != player.id:
            await self._leave(previous)

        for other_connection_id in self.connection_manager.connections_for_player(player.id):
            self.connection_manager.unbind(other_connection_id)
            logger.debug(
                "Moved player %s from connection %s to %s",
                player.name,
                other_connection_id,
                connection_id,
            )

        session = PlayerSession(player_id=player.id, room_id=room.id, room_code=room.room_code)
        self.connection_manager.bind(connection_id, session)

        state = self.game_service.find_game_state(room.room_code)
        if state is None:
            return

        message = encode_game_state_update(state)
        await self.connection_manager.broadcast(
            message, room.id, exclude_connection_id=connection_id
        )
        await self.connection_manager.send_personal_message(message, connection_id)

    async def handle_join_room(self, connection_id: UUID, payload: JoinRoomPayload) -> None:
        if payload.is_creating:
            room, player = self.game_service.create_room(payload.player_name)
        else:
            room, player = self.game_service.join_room(payload.room_code, payload.player_name)
        await self._enter_room(connection_id, room, player)

    async def handle_rejoin_room(self, connection_id: UUID, payload: RejoinRoomPayload) -> None:
        room, player = self.game_service.rejoin_room(payload.room_code, payload.player_name)
        await self._enter_room(connection_id, room, player)

    async def handle_start_game(self, connection_id: UUID, payload: StartGamePayload) -> None:
        session = self._require_session(connection_id)
        self.game_service.start_game(session.room_id, session.player_id, payload.max_guesses)
        await self._broadcast_state(session)

    async def handle_set_word(self, connection_id: UUID, payload: SetWordPayload) -> None:
        session = self._require_session(connection_id)
        self.game_service.set_word(session.room_id, session.player_id, payload.word, payload.hint)
        await self._broadcast_state(session)

    async def handle_guess_letter(self, connection_id: UUID, payload: GuessLetterPayload) -> None:
        session = self._require_session(connection_id)
        check = self.game_service.guess_letter(session.room_id, session.player_id, payload.letter)
        await self._broadcast_state(session, round_end_check=check)

    async def handle_start_round(self, connection_id: UUID, _: EmptyPayload) -> None:
        session = self._require_session(connection_id)
        self.game_service.start_round(session.room_id)
        await self._broadcast_state(session)

    async def handle_end_game(self, connection_id: UUID, _: EmptyPayload) -> None:
        session = self._require_session(connection_id)
        result = self.game_service.end_game(session.room_id)
        await self._broadcast_state(session, final_result=result)

    async def handle_leave_room(self, connection_id: UUID, _: EmptyPayload) -> None:
        session = self._require_session(connection_id)
        self.connection_manager.unbind(connection_id)
        await self._leave(session)
