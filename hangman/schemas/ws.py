import logging
from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, TypeAdapter, ValidationError, field_validator

from hangman.core.error import DomainErrorCode, HangmanDomainError
from hangman.schemas.common import CamelModel
from hangman.schemas.game_state import FinalResult, GameState, RoundEndCheck
from hangman.util.validators import (
    normalize_room_code,
    validate_hint,
    validate_letter,
    validate_player_name,
    validate_word,
)

logger = logging.getLogger(__name__)


class MessageType(str, Enum):
    JOIN_ROOM = "join_room"
    REJOIN_ROOM = "rejoin_room"
    START_GAME = "start_game"
    SET_WORD = "set_word"
    GUESS_LETTER = "guess_letter"
    START_ROUND = "start_round"
    END_GAME = "end_game"
    LEAVE_ROOM = "leave_room"

    GAME_STATE_UPDATE = "game_state_update"
    ERROR = "error"


class JoinRoomPayload(CamelModel):
    player_name: str
    room_code: str = ""
    is_creating: bool

    @field_validator("player_name")
    @classmethod
    def check_player_name(cls, v: str) -> str:
        return validate_player_name(v)

    @field_validator("room_code", mode="before")
    @classmethod
    def check_room_code(cls, v: Any) -> Any:
        if v is None:
            return ""
        return normalize_room_code(v) if isinstance(v, str) else v


class RejoinRoomPayload(CamelModel):
    player_name: str
    room_code: str

    @field_validator("player_name")
    @classmethod
    def check_player_name(cls, v: str) -> str:
        return validate_player_name(v)

    @field_validator("room_code")
    @classmethod
    def check_room_code(cls, v: str) -> str:
        return normalize_room_code(v)


class StartGamePayload(CamelModel):
    max_guesses: int | None = None


class SetWordPayload(CamelModel):
    word: str
    hint: str | None = None

    @field_validator("word")
    @classmethod
    def check_word(cls, v: str) -> str:
        return validate_word(v)

    @field_validator("hint")
    @classmethod
    def check_hint(cls, v: str | None) -> str | None:
        return validate_hint(v)


class GuessLetterPayload(CamelModel):
    letter: str

    @field_validator("letter")
    @classmethod
    def check_letter(cls, v: str) -> str:
        return validate_letter(v)


class EmptyPayload(CamelModel):
    pass


class InboundEnvelope(BaseModel):
    @field_validator("payload", mode="before", check_fields=False)
    @classmethod
    def default_payload(cls, v: Any) -> Any:
        return {} if v is None else v


class JoinRoomMessage(InboundEnvelope):
    type: Literal["join_room"]
    payload: JoinRoomPayload


class RejoinRoomMessage(InboundEnvelope):
    type: Literal["rejoin_room"]
    payload: RejoinRoomPayload


class StartGameMessage(InboundEnvelope):
    type: Literal["start_game"]
    payload: StartGamePayload = Field(default_factory=StartGamePayload)


class SetWordMessage(InboundEnvelope):
    type: Literal["set_word"]
    payload: SetWordPayload


class GuessLetterMessage(InboundEnvelope):
    type: Literal["guess_letter"]
    payload: GuessLetterPayload


class StartRoundMessage(InboundEnvelope):
    type: Literal["start_round"]
    payload: EmptyPayload = Field(default_factory=EmptyPayload)


class EndGameMessage(InboundEnvelope):
    type: Literal["end_game"]
    payload: EmptyPayload = Field(default_factory=EmptyPayload)


class LeaveRoomMessage(InboundEnvelope):
    type: Literal["leave_room"]
    payload: EmptyPayload = Field(default_factory=EmptyPayload)


InboundMessage = Annotated[
    JoinRoomMessage
    | RejoinRoomMessage
    | StartGameMessage
    | SetWordMessage
    | GuessLetterMessage
    | StartRoundMessage
    | EndGameMessage
    | LeaveRoomMessage,
    Field(discriminator="type"),
]

inbound_message_adapter: TypeAdapter[InboundMessage] = TypeAdapter(InboundMessage)


class OutboundMessage(BaseModel):
    type: MessageType
    payload: dict[str, Any] = Field(default_factory=dict)


def decode_message(raw: str | bytes) -> InboundMessage:
    """Parse one inbound frame.

    Field-level validators raise HangmanDomainError with a specific message;
    anything else that does not fit the envelope is reported generically.
    """
    try:
        return inbound_message_adapter.validate_json(raw)
    except ValidationError as e:
        logger.debug("Rejected malformed message: %s", e.errors(include_url=False))
        raise HangmanDomainError(
            code=DomainErrorCode.INVALID_MESSAGE_FORMAT,
            message="Invalid message format",
            details={"error_count": e.error_count()},
        ) from e


def encode_game_state_update(
    state: GameState,
    *,
    round_end_check: RoundEndCheck | None = None,
    final_result: FinalResult | None = None,
) -> dict[str, Any]:
    payload = state.model_dump(mode="json", by_alias=True)

    if round_end_check is not None:
        payload["roundEndCheck"] = round_end_check.model_dump(mode="json", by_alias=True)

    if final_result is not None:
        payload["finalWinner"] = (
            final_result.winner.model_dump(mode="json", by_alias=True)
            if final_result.winner
            else None
        )
        payload["isDraw"] = final_result.is_draw
        payload["finalRankings"] = [
            ranking.model_dump(mode="json", by_alias=True)
            for ranking in final_result.rankings
        ]

    return OutboundMessage(
        type=MessageType.GAME_STATE_UPDATE,
        payload=payload,
    ).model_dump(mode="json")


def encode_error(message: str) -> dict[str, Any]:
    return OutboundMessage(
        type=MessageType.ERROR,
        payload={"message": message},
    ).model_dump(mode="json")
