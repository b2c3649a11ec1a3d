from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from hangman.api.internal.endpoints import internal_router
from hangman.api.v1.endpoints import api_router, ws_game
from hangman.core.config import settings
from hangman.core.connection_manager import GameConnectionManager
from hangman.core.error import DomainErrorCode, HangmanDomainError
from hangman.core.logging import configure_logging
from hangman.core.session_router import SessionRouter
from hangman.repositories.store import GameStore
from hangman.schemas.common import BaseResponse
from hangman.services.game_service import GameService

configure_logging(settings.LOG_LEVEL)


def init_app_state(application: FastAPI) -> None:
    store = GameStore()
    application.state.store = store
    application.state.connection_manager = GameConnectionManager()
    application.state.session_router = SessionRouter(
        GameService(store),
        application.state.connection_manager,
    )


app = FastAPI(
    title="Hangman-Duel",
    description="A FastAPI backend for two-player hangman rooms",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

init_app_state(app)

app.include_router(ws_game.router)

app.include_router(api_router, prefix=settings.API_V1_STR)


app.include_router(internal_router, prefix="/internal")


@app.get("/health", status_code=status.HTTP_200_OK)
async def health_check() -> BaseResponse:
    return BaseResponse(message="healthy")


@app.exception_handler(HangmanDomainError)
async def hangman_domain_error_handler(
    _request: Request,
    exc: HangmanDomainError,
) -> JSONResponse:
    domain_error_code_mapper = {
        DomainErrorCode.INVALID_MESSAGE_FORMAT: status.HTTP_422_UNPROCESSABLE_ENTITY,
        DomainErrorCode.INVALID_PLAYER_NAME: status.HTTP_422_UNPROCESSABLE_ENTITY,
        DomainErrorCode.INVALID_WORD: status.HTTP_422_UNPROCESSABLE_ENTITY,
        DomainErrorCode.INVALID_HINT: status.HTTP_422_UNPROCESSABLE_ENTITY,
        DomainErrorCode.INVALID_LETTER: status.HTTP_422_UNPROCESSABLE_ENTITY,
        DomainErrorCode.INVALID_DIFFICULTY: status.HTTP_422_UNPROCESSABLE_ENTITY,
        DomainErrorCode.ROOM_NOT_FOUND: status.HTTP_404_NOT_FOUND,
        DomainErrorCode.ROUND_NOT_FOUND: status.HTTP_404_NOT_FOUND,
        DomainErrorCode.GUESS_EVENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
        DomainErrorCode.PLAYER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
        DomainErrorCode.ROOM_IS_FULL: status.HTTP_400_BAD_REQUEST,
        DomainErrorCode.PLAYER_NAME_TAKEN: status.HTTP_400_BAD_REQUEST,
        DomainErrorCode.NOT_IN_ROOM: status.HTTP_400_BAD_REQUEST,
        DomainErrorCode.NOT_ENOUGH_PLAYERS: status.HTTP_400_BAD_REQUEST,
        DomainErrorCode.GAME_ALREADY_STARTED: status.HTTP_400_BAD_REQUEST,
        DomainErrorCode.NOT_ROOM_CREATOR: status.HTTP_400_BAD_REQUEST,
        DomainErrorCode.NOT_WORD_SETTING_PHASE: status.HTTP_400_BAD_REQUEST,
        DomainErrorCode.NOT_WORD_GIVER: status.HTTP_400_BAD_REQUEST,
        DomainErrorCode.NOT_GUESSING_PHASE: status.HTTP_400_BAD_REQUEST,
        DomainErrorCode.NOT_GUESSER: status.HTTP_400_BAD_REQUEST,
        DomainErrorCode.LETTER_ALREADY_GUESSED: status.HTTP_400_BAD_REQUEST,
        DomainErrorCode.ROUND_NOT_FINISHED: status.HTTP_400_BAD_REQUEST,
    }
    status_code = domain_error_code_mapper.get(
        exc.code,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )

    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(
            {
                "detail": exc.message,
                "code": exc.code,
                "error_details": exc.details,
            }
        ),
    )
