from fastapi import APIRouter, Depends, status

from hangman.dependencies.repositories import get_room_by_code
from hangman.dependencies.services import get_game_service
from hangman.models.room import Room
from hangman.schemas.game_state import GameState, PlayerRanking
from hangman.services.game_service import GameService

router = APIRouter()


@router.get(
    "/{room_code}",
    response_model=GameState,
    status_code=status.HTTP_200_OK,
)
async def get_room_state(
    room: Room = Depends(get_room_by_code),
    game_service: GameService = Depends(get_game_service),
):
    return game_service.get_game_state(room.room_code)


@router.get(
    "/{room_code}/rankings",
    response_model=list[PlayerRanking],
    status_code=status.HTTP_200_OK,
)
async def get_room_rankings(
    room: Room = Depends(get_room_by_code),
    game_service: GameService = Depends(get_game_service),
):
    return game_service.get_rankings(room.room_code)
