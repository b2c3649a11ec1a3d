from fastapi import APIRouter, Depends, status

from hangman.core.session_router import SessionRouter
from hangman.dependencies.services import get_session_router
from hangman.schemas.common import BaseResponse
from hangman.util.validators import normalize_room_code

router = APIRouter(tags=["internal"])


@router.delete(
    "/{room_code}",
    response_model=BaseResponse,
    status_code=status.HTTP_200_OK,
)
async def delete_room(
    room_code: str,
    session_router: SessionRouter = Depends(get_session_router),
):
    room = await session_router.close_room(normalize_room_code(room_code))
    return BaseResponse(message="Room deleted successfully", data={"roomCode": room.room_code})
