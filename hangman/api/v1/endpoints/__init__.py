from fastapi import APIRouter

from hangman.api.v1.endpoints import room

api_router = APIRouter()

api_router.include_router(room.router, prefix="/room", tags=["rooms"])
