from fastapi import APIRouter

from hangman.api.internal.endpoints import rooms

internal_router = APIRouter()

internal_router.include_router(rooms.router, prefix="/rooms")
