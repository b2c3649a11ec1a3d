from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    PROJECT_NAME: str = "hangman-duel"
    API_V1_STR: str = "/api/v1"
    WS_PATH: str = "/ws"

    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: list[str] = ["*"]

    MAX_PLAYERS_PER_ROOM: int = 2
    MIN_PLAYERS_TO_START: int = 2

    DEFAULT_MAX_GUESSES: int = 6
    MIN_MAX_GUESSES: int = 1
    MAX_MAX_GUESSES: int = 26

    ROOM_CODE_LENGTH: int = 6
    ROOM_CODE_MAX_ATTEMPTS: int = 100

    WS_SEND_TIMEOUT: float = 5.0

    MAX_PLAYER_NAME_LENGTH: int = 20
    MAX_WORD_LENGTH: int = 32
    MAX_HINT_LENGTH: int = 200


@lru_cache
def get_settings() -> Settings:
    return Settings()


def get_test_settings() -> Settings:
    return Settings(_env_file=".env.test")


settings = get_settings()
