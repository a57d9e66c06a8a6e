from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import ClassVar

class Settings(BaseSettings):
    PROJECT_NAME: str = "Library Store API"

    DATABASE_URL: str = "sqlite:///./database.db"
    LOG_LEVEL: str = "INFO"

    HOST: str = "127.0.0.1"
    PORT: int = 3000

    # Client
    API_BASE_URL: str = "http://localhost:3000"
    CLIENT_TIMEOUT: float = 10.0

    model_config: ClassVar[SettingsConfigDict] = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="allow",
    )

@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
