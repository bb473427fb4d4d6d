from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite+aiosqlite:///./shareit.db"
    ADMIN_PASSWORD: str = "123"
    AUTO_CREATE_TABLES: bool = False
    DB_CONNECT_RETRIES: int = 5
    LOG_LEVEL: str = "INFO"

    API_URL: str = "http://localhost:5000/api"
    REMOTE_API_URL: str = "https://share-it-backend.onrender.com/api"
    LOCAL_API_URL: str = "http://localhost:5000/api"

    CORS_ORIGINS: List[str] = [
        "https://krptrips.onrender.com",
        "http://localhost:3000",
        "http://localhost:5173",
        "http://localhost:5500",
        "http://localhost:8080",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173",
        "http://127.0.0.1:5500",
        "http://127.0.0.1:8080",
        "null",  # file:// origin
    ]

    class Config:
        env_file = ".env"


@lru_cache
def get_settings() -> Settings:
    return Settings()
