"""
Configuration - every setting comes from the environment or a .env file.
Read it through get_settings(); tests build Settings(...) directly.
"""

from functools import lru_cache
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # MongoDB
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "alumniconnect"

    # Session (JWT carried in an HTTP-only cookie)
    session_secret_key: str = "change-this-secret"
    session_algorithm: str = "HS256"
    session_expire_minutes: int = 1440
    session_cookie_name: str = "alumniconnect_session"
    session_cookie_secure: bool = False

    # Mentorship/message mutations restricted to the two parties
    strict_mentorship_access: bool = True

    # App
    cors_origins: List[str] = ["*"]
    log_level: str = "INFO"
    debug: bool = False

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
