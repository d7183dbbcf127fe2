# Configuration module for environment setup
# This module is imported by: main.py (app factory), core/database.py
# Dependencies: python-dotenv, pydantic-settings
# Purpose: Centralized configuration management, read once at app creation

from typing import Annotated, Optional, Tuple

from dotenv import load_dotenv  # For loading .env files into environment
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_DATABASE_URL = "sqlite:///./hangman.db"
DEFAULT_CORS_ORIGINS = (
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "tauri://localhost",
)


class Settings(BaseSettings):
    """Application settings; each field is read from the upper-cased env var of the same name."""

    database_url: str = DEFAULT_DATABASE_URL
    db_pool_size: int = 5
    db_pool_timeout_secs: int = 30
    game_ttl_secs: int = 2 * 60 * 60
    game_sweep_interval_secs: int = 60
    game_lock_timeout_secs: float = 5.0
    # Comma-separated in the environment
    cors_origins: Annotated[Tuple[str, ...], NoDecode] = DEFAULT_CORS_ORIGINS
    log_level: str = "INFO"
    # Optional admin bootstrap; all three must be set for seeding to happen.
    seed_admin_username: Optional[str] = None
    seed_admin_email: Optional[str] = None
    seed_admin_password: Optional[str] = Field(default=None, repr=False)

    model_config = SettingsConfigDict(frozen=True, extra="ignore", env_ignore_empty=True)

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_origins(cls, v):
        if isinstance(v, str):
            return tuple(part.strip() for part in v.split(",") if part.strip())
        return v

    @field_validator("log_level")
    @classmethod
    def upper_level(cls, v: str) -> str:
        return v.strip().upper()

    @property
    def seeds_admin(self) -> bool:
        return bool(self.seed_admin_username and self.seed_admin_email and self.seed_admin_password)


def load_settings() -> Settings:
    """
    Load environment variables from .env file and build the Settings object
    Called by: main.py (create_app) when no explicit settings are passed
    Returns: frozen Settings instance
    Raises: pydantic.ValidationError if a variable cannot be parsed
    Logic: Uses dotenv to load .env file, then BaseSettings reads each key with its default
    """
    load_dotenv()  # Load variables from .env file into environment (existing env vars win)
    return Settings()
