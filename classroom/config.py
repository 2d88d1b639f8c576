"""Application configuration for the Classroom Activities system."""
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables."""

    DEBUG: bool = Field(default=False, description="Enable FastAPI debug mode")
    DATA_DIR: Path = Field(
        default=Path(__file__).resolve().parent.parent / "data",
        description="Directory holding the persisted record collections",
    )
    STORAGE_PREFIX: str = Field(
        default="teacher_system_", description="Prefix applied to every collection key"
    )
    DEFAULT_TEACHER_NAME: str = Field(
        default="Professor", description="Display name of the seeded teacher account"
    )
    DEFAULT_TEACHER_PASSWORD: str = Field(
        default="admin123", description="Password of the seeded teacher account"
    )
    DEFAULT_STUDENT_PASSWORD: str = Field(
        default="123", description="Password given to new students when none is supplied"
    )
    SESSION_DURATION_HOURS: int = Field(default=8, ge=1, description="Session lifetime")
    MAX_UPLOAD_SIZE_MB: int = Field(default=80, ge=1, description="Per-file attachment ceiling")
    HOST: str = Field(default="127.0.0.1", description="Development server bind address")
    PORT: int = Field(default=8000, description="Development server port")

    model_config = {
        "env_file": ".env",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
    }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached instance of the application settings."""
    return Settings()
