"""
Configuration management for the Chanakya supplier evaluation service
"""
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "Chanakya Supplier Evaluation"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: list[str] = ["http://localhost:5173", "http://localhost:3000"]

    # Database
    DATABASE_URL: str = "sqlite:///./chanakya.db"
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 5
    SEED_DEMO_DATA: bool = False

    # Authorization predicate for supplier creation (empty = open)
    CREATE_CAPABILITY_TOKENS: list[str] = []

    # Claude API (voice intent fallback)
    ANTHROPIC_API_KEY: str = ""
    CLAUDE_MODEL: str = "claude-sonnet-4-20250514"
    CLAUDE_MAX_TOKENS: int = 1024

    # Knowledge base sync
    KNOWLEDGE_SYNC_URL: str = ""
    KNOWLEDGE_SYNC_API_KEY: str = ""
    KNOWLEDGE_SYNC_TIMEOUT: float = 30.0
    KNOWLEDGE_BASE_TITLE: str = "CHANAKYA Supplier Database"

    # Analytics
    TOP_PERFORMER_FRACTION: float = 0.1

    # Voice commands
    VOICE_MIN_CONFIDENCE: float = 0.5

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    return Settings()
