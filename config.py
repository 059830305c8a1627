from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Durable store
    REDIS_URL: str = "redis://localhost:6379/0"
    STORAGE_KEY: str = "mishmar-practices"

    # Suggestion service
    SUGGESTION_API_URL: str = "https://api.anthropic.com/v1/messages"
    SUGGESTION_MODEL: str = "claude-sonnet-4-20250514"
    SUGGESTION_MAX_TOKENS: int = 1000
    # Unset means the request goes out without credentials
    SUGGESTION_API_KEY: Optional[str] = None
    SUGGESTION_API_VERSION: str = "2023-06-01"
    # Unset means no timeout
    SUGGESTION_TIMEOUT_SECONDS: Optional[float] = None

    # Key the client sends in x-api-key; unset disables the check
    X_API_KEY: Optional[str] = None

    # Server Config
    PORT: int = 8000
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )


settings = Settings()
