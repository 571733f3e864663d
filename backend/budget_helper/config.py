from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    # App
    ENV: str = "development"
    PORT: int = 8000

    # Frontend
    WEB_APP_URL: str = "http://localhost:5173"

    # Anthropic (bill extraction)
    ANTHROPIC_API_KEY: str | None = None
    ANTHROPIC_API_URL: str = "https://api.anthropic.com/v1"
    ANTHROPIC_VERSION: str = "2023-06-01"
    ANTHROPIC_MODEL: str = "claude-3-sonnet-20240229"  # Domyślny model
    ANTHROPIC_MAX_TOKENS: int = 4096
    ANTHROPIC_TIMEOUT: int = 60  # Timeout w sekundach

    # Ingestion pipeline
    INGESTION_MAX_CONCURRENCY: int = 4  # Max liczba plików analizowanych równolegle
    MAX_UPLOAD_SIZE: int = 10 * 1024 * 1024  # 10MB

    model_config = {
        "env_file": ".env",
        "extra": "ignore"
    }

settings = Settings()
