# mergeguard/config.py
from pydantic_settings import BaseSettings
from typing import Optional

class Settings(BaseSettings):
    APP_NAME: str = "MergeGuard"
    APP_ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    GITHUB_WEBHOOK_SECRET: Optional[str] = None

    OLLAMA_BASE_URL: str = "http://localhost:11434/api"
    OLLAMA_MODEL: Optional[str] = None
    # None keeps the inference call unbounded
    OLLAMA_TIMEOUT_SECONDS: Optional[float] = None

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
