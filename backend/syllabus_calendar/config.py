from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
import os


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # App settings
    APP_NAME: str = "AI Syllabus Calendar"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # OpenAI
    OPENAI_API_KEY: Optional[str] = None

    # LLM extraction
    ENABLE_LLM_PARSING: bool = False
    LLM_MODEL: str = "gpt-3.5-turbo"
    LLM_MAX_TOKENS: int = 2000
    LLM_TEMPERATURE: float = 0.1
    LLM_TIMEOUT_SECONDS: float = 60.0

    # Preprocessing (characters of syllabus text sent to the model)
    MAX_TEXT_LENGTH: int = 8000

    # Enforced by the HTTP layer around a whole pipeline run
    REQUEST_TIMEOUT_SECONDS: float = 90.0

    # CORS
    CORS_ORIGINS: Optional[str] = None

    @property
    def openai_key_configured(self) -> bool:
        key = self.OPENAI_API_KEY
        return bool(key) and key.startswith("sk-")


settings = Settings()

# CORS - Get from environment or use defaults
def get_cors_origins() -> list:
    cors_env = os.getenv("CORS_ORIGINS") or settings.CORS_ORIGINS
    if cors_env:
        # Support comma-separated list
        return [origin.strip() for origin in cors_env.split(",") if origin.strip()]
    return ["http://localhost:3000", "http://localhost:5173"]
