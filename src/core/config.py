import os
from pydantic_settings import BaseSettings

PLACEHOLDER_API_KEY = "your_openai_api_key_here"

class Settings(BaseSettings):
    APP_NAME: str = "Jarurat Care Patient Intake"
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: str = "*"

    OPENAI_API_KEY: str = ""
    OPENAI_MODEL: str = "gpt-3.5-turbo"
    OPENAI_BASE_URL: str = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")
    LLM_TIMEOUT_SECONDS: float = 10.0

    class Config:
        env_file = ".env"

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

settings = Settings()
