from functools import lru_cache
from pydantic_settings import BaseSettings
from typing import Optional, List, Union
import json

class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./portfolio.db"
    SQL_ECHO: bool = False

    # Auth
    JWT_SECRET: str = "development_secret_key"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_HOURS: int = 24

    # OpenAI
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_MODEL: str = "gpt-4-turbo"
    OPENAI_TIMEOUT_SECONDS: float = 30.0
    AI_HOURLY_LIMIT: int = 10

    # Uploads
    MAX_UPLOAD_BYTES: int = 5 * 1024 * 1024

    # Rate limiter storage, e.g. redis://localhost:6379
    RATE_LIMIT_STORAGE_URI: str = "memory://"

    # CORS Configuration
    CORS_ORIGINS: Union[str, List[str]] = "http://localhost:3000"

    LOG_LEVEL: str = "INFO"

    @property
    def cors_origins_list(self) -> List[str]:
        if isinstance(self.CORS_ORIGINS, list):
            return self.CORS_ORIGINS
        if isinstance(self.CORS_ORIGINS, str):
            s = self.CORS_ORIGINS.strip()
            if s.startswith("["):
                try:
                    return json.loads(s)
                except ValueError:
                    pass
            return [o.strip() for o in s.split(",") if o.strip()]
        return ["*"]

    class Config:
        env_file = ".env"
        extra = "ignore"

class LogConfig(dict):
    def __init__(self, level: str = "INFO"):
        super().__init__(
            version=1,
            disable_existing_loggers=False,
            formatters={
                "default": {
                    "format": "[%(asctime)s] %(levelname)s in %(module)s: %(message)s",
                }
            },
            handlers={
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                }
            },
            root={
                "level": level,
                "handlers": ["console"],
            },
        )

@lru_cache()
def get_settings() -> Settings:
    return Settings()
