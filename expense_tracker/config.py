from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./expense_tracker.db"

    # JWT
    SECRET_KEY: str = "supersecretkey_change_this"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_DAYS: int = 7

    # Auth cookie
    COOKIE_NAME: str = "token"
    COOKIE_MAX_AGE: int = 24 * 60 * 60

    # Runtime
    ENVIRONMENT: str = "development"
    HOST: str = "0.0.0.0"
    PORT: int = 5000

    # CORS
    FRONTEND_URL: str = ""
    ALLOWED_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:3001",
    ]

    # Logging
    LOG_FILE: str = "app.log"
    LOG_LEVEL: str = "DEBUG"

    class Config:
        env_file = ".env"

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() == "development"

    @property
    def cors_origins(self) -> List[str]:
        origins = list(self.ALLOWED_ORIGINS)
        if self.FRONTEND_URL:
            origins.append(self.FRONTEND_URL)
            origins.append(self.FRONTEND_URL.rstrip("/"))
        # keep order, drop duplicates
        return list(dict.fromkeys(o for o in origins if o))


settings = Settings()
