import secrets
from typing import Literal

from pydantic import EmailStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
    )

    PROJECT_NAME: str = "Botdesk"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    LOG_LEVEL: str = "INFO"

    SECRET_KEY: str = secrets.token_urlsafe(32)
    # 60 minutes * 24 hours = 1 day
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    AUTH_COOKIE_NAME: str = "auth-token"

    SQLALCHEMY_DATABASE_URI: str = "sqlite:///./botdesk.db"
    BACKEND_CORS_ORIGINS: list[str] = ["http://localhost:5173", "http://localhost:3000"]

    FIRST_SUPERUSER: EmailStr = "admin@company.com"
    FIRST_SUPERUSER_PASSWORD: str = "changethis"
    FIRST_SUPERUSER_NAME: str = "Administrator"
    SEED_DEMO_DATA: bool = False
    DEFAULT_CLIENT_NAME: str = "Default Client"

    @property
    def cookie_secure(self) -> bool:
        return self.ENVIRONMENT == "production"


settings = Settings()  # type: ignore
