import os
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings.
    Read from environment variables (.env file).
    """
    APP_NAME: str = "Social Network API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = os.getenv("DEBUG", "False") == "True"

    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        "sqlite:///./social.db"
    )

    # PEM encoded RSA keys. When both are empty an ephemeral pair is generated.
    JWT_PRIVATE_KEY: str = os.getenv("JWT_PRIVATE_KEY", "")
    JWT_PUBLIC_KEY: str = os.getenv("JWT_PUBLIC_KEY", "")

    JWT_ALGORITHM: str = "RS256"
    JWT_ISSUER: str = "self"

    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(
        os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60")
    )

    BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "12"))

    CORS_ORIGINS: List[str] = [
        "http://localhost:5173",
        "http://localhost:5174",
        "http://localhost:5175",
        "http://localhost:3000",
    ]

    DEFAULT_PAGE_SIZE: int = 5

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
