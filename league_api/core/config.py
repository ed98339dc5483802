import os
from dotenv import load_dotenv
from pydantic_settings import BaseSettings

# Load .env before the settings object is built
load_dotenv()

class Settings(BaseSettings):
    APP_NAME: str = "League Management API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = os.getenv("DEBUG", "False").lower() in ("true", "1", "t")

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./storage/league.db")

    # Admin tokens
    JWT_SECRET: str = os.getenv("JWT_SECRET", "change-me")
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_HOURS: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_HOURS", "24"))

    # Reports
    TOP_SCORERS_DEFAULT_LIMIT: int = int(os.getenv("TOP_SCORERS_DEFAULT_LIMIT", "10"))

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_DIR: str = os.getenv("LOG_DIR", "logs")

# Global settings instance
settings = Settings()
