import os
from typing import Optional, List
from dotenv import load_dotenv
from pathlib import Path

# Load .env from project folder explicitly (works even if CWD differs)
_BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(dotenv_path=_BASE_DIR / ".env")


class Settings:
    # Database
    DATABASE_URL: str = os.getenv("DISCOVER_DATABASE_URL", "sqlite:///./discover.db")

    # Server
    DEBUG: bool = os.getenv("DEBUG", "False").lower() == "true"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # CORS
    ALLOWED_ORIGINS: List[str] = os.getenv("ALLOWED_ORIGINS", "*").split(",")

    # Authentication: "jwt" verifies locally, "remote" delegates to the auth service
    AUTH_MODE: str = os.getenv("AUTH_MODE", "jwt").lower()
    JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "change-me")
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    AUTH_SERVICE_URL: Optional[str] = os.getenv("AUTH_SERVICE_URL")
    AUTH_TIMEOUT_SECONDS: float = float(os.getenv("AUTH_TIMEOUT_SECONDS", "5"))

    # Feed
    FEED_DEFAULT_LIMIT: int = int(os.getenv("FEED_DEFAULT_LIMIT", "10"))
    FEED_MAX_LIMIT: int = int(os.getenv("FEED_MAX_LIMIT", "100"))


settings = Settings()
