import os
import logging
from pydantic import BaseModel, Field
from typing import List
from dotenv import load_dotenv

load_dotenv()


class Config(BaseModel):
    app_name: str = "Gym Management API"
    environment: str = os.getenv("APP_ENV", "development")
    api_prefix: str = "/api"

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./gym.db")

    version: str = "1.0.0"
    request_id_header: str = "X-Request-ID"

    # Identity of the caller. Authentication itself is handled upstream.
    acting_user_header: str = "X-Acting-User-Id"

    # CORS: comma-separated origins loaded from env
    cors_origins: List[str] = Field(
        default_factory=lambda: [
            o.strip()
            for o in os.getenv(
                "CORS_ORIGINS",
                "http://localhost:3000,http://localhost:5173,"
                "http://127.0.0.1:3000,http://127.0.0.1:5173",
            ).split(",")
            if o.strip()
        ]
    )

    # Rate limiting
    rate_limit_enabled: bool = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
    rate_limit_per_minute: int = int(os.getenv("RATE_LIMIT_PER_MINUTE", "120"))

    # Calendar
    week_starts_on: int = 0  # Monday

    # First-run bootstrap: a default branch and superadmin when the users table is empty
    bootstrap_enabled: bool = os.getenv("BOOTSTRAP_ENABLED", "true").lower() == "true"
    bootstrap_admin_email: str = os.getenv("BOOTSTRAP_ADMIN_EMAIL", "superadmin@gym.local")
    bootstrap_branch_name: str = os.getenv("BOOTSTRAP_BRANCH_NAME", "Main Branch")

settings = Config()

_logger = logging.getLogger(__name__)
if settings.environment == "production" and settings.database_url.startswith("sqlite"):
    _logger.warning("⚠ Running production with a SQLite database.")
