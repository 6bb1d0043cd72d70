"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables so the service runs without a ``.env`` loader or
``pydantic-settings``.  Defaults are provided for all fields and match
the local development setup (frontend on port 3000, API on port 5000).
"""

import os
from dataclasses import dataclass, field
from typing import List


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


def _env_list(name: str, default: str) -> List[str]:
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Wish Lighthouse API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    environment: str = os.getenv("ENVIRONMENT", "development")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    # Backing store for wishes: ``sqlite`` (default) or ``memory``.  The
    # in-memory store loses everything on restart and is meant for demos
    # and tests.
    wish_store: str = os.getenv("WISH_STORE", "sqlite")

    # Path to the SQLite database file.  Relative paths are resolved
    # against the project root by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "wish_lighthouse.db")

    # Load the sample wishes into an empty store on startup.
    seed_demo_data: bool = _env_bool("SEED_DEMO_DATA", "true")

    secret_key: str = os.getenv("SECRET_KEY", "change_me")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 7)))

    # Identity used when a request carries no bearer token.  There is no
    # sign-up flow; this user stands in for the whole audience.
    demo_user_id: str = os.getenv("DEMO_USER_ID", "demo-user")
    demo_user_name: str = os.getenv("DEMO_USER_NAME", "Demo User")
    demo_user_email: str = os.getenv("DEMO_USER_EMAIL", "demo@example.com")
    demo_user_avatar: str = os.getenv(
        "DEMO_USER_AVATAR",
        "https://ui-avatars.com/api/?name=Demo+User&background=random",
    )

    default_page_limit: int = int(os.getenv("DEFAULT_PAGE_LIMIT", "10"))
    max_page_limit: int = int(os.getenv("MAX_PAGE_LIMIT", "100"))

    cors_origins: List[str] = field(
        default_factory=lambda: _env_list("CORS_ORIGINS", "http://localhost:3000")
    )

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "5000"))

    @property
    def debug(self) -> bool:
        """Whether error responses may include exception details."""
        return self.environment.lower() == "development"


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables must
# be set before importing this module; tests build their own
# ``Settings`` instances instead.
settings = Settings()
