"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from environment
variables.  Defaults are provided for all fields so the API can start
without any configuration; override them via environment variables in
a real deployment.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Finance Tracker API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")
    secret_key: str = os.getenv("SECRET_KEY", "change_me")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))
    algorithm: str = os.getenv("ALGORITHM", "HS256")

    # Path to the SQLite database.  Relative paths are resolved against
    # the ``finance_tracker_api`` package directory by ``core.db``.
    database_url: str = os.getenv("DATABASE_URL", "finance_tracker.db")

    # Comma-separated list of origins allowed to call the API from a
    # browser, e.g. CORS_ORIGINS="http://localhost:3000".
    cors_origins: str = os.getenv("CORS_ORIGINS", "")

    # Length of the date range used by the summary and transaction list
    # when the client does not send ``from``.
    summary_default_days: int = int(os.getenv("SUMMARY_DEFAULT_DAYS", "30"))

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables must
# be set before importing this module.
settings = Settings()
