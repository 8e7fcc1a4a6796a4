"""Application settings and configuration."""

import sys
from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    All settings can be overridden via environment variables.
    Example: DATABASE_URL, API_KEY, GITHUB_TOKEN, RUNNER_COMMAND
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application settings
    debug: bool = Field(False)
    environment: str = Field("development")
    host: str = Field("0.0.0.0")
    port: int = Field(3000)

    # API settings
    api_title: str = Field("Task API")
    api_version: str = Field("1.0.0")
    api_description: str = Field("API for managing tasks and running the coding agent against them")

    database_url: str = Field(
        default="sqlite+aiosqlite:///./tasks.db",
        description="Database connection URL",
    )

    redis_url: str = Field("redis://localhost:6379/0")

    # Authentication
    api_key: str = Field("default-api-key", description="Value expected in the X-API-Key header")

    # CORS settings
    allowed_origins: List[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://localhost:3100"]
    )

    # Rate limiting
    rate_limit_enabled: bool = Field(True)
    rate_limit_max: int = Field(100, ge=1, description="Requests allowed per window and client")
    rate_limit_window_seconds: int = Field(60, ge=1)

    # Agent runner
    runner_command: str = Field(
        default_factory=lambda: "npx.cmd" if sys.platform == "win32" else "npx",
        description="Executable used to start the agent runner",
    )
    runner_prefix_args: List[str] = Field(
        default_factory=lambda: ["--prefix", "../efizion-agent-runner", "efizion", "run"],
        description="Arguments placed before --repo",
    )
    runner_working_dir: str = Field(".", description="Working directory for the agent runner")
    github_token: Optional[str] = Field(None, description="Token forwarded to the runner as GITHUB_TOKEN")
    max_output_chars: int = Field(
        1_000_000,
        ge=1,
        description="Captured runner output kept in memory; older text is dropped beyond this",
    )
    output_flush_interval: float = Field(
        2.0,
        ge=0,
        description="Seconds between partial output writes while the runner is active (0 disables)",
    )

    # Logging settings
    log_level: str = Field("INFO")
    log_format: str = Field("json", description="Log format (json or text)")
    log_dir: str = Field("logs")

    # Seed data
    tasks_seed_file: str = Field("config/tasks.yaml")

    @property
    def database_is_sqlite(self) -> bool:
        """Check if using SQLite database."""
        return self.database_url.startswith("sqlite")


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings instance.

    Returns:
        Singleton settings instance
    """
    return Settings()
