"""Pipeline settings loaded from environment variables and .env file."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_URL = "https://api.github.com"


class Settings(BaseSettings):
    """Environment exposed by the CI pipeline for a single build."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    branch_name: str | None = None
    owner_name: str | None = None
    repo_name: str | None = None
    build_url: str | None = None
    run_display_url: str | None = None
    change_id: str | None = None
    git_commit: str | None = None
    github_api_url: str = DEFAULT_API_URL
    github_token: str | None = None


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
