"""Application configuration using Pydantic settings."""

import os
from typing import Literal

from dotenv import load_dotenv
from pydantic_settings import BaseSettings

# Load .env file into os.environ so API_KEY_* vars are accessible
load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str = "sqlite:///./motoshop.db"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    log_level: str = "INFO"

    # Category hierarchy
    # "reparent" moves children of a deleted category up one level,
    # "reject" refuses to delete a category that still has children.
    category_delete_policy: Literal["reparent", "reject"] = "reparent"
    conflict_retries: int = 2
    seed_default_categories: bool = True

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"  # Ignore extra env vars like API_KEY_*

    def get_api_keys(self) -> dict[str, str]:
        """Get all API keys from environment variables.

        Returns a dict mapping API key to username.
        Environment variables should be in format: API_KEY_{USERNAME}=key
        """
        api_keys = {}
        for key, value in os.environ.items():
            if key.startswith("API_KEY_"):
                username = key[8:].lower()  # Remove "API_KEY_" prefix
                api_keys[value] = username
        return api_keys


settings = Settings()
