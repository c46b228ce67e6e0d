"""
NoteVault Backend: Application Configuration
=============================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or a .env file),
       validates types/ranges, and exposes a singleton `settings` object.
Who:   Imported by every module that needs configuration values.
When:  Loaded once at module import time; validated before the app starts.
"""

from pathlib import Path
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have defaults suitable for local development.
    Deployments exposing the API should set API_KEY so that
    creating and editing notes requires the X-API-Key header.
    """

    # ── Note Storage ──────────────────────────────────────────────────────
    # What: Path of the JSON document holding the entire note collection
    # Format: A JSON array of {id, user, date, title, body} objects
    notes_file: str = Field(
        default="./data/notes.json",
        description="JSON file holding the whole note collection",
    )

    # What: Indentation used when writing the notes file (0 = compact)
    json_indent: int = Field(default=2, ge=0, le=8)

    @property
    def notes_path(self) -> Path:
        """Resolved path of the notes file."""
        return Path(self.notes_file).expanduser().resolve()

    # ── Authentication ────────────────────────────────────────────────────
    # What: Shared secret expected in the X-API-Key header on mutating routes
    # Empty string disables the check (a warning is logged at startup)
    api_key: str = Field(
        default="",
        description="API key required for POST/PUT on /api/notes",
    )

    @property
    def auth_enabled(self) -> bool:
        return bool(self.api_key)

    # ── CORS ──────────────────────────────────────────────────────────────
    # Format: Comma-separated URLs (split by cors_origins_list)
    cors_origins: str = Field(default="http://localhost:3000")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8000, ge=1024, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # NOTES_FILE and notes_file both work
    }


# Singleton instance, imported throughout the application
settings = Settings()
