"""
Configuration Settings.

This module defines the tabledb configuration using Pydantic's BaseSettings.
It automatically loads all configuration from environment variables and .env file
without explicit dotenv loading.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ERROR_FORMATS = ("html", "text")


class Settings(BaseSettings):
    """
    tabledb settings model.

    All properties are automatically bound from environment variables and .env file.
    Pydantic's BaseSettings handles dotenv loading automatically via model_config.
    """

    # =====================================================================
    # Pydantic Configuration
    # =====================================================================
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
        populate_by_name=True,
    )

    # =====================================================================
    # Database Configuration
    # =====================================================================
    database_url: str = Field(
        default="sqlite:///tabledb.sqlite",
        description="SQLAlchemy database URL (DSN) to connect to",
        alias="TABLEDB_DATABASE_URL",
    )
    database_user: str = Field(
        default="",
        description="Database user; overrides the user embedded in the URL when set",
        alias="TABLEDB_DATABASE_USER",
    )
    database_password: str = Field(
        default="",
        description="Database password; overrides the password embedded in the URL when set",
        alias="TABLEDB_DATABASE_PASSWORD",
    )

    # =====================================================================
    # Input Cleanup and Error Reporting
    # =====================================================================
    strip_tags: bool = Field(
        default=True,
        description="Strip markup from string bind parameters before execution",
        alias="TABLEDB_STRIP_TAGS",
    )
    error_format: str = Field(
        default="html",
        description="Format of messages handed to the error callback (html or text)",
        alias="TABLEDB_ERROR_FORMAT",
    )

    # =====================================================================
    # Logging Configuration
    # =====================================================================
    log_level: str = Field(
        default="INFO",
        description="tabledb logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        alias="TABLEDB_LOG_LEVEL",
    )
    log_format: str = Field(
        default="detailed",
        description="Log line format (simple, detailed, json)",
        alias="TABLEDB_LOG_FORMAT",
    )
    log_file_dir: str = Field(
        default="logs",
        description="Directory for the log file when file logging is enabled",
        alias="TABLEDB_LOG_FILE_DIR",
    )
    enable_file_logging: bool = Field(
        default=False,
        description="Also write logs to <log_file_dir>/tabledb.log",
        alias="TABLEDB_ENABLE_FILE_LOGGING",
    )

    @field_validator("error_format", mode="before")
    @classmethod
    def _normalize_error_format(cls, value: str) -> str:
        value = str(value).lower()
        return value if value in ERROR_FORMATS else "html"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Settings loaded from the environment on first use and cached afterwards."""
    return Settings()
