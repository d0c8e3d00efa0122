import os
from pathlib import Path

from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).parent.parent.parent


def get_database_url() -> str:
    """Get database URL, using absolute path for SQLite to avoid path resolution issues.

    SQLite is only meant for local development. Set DATABASE_URL to a
    PostgreSQL connection string for anything shared.
    """
    db_url = os.getenv("DATABASE_URL", "")
    if db_url:
        logger.info(f"Using DATABASE_URL from environment: {db_url}")
        return db_url

    abs_path = (PROJECT_ROOT / "fitplan.db").resolve()
    db_url = f"sqlite:///{abs_path}"
    logger.warning(f"Using SQLite database (LOCAL DEV ONLY): {db_url}")
    return db_url


class Settings(BaseSettings):
    database_url: str = Field(
        default_factory=get_database_url,
        validation_alias="DATABASE_URL",
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_file: str | None = Field(default=None, validation_alias="LOG_FILE")
    plan_random_seed: int | None = Field(
        default=None,
        validation_alias="PLAN_RANDOM_SEED",
        description="Seed for the process-wide plan random source (OS entropy when unset)",
    )
    default_plan_months: int = Field(default=1, ge=1, validation_alias="DEFAULT_PLAN_MONTHS")
    default_frequency_per_week: int = Field(default=3, ge=1, validation_alias="DEFAULT_FREQUENCY_PER_WEEK")
    max_plan_months: int = Field(default=12, ge=1, validation_alias="MAX_PLAN_MONTHS")
    max_frequency_per_week: int = Field(
        default=7,
        ge=1,
        le=7,
        validation_alias="MAX_FREQUENCY_PER_WEEK",
        description="Upper bound on sessions per week; at most 7 keeps every session on its own day",
    )
    catalog_path: str = Field(
        default=str(PROJECT_ROOT / "data" / "catalog.yaml"),
        validation_alias="CATALOG_PATH",
    )

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate that log level is one of the standard logging levels."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in valid_levels:
            logger.warning(f"Invalid LOG_LEVEL '{value}'. Valid levels are: {', '.join(valid_levels)}. Defaulting to INFO.")
            return "INFO"
        return upper_value


settings = Settings()
