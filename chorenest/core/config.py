"""Configuration management for chorenest."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # SQLite Configuration
    sqlite_db_path: str = Field(default="./data/chorenest.db", description="Path to the SQLite database file")
    sqlite_busy_timeout_ms: int = Field(
        default=5000, ge=0, description="How long a write waits for another connection's transaction to finish"
    )

    # Pydantic Logfire Configuration (optional)
    logfire_token: str | None = Field(default=None, description="Pydantic Logfire token for observability")
    environment: str = Field(default="development", description="Deployment environment name")

    # Occurrence Generation
    default_occurrence_count: int = Field(
        default=10, ge=1, description="Occurrences generated when the caller does not ask for a count"
    )
    max_occurrence_count: int = Field(default=500, ge=1, description="Upper bound on occurrences per request")
    range_occurrence_count: int = Field(
        default=100, ge=1, description="Occurrences generated per chore when answering date range queries"
    )
    due_range_default_days: int = Field(
        default=7, ge=0, description="Length of the due range window when no end date is given"
    )

    # Conditional/Custom Candidate Pool
    candidate_pool_multiplier: int = Field(
        default=3, ge=1, description="Candidate days per requested occurrence for rule-based schedules"
    )
    adaptive_candidate_pool: bool = Field(
        default=True, description="Widen the candidate pool when rules leave fewer results than requested"
    )
    max_candidate_pool_days: int = Field(
        default=3660, ge=1, description="Hard cap on candidate days scanned for rule-based schedules"
    )

    @property
    def is_production(self) -> bool:
        """Whether the service runs in production."""
        return self.environment.lower() == "production"


# Application Constants
class Constants:
    """Application-wide constants."""

    # HTTP Status Codes
    HTTP_OK: int = 200
    HTTP_CREATED: int = 201
    HTTP_NOT_FOUND: int = 404
    HTTP_UNPROCESSABLE: int = 422
    HTTP_SERVER_ERROR: int = 500

    # Calendar
    DAYS_PER_WEEK: int = 7
    DAYS_PER_BIWEEK: int = 14
    WORKDAYS: frozenset[int] = frozenset({1, 2, 3, 4, 5})  # Monday..Friday, 0 = Sunday

    # Pagination Defaults
    DEFAULT_PER_PAGE_LIMIT: int = 1000  # Default pagination limit for list queries


def get_settings() -> Settings:
    """Get application settings (singleton pattern)."""
    return Settings()


# Global settings instance
settings = get_settings()
constants = Constants()
