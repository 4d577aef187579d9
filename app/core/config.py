"""Configuration management for the TrueBlazer moment engine."""

from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file (only if accessible)
try:
    load_dotenv()
except (PermissionError, OSError):
    # In sandboxed environments, .env might not be accessible
    # Environment variables should be set directly
    pass


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    # Supabase configuration (required)
    SUPABASE_URL: str = Field(..., description="Supabase project URL")
    SUPABASE_SERVICE_ROLE_KEY: str = Field(..., description="Supabase service role key")

    # Environment
    TRUEBLAZER_ENV: str = Field(default="dev", description="Environment: dev, staging, prod")

    # Signal windows
    CHECKIN_WINDOW: int = Field(default=5, description="Most recent check-ins to read")
    REFLECTION_WINDOW: int = Field(default=3, description="Most recent reflections to read")
    TASK_WINDOW_DAYS: int = Field(default=7, description="Trailing days of task sets to read")
    DUPLICATE_TASK_SET_WINDOW: int = Field(
        default=3, description="Most recent task sets scanned for repeated titles"
    )
    STAGNATION_CHECKIN_WINDOW: int = Field(
        default=7, description="Check-ins returned in the commitment status pattern"
    )
    DEFAULT_COMMITMENT_WINDOW_DAYS: int = Field(
        default=30, description="Commitment window used when a venture has none"
    )
    AGGREGATION_TIMEOUT_SECONDS: float = Field(
        default=10.0, description="Upper bound for the parallel signal reads"
    )

    # Moment classifier thresholds
    MOMENT_PARALYSIS_NO_STREAK: int = Field(default=3)
    MOMENT_PARALYSIS_ENERGY_CEILING: float = Field(default=2.0)
    MOMENT_PARALYSIS_COMPLETION_CEILING: float = Field(default=0.2)
    MOMENT_STUCK_NO_STREAK: int = Field(default=2)
    MOMENT_STUCK_COMPLETION_CEILING: float = Field(default=0.4)
    MOMENT_LAUNCH_COMPLETION_FLOOR: float = Field(default=0.5)
    MOMENT_SCOPE_CREEP_COMPLETION_FLOOR: float = Field(default=0.6)
    MOMENT_MOMENTUM_COMPLETION_FLOOR: float = Field(default=0.6)
    MOMENT_MOMENTUM_ENERGY_FLOOR: float = Field(default=3.5)
    MOMENT_APPROACHING_END_RATIO: float = Field(
        default=0.75, description="Share of the commitment window that counts as approaching end"
    )

    # Rate limiting
    RATE_LIMIT_REQUESTS_PER_MINUTE: int = Field(
        default=30, description="Moment state requests allowed per user per minute"
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings instance

    Raises:
        ValidationError: If required environment variables are missing
    """
    return Settings()
