"""
Settings Management with Pydantic

Provides type-safe configuration for a simulation run:
- Task sizing (points, lines per point, review threshold)
- Reviewer and developer pools with their error rates
- Run controls (task count, seed, logical time horizon)

Every value can be overridden from the environment or a `.env` file.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_REVIEWERS = ["alice", "bob", "carol", "dave", "erin"]
DEFAULT_DEVELOPERS = ["frank", "grace", "heidi"]


class TaskConfig(BaseSettings):
    """Task sizing configuration."""
    model_config = SettingsConfigDict(
        env_prefix="TASK_",
        extra="ignore"
    )

    average_lines_per_point: float = Field(default=100.0, gt=0)
    average_points: float = Field(default=5.0, gt=0)

    # One reviewer is required for every this many lines
    lines_per_reviewer_threshold: float = Field(default=300.0, gt=0)


class ReviewerConfig(BaseSettings):
    """Reviewer (code owner) configuration."""
    model_config = SettingsConfigDict(
        env_prefix="REVIEWER_",
        extra="ignore"
    )

    # Likelihood of missing a flagged line
    error_rate: float = Field(default=0.05, ge=0, le=1)

    # 0 disables review duration modelling
    lines_per_hour: float = Field(default=0.0, ge=0)

    names: list[str] = Field(default_factory=lambda: list(DEFAULT_REVIEWERS))


class DeveloperConfig(BaseSettings):
    """Developer configuration."""
    model_config = SettingsConfigDict(
        env_prefix="DEVELOPER_",
        extra="ignore"
    )

    # Likelihood of writing a defect on any given line
    error_rate: float = Field(default=0.10, ge=0, le=1)

    # 0 disables authoring duration modelling
    hours_per_point: float = Field(default=0.0, ge=0)

    names: list[str] = Field(default_factory=lambda: list(DEFAULT_DEVELOPERS))


class Settings(BaseSettings):
    """Main application settings."""
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Application
    app_name: str = "Circle of Trust"
    log_level: str = "INFO"

    # Run controls
    number_of_tasks: int = Field(default=20, gt=0)
    random_seed: Optional[int] = None
    max_hours: Optional[float] = Field(default=None, ge=0)

    # Sub-configurations
    task: TaskConfig = Field(default_factory=TaskConfig)
    reviewer: ReviewerConfig = Field(default_factory=ReviewerConfig)
    developer: DeveloperConfig = Field(default_factory=DeveloperConfig)

    @classmethod
    def from_env(cls) -> "Settings":
        """Create settings from environment variables."""
        return cls(
            task=TaskConfig(),
            reviewer=ReviewerConfig(),
            developer=DeveloperConfig()
        )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings.from_env()
