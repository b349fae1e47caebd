"""
Configuration Management

Centralized configuration for:
- Task sizing and review thresholds
- Reviewer and developer pools
- Run controls and logging
"""

from .settings import (
    Settings,
    TaskConfig,
    ReviewerConfig,
    DeveloperConfig,
    get_settings
)
from .log import configure_logging

__all__ = [
    "Settings",
    "TaskConfig",
    "ReviewerConfig",
    "DeveloperConfig",
    "get_settings",
    "configure_logging"
]
