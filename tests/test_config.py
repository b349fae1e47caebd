"""Tests for settings loading and validation."""

import pytest
from pydantic import ValidationError

from circle_of_trust.config import (
    DeveloperConfig,
    ReviewerConfig,
    Settings,
    TaskConfig,
    get_settings
)


class TestDefaults:

    def test_simulation_defaults(self):
        settings = Settings.from_env()
        assert settings.task.average_lines_per_point == 100.0
        assert settings.task.average_points == 5.0
        assert settings.task.lines_per_reviewer_threshold == 300.0
        assert settings.reviewer.error_rate == 0.05
        assert settings.developer.error_rate == 0.10
        assert len(settings.reviewer.names) == 5
        assert settings.max_hours is None

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()


class TestEnvironment:

    def test_task_prefix(self, monkeypatch):
        monkeypatch.setenv("TASK_LINES_PER_REVIEWER_THRESHOLD", "500")
        assert TaskConfig().lines_per_reviewer_threshold == 500.0

    def test_reviewer_names_from_json(self, monkeypatch):
        monkeypatch.setenv("REVIEWER_NAMES", '["x", "y"]')
        assert ReviewerConfig().names == ["x", "y"]

    def test_keyword_overrides_environment(self, monkeypatch):
        monkeypatch.setenv("DEVELOPER_ERROR_RATE", "0.5")
        assert DeveloperConfig(error_rate=0.2).error_rate == 0.2


class TestValidation:

    @pytest.mark.parametrize("rate", [-0.1, 1.5])
    def test_error_rate_bounds(self, rate):
        with pytest.raises(ValidationError):
            ReviewerConfig(error_rate=rate)

    def test_threshold_must_be_positive(self):
        with pytest.raises(ValidationError):
            TaskConfig(lines_per_reviewer_threshold=0)

    def test_task_count_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(number_of_tasks=0)
