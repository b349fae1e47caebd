import random

import pytest

from circle_of_trust.config import (
    Settings,
    TaskConfig,
    ReviewerConfig,
    DeveloperConfig,
    get_settings
)
from circle_of_trust.simulation import EventBus, Scheduler, Task


@pytest.fixture(autouse=True)
def _isolate_settings(monkeypatch):
    for prefix in ("TASK_", "REVIEWER_", "DEVELOPER_"):
        for name in ("ERROR_RATE", "NAMES", "LINES_PER_HOUR", "HOURS_PER_POINT",
                     "AVERAGE_POINTS", "AVERAGE_LINES_PER_POINT",
                     "LINES_PER_REVIEWER_THRESHOLD"):
            monkeypatch.delenv(prefix + name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def make_settings():
    """Build Settings without reading the environment defaults for pools."""
    def _make(
        tasks=5,
        reviewers=("alice", "bob", "carol", "grace"),
        developers=("dave", "erin"),
        threshold=300.0,
        lines_per_point=100.0,
        average_points=5.0,
        developer_error_rate=0.10,
        reviewer_error_rate=0.05,
        hours_per_point=0.0,
        lines_per_hour=0.0,
        seed=1234,
        max_hours=None
    ) -> Settings:
        return Settings(
            number_of_tasks=tasks,
            random_seed=seed,
            max_hours=max_hours,
            task=TaskConfig(
                average_lines_per_point=lines_per_point,
                average_points=average_points,
                lines_per_reviewer_threshold=threshold
            ),
            reviewer=ReviewerConfig(
                error_rate=reviewer_error_rate,
                lines_per_hour=lines_per_hour,
                names=list(reviewers)
            ),
            developer=DeveloperConfig(
                error_rate=developer_error_rate,
                hours_per_point=hours_per_point,
                names=list(developers)
            )
        )
    return _make


@pytest.fixture
def scheduler():
    return Scheduler()


@pytest.fixture
def bus(scheduler):
    return EventBus(scheduler)


@pytest.fixture
def rng():
    return random.Random(42)


@pytest.fixture
def make_task():
    def _make(points=5.0, lines_per_point=100.0, threshold=300.0) -> Task:
        return Task(
            points=points,
            lines_per_point=lines_per_point,
            lines_per_reviewer=threshold
        )
    return _make


@pytest.fixture
def open_pr(make_task):
    """A task that has been written and is waiting for review."""
    def _make(**kwargs) -> Task:
        task = make_task(**kwargs)
        task.start()
        task.create_pr()
        return task
    return _make
