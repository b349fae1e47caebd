"""
Task

A unit of work and its pull request. Tracks:
- Lifecycle state (forward-only, guarded transitions)
- Lines still carrying a defect
- The distinct reviewers who have approved it
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
from uuid import uuid4
import math
import random

from ..config.settings import TaskConfig
from .errors import InvalidTransitionError


class TaskState(Enum):
    """Task lifecycle states."""
    TO_DO = "todo"
    IN_PROGRESS = "in progress"
    READY_FOR_REVIEW = "ready for review"
    IN_REVIEW = "in review"
    COMPLETE = "complete"


def jittered(average: float, rng: Optional[random.Random] = None) -> float:
    """Sample `average * (1 + U[0, 1))`."""
    rng = rng or random
    return average * (1 + rng.random())


def roll(rate: float, rng: Optional[random.Random] = None) -> bool:
    """Bernoulli trial that succeeds with probability `rate`."""
    rng = rng or random
    return rng.random() < rate


@dataclass
class Task:
    """
    A simulated task and its PR.

    `points` is drawn once and never changes; `lines` and
    `required_reviews` are derived from it.
    """
    id: str = field(default_factory=lambda: uuid4().hex[:8])
    points: float = 5.0

    # Sizing, copied from TaskConfig when generated
    lines_per_point: float = 100.0
    lines_per_reviewer: float = 300.0

    state: TaskState = TaskState.TO_DO
    error_lines: set = field(default_factory=set)
    reviewed_by: set = field(default_factory=set)

    authored_errors: int = 0
    state_history: list = field(default_factory=list)
    review_log: list = field(default_factory=list)

    def __post_init__(self):
        if self.points <= 0:
            raise ValueError(f"points must be positive, got {self.points}")

    @classmethod
    def generate(
        cls,
        config: TaskConfig,
        rng: Optional[random.Random] = None,
        points: Optional[float] = None
    ) -> "Task":
        """Create a ToDo task with randomly sampled points."""
        if points is None:
            points = jittered(config.average_points, rng)

        return cls(
            points=points,
            lines_per_point=config.average_lines_per_point,
            lines_per_reviewer=config.lines_per_reviewer_threshold
        )

    def fresh_copy(self) -> "Task":
        """A new ToDo task with the same sizing."""
        return Task(
            points=self.points,
            lines_per_point=self.lines_per_point,
            lines_per_reviewer=self.lines_per_reviewer
        )

    @property
    def lines(self) -> float:
        return self.points * self.lines_per_point

    @property
    def line_count(self) -> int:
        """Number of line positions 0..n-1 covered by authoring and review."""
        return math.ceil(self.lines)

    @property
    def required_reviews(self) -> int:
        return math.ceil(self.lines / self.lines_per_reviewer)

    @property
    def error_count(self) -> int:
        return len(self.error_lines)

    def is_fully_reviewed(self) -> bool:
        return (
            self.state == TaskState.COMPLETE
            or len(self.reviewed_by) >= self.required_reviews
        )

    # Defect ledger

    def add_error(self, line_number: int) -> None:
        if line_number not in self.error_lines:
            self.error_lines.add(line_number)
            self.authored_errors += 1

    def has_error(self, line_number: int) -> bool:
        return line_number in self.error_lines

    def correct_error(self, line_number: int) -> None:
        self.error_lines.discard(line_number)

    # Review ledger

    def add_reviewer(self, name: str) -> None:
        self.reviewed_by.add(name)

    def has_reviewer(self, name: str) -> bool:
        return name in self.reviewed_by

    # State machine

    def _transition(self, allowed: TaskState, target: TaskState, timestamp: float) -> None:
        if self.state != allowed:
            raise InvalidTransitionError(self.id, self.state, target)

        self.state_history.append({
            "from_state": self.state,
            "to_state": target,
            "time": timestamp
        })
        self.state = target

    def start(self, timestamp: float = 0.0) -> None:
        self._transition(TaskState.TO_DO, TaskState.IN_PROGRESS, timestamp)

    def create_pr(self, timestamp: float = 0.0) -> None:
        self._transition(TaskState.IN_PROGRESS, TaskState.READY_FOR_REVIEW, timestamp)

    def review_pr(
        self,
        reviewer: str,
        timestamp: float = 0.0,
        started_at: Optional[float] = None
    ) -> None:
        """
        Record one reviewer pass finishing at `timestamp`.

        The reviewer is added first, so a single pass completes the task
        when only one review is required.
        """
        if self.state not in (TaskState.READY_FOR_REVIEW, TaskState.IN_REVIEW):
            raise InvalidTransitionError(self.id, self.state, TaskState.IN_REVIEW)

        self.add_reviewer(reviewer)
        self.review_log.append({
            "reviewer": reviewer,
            "started_at": timestamp if started_at is None else started_at,
            "finished_at": timestamp
        })

        if self.state == TaskState.READY_FOR_REVIEW:
            self._transition(TaskState.READY_FOR_REVIEW, TaskState.IN_REVIEW, timestamp)

        if self.is_fully_reviewed():
            self._transition(TaskState.IN_REVIEW, TaskState.COMPLETE, timestamp)

    # Timing

    def entered_at(self, state: TaskState) -> Optional[float]:
        """Logical time the task first entered `state`."""
        for entry in self.state_history:
            if entry["to_state"] == state:
                return entry["time"]
        return None

    def cycle_time(self) -> Optional[float]:
        """Hours from start of work to completion."""
        started = self.entered_at(TaskState.IN_PROGRESS)
        completed = self.entered_at(TaskState.COMPLETE)
        if started is None or completed is None:
            return None
        return completed - started

    def review_wait(self) -> Optional[float]:
        """Hours between opening the PR and the first review starting."""
        opened = self.entered_at(TaskState.READY_FOR_REVIEW)
        if opened is None or not self.review_log:
            return None
        return self.review_log[0]["started_at"] - opened
