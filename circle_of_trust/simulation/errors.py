"""
Simulation Errors

Failures that abort a run. Reviewer mistakes are a modelled outcome and
never raise; these exceptions signal a broken protocol between actors.
"""

from typing import Iterable


class SimulationError(Exception):
    """Base class for errors that abort a simulation run."""


class InvalidTransitionError(SimulationError):
    """A task state-machine method was called from the wrong state."""

    def __init__(self, task_id: str, current, target):
        self.task_id = task_id
        self.current = current
        self.target = target
        super().__init__(
            f"cannot transition task {task_id} from {current.value} to {target.value}"
        )


class ReviewerStarvationError(SimulationError):
    """No reviewer in the pool is eligible to review a task."""

    def __init__(self, task_id: str, reviewers: Iterable[str]):
        self.task_id = task_id
        self.reviewers = list(reviewers)
        pool = ", ".join(self.reviewers) or "<empty>"
        super().__init__(
            f"no eligible reviewer for task {task_id} (pool: {pool})"
        )
