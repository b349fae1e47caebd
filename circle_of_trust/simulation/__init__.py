"""
Code-Review Workflow Simulation

A discrete-event model of a team shipping work through code review:
- Developers pull tasks, write them (with defects) and open PRs
- A dispatcher rotates PRs through a pool of reviewers (code owners)
- Reviewers catch defects with some probability; a PR merges once enough
  distinct reviewers have approved it
- The project manager reports what was merged and how clean it was

All actors communicate through an event bus driven by a logical clock.
"""

from .bus import EventBus
from .errors import (
    SimulationError,
    InvalidTransitionError,
    ReviewerStarvationError
)
from .events import EventType, task_assigned_to
from .metrics import (
    SprintReport,
    ReportCalculator,
    format_report_markdown
)
from .scheduler import Scheduler
from .simulator import (
    Simulator,
    SimulationResult,
    run_sprint
)
from .task import Task, TaskState
from .team import (
    TeamMember,
    ProjectManager,
    Reviewer,
    ReviewerDispatcher,
    Developer
)

__all__ = [
    "EventBus",
    "SimulationError",
    "InvalidTransitionError",
    "ReviewerStarvationError",
    "EventType",
    "task_assigned_to",
    "SprintReport",
    "ReportCalculator",
    "format_report_markdown",
    "Scheduler",
    "Simulator",
    "SimulationResult",
    "run_sprint",
    "Task",
    "TaskState",
    "TeamMember",
    "ProjectManager",
    "Reviewer",
    "ReviewerDispatcher",
    "Developer"
]
