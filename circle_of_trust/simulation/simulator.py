"""
Simulation Engine

Runs one sprint for one configuration:
- Seeds a backlog of randomly sized tasks
- Wires the project manager, dispatcher, reviewers and developers to a
  fresh event bus
- Advances the logical clock until the team goes quiet (or a time
  horizon is reached) and reports on what was merged

Answering "how many reviewers do we need" means calling this repeatedly
with different reviewer pools.
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional
from uuid import UUID, uuid4
import logging
import random

from ..config.settings import Settings, get_settings
from .bus import EventBus
from .errors import SimulationError
from .events import EventType
from .metrics import SprintReport
from .scheduler import Scheduler
from .task import Task
from .team import Developer, ProjectManager, Reviewer, ReviewerDispatcher

logger = logging.getLogger(__name__)


@dataclass
class SimulationResult:
    """Outcome of one sprint."""
    id: UUID = field(default_factory=uuid4)
    settings: Optional[Settings] = None
    report: SprintReport = field(default_factory=SprintReport)

    completed_tasks: list = field(default_factory=list)
    reactions_executed: int = 0
    events_published: int = 0
    tasks_authored: int = 0
    dropped_requests: int = 0

    # True when the backlog drained and every task merged
    finished: bool = False


class Simulator:
    """
    Main simulation engine.

    A simulator may be run more than once; every run gets its own bus,
    scheduler and team. A prebuilt backlog only supplies task sizing;
    each run works on fresh copies of those tasks.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        backlog: Optional[Iterable[Task]] = None
    ):
        self.settings = settings or get_settings()
        self.rng = random.Random(self.settings.random_seed)
        self._backlog_template = list(backlog) if backlog is not None else None

        # Run state
        self.scheduler: Optional[Scheduler] = None
        self.bus: Optional[EventBus] = None
        self.project_manager: Optional[ProjectManager] = None
        self.dispatcher: Optional[ReviewerDispatcher] = None
        self.reviewers: list[Reviewer] = []
        self.developers: list[Developer] = []

    def build(self) -> None:
        """Create the bus and attach every team member to it."""
        self.scheduler = Scheduler()
        self.bus = EventBus(self.scheduler)

        if self._backlog_template is None:
            backlog = self._generate_backlog()
        else:
            backlog = [task.fresh_copy() for task in self._backlog_template]

        # Subscription order defines delivery order for shared events
        self.project_manager = ProjectManager(self.bus, backlog)

        reviewer_config = self.settings.reviewer
        self.reviewers = [
            Reviewer(
                self.bus,
                name,
                error_rate=reviewer_config.error_rate,
                lines_per_hour=reviewer_config.lines_per_hour,
                rng=self.rng
            )
            for name in reviewer_config.names
        ]
        self.dispatcher = ReviewerDispatcher(self.bus, self.reviewers)

        developer_config = self.settings.developer
        self.developers = [
            Developer(
                self.bus,
                name,
                error_rate=developer_config.error_rate,
                hours_per_point=developer_config.hours_per_point,
                rng=self.rng
            )
            for name in developer_config.names
        ]

    def _generate_backlog(self) -> list[Task]:
        return [
            Task.generate(self.settings.task, self.rng)
            for _ in range(self.settings.number_of_tasks)
        ]

    def run(self) -> SimulationResult:
        """Run a complete sprint."""
        self.build()

        logger.info(
            "Sprint started: %d task(s), %d reviewer(s), %d developer(s)",
            self.project_manager.total_tasks,
            len(self.reviewers),
            len(self.developers)
        )

        self.bus.publish(EventType.SPRINT_STARTED)
        try:
            self.scheduler.run(until=self.settings.max_hours)
            result = SimulationResult(
                settings=self.settings,
                report=self.project_manager.report(),
                completed_tasks=list(self.project_manager.completed),
                reactions_executed=self.scheduler.executed,
                events_published=self.bus.published,
                tasks_authored=sum(d.tasks_authored for d in self.developers),
                dropped_requests=self.project_manager.dropped_requests,
                finished=self.project_manager.is_done()
            )
        except SimulationError as e:
            logger.error("Sprint aborted at t=%.2f: %s", self.scheduler.now, e)
            raise
        finally:
            self.stop()

        logger.info(
            "Sprint finished at t=%.2f: %d/%d task(s) merged",
            result.report.simulated_hours,
            result.report.tasks_completed,
            self.project_manager.total_tasks
        )
        return result

    def stop(self) -> None:
        """Detach every listener and drop work still in flight."""
        self.bus.detach_all()
        self.scheduler.clear()


def run_sprint(settings: Optional[Settings] = None) -> SprintReport:
    """Run one sprint and return its report."""
    return Simulator(settings).run().report
