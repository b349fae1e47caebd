"""
Team Members

The actors of a sprint. Apart from the dispatcher handing tasks to its
reviewers, all coordination flows through the event bus:

    ProjectManager --assignment--> Developer --review request--> ReviewerDispatcher
    ReviewerDispatcher --> Reviewer --additional review--> ReviewerDispatcher
                                    --fully reviewed-----> ProjectManager
"""

from collections import deque
from typing import Iterable, Optional
import logging
import random

from .bus import EventBus, EventName
from .errors import ReviewerStarvationError
from .events import EventType, task_assigned_to
from .metrics import ReportCalculator, SprintReport
from .task import Task, roll

logger = logging.getLogger(__name__)


class TeamMember:
    """Base class for actors attached to a bus."""

    def __init__(self, bus: EventBus, name: str = ""):
        self.bus = bus
        self.name = name

    @property
    def now(self) -> float:
        return self.bus.scheduler.now

    def emit(self, event: EventName, payload=None, delay: float = 0.0) -> None:
        self.bus.publish(event, payload, delay=delay)

    def listen(self, event: EventName, reaction) -> None:
        self.bus.subscribe(event, reaction)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class ProjectManager(TeamMember):
    """
    Owns the backlog and the completed list.

    Hands out tasks in backlog order to whichever developer asks and
    records tasks once they are fully reviewed.
    """

    def __init__(self, bus: EventBus, backlog: Optional[Iterable[Task]] = None, name: str = "pm"):
        super().__init__(bus, name)
        self.backlog: deque[Task] = deque(backlog or [])
        self.completed: list[Task] = []
        self.total_tasks = len(self.backlog)
        self.dropped_requests = 0

        self.listen(EventType.TASK_REQUESTED, self.assign_task)
        self.listen(EventType.FULLY_REVIEWED, self.mark_task_complete)

    def assign_task(self, developer: str) -> Optional[Task]:
        if not self.backlog:
            self.dropped_requests += 1
            logger.debug("Backlog empty, %s stalls", developer)
            return None

        task = self.backlog.popleft()
        logger.debug("Assigning task %s to %s", task.id, developer)
        self.emit(task_assigned_to(developer), task)
        return task

    def mark_task_complete(self, task: Task) -> None:
        self.completed.append(task)
        logger.info(
            "Task %s complete (%d/%d) reviewed by %s, %d residual error(s)",
            task.id,
            len(self.completed),
            self.total_tasks,
            ", ".join(sorted(task.reviewed_by)),
            task.error_count
        )

    def is_done(self) -> bool:
        """Backlog drained and every task merged."""
        return not self.backlog and len(self.completed) == self.total_tasks

    def report(self) -> SprintReport:
        """Aggregate statistics over the completed tasks."""
        return ReportCalculator().calculate(
            self.completed,
            tasks_remaining=len(self.backlog),
            simulated_hours=self.now
        )


class Reviewer(TeamMember):
    """
    A code owner.

    Reviews assigned tasks one after another. Each flagged line gets one
    chance to be caught; a miss leaves the defect in place.
    """

    def __init__(
        self,
        bus: EventBus,
        name: str,
        error_rate: float = 0.05,
        lines_per_hour: float = 0.0,
        rng: Optional[random.Random] = None
    ):
        super().__init__(bus, name)
        self.error_rate = error_rate
        self.lines_per_hour = lines_per_hour
        self.rng = rng or random.Random()

        self.assigned_tasks: deque[Task] = deque()
        self.is_reviewing = False
        self.available_at = 0.0
        self.reviews_completed = 0

    def assign(self, task: Task) -> bool:
        """Queue `task` unless already reviewed by this reviewer."""
        if task.has_reviewer(self.name):
            return False

        self.assigned_tasks.append(task)
        if not self.is_reviewing:
            self.review_queued()
        return True

    def review_queued(self) -> None:
        """Drain the queue without yielding to the bus."""
        if self.is_reviewing:
            return

        self.is_reviewing = True
        try:
            while self.assigned_tasks:
                task = self.assigned_tasks.popleft()
                finished_at = self.review(task)
                self.handle_reviewed_task(task, delay=finished_at - self.now)
        finally:
            self.is_reviewing = False

    def review(self, task: Task) -> float:
        """Run one repair pass over `task`. Returns the finish time."""
        started_at = max(self.now, self.available_at)
        finished_at = started_at + self.review_hours(task)

        caught = 0
        for line in range(task.line_count):
            if task.has_error(line) and not roll(self.error_rate, self.rng):
                task.correct_error(line)
                caught += 1

        task.review_pr(self.name, timestamp=finished_at, started_at=started_at)
        self.available_at = finished_at
        self.reviews_completed += 1

        logger.debug(
            "%s reviewed task %s: caught %d, %d left (%d/%d reviews)",
            self.name,
            task.id,
            caught,
            task.error_count,
            len(task.reviewed_by),
            task.required_reviews
        )
        return finished_at

    def review_hours(self, task: Task) -> float:
        if not self.lines_per_hour:
            return 0.0
        return task.lines / self.lines_per_hour

    def handle_reviewed_task(self, task: Task, delay: float = 0.0) -> None:
        if task.is_fully_reviewed():
            self.emit(EventType.FULLY_REVIEWED, task, delay=delay)
        else:
            self.emit(EventType.ADDITIONAL_REVIEW_REQUESTED, task, delay=delay)


class ReviewerDispatcher(TeamMember):
    """
    Routes review requests through a round-robin rotation of reviewers.

    The head reviewer is rotated to the tail on every attempt; reviewers
    who already approved the task are skipped.
    """

    def __init__(self, bus: EventBus, reviewers: Iterable[Reviewer], name: str = "dispatcher"):
        super().__init__(bus, name)
        self.rotation: deque[Reviewer] = deque(reviewers)
        self.skips = 0

        self.listen(EventType.REVIEW_REQUESTED, self.dispatch)
        self.listen(EventType.ADDITIONAL_REVIEW_REQUESTED, self.dispatch)

    def dispatch(self, task: Task) -> Reviewer:
        """Assign `task` to the next eligible reviewer in the rotation."""
        for _ in range(len(self.rotation)):
            reviewer = self.rotation.popleft()
            self.rotation.append(reviewer)

            if not task.has_reviewer(reviewer.name):
                logger.debug("Dispatching task %s to %s", task.id, reviewer.name)
                reviewer.assign(task)
                return reviewer

            self.skips += 1

        raise ReviewerStarvationError(task.id, [r.name for r in self.rotation])


class Developer(TeamMember):
    """
    Pulls tasks, writes them (defects included) and opens PRs.

    Requests the next task as soon as a PR is opened.
    """

    def __init__(
        self,
        bus: EventBus,
        name: str,
        error_rate: float = 0.10,
        hours_per_point: float = 0.0,
        rng: Optional[random.Random] = None
    ):
        super().__init__(bus, name)
        self.error_rate = error_rate
        self.hours_per_point = hours_per_point
        self.rng = rng or random.Random()
        self.tasks_authored = 0

        self.listen(task_assigned_to(self.name), self.perform_task)
        self.listen(EventType.SPRINT_STARTED, self.request_task)

    def request_task(self, _payload=None, delay: float = 0.0) -> None:
        self.emit(EventType.TASK_REQUESTED, self.name, delay=delay)

    def perform_task(self, task: Task) -> None:
        duration = task.points * self.hours_per_point

        task.start(timestamp=self.now)
        for line in range(task.line_count):
            if roll(self.error_rate, self.rng):
                task.add_error(line)

        self.tasks_authored += 1
        logger.debug(
            "%s wrote task %s: %d lines, %d error(s)",
            self.name, task.id, task.line_count, task.authored_errors
        )

        self.submit_for_review(task, delay=duration)
        self.request_task(delay=duration)

    def submit_for_review(self, task: Task, delay: float = 0.0) -> None:
        task.create_pr(timestamp=self.now + delay)
        self.emit(EventType.REVIEW_REQUESTED, task, delay=delay)
