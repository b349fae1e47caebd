"""
Logical Clock Scheduler

Reactions are queued with a logical timestamp and run one at a time, to
completion, in (time, insertion order). Nothing here touches the wall
clock, so a run is reproducible given the same random seed.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Optional
import heapq
import itertools
import logging

logger = logging.getLogger(__name__)


@dataclass(order=True)
class Reaction:
    """A callback waiting for its turn on the scheduler."""
    time: float
    sequence: int
    callback: Callable = field(compare=False)
    args: tuple = field(default=(), compare=False)
    name: str = field(default="", compare=False)

    def run(self) -> Any:
        return self.callback(*self.args)


class Scheduler:
    """
    Cooperative single-threaded scheduler.

    Each call to `step` pops the earliest reaction, advances `now` to its
    timestamp and runs it. A reaction that schedules further work never
    runs it inline; the new reaction waits for a later turn.
    """

    def __init__(self):
        self.now: float = 0.0
        self._queue: list[Reaction] = []
        self._sequence = itertools.count()
        self.executed = 0

    @property
    def pending(self) -> int:
        """Number of reactions waiting to run."""
        return len(self._queue)

    def is_idle(self) -> bool:
        return not self._queue

    def schedule(
        self,
        callback: Callable,
        *args: Any,
        delay: float = 0.0,
        name: str = ""
    ) -> Reaction:
        """Queue `callback(*args)` to run `delay` logical hours from now."""
        if delay < 0:
            raise ValueError(f"delay must be non-negative, got {delay}")

        reaction = Reaction(
            time=self.now + delay,
            sequence=next(self._sequence),
            callback=callback,
            args=args,
            name=name or getattr(callback, "__qualname__", repr(callback))
        )
        heapq.heappush(self._queue, reaction)
        return reaction

    def peek_time(self) -> Optional[float]:
        """Timestamp of the next reaction, or None when idle."""
        return self._queue[0].time if self._queue else None

    def step(self) -> bool:
        """Run the next reaction. Returns False when there was nothing to run."""
        if not self._queue:
            return False

        reaction = heapq.heappop(self._queue)
        self.now = reaction.time
        try:
            reaction.run()
        except Exception:
            logger.error(
                "Reaction %s failed at t=%.2f", reaction.name, self.now
            )
            raise
        self.executed += 1
        return True

    def run(self, until: Optional[float] = None) -> int:
        """
        Run reactions until idle, or until the next one is due after `until`.

        Returns the number of reactions executed by this call.
        """
        count = 0
        while self._queue:
            if until is not None and self._queue[0].time > until:
                self.now = max(self.now, until)
                break
            self.step()
            count += 1
        return count

    def clear(self) -> None:
        """Drop every pending reaction."""
        dropped = len(self._queue)
        self._queue = []
        if dropped:
            logger.debug("Dropped %d pending reactions", dropped)
