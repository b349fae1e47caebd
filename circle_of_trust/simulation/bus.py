"""
Event Bus

Per-run publish/subscribe dispatch table. Actors talk to each other only
through the bus; every delivery becomes its own reaction on the scheduler,
so a chain of publishes never grows the call stack.
"""

from collections import defaultdict
from enum import Enum
from typing import Any, Callable, Optional, Union
import logging

from .scheduler import Scheduler

logger = logging.getLogger(__name__)

EventName = Union[str, Enum]


def _key(event: EventName) -> str:
    return event.value if isinstance(event, Enum) else event


class EventBus:
    """
    Deferred publish/subscribe channel.

    Delivery guarantee: every listener subscribed to a name at publish
    time receives the payload once, in subscription order, on a future
    scheduler turn.
    """

    def __init__(self, scheduler: Optional[Scheduler] = None):
        self.scheduler = scheduler or Scheduler()
        self._listeners: dict[str, list[Callable]] = defaultdict(list)
        self.published = 0

    def subscribe(self, event: EventName, listener: Callable) -> None:
        self._listeners[_key(event)].append(listener)

    def unsubscribe(self, event: EventName, listener: Callable) -> None:
        listeners = self._listeners.get(_key(event), [])
        if listener in listeners:
            listeners.remove(listener)

    def listeners(self, event: EventName) -> list[Callable]:
        return list(self._listeners.get(_key(event), []))

    def publish(self, event: EventName, payload: Any = None, delay: float = 0.0) -> int:
        """
        Schedule delivery of `payload` to the current listeners of `event`.

        Returns the number of deliveries scheduled.
        """
        name = _key(event)
        listeners = list(self._listeners.get(name, []))
        self.published += 1

        logger.debug(
            "publish %s -> %d listener(s) at t+%.2f", name, len(listeners), delay
        )

        for listener in listeners:
            self.scheduler.schedule(
                listener,
                payload,
                delay=delay,
                name=f"{name}:{getattr(listener, '__qualname__', repr(listener))}"
            )
        return len(listeners)

    def detach_all(self) -> None:
        """Remove every listener. Pending deliveries are left to the scheduler."""
        self._listeners.clear()
