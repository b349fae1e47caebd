"""
Simulation Events

Names of the events exchanged over the bus. Assignments are addressed to a
single developer through a per-developer key.
"""

from enum import Enum


class EventType(str, Enum):
    """Static event names."""
    SPRINT_STARTED = "sprint_started"
    TASK_REQUESTED = "task_requested"
    REVIEW_REQUESTED = "review_requested"
    ADDITIONAL_REVIEW_REQUESTED = "additional_review_requested"
    FULLY_REVIEWED = "fully_reviewed"


def task_assigned_to(developer: str) -> str:
    """Event name for an assignment addressed to one developer."""
    return f"task_assigned_to:{developer}"
