"""
Sprint Report

Aggregate statistics over the tasks merged during a sprint. Everything is
computed once, on demand, from the completed tasks:
- Size: points and lines
- Quality: defects still present at merge
- Review effort: distinct reviewers per task
- Flow: cycle time and time waiting for a first review
"""

from dataclasses import asdict, dataclass
from typing import Iterable, Optional
import statistics

from .task import Task


@dataclass
class SprintReport:
    """
    Flat statistics record for one simulation run.

    Averages are per completed task and are 0 when nothing was completed.
    """
    tasks_completed: int = 0
    tasks_remaining: int = 0

    total_points: float = 0.0
    average_points: float = 0.0

    total_lines: float = 0.0
    average_lines: float = 0.0

    total_errors: int = 0
    average_errors: float = 0.0
    percent_lines_with_errors: float = 0.0

    total_reviewers: int = 0
    average_reviewers: float = 0.0

    average_cycle_hours: float = 0.0
    average_review_wait_hours: float = 0.0
    simulated_hours: float = 0.0

    def to_dict(self) -> dict:
        return asdict(self)


class ReportCalculator:
    """Builds a SprintReport from completed tasks."""

    def calculate(
        self,
        completed: Iterable[Task],
        tasks_remaining: int = 0,
        simulated_hours: float = 0.0
    ) -> SprintReport:
        tasks = list(completed)
        report = SprintReport(
            tasks_remaining=tasks_remaining,
            simulated_hours=simulated_hours
        )
        if not tasks:
            return report

        count = len(tasks)
        report.tasks_completed = count

        report.total_points = sum(t.points for t in tasks)
        report.average_points = report.total_points / count

        # Lines derive from points, per task sizing
        report.total_lines = sum(t.points * t.lines_per_point for t in tasks)
        report.average_lines = report.total_lines / count

        report.total_errors = sum(t.error_count for t in tasks)
        report.average_errors = report.total_errors / count
        if report.total_lines:
            report.percent_lines_with_errors = (
                report.total_errors / report.total_lines * 100
            )

        report.total_reviewers = sum(len(t.reviewed_by) for t in tasks)
        report.average_reviewers = report.total_reviewers / count

        report.average_cycle_hours = self._mean(t.cycle_time() for t in tasks)
        report.average_review_wait_hours = self._mean(t.review_wait() for t in tasks)

        return report

    @staticmethod
    def _mean(values: Iterable[Optional[float]]) -> float:
        present = [v for v in values if v is not None]
        return statistics.mean(present) if present else 0.0


REPORT_ROWS = [
    ("tasks_completed", "Tasks completed", "{:d}"),
    ("tasks_remaining", "Tasks left in backlog", "{:d}"),
    ("total_points", "Total points", "{:.1f}"),
    ("average_points", "Average points", "{:.2f}"),
    ("total_lines", "Total lines", "{:.0f}"),
    ("average_lines", "Average lines", "{:.1f}"),
    ("total_errors", "Residual errors", "{:d}"),
    ("average_errors", "Average residual errors", "{:.2f}"),
    ("percent_lines_with_errors", "Lines with errors (%)", "{:.3f}"),
    ("total_reviewers", "Total reviews", "{:d}"),
    ("average_reviewers", "Average reviewers per task", "{:.2f}"),
    ("average_cycle_hours", "Average cycle time (hrs)", "{:.2f}"),
    ("average_review_wait_hours", "Average wait for review (hrs)", "{:.2f}"),
    ("simulated_hours", "Simulated time (hrs)", "{:.2f}"),
]


def format_report_markdown(report: SprintReport) -> str:
    """Format a report as a two-column markdown table."""
    lines = [
        "| Metric | Value |",
        "|--------|-------|"
    ]

    for attr, label, fmt in REPORT_ROWS:
        lines.append(f"| {label} | {fmt.format(getattr(report, attr))} |")

    return "\n".join(lines)
