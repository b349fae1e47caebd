#!/usr/bin/env python3
"""
Circle of Trust - Sprint Simulation

Simulates one sprint of a team working through code review and prints
how clean the merged code is.

Usage:
    # Defaults (from the environment / .env, see circle_of_trust.config)
    python main.py

    # Two code owners, 50 tasks, reproducible
    python main.py --reviewers alice bob --tasks 50 --seed 7

    # Stop after 40 simulated hours
    python main.py --hours-per-point 2 --review-lines-per-hour 200 --max-hours 40

Run it once per reviewer pool to compare pools.
"""

import argparse
import sys

from circle_of_trust.config import (
    Settings,
    TaskConfig,
    ReviewerConfig,
    DeveloperConfig,
    get_settings,
    configure_logging
)
from circle_of_trust.simulation import (
    SimulationError,
    Simulator,
    format_report_markdown
)


def _given(**values) -> dict:
    """Drop options that were not passed on the command line."""
    return {k: v for k, v in values.items() if v is not None}


def build_settings(args: argparse.Namespace) -> Settings:
    """Overlay command-line options on the environment settings."""
    base = get_settings()

    task = TaskConfig(**_given(
        average_lines_per_point=args.lines_per_point,
        average_points=args.average_points,
        lines_per_reviewer_threshold=args.lines_per_reviewer
    ))
    reviewer = ReviewerConfig(**_given(
        error_rate=args.reviewer_error_rate,
        lines_per_hour=args.review_lines_per_hour,
        names=args.reviewers
    ))
    developer = DeveloperConfig(**_given(
        error_rate=args.developer_error_rate,
        hours_per_point=args.hours_per_point,
        names=args.developers
    ))

    return Settings(**_given(
        app_name=base.app_name,
        log_level=args.log_level or base.log_level,
        number_of_tasks=args.tasks if args.tasks is not None else base.number_of_tasks,
        random_seed=args.seed if args.seed is not None else base.random_seed,
        max_hours=args.max_hours if args.max_hours is not None else base.max_hours,
        task=task,
        reviewer=reviewer,
        developer=developer
    ))


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Simulate a sprint of code review",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument("--tasks", type=int, help="Number of tasks in the backlog")
    parser.add_argument("--reviewers", nargs="+", metavar="NAME", help="Reviewer names")
    parser.add_argument("--developers", nargs="+", metavar="NAME", help="Developer names")

    sizing = parser.add_argument_group("task sizing")
    sizing.add_argument("--average-points", type=float)
    sizing.add_argument("--lines-per-point", type=float)
    sizing.add_argument(
        "--lines-per-reviewer",
        type=float,
        help="Lines one reviewer can vouch for",
    )

    rates = parser.add_argument_group("error rates")
    rates.add_argument("--developer-error-rate", type=float)
    rates.add_argument("--reviewer-error-rate", type=float)

    timing = parser.add_argument_group("logical time")
    timing.add_argument("--hours-per-point", type=float)
    timing.add_argument("--review-lines-per-hour", type=float)
    timing.add_argument("--max-hours", type=float, help="Stop the sprint at this time")

    parser.add_argument("--seed", type=int, help="Random seed")
    parser.add_argument("--log-level", help="Logging level (default: INFO)")

    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    settings = build_settings(args)
    configure_logging(settings.log_level)

    print("=" * 60)
    print(f"{settings.app_name.upper()} - SPRINT SIMULATION")
    print("=" * 60)
    print()
    print("Configuration:")
    print(f"  - Tasks: {settings.number_of_tasks}")
    print(f"  - Reviewers: {', '.join(settings.reviewer.names)}")
    print(f"  - Developers: {', '.join(settings.developer.names)}")
    print(f"  - Lines per reviewer: {settings.task.lines_per_reviewer_threshold:g}")
    print(f"  - Developer error rate: {settings.developer.error_rate:.0%}")
    print(f"  - Reviewer error rate: {settings.reviewer.error_rate:.0%}")
    print()

    try:
        result = Simulator(settings).run()
    except SimulationError as e:
        print(f"Simulation aborted: {e}", file=sys.stderr)
        return 1

    print(format_report_markdown(result.report))
    print()
    if not result.finished:
        print(f"Sprint ended with {settings.number_of_tasks - result.report.tasks_completed} task(s) unmerged.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
