"""
Logging Setup

Simulation modules log through `logging.getLogger(__name__)`; this module
configures the root handler once per process.
"""

import logging
from typing import Union


def configure_logging(level: Union[int, str] = logging.INFO) -> None:
    """Configure logging for simulation runs.

    Args:
        level: Logging level, either a name ("DEBUG") or a number
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    logging.getLogger("circle_of_trust").setLevel(level)
