"""
Command-line interface for oneiromancer.

- cli_group.py: Root group, shared context, error reporting and exit codes
- analyze.py: analyze command
- status.py: status command

oneiromancer/src/oneiromancer/cli/__init__.py
"""

import logging
import sys

from . import analyze, status  # noqa: F401  (registers commands)
from .cli_group import OneiromancerContext, cli, report_error

__all__ = ["cli", "main"]

logger = logging.getLogger(__name__)


def main() -> None:
    """
    Main entry point for the oneiromancer CLI application.

    Commands map OneiromancerError to their own exit codes; this only
    covers I/O failures outside them, such as a closed stdout.
    """
    try:
        cli(obj=OneiromancerContext(), prog_name="oneiromancer")
    except OSError as e:
        report_error(e)
        logger.debug("Unhandled I/O error in CLI execution", exc_info=True)
        sys.exit(1)
