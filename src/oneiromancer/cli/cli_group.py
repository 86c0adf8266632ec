"""
Root click group and shared CLI helpers for oneiromancer.

oneiromancer/src/oneiromancer/cli/cli_group.py
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Type

import click
from rich.markup import escape

from .. import __version__
from ..config import OneiromancerConfig, load_config
from ..console_utils import console
from ..errors import (
    AnalysisValidationError,
    InferenceConnectionError,
    InputFileError,
    OneiromancerError,
    ProtocolError,
)

logger = logging.getLogger(__name__)

EXIT_INTERRUPTED = 130

EXIT_CODES: Dict[Type[OneiromancerError], int] = {
    InputFileError: 2,
    InferenceConnectionError: 3,
    ProtocolError: 4,
    AnalysisValidationError: 5,
}


@dataclass
class OneiromancerContext:
    """Shared context for CLI commands."""

    verbose: bool = False


def exit_code_for(error: OneiromancerError) -> int:
    for error_type, code in EXIT_CODES.items():
        if isinstance(error, error_type):
            return code
    return 1


def report_error(error: BaseException) -> None:
    """Print an error together with its cause chain."""
    console.print(f"[bold red][!] Error: {escape(str(error))}[/bold red]")
    cause = error.__cause__
    while cause is not None:
        console.print(f"[red]    caused by: {escape(str(cause))}[/red]")
        cause = cause.__cause__


def resolve_config(
    base_url: Optional[str], model: Optional[str], timeout: Optional[float] = None
) -> OneiromancerConfig:
    """Load configuration once, turning invalid values into usage errors."""
    try:
        return load_config(base_url=base_url, model=model, timeout=timeout)
    except ValueError as e:
        raise click.UsageError(str(e)) from e


@click.group()
@click.version_option(__version__, prog_name="oneiromancer")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """oneiromancer: reverse engineering assistant backed by a local LLM."""
    ctx.obj = OneiromancerContext(verbose=verbose)

    # Configure logging
    if verbose:
        logging.basicConfig(level=logging.DEBUG)
    else:
        logging.basicConfig(level=logging.INFO)
