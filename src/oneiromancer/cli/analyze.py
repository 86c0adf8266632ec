"""
The `analyze` command: query the local model and apply its suggestions.

oneiromancer/src/oneiromancer/cli/analyze.py
"""

import logging
from contextlib import nullcontext
from pathlib import Path
from typing import Optional

import click
from rich.markup import escape

from ..analyzer import Analyzer
from ..console_utils import console
from ..errors import InputFileError, OneiromancerError
from ..ollama import OllamaClient
from ..output import AnalysisWriter, output_path, render_analysis
from ..sources import discover, read_pseudocode, split_function_blocks
from .cli_group import EXIT_INTERRUPTED, cli, exit_code_for, report_error, resolve_config

logger = logging.getLogger(__name__)


@cli.command("analyze")
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True, path_type=Path))
@click.option("--base-url", "-b", help="Ollama base URL (default: $OLLAMA_BASEURL or http://127.0.0.1:11434)")
@click.option("--model", "-m", help="Model name (default: $OLLAMA_MODEL or aidapal)")
@click.option("--timeout", type=float, help="Read timeout in seconds for each request")
@click.option("--split/--no-split", default=True, help="Split Hex-Rays C files into one request per function")
@click.option("--write/--no-write", default=True, help="Save improved pseudo-code next to each input as *.out.c")
@click.option("--overwrite", is_flag=True, help="Replace existing *.out.c files")
@click.option("--show-code", is_flag=True, help="Print the improved pseudo-code")
@click.pass_context
def analyze(
    ctx: click.Context,
    paths: tuple[Path, ...],
    base_url: Optional[str],
    model: Optional[str],
    timeout: Optional[float],
    split: bool,
    write: bool,
    overwrite: bool,
    show_code: bool,
) -> None:
    """Analyze pseudo-code files with the local LLM."""
    config = resolve_config(base_url, model, timeout)
    analyzer = Analyzer(config, OllamaClient(config))

    try:
        for path in discover(paths):
            _analyze_path(analyzer, path, split, write, overwrite, show_code)
    except OneiromancerError as e:
        report_error(e)
        logger.debug("Analysis aborted", exc_info=True)
        ctx.exit(exit_code_for(e))
    except KeyboardInterrupt:
        console.print("[bold red][!] Interrupted[/bold red]")
        ctx.exit(EXIT_INTERRUPTED)

    console.print("[green][+] Done analyzing pseudo-code[/green]")


def _analyze_path(
    analyzer: Analyzer, path: Path, split: bool, write: bool, overwrite: bool, show_code: bool
) -> None:
    """Analyze every function in one input file, writing results as they complete."""
    console.print(f"[*] Analyzing pseudo-code in `{escape(str(path))}`")
    text = read_pseudocode(path)
    blocks = split_function_blocks(text) if split else ([("", text)] if text.strip() else [])
    if not blocks:
        raise InputFileError(f"No pseudo-code found in `{path}`")

    destination = output_path(path)
    writer = AnalysisWriter(destination, overwrite=overwrite) if write else nullcontext()
    with writer:
        total = len(blocks)
        for index, (separator, snippet) in enumerate(blocks):
            with console.status(f"Querying the Oneiromancer ({index + 1}/{total})", spinner="simpleDotsScrolling"):
                analysis = analyzer.analyze_function(index, snippet)
            console.print(f"[green][+] Successfully analyzed function {index + 1}/{total}[/green]\n")
            render_analysis(console, analysis, show_code=show_code)
            if write:
                writer.write(analysis, separator)

    if write:
        console.print(f"[*] Saved improved pseudo-code in `{escape(str(destination))}`")
