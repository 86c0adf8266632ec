"""
Output sink: terminal rendering and improved pseudo-code files.

oneiromancer/src/oneiromancer/output.py
"""

import logging
import textwrap
from pathlib import Path
from typing import IO, Iterable, Optional

from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from .errors import InputFileError
from .models import FunctionAnalysis
from .sources import OUTPUT_SUFFIX

logger = logging.getLogger(__name__)

__all__ = [
    "AnalysisWriter",
    "format_description",
    "output_path",
    "render_analysis",
    "write_analyses",
]

DESCRIPTION_WIDTH = 76


def format_description(name: str, description: str, width: int = DESCRIPTION_WIDTH) -> str:
    """Render a Phrack-style block comment describing a function."""
    # A stray terminator in model output would close the comment early
    safe = description.replace("*/", "* /")
    name = name.replace("*/", "* /")
    body = textwrap.fill(safe, width=width, initial_indent=" * ", subsequent_indent=" * ")
    return f"/*\n * {name}()\n *\n{body}\n */\n\n"


def output_path(source: Path) -> Path:
    """Sibling file for improved pseudo-code, e.g. foo.c -> foo.out.c."""
    return source.with_name(source.stem + OUTPUT_SUFFIX)


class AnalysisWriter:
    """Writes analyses for one input file as they complete.

    The output file is only created on the first write, so an input whose
    first function fails leaves nothing behind.
    """

    def __init__(self, path: Path, overwrite: bool = False):
        self.path = path
        self.overwrite = overwrite
        self.written = 0
        self._handle: Optional[IO[str]] = None

    def __enter__(self) -> "AnalysisWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _open(self) -> IO[str]:
        mode = "w" if self.overwrite else "x"
        try:
            return open(self.path, mode, encoding="utf-8")
        except FileExistsError as e:
            raise InputFileError(f"Refusing to overwrite existing `{self.path}` (use --overwrite)") from e
        except OSError as e:
            raise InputFileError(f"Failed to create `{self.path}`: {e.strerror or e}") from e

    def write(self, analysis: FunctionAnalysis, separator: str = "") -> None:
        """Append one analysis, below its Hex-Rays address line when given."""
        if self._handle is None:
            self._handle = self._open()
        else:
            self._handle.write("\n")
        if separator:
            self._handle.write(separator + "\n")
        self._handle.write(format_description(analysis.suggested_name, analysis.description))
        self._handle.write(analysis.rewritten)
        self._handle.flush()
        self.written += 1

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None
            logger.debug(f"Wrote {self.written} function(s) to {self.path}")


def write_analyses(path: Path, analyses: Iterable[FunctionAnalysis], overwrite: bool = False) -> int:
    """Write all analyses to one file and return how many were written."""
    with AnalysisWriter(path, overwrite=overwrite) as writer:
        for analysis in analyses:
            writer.write(analysis)
    return writer.written


def render_analysis(console: Console, analysis: FunctionAnalysis, show_code: bool = False) -> None:
    """Print the description, rename suggestions and diagnostics for one function."""
    console.print(format_description(analysis.suggested_name, analysis.description), markup=False, end="")

    variables = analysis.result.variables
    if variables:
        table = Table(title="Variable renaming suggestions", title_justify="left")
        table.add_column("Original", style="cyan")
        table.add_column("New", style="green")
        table.add_column("Hits", justify="right")
        for old, new in variables.items():
            table.add_row(escape(old), escape(new), str(analysis.outcome.per_name.get(old, 0)))
        console.print(table)
    else:
        console.print("[dim]No variable renaming suggestions[/dim]")

    if analysis.outcome.unmatched:
        console.print(
            f"[yellow]Not all suggested renames were found in the text: "
            f"{escape(', '.join(analysis.outcome.unmatched))}[/yellow]"
        )
    if analysis.result.dropped_variables:
        console.print(
            f"[yellow]Ignored {len(analysis.result.dropped_variables)} malformed rename suggestion(s)[/yellow]"
        )

    if show_code:
        console.print(Syntax(analysis.rewritten, "c", word_wrap=True))
    console.print()
