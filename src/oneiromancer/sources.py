"""
Input discovery and splitting for pseudo-code files.

oneiromancer/src/oneiromancer/sources.py
"""

import logging
import re
from pathlib import Path
from typing import Iterable, List, Tuple

from .errors import InputFileError

logger = logging.getLogger(__name__)

__all__ = ["discover", "read_pseudocode", "split_function_blocks", "split_functions", "OUTPUT_SUFFIX"]

OUTPUT_SUFFIX = ".out.c"

# Hex-Rays "Produce C file" puts one of these lines above every function:
# //----- (0000000140001000) ----------------------------------------------------
FUNCTION_SEPARATOR_RE = re.compile(r"^//-{3,}\s*\([0-9A-Fa-f]+\)\s*-*[ \t]*\r?$", re.MULTILINE)


def discover(paths: Iterable[Path], exts: tuple[str, ...] = (".c",)) -> List[Path]:
    """Expand files and directories into an ordered list of pseudo-code files.

    Generated *.out.c files are skipped when walking directories.
    """
    files: List[Path] = []
    for path in paths:
        if path.is_dir():
            found = sorted(
                p for ext in exts for p in path.rglob(f"*{ext}")
                if p.is_file() and not p.name.endswith(OUTPUT_SUFFIX)
            )
            logger.debug(f"Found {len(found)} file(s) under {path}")
            files.extend(found)
        elif path.is_file():
            files.append(path)
        else:
            raise InputFileError(f"No such file or directory: {path}")

    # Preserve first-seen order while dropping duplicates
    unique: List[Path] = []
    seen = set()
    for f in files:
        key = f.resolve()
        if key not in seen:
            seen.add(key)
            unique.append(f)
    return unique


def read_pseudocode(path: Path) -> str:
    """Read a pseudo-code file as UTF-8, replacing undecodable bytes."""
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise InputFileError(f"Failed to read `{path}`: {e.strerror or e}") from e


def split_function_blocks(text: str) -> List[Tuple[str, str]]:
    """Split Hex-Rays C file output into (separator, body) pairs.

    The separator is the `//----- (ADDRESS) ---` line that ties the function
    back to the binary. Text without separators is one block with an empty
    separator. The preamble before the first separator (includes,
    declarations) is not a function and is left out.
    """
    matches = list(FUNCTION_SEPARATOR_RE.finditer(text))
    if not matches:
        return [("", text)] if text.strip() else []

    blocks: List[Tuple[str, str]] = []
    for current, following in zip(matches, matches[1:] + [None]):
        end = following.start() if following is not None else len(text)
        body = text[current.end():end].strip("\r\n")
        if body.strip():
            blocks.append((current.group(0).rstrip("\r"), body + "\n"))

    logger.debug(f"Split input into {len(blocks)} function(s)")
    return blocks


def split_functions(text: str) -> List[str]:
    """Split Hex-Rays C file output into one snippet per function."""
    return [body for _, body in split_function_blocks(text)]
