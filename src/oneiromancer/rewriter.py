"""
Whole-token identifier rewriting for pseudo-code.

All renames are applied in one simultaneous pass over the original text: a
single alternation pattern is built from every escaped old name (longest
first) and each match is replaced by a dictionary lookup. Replacement output
is never rescanned, so maps such as {"a": "b", "b": "a"} swap cleanly instead
of cascading.

The rewriter is lexical only. Identifier-shaped tokens inside string literals
and comments are renamed like any other token.

oneiromancer/src/oneiromancer/rewriter.py
"""

import logging
import re
from typing import Dict, Mapping, Optional, Pattern

from .models import RewriteOutcome

logger = logging.getLogger(__name__)

__all__ = ["rewrite", "build_pattern"]

# A name only matches when no word character (any script, digits, `_`) touches it
TOKEN_BOUNDARY_BEFORE = r"(?<!\w)"
TOKEN_BOUNDARY_AFTER = r"(?!\w)"


def build_pattern(names) -> Optional[Pattern[str]]:
    """
    Compile a single whole-token alternation for the given names.

    Names are escaped, so characters with regex meaning cannot corrupt the
    match. Longer names come first to avoid prefix shadowing.

    Returns None when there is nothing to match.
    """
    candidates = sorted({name for name in names if name}, key=lambda n: (-len(n), n))
    if not candidates:
        return None
    alternation = "|".join(re.escape(name) for name in candidates)
    return re.compile(f"{TOKEN_BOUNDARY_BEFORE}(?:{alternation}){TOKEN_BOUNDARY_AFTER}")


def rewrite(original: str, renames: Mapping[str, str]) -> RewriteOutcome:
    """
    Rename whole identifier tokens in `original` according to `renames`.

    Keys absent from the text are no-ops. `substitutions` counts replacements
    that actually changed the text; `per_name` records how often each old
    name occurred.
    """
    per_name: Dict[str, int] = {name: 0 for name in renames if name}
    pattern = build_pattern(per_name)
    if pattern is None:
        return RewriteOutcome(text=original, substitutions=0, per_name=per_name)

    substitutions = 0

    def _replace(match: "re.Match[str]") -> str:
        nonlocal substitutions
        old = match.group(0)
        new = renames[old]
        per_name[old] += 1
        if new != old:
            substitutions += 1
        return new

    text = pattern.sub(_replace, original)

    missing = [name for name, hits in per_name.items() if hits == 0]
    if missing:
        logger.debug(f"Renames not found in text: {', '.join(missing)}")
    logger.debug(f"Applied {substitutions} substitution(s) for {len(per_name)} name(s)")

    return RewriteOutcome(text=text, substitutions=substitutions, per_name=per_name)
