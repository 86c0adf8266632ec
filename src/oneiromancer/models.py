"""
Data model for analysis results and rewrite outcomes.

oneiromancer/src/oneiromancer/models.py
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

__all__ = [
    "AnalysisResult",
    "FunctionAnalysis",
    "RewriteOutcome",
    "RESPONSE_SCHEMA",
    "is_identifier",
    "normalize_variables",
]

IDENTIFIER_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

# Shape the model is asked to produce; embedded in the prompt as a hint.
RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "description": {"type": "string"},
        "name": {"type": "string"},
        "variables": {
            "type": "object",
            "additionalProperties": {"type": "string"},
        },
    },
    "required": ["description", "name", "variables"],
}


def is_identifier(token: str) -> bool:
    """Return True if token looks like a C identifier."""
    return IDENTIFIER_RE.fullmatch(token) is not None


def normalize_variables(raw: Any) -> Tuple[Dict[str, str], List[Tuple[str, str]]]:
    """
    Split a raw `variables` value into usable renames and dropped entries.

    Accepts the object form {"old": "new"} and the aidapal list form
    [{"original_name": "old", "new_name": "new"}]. Anything else is dropped.

    Returns:
        (kept, dropped) where dropped holds (key, value) pairs as strings

    """
    kept: Dict[str, str] = {}
    dropped: List[Tuple[str, str]] = []

    if raw is None:
        return kept, dropped

    if isinstance(raw, dict):
        pairs = list(raw.items())
    elif isinstance(raw, list):
        pairs = []
        for item in raw:
            if isinstance(item, dict) and "original_name" in item and "new_name" in item:
                pairs.append((item["original_name"], item["new_name"]))
            else:
                dropped.append((str(item), ""))
    else:
        return kept, [(str(raw), "")]

    for key, value in pairs:
        if not isinstance(key, str) or not isinstance(value, str):
            dropped.append((str(key), str(value)))
            continue
        key, value = key.strip(), value.strip()
        if not is_identifier(key) or not is_identifier(value) or key in kept:
            dropped.append((key, value))
            continue
        kept[key] = value

    return kept, dropped


class AnalysisResult(BaseModel):
    """Validated suggestions for one function."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    description: str = Field(validation_alias=AliasChoices("description", "comment"))
    suggested_name: str = Field(
        validation_alias=AliasChoices("name", "function_name", "suggestedName", "suggested_name")
    )
    variables: Dict[str, str] = Field(default_factory=dict)
    dropped_variables: List[Tuple[str, str]] = Field(default_factory=list)

    @field_validator("description", "suggested_name")
    @classmethod
    def _require_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @model_validator(mode="before")
    @classmethod
    def _split_variables(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        kept, dropped = normalize_variables(data.get("variables"))
        return {**data, "variables": kept, "dropped_variables": dropped}


@dataclass(frozen=True)
class RewriteOutcome:
    """Result of applying a rename map to pseudo-code."""

    text: str
    substitutions: int
    per_name: Dict[str, int] = field(default_factory=dict)

    @property
    def unmatched(self) -> List[str]:
        """Names from the rename map that never occurred in the text."""
        return [name for name, hits in self.per_name.items() if hits == 0]


@dataclass(frozen=True)
class FunctionAnalysis:
    """Everything produced for one analyzed function, in input order."""

    index: int
    source: str
    result: AnalysisResult
    outcome: RewriteOutcome

    @property
    def description(self) -> str:
        return self.result.description

    @property
    def suggested_name(self) -> str:
        return self.result.suggested_name

    @property
    def rewritten(self) -> str:
        return self.outcome.text

    @property
    def substitutions(self) -> int:
        return self.outcome.substitutions
