"""
Prompt construction for pseudo-code analysis.

oneiromancer/src/oneiromancer/prompt.py
"""

import json
from typing import Any, Dict

from .config import OneiromancerConfig
from .models import RESPONSE_SCHEMA
from .ollama import AnalysisRequest

__all__ = ["PromptBuilder", "SYSTEM_INSTRUCTIONS"]

SYSTEM_INSTRUCTIONS = """You are a reverse engineering assistant.
Analyze the decompiled pseudo-code of ONE function below and respond with a
single JSON object and nothing else. The object must have these keys:
- "description": a concise explanation of what the function does
- "name": a descriptive name for the function
- "variables": an object mapping each original variable or parameter name
  to a more meaningful name

Only rename identifiers that appear in the code. Use valid C identifiers."""


class PromptBuilder:
    """Turns one pseudo-code snippet into an AnalysisRequest."""

    def __init__(self, config: OneiromancerConfig):
        self.config = config
        self._schema_hint = json.dumps(RESPONSE_SCHEMA, indent=2)

    def options(self) -> Dict[str, Any]:
        options: Dict[str, Any] = {}
        if self.config.temperature is not None:
            options["temperature"] = self.config.temperature
        return options

    def build(self, pseudocode: str) -> AnalysisRequest:
        """Embed fixed instructions, the JSON schema hint, and the snippet.

        Callers should pass exactly one function; anything else is sent as-is.
        """
        prompt = (
            f"{SYSTEM_INSTRUCTIONS}\n\n"
            f"JSON schema:\n{self._schema_hint}\n\n"
            f"Pseudo-code:\n{pseudocode}"
        )
        return AnalysisRequest(
            model=self.config.model,
            prompt=prompt,
            options=self.options(),
        )
