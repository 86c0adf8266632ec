"""
Analysis orchestration.

Sequences prompt construction, the inference call, response validation and
identifier rewriting for each function, strictly one request at a time and in
input order. Errors are never swallowed: the first failure aborts the run.

oneiromancer/src/oneiromancer/analyzer.py
"""

import logging
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Union

from .config import OneiromancerConfig
from .models import AnalysisResult, FunctionAnalysis
from .ollama import InferenceBackend, OllamaClient
from .parser import parse_response
from .prompt import PromptBuilder
from .rewriter import rewrite
from .sources import read_pseudocode

logger = logging.getLogger(__name__)

__all__ = [
    "Analyzer",
    "analyze_code",
    "analyze_file",
    "analyze_functions",
    "iter_analyses",
]


class Analyzer:
    """Runs the per-function pipeline against one inference backend."""

    def __init__(
        self,
        config: Optional[OneiromancerConfig] = None,
        backend: Optional[InferenceBackend] = None,
    ):
        self.config = config if config is not None else OneiromancerConfig()
        self.backend = backend if backend is not None else OllamaClient(self.config)
        self.prompts = PromptBuilder(self.config)

    def analyze(self, pseudocode: str) -> AnalysisResult:
        """Build, send and validate one request."""
        request = self.prompts.build(pseudocode)
        body = self.backend.generate(request)
        return parse_response(body)

    def analyze_function(self, index: int, pseudocode: str) -> FunctionAnalysis:
        result = self.analyze(pseudocode)
        outcome = rewrite(pseudocode, result.variables)
        if outcome.unmatched:
            logger.debug(
                f"Function {index}: {len(outcome.unmatched)} suggested rename(s) not found in the text: "
                f"{', '.join(outcome.unmatched)}"
            )
        return FunctionAnalysis(index=index, source=pseudocode, result=result, outcome=outcome)

    def iter_analyses(self, snippets: Iterable[str]) -> Iterator[FunctionAnalysis]:
        """Yield one FunctionAnalysis per snippet, in order, failing fast."""
        for index, snippet in enumerate(snippets):
            logger.debug(f"Analyzing function {index} ({len(snippet)} chars)")
            yield self.analyze_function(index, snippet)


def analyze_code(
    pseudocode: str,
    config: Optional[OneiromancerConfig] = None,
    backend: Optional[InferenceBackend] = None,
) -> AnalysisResult:
    """Submit one pseudo-code snippet for analysis and return the validated result."""
    return Analyzer(config, backend).analyze(pseudocode)


def analyze_file(
    filepath: Union[str, Path],
    config: Optional[OneiromancerConfig] = None,
    backend: Optional[InferenceBackend] = None,
) -> AnalysisResult:
    """Read a pseudo-code file and submit its whole content as one snippet."""
    return analyze_code(read_pseudocode(Path(filepath)), config, backend)


def iter_analyses(
    snippets: Iterable[str],
    config: Optional[OneiromancerConfig] = None,
    backend: Optional[InferenceBackend] = None,
) -> Iterator[FunctionAnalysis]:
    """Lazily analyze snippets; results already yielded survive a later failure."""
    return Analyzer(config, backend).iter_analyses(snippets)


def analyze_functions(
    snippets: Iterable[str],
    config: Optional[OneiromancerConfig] = None,
    backend: Optional[InferenceBackend] = None,
) -> List[FunctionAnalysis]:
    """Analyze every snippet in order and return all results."""
    return list(iter_analyses(snippets, config, backend))
