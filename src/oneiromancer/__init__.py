"""Oneiromancer: reverse engineering assistant backed by a local LLM.

Sends decompiler pseudo-code to a locally running Ollama model and applies its
suggested function name, description and variable renames to the code.
"""

__version__ = "0.6.3"

from oneiromancer.analyzer import (
    Analyzer,
    analyze_code,
    analyze_file,
    analyze_functions,
    iter_analyses,
)
from oneiromancer.config import OneiromancerConfig, load_config
from oneiromancer.errors import (
    AnalysisValidationError,
    InferenceConnectionError,
    InputFileError,
    OneiromancerError,
    ProtocolError,
)
from oneiromancer.models import AnalysisResult, FunctionAnalysis, RewriteOutcome
from oneiromancer.ollama import AnalysisRequest, InferenceBackend, OllamaClient
from oneiromancer.rewriter import rewrite

__all__ = [
    # Configuration
    "OneiromancerConfig",
    "load_config",
    # Analysis
    "Analyzer",
    "analyze_code",
    "analyze_file",
    "analyze_functions",
    "iter_analyses",
    "rewrite",
    # Data model
    "AnalysisRequest",
    "AnalysisResult",
    "FunctionAnalysis",
    "RewriteOutcome",
    # Inference
    "InferenceBackend",
    "OllamaClient",
    # Errors
    "OneiromancerError",
    "InferenceConnectionError",
    "ProtocolError",
    "AnalysisValidationError",
    "InputFileError",
]
