"""
Response validation for Ollama analysis output.

The model is asked for JSON but may surround it with prose or code fences.
The first balanced {...} object in the `response` text that decodes as JSON
is located by a brace-depth scan that ignores braces inside quoted strings,
then validated into an AnalysisResult.

oneiromancer/src/oneiromancer/parser.py
"""

import json
import logging
from typing import Any, Dict, Optional

from pydantic import ValidationError

from .errors import AnalysisValidationError, ProtocolError
from .models import AnalysisResult
from .ollama import InferenceEnvelope

logger = logging.getLogger(__name__)

__all__ = [
    "extract_json_object",
    "parse_envelope",
    "parse_analysis",
    "parse_response",
]

_ENVELOPE_INT_FIELDS = (
    "total_duration",
    "load_duration",
    "prompt_eval_count",
    "eval_count",
    "eval_duration",
)


def _balanced_end(text: str, start: int) -> Optional[int]:
    """Index of the brace closing the object opened at `start`, or None."""
    depth = 0
    in_string = False
    escaped = False

    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
        elif ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i

    return None


def _decodes(candidate: str) -> bool:
    try:
        json.loads(candidate)
    except ValueError:
        return False
    return True


def extract_json_object(text: str) -> Optional[str]:
    """Return the first balanced {...} substring of text that decodes as JSON.

    A `{` inside quoted prose can open a bogus candidate, so when a candidate
    does not decode the scan restarts at the next `{`. If no candidate
    decodes, the first balanced one is returned and fails later with a
    decode error; None means no balanced object at all.
    """
    first = None
    start = text.find("{")
    while start != -1:
        end = _balanced_end(text, start)
        if end is not None:
            candidate = text[start:end + 1]
            if _decodes(candidate):
                return candidate
            if first is None:
                first = candidate
        start = text.find("{", start + 1)
    return first


def parse_envelope(body: str) -> InferenceEnvelope:
    """Decode the outer /api/generate response body.

    Raises:
        ProtocolError: body is not a JSON object with a string `response`

    """
    try:
        data = json.loads(body)
    except (TypeError, ValueError) as e:
        raise ProtocolError(f"Inference response is not valid JSON: {body[:200]!r}") from e

    if not isinstance(data, dict):
        raise ProtocolError(f"Inference response is not a JSON object: {type(data).__name__}")
    if "error" in data and "response" not in data:
        raise ProtocolError(f"Inference service reported an error: {data['error']}")

    response = data.get("response")
    if not isinstance(response, str):
        raise ProtocolError(f"Inference response lacks a string 'response' field (keys: {sorted(data)})")

    metadata: Dict[str, Any] = {
        key: data[key] for key in _ENVELOPE_INT_FIELDS if isinstance(data.get(key), int)
    }
    return InferenceEnvelope(
        response=response,
        done=bool(data.get("done", False)),
        model=data.get("model"),
        done_reason=data.get("done_reason"),
        **metadata,
    )


def parse_analysis(text: str) -> AnalysisResult:
    """Validate the model's own output into an AnalysisResult.

    Raises:
        AnalysisValidationError: no balanced object, undecodable JSON,
            or missing/empty description or name

    """
    candidate = extract_json_object(text)
    if candidate is None:
        raise AnalysisValidationError(f"No JSON object found in model output: {text[:200]!r}")

    try:
        data = json.loads(candidate)
    except ValueError as e:
        raise AnalysisValidationError(f"Model output is not valid JSON: {e}") from e

    try:
        result = AnalysisResult.model_validate(data)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'result'}: {err['msg']}"
            for err in e.errors()
        )
        raise AnalysisValidationError(f"Model output failed validation: {problems}") from e

    if result.dropped_variables:
        dropped = ", ".join(f"{k!r}->{v!r}" for k, v in result.dropped_variables)
        logger.warning(f"Dropped {len(result.dropped_variables)} malformed variable rename(s): {dropped}")

    return result


def parse_response(body: str) -> AnalysisResult:
    """Decode the envelope, then validate the analysis it carries."""
    envelope = parse_envelope(body)
    logger.debug(
        f"Envelope from {envelope.model}: done={envelope.done}, "
        f"eval_count={envelope.eval_count}, total_duration={envelope.total_duration}"
    )
    return parse_analysis(envelope.response)
