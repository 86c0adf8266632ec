"""Ollama inference client for oneiromancer.

Sends one analysis request at a time to a locally hosted Ollama server and
hands back the raw response body. Decoding and validation of that body live in
oneiromancer.parser.

oneiromancer/src/oneiromancer/ollama.py
"""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

import requests

from .config import OneiromancerConfig
from .errors import InferenceConnectionError

logger = logging.getLogger(__name__)

GENERATE_ENDPOINT = "/api/generate"
TAGS_ENDPOINT = "/api/tags"

__all__ = [
    "AnalysisRequest",
    "InferenceEnvelope",
    "InferenceBackend",
    "OllamaClient",
]


@dataclass(frozen=True)
class AnalysisRequest:
    """Request body for a single non-streaming /api/generate call."""

    model: str
    prompt: str
    stream: bool = False
    format: str = "json"
    options: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        # Read-only copy of the caller's mapping
        object.__setattr__(self, "options", MappingProxyType(dict(self.options)))

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": self.model,
            "prompt": self.prompt,
            "stream": self.stream,
            "format": self.format,
        }
        if self.options:
            payload["options"] = dict(self.options)
        return payload


@dataclass(frozen=True)
class InferenceEnvelope:
    """Outer JSON object returned by /api/generate."""

    response: str
    done: bool = False
    model: Optional[str] = None
    done_reason: Optional[str] = None
    total_duration: Optional[int] = None
    load_duration: Optional[int] = None
    prompt_eval_count: Optional[int] = None
    eval_count: Optional[int] = None
    eval_duration: Optional[int] = None


class InferenceBackend(ABC):
    """Narrow interface to the inference service: request in, raw body out."""

    @abstractmethod
    def generate(self, request: AnalysisRequest) -> str:
        """Send `request` and return the raw response body."""
        pass


class OllamaClient(InferenceBackend):
    """Blocking HTTP client for the Ollama API."""

    def __init__(self, config: OneiromancerConfig, session: Optional[requests.Session] = None):
        """Initialize with an immutable configuration.

        Args:
            config: Resolved OneiromancerConfig
            session: Optional requests.Session, mainly for tests

        """
        self.config = config
        self.session = session if session is not None else requests.Session()

    def _url(self, endpoint: str) -> str:
        base = self.config.base_url.strip().rstrip("/")
        if not base:
            raise InferenceConnectionError("No Ollama base URL configured")
        return f"{base}{endpoint}"

    @property
    def _timeout(self):
        return (self.config.connect_timeout, self.config.timeout)

    def generate(self, request: AnalysisRequest) -> str:
        """POST `request` to /api/generate and return the raw body text.

        Raises:
            InferenceConnectionError: endpoint unreachable, timed out, or non-2xx

        """
        url = self._url(GENERATE_ENDPOINT)
        payload = request.to_payload()

        logger.info(f"Querying model {request.model} at {url}")
        logger.debug(f"Prompt length: {len(request.prompt)} chars, options: {request.options}")

        start_time = time.time()
        response = self._send("POST", url, json=payload)
        duration = time.time() - start_time

        logger.debug(f"HTTP response status: {response.status_code} after {duration:.2f}s")
        logger.debug(f"Raw response preview: {response.text[:500]}")
        return response.text

    def list_models(self) -> List[str]:
        """Return the model names the server has pulled (GET /api/tags)."""
        response = self._send("GET", self._url(TAGS_ENDPOINT))
        try:
            data = response.json()
        except ValueError as e:
            raise InferenceConnectionError(f"Unreadable model list from {response.url}") from e

        models = data.get("models", []) if isinstance(data, dict) else []
        return [m["name"] for m in models if isinstance(m, dict) and "name" in m]

    def _send(self, method: str, url: str, **kwargs) -> requests.Response:
        try:
            response = self.session.request(method, url, timeout=self._timeout, **kwargs)
        except requests.Timeout as e:
            raise InferenceConnectionError(
                f"Timed out waiting for {url} after {self.config.timeout:g}s"
            ) from e
        except requests.ConnectionError as e:
            raise InferenceConnectionError(f"Could not connect to {url}") from e
        except requests.RequestException as e:
            # Malformed URLs and similar transport failures
            raise InferenceConnectionError(f"Request to {url} failed: {e}") from e

        if not response.ok:
            detail = _error_detail(response)
            raise InferenceConnectionError(
                f"{url} returned HTTP {response.status_code}: {detail}",
                status_code=response.status_code,
            )
        return response


def _error_detail(response: requests.Response) -> str:
    """Extract Ollama's {"error": ...} message, falling back to the reason phrase."""
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict) and data.get("error"):
        return str(data["error"])
    return response.reason or "unknown error"
