"""
Oneiromancer Configuration Management

Builds the process-wide, read-only configuration used to reach the local
Ollama service.

Configuration priority order:
1. Explicit overrides (command-line options)
2. Environment variables (OLLAMA_BASEURL, OLLAMA_MODEL), including .env files
3. [tool.oneiromancer] in ./pyproject.toml
4. Default values

The resulting OneiromancerConfig is immutable and is passed into the prompt
builder and inference client constructors.
"""

import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional

# Handle TOML library imports - support Python 3.10 (tomli) and 3.11+ (tomllib)
try:
    import tomllib  # Python 3.11+
except ImportError:
    import tomli as tomllib  # Python 3.10 fallback

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Configuration constants
DEFAULT_BASE_URL = "http://127.0.0.1:11434"
DEFAULT_MODEL = "aidapal"
DEFAULT_TIMEOUT_SECONDS = 300.0
DEFAULT_CONNECT_TIMEOUT_SECONDS = 10.0

BASE_URL_ENV = "OLLAMA_BASEURL"
MODEL_ENV = "OLLAMA_MODEL"

__all__ = [
    "OneiromancerConfig",
    "load_config",
    "load_env_files",
    "load_toml_config",
    "DEFAULT_BASE_URL",
    "DEFAULT_MODEL",
    "BASE_URL_ENV",
    "MODEL_ENV",
]


@dataclass(frozen=True)
class OneiromancerConfig:
    """Typed inference configuration with explicit validation."""

    base_url: str = DEFAULT_BASE_URL
    model: str = DEFAULT_MODEL
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT_SECONDS
    temperature: Optional[float] = None

    def __post_init__(self):
        """Validate required configuration."""
        if not self.model:
            raise ValueError("model is required - set OLLAMA_MODEL or pass --model")
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")
        if self.connect_timeout <= 0:
            raise ValueError(f"connect_timeout must be positive, got {self.connect_timeout}")

    def with_base_url(self, base_url: str) -> "OneiromancerConfig":
        return replace(self, base_url=base_url)

    def with_model(self, model: str) -> "OneiromancerConfig":
        return replace(self, model=model)

    def with_timeout(self, timeout: float) -> "OneiromancerConfig":
        return replace(self, timeout=timeout)


def load_env_files(search_dirs: Optional[list[Path]] = None) -> None:
    """Load environment variables from .env files without overriding the real environment."""
    if search_dirs is None:
        search_dirs = [Path.cwd()]

    env_paths = [directory / ".env" for directory in search_dirs]
    env_paths.append(Path.home() / ".oneiromancer.env")

    for env_path in env_paths:
        if env_path.exists():
            logger.debug(f"Loading environment from {env_path}")
            load_dotenv(env_path)


def load_toml_config(config_path: Path) -> Dict[str, Any]:
    """Load the [tool.oneiromancer] table from a TOML file."""
    if not config_path.exists():
        return {}

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning(f"Failed to load {config_path}: {e}")
        return {}

    section = data.get("tool", {}).get("oneiromancer", {})
    if not isinstance(section, dict):
        logger.warning(f"Ignoring non-table [tool.oneiromancer] in {config_path}")
        return {}
    return section


def load_config(
    base_url: Optional[str] = None,
    model: Optional[str] = None,
    timeout: Optional[float] = None,
    project_root: Optional[Path] = None,
) -> OneiromancerConfig:
    """
    Resolve configuration once at process start.

    Args:
        base_url: Explicit base URL override (e.g. from --base-url)
        model: Explicit model override (e.g. from --model)
        timeout: Explicit read timeout override in seconds
        project_root: Directory holding .env and pyproject.toml, defaults to cwd

    Returns:
        Validated OneiromancerConfig

    """
    root = project_root if project_root is not None else Path.cwd()
    load_env_files([root])
    toml = load_toml_config(root / "pyproject.toml")

    kwargs: Dict[str, Any] = {
        "base_url": (
            base_url or
            os.getenv(BASE_URL_ENV) or
            toml.get("base_url", DEFAULT_BASE_URL)
        ),
        "model": (
            model or
            os.getenv(MODEL_ENV) or
            toml.get("model", DEFAULT_MODEL)
        ),
        "timeout": float(timeout if timeout is not None else toml.get("timeout", DEFAULT_TIMEOUT_SECONDS)),
        "connect_timeout": float(toml.get("connect_timeout", DEFAULT_CONNECT_TIMEOUT_SECONDS)),
        "temperature": _as_optional_float(toml.get("temperature")),
    }

    config = OneiromancerConfig(**kwargs)
    logger.debug(f"Resolved configuration: {config}")
    return config


def _as_optional_float(value: Any) -> Optional[float]:
    """Coerce a TOML value to float, ignoring anything unusable."""
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring non-numeric temperature {value!r}")
        return None
