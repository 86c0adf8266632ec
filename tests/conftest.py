"""Pytest configuration and fixtures for oneiromancer tests."""

import tempfile
from pathlib import Path
from typing import Callable, Iterator

import pytest

from helpers.fakes import SAMPLE_PSEUDOCODE, FakeBackend
from oneiromancer.config import BASE_URL_ENV, MODEL_ENV, OneiromancerConfig


@pytest.fixture(autouse=True)
def clean_env(request: pytest.FixtureRequest, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's Ollama settings out of the tests, except live ones."""
    if request.node.get_closest_marker("integration"):
        return
    for name in (BASE_URL_ENV, MODEL_ENV):
        # setenv first so values loaded from .env files during a test are removed on teardown
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


@pytest.fixture
def temp_dir() -> Iterator[Path]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def config() -> OneiromancerConfig:
    return OneiromancerConfig(base_url="http://127.0.0.1:11434", model="aidapal")


@pytest.fixture
def make_backend() -> Callable[..., FakeBackend]:
    """Factory for fake backends replying with the given bodies or errors, in order."""
    return lambda *replies: FakeBackend(list(replies))


@pytest.fixture
def sample_pseudocode_file(temp_dir: Path) -> Path:
    """Create a sample pseudo-code file for testing."""
    file_path = temp_dir / "sample.c"
    file_path.write_text(SAMPLE_PSEUDOCODE)
    return file_path
