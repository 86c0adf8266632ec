"""Live tests against a local Ollama server.

Uses OLLAMA_BASEURL / OLLAMA_MODEL (or the defaults) and skips when the
server or the model is not available.
"""

import pytest

from helpers.fakes import HELLO_PSEUDOCODE, SAMPLE_PSEUDOCODE
from oneiromancer.analyzer import analyze_code, analyze_functions
from oneiromancer.cli.status import model_available
from oneiromancer.config import load_config
from oneiromancer.errors import InferenceConnectionError
from oneiromancer.ollama import OllamaClient

pytestmark = pytest.mark.integration


@pytest.fixture
def live_config():
    config = load_config()
    try:
        models = OllamaClient(config).list_models()
    except InferenceConnectionError as e:
        pytest.skip(f"Ollama not reachable: {e}")
    if not model_available(config.model, models):
        pytest.skip(f"Model {config.model} not pulled")
    return config


def test_hello_world(live_config):
    result = analyze_code(HELLO_PSEUDOCODE, live_config)

    assert result.description
    assert result.suggested_name


def test_rewrites_sample_function(live_config):
    [analysis] = analyze_functions([SAMPLE_PSEUDOCODE], live_config)

    assert analysis.suggested_name
    assert analysis.rewritten.count("\n") == SAMPLE_PSEUDOCODE.count("\n")
