"""Live integration tests that hit a real Ollama server.

These tests are separated from unit tests because they:
- Make real requests to the configured Ollama endpoint
- Take much longer to run (model inference, seconds to minutes)
- Require the configured model to be pulled locally

Run with: pytest tests/live/ -v -m integration
Skip with: pytest tests/ --ignore=tests/live/
"""
