"""Tests for a11y_audit/generator.py"""

import pytest
import requests

from a11y_audit.config import Config, GeneratorConfig
from a11y_audit.generator import (
    ANTHROPIC_URL,
    AnthropicGenerator,
    GeneratorNetworkError,
    GeneratorResponseError,
    build_generator,
)


@pytest.fixture
def generator() -> AnthropicGenerator:
    return AnthropicGenerator(api_key="sk-ant-test", model="claude-test", timeout=7, max_tokens=100)


def _message(*texts: str) -> dict:
    return {
        "id": "msg_1",
        "type": "message",
        "role": "assistant",
        "content": [{"type": "text", "text": t} for t in texts],
    }


# ---------------------------------------------------------------------------
# generate() — happy path
# ---------------------------------------------------------------------------

def test_generate_returns_text(generator, requests_mock):
    requests_mock.post(ANTHROPIC_URL, json=_message('{"functional": []', "}"))
    assert generator.generate("prompt") == '{"functional": []}'


def test_generate_request_shape(generator, requests_mock):
    adapter = requests_mock.post(ANTHROPIC_URL, json=_message("ok"))
    generator.generate("Write requirements")

    body = adapter.last_request.json()
    assert body["model"] == "claude-test"
    assert body["max_tokens"] == 100
    assert body["messages"] == [{"role": "user", "content": "Write requirements"}]

    headers = adapter.last_request.headers
    assert headers["x-api-key"] == "sk-ant-test"
    assert headers["anthropic-version"] == "2023-06-01"


# ---------------------------------------------------------------------------
# generate() — failures
# ---------------------------------------------------------------------------

def test_generate_http_error(generator, requests_mock):
    requests_mock.post(ANTHROPIC_URL, status_code=529, text="overloaded")
    with pytest.raises(GeneratorResponseError, match="529"):
        generator.generate("prompt")


def test_generate_empty_content(generator, requests_mock):
    requests_mock.post(ANTHROPIC_URL, json={"content": []})
    with pytest.raises(GeneratorResponseError, match="no text"):
        generator.generate("prompt")


def test_generate_timeout(generator, requests_mock):
    requests_mock.post(ANTHROPIC_URL, exc=requests.exceptions.Timeout)
    with pytest.raises(GeneratorNetworkError, match="7s"):
        generator.generate("prompt")


def test_generate_connection_error(generator, requests_mock):
    requests_mock.post(ANTHROPIC_URL, exc=requests.exceptions.ConnectionError)
    with pytest.raises(GeneratorNetworkError, match="Unable to reach"):
        generator.generate("prompt")


@pytest.mark.parametrize("exc", [
    requests.exceptions.ChunkedEncodingError,
    requests.exceptions.TooManyRedirects,
    requests.exceptions.InvalidURL,
])
def test_generate_other_request_errors(generator, requests_mock, exc):
    requests_mock.post(ANTHROPIC_URL, exc=exc)
    with pytest.raises(GeneratorNetworkError, match="failed"):
        generator.generate("prompt")


# ---------------------------------------------------------------------------
# build_generator
# ---------------------------------------------------------------------------

def test_build_generator_with_key():
    gen = build_generator(Config(generator=GeneratorConfig(api_key="k", model="m")))
    assert isinstance(gen, AnthropicGenerator)
    assert gen.model == "m"


def test_build_generator_without_key_returns_none():
    assert build_generator(Config()) is None


def test_build_generator_provider_none():
    assert build_generator(Config(generator=GeneratorConfig(provider="none", api_key="k"))) is None
