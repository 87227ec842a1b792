"""Text generation backends used to phrase PRD requirements.

Usage:
    generator = AnthropicGenerator(api_key="sk-ant-xxx")
    text      = generator.generate("Write four requirement buckets as JSON ...")

Any object with a ``generate(prompt) -> str`` method can be passed to the
requirement synthesizer; ``build_generator(config)`` returns ``None`` when no
backend is configured, which selects the deterministic fallback.
"""

import logging
from typing import Protocol

import requests

logger = logging.getLogger("a11y_audit.generator")

ANTHROPIC_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_VERSION = "2023-06-01"


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class GeneratorError(Exception):
    """Base exception for text generation failures."""


class GeneratorNetworkError(GeneratorError):
    """Raised on timeout or unreachable backend."""


class GeneratorResponseError(GeneratorError):
    """Raised on a non-2xx response or a reply without text content."""


# ---------------------------------------------------------------------------
# Interface
# ---------------------------------------------------------------------------

class TextGenerator(Protocol):
    def generate(self, prompt: str) -> str: ...


# ---------------------------------------------------------------------------
# Anthropic backend
# ---------------------------------------------------------------------------

class AnthropicGenerator:
    """Single-shot client for the Anthropic Messages API."""

    def __init__(
        self,
        api_key: str,
        model: str = "claude-3-5-sonnet-20241022",
        timeout: int = 30,
        max_tokens: int = 4000,
        url: str = ANTHROPIC_URL,
    ) -> None:
        self.model = model
        self.url = url
        self._timeout = timeout
        self._max_tokens = max_tokens
        self._session = requests.Session()
        self._session.headers.update({
            "x-api-key":         api_key,
            "anthropic-version": ANTHROPIC_VERSION,
            "content-type":      "application/json",
        })

    def generate(self, prompt: str) -> str:
        """Send *prompt* as a single user message and return the reply text.

        One attempt only; callers decide what to do on failure.

        Raises:
            GeneratorNetworkError:  Timeout or connection failure
            GeneratorResponseError: Non-2xx response or no text in the reply
        """
        payload = {
            "model":      self.model,
            "max_tokens": self._max_tokens,
            "messages":   [{"role": "user", "content": prompt}],
        }
        try:
            response = self._session.post(self.url, json=payload, timeout=self._timeout)
        except requests.exceptions.Timeout as exc:
            raise GeneratorNetworkError(
                f"Text generation timed out after {self._timeout}s"
            ) from exc
        except requests.exceptions.ConnectionError as exc:
            raise GeneratorNetworkError(f"Unable to reach '{self.url}'") from exc
        except requests.exceptions.RequestException as exc:
            raise GeneratorNetworkError(f"Request to '{self.url}' failed: {exc}") from exc

        if not response.ok:
            raise GeneratorResponseError(
                f"Unexpected response {response.status_code} from {self.url}: {response.text[:200]}"
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise GeneratorResponseError("Text generation reply is not valid JSON") from exc
        if not isinstance(data, dict):
            raise GeneratorResponseError("Text generation reply is not a message object")

        text = "".join(
            block.get("text", "")
            for block in data.get("content") or []
            if isinstance(block, dict) and block.get("type") == "text"
        )
        if not text.strip():
            raise GeneratorResponseError("Text generation reply contained no text")

        logger.debug("Generated %d characters with model %s", len(text), self.model)
        return text


def build_generator(config) -> TextGenerator | None:
    """Return the configured text generator, or None to use the rule-based fallback."""
    gen = config.generator
    if gen.provider == "none":
        return None
    if not gen.api_key:
        logger.info("No API key configured for '%s'; using rule-based requirements", gen.provider)
        return None
    return AnthropicGenerator(
        api_key=gen.api_key,
        model=gen.model,
        timeout=gen.timeout,
        max_tokens=gen.max_tokens,
    )
