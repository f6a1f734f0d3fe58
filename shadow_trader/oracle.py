"""
Text-completion oracles used for pattern extraction.

Two implementations share the ``PatternOracle`` interface:

- ``AnthropicOracle`` calls the Anthropic Messages API.
- ``StubOracle`` is used when no credentials are configured and always
  reports itself unavailable, so the extractor falls back deterministically.

Use ``create_oracle()`` to pick one from configuration.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any

import anthropic

from shadow_trader.config import ShadowTraderConfig, get_config

logger = logging.getLogger(__name__)


class OracleError(Exception):
    """Raised when the oracle cannot produce a completion."""


class OracleUnavailableError(OracleError):
    """Raised by oracles that are not configured."""


class PatternOracle(ABC):
    """Single-turn text completion."""

    @abstractmethod
    def complete(
        self,
        prompt: str,
        max_tokens: int,
        timeout: float | None = None,
    ) -> str:
        """
        Return the oracle's free-form text response to one user prompt.

        Raises:
            OracleError: If no completion could be obtained
        """


class StubOracle(PatternOracle):
    """Oracle used when no credentials are configured."""

    def complete(
        self,
        prompt: str,
        max_tokens: int,
        timeout: float | None = None,
    ) -> str:
        raise OracleUnavailableError("no extraction oracle configured")


class AnthropicOracle(PatternOracle):
    """
    Anthropic Messages API oracle.

    Example:
        ```python
        oracle = AnthropicOracle(api_key="sk-ant-...")
        text = oracle.complete("Find patterns...", max_tokens=2000, timeout=30)
        ```
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        config: ShadowTraderConfig | None = None,
        client: anthropic.Anthropic | None = None,
    ):
        """
        Initialize the oracle.

        Args:
            api_key: Anthropic API key (defaults to config)
            model: Model name (defaults to config)
            config: Configuration settings
            client: Optional pre-configured Anthropic client
        """
        self._config = config or get_config()
        self._model = model or self._config.anthropic_model

        if client is not None:
            self._client = client
        else:
            key = api_key or self._config.anthropic_api_key.get_secret_value()
            if not key:
                raise ValueError(
                    "Anthropic API key required. "
                    "Set SHADOW_TRADER_ANTHROPIC_API_KEY environment variable."
                )
            self._client = anthropic.Anthropic(api_key=key)

        logger.info("AnthropicOracle initialized (model=%s)", self._model)

    def complete(
        self,
        prompt: str,
        max_tokens: int,
        timeout: float | None = None,
    ) -> str:
        request: dict[str, Any] = {
            "model": self._model,
            "max_tokens": max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        if timeout is not None:
            request["timeout"] = timeout

        try:
            response = self._client.messages.create(**request)
        except anthropic.APIError as e:
            raise OracleError(f"Anthropic request failed: {e}") from e

        for block in response.content:
            if block.type == "text":
                return block.text

        raise OracleError("Anthropic response contained no text content")


def create_oracle(config: ShadowTraderConfig | None = None) -> PatternOracle:
    """
    Factory function to create the extraction oracle.

    Returns AnthropicOracle when an API key is configured, else StubOracle.
    """
    config = config or get_config()

    if config.anthropic_api_key.get_secret_value():
        logger.info("Creating AnthropicOracle")
        return AnthropicOracle(config=config)

    logger.info("No Anthropic API key configured; using StubOracle")
    return StubOracle()
