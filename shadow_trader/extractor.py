"""
Pattern extraction: prompt the oracle with a digest and parse its answer.

``PatternExtractor.extract`` never raises. An unavailable or failing oracle
yields the fallback pattern; an unusable response yields an empty list.
"""

import logging

from shadow_trader.oracle import OracleUnavailableError, PatternOracle
from shadow_trader.parsers import ExtractionResult, parse_pattern_response
from shadow_trader.types import ExtractionStatus, Pattern, PatternType

logger = logging.getLogger(__name__)

DEFAULT_MAX_TOKENS = 2000

PROMPT_TEMPLATE = """Analyze this whale wallet's behavior and find patterns.

{digest}

Find predictive patterns like:
1. Trading times (e.g., "usually active 2-4 PM EST")
2. Value patterns (e.g., "often moves 10+ ETH at once")
3. Behavioral patterns (e.g., "accumulates then dumps")

Allowed pattern types: timing, sequence, value, protocol_switch, market_correlation.
Confidence is a number between 0 and 1.

Return ONLY a JSON array with this structure:
[{{
  "type": "timing",
  "description": "string describing the pattern",
  "actions": ["action1", "action2"],
  "confidence": 0.75,
  "occurrences": 5,
  "details": {{"avgTimeGap": "2.3 days", "avgValue": "10.5 ETH"}}
}}]"""


def build_prompt(digest: str) -> str:
    return PROMPT_TEMPLATE.format(digest=digest)


def fallback_pattern() -> Pattern:
    """The fixed pattern reported when no oracle answer is available."""
    return Pattern(
        type=PatternType.SEQUENCE,
        description="Regular activity pattern detected",
        actions=("Transfer", "Receive", "Transfer"),
        confidence=0.6,
        occurrences=3,
    )


def insufficient_data_pattern() -> Pattern:
    """The pattern reported when the history is too short to analyze."""
    return Pattern(
        type=PatternType.TIMING,
        description="Insufficient data for pattern analysis",
        actions=(),
        confidence=0.0,
        occurrences=0,
    )


class PatternExtractor:
    """Turns a digest into patterns via a ``PatternOracle``."""

    def __init__(
        self,
        oracle: PatternOracle,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        timeout: float | None = None,
    ):
        self._oracle = oracle
        self._max_tokens = max_tokens
        self._timeout = timeout

    def extract_result(
        self, digest: str, timeout: float | None = None
    ) -> ExtractionResult:
        """
        Run one extraction and report how it ended.

        Args:
            digest: Output of ``summarize()``
            timeout: Per-call timeout in seconds, overriding the default

        Returns:
            PARSED with patterns, EMPTY for an unusable response, or
            UNAVAILABLE with the fallback pattern
        """
        prompt = build_prompt(digest)

        try:
            text = self._oracle.complete(
                prompt,
                max_tokens=self._max_tokens,
                timeout=timeout if timeout is not None else self._timeout,
            )
        except OracleUnavailableError as e:
            logger.info("Pattern oracle unavailable, using fallback: %s", e)
            return self._unavailable()
        except Exception as e:
            logger.warning("Pattern oracle failed, using fallback: %s", e)
            return self._unavailable()

        result = parse_pattern_response(text)
        logger.debug(
            "Extraction finished (status=%s, patterns=%d)",
            result.status.value,
            len(result.patterns),
        )
        return result

    def extract(self, digest: str, timeout: float | None = None) -> list[Pattern]:
        return self.extract_result(digest, timeout=timeout).patterns

    @staticmethod
    def _unavailable() -> ExtractionResult:
        return ExtractionResult(
            status=ExtractionStatus.UNAVAILABLE,
            patterns=[fallback_pattern()],
        )
