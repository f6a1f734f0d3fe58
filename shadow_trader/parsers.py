"""
Parsers for extraction oracle responses.

The oracle answers in free text and may wrap the requested JSON array in
prose or markdown. Parsing is two-stage: the first bracket-balanced
``[...]`` substring is decoded, and failing that the whole trimmed response
is decoded when it starts with ``[``. Anything else yields an empty result.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from shadow_trader.types import ExtractionStatus, Pattern

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExtractionResult:
    """Tagged outcome of one extraction attempt."""

    status: ExtractionStatus
    patterns: list[Pattern] = field(default_factory=list)

    @classmethod
    def empty(cls) -> "ExtractionResult":
        return cls(status=ExtractionStatus.EMPTY)


def find_json_array(text: str) -> str | None:
    """
    Locate the first bracket-balanced ``[...]`` substring.

    Brackets inside JSON string literals are ignored. Returns None if no
    opening bracket is ever balanced.
    """
    start = text.find("[")
    while start != -1:
        end = _match_bracket(text, start)
        if end is not None:
            return text[start : end + 1]
        start = text.find("[", start + 1)
    return None


def _match_bracket(text: str, start: int) -> int | None:
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
        elif ch == "[":
            depth += 1
        elif ch == "]":
            depth -= 1
            if depth == 0:
                return i
    return None


def _decode_array(candidate: str) -> list[Any] | None:
    try:
        decoded = json.loads(candidate)
    except (json.JSONDecodeError, RecursionError):
        return None
    return decoded if isinstance(decoded, list) else None


def parse_pattern_response(text: str) -> ExtractionResult:
    """
    Parse an oracle response into typed patterns.

    Array elements that fail validation are skipped.

    Args:
        text: Raw oracle response

    Returns:
        ExtractionResult with status PARSED, or EMPTY if nothing usable
    """
    items: list[Any] | None = None

    candidate = find_json_array(text)
    if candidate is not None:
        items = _decode_array(candidate)

    if items is None:
        stripped = text.strip()
        if stripped.startswith("["):
            items = _decode_array(stripped)

    if items is None:
        logger.warning("Oracle response contained no JSON pattern array")
        return ExtractionResult.empty()

    patterns = []
    for i, item in enumerate(items):
        try:
            patterns.append(Pattern.model_validate(item))
        except ValidationError as e:
            logger.warning("Pattern #%s failed validation: %s, skipping", i, e)

    if not patterns:
        return ExtractionResult.empty()

    return ExtractionResult(status=ExtractionStatus.PARSED, patterns=patterns)
