"""
Matching recent wallet activity against learned patterns.

The default rule is a placeholder policy: any recent transfer above 10 ETH
counts as a match against the first stored pattern, whatever that pattern
describes. Pass a different ``MatchRule`` to ``PatternMatcher`` to change it.
"""

from collections.abc import Sequence
from decimal import Decimal
from typing import Protocol

from shadow_trader.types import MatchVerdict, Pattern, Transaction

NO_MATCH = MatchVerdict(matched=False, confidence=0.0)


class MatchRule(Protocol):
    def __call__(
        self,
        recent: Sequence[Transaction],
        patterns: Sequence[Pattern],
    ) -> MatchVerdict: ...


class LargeTransferRule:
    """Match when any recent transaction value exceeds ``threshold``."""

    def __init__(
        self,
        threshold: Decimal = Decimal("10"),
        confidence: float = 0.7,
    ):
        self.threshold = threshold
        self.confidence = confidence

    def __call__(
        self,
        recent: Sequence[Transaction],
        patterns: Sequence[Pattern],
    ) -> MatchVerdict:
        if any(tx.amount > self.threshold for tx in recent):
            return MatchVerdict(
                matched=True,
                pattern=patterns[0],
                confidence=self.confidence,
            )
        return NO_MATCH


class PatternMatcher:
    """Applies a ``MatchRule`` with the empty-input guard in front of it."""

    def __init__(self, rule: MatchRule | None = None):
        self._rule = rule or LargeTransferRule()

    def match(
        self,
        recent: Sequence[Transaction],
        patterns: Sequence[Pattern],
    ) -> MatchVerdict:
        if not recent or not patterns:
            return NO_MATCH
        return self._rule(recent, patterns)
