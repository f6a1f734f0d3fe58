"""
Pattern analyzer: the learn/check pipeline over a wallet's history.

    transactions -> segment -> sessions
    (transactions, sessions) -> summarize -> digest
    digest -> extract -> patterns -> store
    (recent transactions, stored patterns) -> match -> verdict
"""

import logging
from collections.abc import Sequence

from shadow_trader.config import ShadowTraderConfig, get_config
from shadow_trader.extractor import PatternExtractor, insufficient_data_pattern
from shadow_trader.matcher import PatternMatcher
from shadow_trader.oracle import create_oracle
from shadow_trader.sessions import segment, sort_newest_first
from shadow_trader.store import PatternStore
from shadow_trader.summarizer import summarize
from shadow_trader.types import MatchVerdict, Pattern, Transaction

logger = logging.getLogger(__name__)


class PatternAnalyzer:
    """
    Learns behavioral patterns per wallet and checks new activity against them.

    Example:
        ```python
        analyzer = create_pattern_analyzer()
        patterns = analyzer.learn(address, transactions)
        verdict = analyzer.check(address, recent_transactions)
        ```
    """

    def __init__(
        self,
        extractor: PatternExtractor,
        store: PatternStore,
        matcher: PatternMatcher | None = None,
        gap_threshold_ms: int | None = None,
        min_transactions: int | None = None,
        config: ShadowTraderConfig | None = None,
    ):
        self._config = config or get_config()
        self._extractor = extractor
        self._store = store
        self._matcher = matcher or PatternMatcher()
        self._gap_threshold_ms = (
            gap_threshold_ms
            if gap_threshold_ms is not None
            else self._config.session_gap_ms
        )
        self._min_transactions = (
            min_transactions
            if min_transactions is not None
            else self._config.min_transactions
        )

    @property
    def store(self) -> PatternStore:
        return self._store

    def analyze(
        self,
        transactions: Sequence[Transaction],
        timeout: float | None = None,
    ) -> list[Pattern]:
        """
        Derive patterns from a wallet's history without storing them.

        Histories shorter than ``min_transactions`` short-circuit to a single
        zero-confidence pattern and the oracle is not consulted.
        """
        if len(transactions) < self._min_transactions:
            logger.info(
                "Only %d transactions, skipping pattern extraction",
                len(transactions),
            )
            return [insufficient_data_pattern()]

        ordered = sort_newest_first(transactions)
        sessions = segment(ordered, self._gap_threshold_ms)
        digest = summarize(ordered, sessions)

        logger.debug(
            "Summarized %d transactions into %d sessions",
            len(ordered),
            len(sessions),
        )
        return self._extractor.extract(digest, timeout=timeout)

    def learn(
        self,
        address: str,
        transactions: Sequence[Transaction],
        timeout: float | None = None,
    ) -> list[Pattern]:
        """Analyze and replace the stored patterns for ``address``."""
        patterns = self.analyze(transactions, timeout=timeout)
        self._store.put(address, patterns)
        logger.info("Learned %d patterns for %s", len(patterns), address.lower())
        return patterns

    def known_patterns(self, address: str) -> Sequence[Pattern]:
        return self._store.get(address) or []

    def check(
        self,
        address: str,
        recent: Sequence[Transaction],
    ) -> MatchVerdict:
        """Match recent activity against the stored patterns for ``address``."""
        return self._matcher.match(recent, self.known_patterns(address))


def create_pattern_analyzer(
    config: ShadowTraderConfig | None = None,
    store: PatternStore | None = None,
) -> PatternAnalyzer:
    """
    Factory function wiring an analyzer from configuration.

    The oracle is chosen once here: Anthropic when a key is configured,
    otherwise the stub that always falls back.
    """
    config = config or get_config()
    extractor = PatternExtractor(
        create_oracle(config),
        max_tokens=config.oracle_max_tokens,
        timeout=config.oracle_timeout,
    )
    return PatternAnalyzer(
        extractor=extractor,
        store=store if store is not None else PatternStore(),
        config=config,
    )
