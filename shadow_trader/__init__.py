"""
Shadow Trader - behavioral pattern learning for whale wallets.

This package segments a wallet's on-chain history into activity sessions,
asks a text-completion oracle for behavioral patterns, keeps the latest
patterns per wallet in memory, and checks new activity against them.

Example:
    ```python
    from shadow_trader import LedgerClient, create_pattern_analyzer

    ledger = LedgerClient()
    analyzer = create_pattern_analyzer()

    txs = ledger.get_wallet_transactions("0xabc...", limit=50)
    analyzer.learn("0xabc...", txs)
    verdict = analyzer.check("0xabc...", ledger.get_wallet_transactions("0xabc...", 10))
    ```
"""

from shadow_trader.analyzer import PatternAnalyzer, create_pattern_analyzer
from shadow_trader.config import ShadowTraderConfig
from shadow_trader.extractor import (
    PatternExtractor,
    fallback_pattern,
    insufficient_data_pattern,
)
from shadow_trader.ledger import LedgerClient, LedgerError
from shadow_trader.matcher import LargeTransferRule, MatchRule, PatternMatcher
from shadow_trader.oracle import (
    AnthropicOracle,
    OracleError,
    OracleUnavailableError,
    PatternOracle,
    StubOracle,
    create_oracle,
)
from shadow_trader.parsers import ExtractionResult, parse_pattern_response
from shadow_trader.sessions import UnsortedTransactionsError, segment, sort_newest_first
from shadow_trader.store import PatternStore
from shadow_trader.summarizer import summarize
from shadow_trader.types import (
    ExtractionStatus,
    MatchVerdict,
    Pattern,
    PatternDetails,
    PatternType,
    Session,
    Transaction,
)

__version__ = "0.1.0"

__all__ = [
    # Pipeline entry points
    "create_pattern_analyzer",
    "PatternAnalyzer",
    "ShadowTraderConfig",
    # Components
    "segment",
    "sort_newest_first",
    "summarize",
    "PatternExtractor",
    "PatternStore",
    "PatternMatcher",
    "MatchRule",
    "LargeTransferRule",
    "fallback_pattern",
    "insufficient_data_pattern",
    # Oracles
    "create_oracle",
    "PatternOracle",
    "AnthropicOracle",
    "StubOracle",
    # Ledger
    "LedgerClient",
    # Parsing
    "ExtractionResult",
    "parse_pattern_response",
    # Typed models
    "Transaction",
    "Session",
    "Pattern",
    "PatternDetails",
    "PatternType",
    "MatchVerdict",
    "ExtractionStatus",
    # Errors
    "LedgerError",
    "OracleError",
    "OracleUnavailableError",
    "UnsortedTransactionsError",
]
