"""
Whale-watching tools exposed by the MCP server.

Each tool validates its address, calls the ledger client and the pattern
analyzer, and returns a JSON-serializable dict.
"""

import logging
import re
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from shadow_trader.analyzer import PatternAnalyzer, create_pattern_analyzer
from shadow_trader.config import ShadowTraderConfig, get_config
from shadow_trader.ledger import LedgerClient
from shadow_trader.summarizer import format_timestamp
from shadow_trader.types import Transaction, format_confidence

logger = logging.getLogger(__name__)

ADDRESS_PATTERN = re.compile(r"^0x[a-fA-F0-9]{40}$")


class InvalidAddressError(ValueError):
    """Raised when a tool receives a malformed wallet address."""


@dataclass
class ToolContext:
    """Collaborators shared by the tools for the lifetime of the server."""

    config: ShadowTraderConfig = field(default_factory=get_config)
    ledger: LedgerClient | None = None
    analyzer: PatternAnalyzer | None = None

    def __post_init__(self) -> None:
        if self.ledger is None:
            self.ledger = LedgerClient(config=self.config)
        if self.analyzer is None:
            self.analyzer = create_pattern_analyzer(config=self.config)


def normalize_address(address: Any) -> str:
    """Validate a wallet address and return it lowercased."""
    if not isinstance(address, str):
        raise InvalidAddressError("address must be a string")
    if not ADDRESS_PATTERN.match(address):
        raise InvalidAddressError(f"Invalid Ethereum address: {address}")
    return address.lower()


def _last_activity(transactions: list[Transaction], default: str) -> str:
    if transactions and transactions[0].timestamp is not None:
        return format_timestamp(transactions[0].timestamp)
    return default


def learn_whale_patterns(
    ctx: ToolContext, address: Any, limit: int | None = None
) -> dict[str, Any]:
    """Fetch a wallet's history, learn its patterns and store them."""
    address = normalize_address(address)
    if limit is None:
        limit = ctx.config.learn_limit
    elif limit < 1:
        raise ValueError(f"limit must be at least 1: {limit}")
    logger.info("Learning patterns for %s", address)

    transactions = ctx.ledger.get_wallet_transactions(address, limit)
    patterns = ctx.analyzer.learn(address, transactions)

    return {
        "address": address,
        "transactionsAnalyzed": len(transactions),
        "patternsFound": len(patterns),
        "patterns": [p.to_summary() for p in patterns],
        "summary": (
            f"Analyzed {len(transactions)} transactions and found "
            f"{len(patterns)} behavioral patterns."
        ),
    }


def check_whale_activity(ctx: ToolContext, address: Any) -> dict[str, Any]:
    """Compare a wallet's latest transactions with its learned patterns."""
    address = normalize_address(address)
    logger.info("Checking activity for %s", address)

    recent = ctx.ledger.get_wallet_transactions(address, ctx.config.check_limit)
    if not ctx.analyzer.known_patterns(address):
        return {
            "status": "No patterns learned yet",
            "message": f"Use learn_whale_patterns first to analyze {address}",
            "recentActivity": f"{len(recent)} transactions in last period",
        }

    verdict = ctx.analyzer.check(address, recent)
    pattern_match = None
    if verdict.matched and verdict.pattern is not None:
        pattern_match = {
            "description": verdict.pattern.description,
            "confidence": format_confidence(verdict.confidence),
        }

    return {
        "address": address,
        "status": "PATTERN DETECTED" if verdict.matched else "Normal activity",
        "recentTransactions": len(recent),
        "lastActivity": _last_activity(recent, "Unknown"),
        "patternMatch": pattern_match,
    }


def get_whale_summary(ctx: ToolContext, address: Any) -> dict[str, Any]:
    """Balance and recent activity overview for a wallet."""
    address = normalize_address(address)
    logger.info("Getting summary for %s", address)

    balance = Decimal(ctx.ledger.get_eth_balance(address))
    recent = ctx.ledger.get_wallet_transactions(address, ctx.config.summary_limit)
    total = sum((tx.amount for tx in recent), Decimal("0"))

    return {
        "address": address,
        "ethBalance": f"{balance:.4f} ETH",
        "recentTransactions": len(recent),
        "lastActive": _last_activity(recent, "No recent activity"),
        "totalValueMoved": f"{total:.4f}",
    }
