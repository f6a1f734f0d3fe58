"""MCP stdio server exposing the whale-watching tools."""

import logging
import sys
from functools import lru_cache
from typing import Optional

from mcp.server import FastMCP

from shadow_trader import tools
from shadow_trader.config import get_config

logger = logging.getLogger(__name__)

mcp = FastMCP("shadow-trader")


@lru_cache
def get_context() -> tools.ToolContext:
    """Shared tool context; the pattern store lives as long as the server."""
    return tools.ToolContext(config=get_config())


@mcp.tool()
def learn_whale_patterns(address: str, limit: Optional[int] = None) -> dict:
    """Analyze a whale wallet's transaction history and learn behavioral
    patterns. Returns patterns with confidence scores. Use this when asked to
    'analyze' or 'learn patterns' from a wallet."""
    return tools.learn_whale_patterns(get_context(), address, limit)


@mcp.tool()
def check_whale_activity(address: str) -> dict:
    """Check a whale's current activity against learned patterns. Use this to
    see if whale is doing something unusual or matching a known pattern."""
    return tools.check_whale_activity(get_context(), address)


@mcp.tool()
def get_whale_summary(address: str) -> dict:
    """Get quick summary of a whale wallet including ETH balance and recent
    activity count."""
    return tools.get_whale_summary(get_context(), address)


def configure_logging(level: str) -> None:
    # stdout carries the protocol; diagnostics go to stderr.
    logging.basicConfig(
        stream=sys.stderr,
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> None:
    config = get_config()
    configure_logging(config.log_level)
    get_context()
    logger.info("Shadow Trader MCP server running")
    mcp.run()


if __name__ == "__main__":
    main()
