"""
Pytest fixtures for shadow_trader tests.

Uses responses to mock HTTP requests and simple in-process oracles in place
of the Anthropic API.
"""

from typing import Callable, Generator

import pytest
import responses

from shadow_trader.analyzer import PatternAnalyzer
from shadow_trader.config import ShadowTraderConfig
from shadow_trader.extractor import PatternExtractor
from shadow_trader.ledger import LedgerClient
from shadow_trader.oracle import OracleError, PatternOracle, StubOracle
from shadow_trader.store import PatternStore
from shadow_trader.types import Pattern, PatternType, Transaction

HOUR_MS = 60 * 60 * 1000
DAY_MS = 24 * HOUR_MS

WHALE_ADDRESS = "0x28C6c06298d514Db089934071355E5743bf21d60"

ETHERSCAN_URL = "https://api.etherscan.test/v2/api"
RPC_URL = "https://rpc.test"

SAMPLE_ORACLE_RESPONSE = """Here is what I found:

```json
[
  {
    "type": "timing",
    "description": "Usually active between 14:00 and 16:00 UTC",
    "actions": ["Transfer", "Transfer"],
    "confidence": 0.8,
    "occurrences": 6
  },
  {
    "type": "value",
    "description": "Often moves 10+ ETH at once",
    "actions": ["Transfer"],
    "confidence": 0.65,
    "occurrences": 3,
    "details": {"avgValue": "12.5 ETH"}
  }
]
```"""


class ScriptedOracle(PatternOracle):
    """Oracle returning a fixed reply and recording every prompt."""

    def __init__(self, reply: str = SAMPLE_ORACLE_RESPONSE):
        self.reply = reply
        self.calls: list[dict] = []

    def complete(self, prompt, max_tokens, timeout=None):
        self.calls.append(
            {"prompt": prompt, "max_tokens": max_tokens, "timeout": timeout}
        )
        return self.reply


class FailingOracle(PatternOracle):
    """Oracle whose every call fails."""

    def __init__(self) -> None:
        self.calls = 0

    def complete(self, prompt, max_tokens, timeout=None):
        self.calls += 1
        raise OracleError("HTTP 529: overloaded")


@pytest.fixture
def test_config() -> ShadowTraderConfig:
    """Create test configuration."""
    return ShadowTraderConfig(
        anthropic_api_key="",
        etherscan_api_key="test-etherscan-key",
        etherscan_url=ETHERSCAN_URL,
        rpc_url=RPC_URL,
        request_timeout=10,
    )


@pytest.fixture
def make_tx() -> Callable[..., Transaction]:
    """Factory for transactions with sensible defaults."""
    counter = iter(range(1_000_000))

    def _make(
        value: str = "1.0",
        timestamp: int | None = 1_700_000_000_000,
        **overrides,
    ) -> Transaction:
        n = next(counter)
        fields = {
            "hash": f"0x{n:064x}",
            "from": WHALE_ADDRESS.lower(),
            "to": "0x" + "ab" * 20,
            "value": value,
            "asset": "ETH",
            "category": "external",
            "blockNumber": 19_000_000 + n,
            "timestamp": timestamp,
        }
        fields.update(overrides)
        return Transaction.model_validate(fields)

    return _make


@pytest.fixture
def hourly_history(make_tx) -> list[Transaction]:
    """Six transactions one hour apart, newest first."""
    start = 1_700_000_000_000
    return [
        make_tx(value=str(i + 1), timestamp=start - i * HOUR_MS) for i in range(6)
    ]


@pytest.fixture
def sample_pattern() -> Pattern:
    return Pattern(
        type=PatternType.VALUE,
        description="Often moves 10+ ETH at once",
        actions=("Transfer",),
        confidence=0.65,
        occurrences=3,
    )


@pytest.fixture
def store() -> PatternStore:
    return PatternStore()


@pytest.fixture
def scripted_oracle() -> ScriptedOracle:
    return ScriptedOracle()


@pytest.fixture
def analyzer(
    scripted_oracle: ScriptedOracle,
    store: PatternStore,
    test_config: ShadowTraderConfig,
) -> PatternAnalyzer:
    """Analyzer backed by the scripted oracle."""
    return PatternAnalyzer(
        extractor=PatternExtractor(scripted_oracle),
        store=store,
        config=test_config,
    )


@pytest.fixture
def stub_analyzer(
    store: PatternStore, test_config: ShadowTraderConfig
) -> PatternAnalyzer:
    """Analyzer with no oracle configured."""
    return PatternAnalyzer(
        extractor=PatternExtractor(StubOracle()),
        store=store,
        config=test_config,
    )


@pytest.fixture
def ledger_client(test_config: ShadowTraderConfig) -> LedgerClient:
    return LedgerClient(config=test_config)


@pytest.fixture
def mock_http() -> Generator[responses.RequestsMock, None, None]:
    """Mock Etherscan and JSON-RPC responses."""
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


def etherscan_tx(
    n: int,
    value_wei: str,
    timestamp_s: int,
    from_address: str = WHALE_ADDRESS,
) -> dict:
    """One raw txlist entry as Etherscan returns it."""
    return {
        "blockNumber": str(19_000_000 + n),
        "timeStamp": str(timestamp_s),
        "hash": f"0x{n:064x}",
        "from": from_address,
        "to": "0xAbAbAbAbAbAbAbAbAbAbAbAbAbAbAbAbAbAbAbAb",
        "value": value_wei,
        "isError": "0",
    }
