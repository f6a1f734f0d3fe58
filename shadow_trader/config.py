"""
Configuration for shadow_trader package.

Uses pydantic-settings for environment variable management.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class ShadowTraderConfig(BaseSettings):
    """Configuration for the pattern pipeline and its upstream clients."""

    model_config = SettingsConfigDict(
        env_prefix="SHADOW_TRADER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Extraction oracle (Anthropic). Empty key selects the stub oracle.
    anthropic_api_key: SecretStr = Field(
        default=SecretStr(""),
        description="Anthropic API key for pattern extraction",
    )
    anthropic_model: str = Field(
        default="claude-sonnet-4-20250514",
        description="Model used for pattern extraction",
    )
    oracle_max_tokens: int = Field(
        default=2000,
        description="Output token budget for a single extraction call",
        ge=1,
        le=8192,
    )
    oracle_timeout: float = Field(
        default=60.0,
        description="Timeout in seconds for a single extraction call",
        gt=0,
        le=600,
    )

    # Ledger history (Etherscan-compatible API)
    etherscan_api_key: SecretStr = Field(
        default=SecretStr(""),
        description="Etherscan API key",
    )
    etherscan_url: str = Field(
        default="https://api.etherscan.io/v2/api",
        description="Etherscan-compatible API endpoint",
    )
    chain_id: int = Field(
        default=1,
        description="EVM chain id passed to the history API",
        ge=1,
    )

    # Balance lookup (JSON-RPC)
    rpc_url: str = Field(
        default="https://eth.llamarpc.com",
        description="Ethereum JSON-RPC endpoint for balance lookups",
    )

    request_timeout: int = Field(
        default=30,
        description="HTTP request timeout in seconds",
        ge=5,
        le=120,
    )

    # Pattern pipeline
    session_gap_ms: int = Field(
        default=24 * 60 * 60 * 1000,
        description="Inactivity gap that closes a session, in milliseconds",
        ge=1,
    )
    min_transactions: int = Field(
        default=5,
        description="Minimum history size before the oracle is consulted",
        ge=1,
    )

    # Tool defaults
    learn_limit: int = Field(
        default=50,
        description="Transactions fetched by learn_whale_patterns",
        ge=1,
        le=10000,
    )
    check_limit: int = Field(
        default=10,
        description="Transactions fetched by check_whale_activity",
        ge=1,
        le=10000,
    )
    summary_limit: int = Field(
        default=20,
        description="Transactions fetched by get_whale_summary",
        ge=1,
        le=10000,
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level",
    )


@lru_cache
def get_config() -> ShadowTraderConfig:
    """Get cached configuration instance."""
    return ShadowTraderConfig()
