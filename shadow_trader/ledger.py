"""
Ledger client: wallet transaction history and ETH balance lookups.

History comes from an Etherscan-compatible ``account/txlist`` endpoint and
balances from a JSON-RPC node. Amounts are converted from wei to exact
decimal ETH strings.
"""

import logging
from decimal import Decimal
from typing import Any, cast

import requests
from pydantic import ValidationError
from tenacity import (
    RetryError,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from shadow_trader.config import ShadowTraderConfig, get_config
from shadow_trader.types import Transaction

logger = logging.getLogger(__name__)

WEI_DECIMALS = 18
NO_TRANSACTIONS_MESSAGE = "No transactions found"


class LedgerError(Exception):
    """Exception raised when history or balance cannot be fetched."""

    def __init__(self, message: str, status: str | None = None):
        super().__init__(message)
        self.status = status


def format_units(value: int, decimals: int = WEI_DECIMALS) -> str:
    """
    Format an integer amount of base units as an exact decimal string.

    ``format_units(1500000000000000000)`` returns ``"1.5"``; whole amounts
    have no fractional part (``"2"``).
    """
    negative = value < 0
    whole, fraction = divmod(abs(value), 10**decimals)
    text = str(whole)
    fraction_text = str(fraction).rjust(decimals, "0").rstrip("0")
    if fraction_text:
        text = f"{text}.{fraction_text}"
    return f"-{text}" if negative else text


class LedgerClient:
    """
    Etherscan history and JSON-RPC balance client.

    Example:
        ```python
        from shadow_trader.ledger import LedgerClient

        client = LedgerClient()
        txs = client.get_wallet_transactions("0xabc...", limit=50)
        balance = client.get_eth_balance("0xabc...")
        ```
    """

    def __init__(
        self,
        config: ShadowTraderConfig | None = None,
        session: requests.Session | None = None,
    ):
        """
        Initialize the ledger client.

        Args:
            config: Configuration settings
            session: Optional pre-configured HTTP session
        """
        self._config = config or get_config()
        self._session = session or requests.Session()
        self._timeout = self._config.request_timeout

        if not self._config.etherscan_api_key.get_secret_value():
            logger.warning(
                "No Etherscan API key configured; requests may be rate limited"
            )

    @retry(
        retry=retry_if_exception_type(requests.exceptions.Timeout),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
    )
    def _get(self, params: dict[str, Any]) -> dict[str, Any]:
        """GET the history API, retrying on timeout."""
        response = self._session.get(
            self._config.etherscan_url, params=params, timeout=self._timeout
        )
        response.raise_for_status()
        return cast(dict[str, Any], response.json())

    @retry(
        retry=retry_if_exception_type(requests.exceptions.Timeout),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
    )
    def _rpc(self, method: str, params: list[Any]) -> dict[str, Any]:
        """POST a JSON-RPC call to the balance node, retrying on timeout."""
        response = self._session.post(
            self._config.rpc_url,
            json={"jsonrpc": "2.0", "id": 1, "method": method, "params": params},
            timeout=self._timeout,
        )
        response.raise_for_status()
        return cast(dict[str, Any], response.json())

    def get_wallet_transactions(
        self, address: str, limit: int = 100
    ) -> list[Transaction]:
        """
        Fetch the most recent transactions for an address, newest first.

        Args:
            address: Wallet address
            limit: Maximum number of transactions

        Returns:
            Transactions ordered by descending block/timestamp

        Raises:
            LedgerError: If the API call fails or returns an error status
        """
        logger.info("Fetching %d transactions for %s", limit, address)

        params: dict[str, Any] = {
            "chainid": self._config.chain_id,
            "module": "account",
            "action": "txlist",
            "address": address,
            "startblock": 0,
            "endblock": 99999999,
            "page": 1,
            "offset": limit,
            "sort": "desc",
            "apikey": self._config.etherscan_api_key.get_secret_value(),
        }

        try:
            data = self._get(params)
        except (requests.exceptions.RequestException, RetryError) as e:
            logger.error("Error fetching transactions: %s", e)
            raise LedgerError(f"Failed to fetch transactions: {e}") from e

        status = str(data.get("status", ""))
        message = str(data.get("message") or "")
        if status != "1":
            if message.startswith(NO_TRANSACTIONS_MESSAGE):
                return []
            detail = message or "Etherscan API error"
            if isinstance(data.get("result"), str):
                detail = f"{detail}: {data['result']}"
            raise LedgerError(f"Failed to fetch transactions: {detail}", status)

        raw = data.get("result") or []
        if not isinstance(raw, list):
            raise LedgerError("Failed to fetch transactions: malformed result", status)

        transactions = []
        for i, item in enumerate(raw):
            try:
                transactions.append(self._parse_transaction(item))
            except (KeyError, TypeError, ValueError, ValidationError) as e:
                logger.warning("Failed to parse transaction #%s: %s, skipping", i, e)
        return transactions

    @staticmethod
    def _parse_transaction(item: dict[str, Any]) -> Transaction:
        to_address = item.get("to") or None
        return Transaction(
            hash=item["hash"],
            from_address=item["from"].lower(),
            to_address=to_address.lower() if to_address else None,
            value=format_units(int(item.get("value") or "0")),
            asset="ETH",
            category="external",
            block_number=int(item["blockNumber"]),
            timestamp=int(item["timeStamp"]) * 1000,
        )

    def get_eth_balance(self, address: str) -> str:
        """
        Get the current ETH balance as an exact decimal string.

        Raises:
            LedgerError: If the RPC call fails
        """
        try:
            data = self._rpc("eth_getBalance", [address, "latest"])
        except (requests.exceptions.RequestException, RetryError) as e:
            logger.error("Error fetching balance: %s", e)
            raise LedgerError(f"Failed to fetch balance: {e}") from e

        if data.get("error"):
            error = data["error"]
            message = error.get("message") if isinstance(error, dict) else str(error)
            raise LedgerError(f"Failed to fetch balance: {message}")

        try:
            return format_units(int(data["result"], 16))
        except (KeyError, TypeError, ValueError) as e:
            raise LedgerError(f"Failed to fetch balance: malformed result {e}") from e

    def get_wallet_stats(
        self, address: str, transactions: list[Transaction]
    ) -> dict[str, Any]:
        """Balance plus simple aggregates over ``transactions``."""
        balance = self.get_eth_balance(address)
        total = sum((tx.amount for tx in transactions), Decimal("0"))
        average = total / len(transactions) if transactions else Decimal("0")
        return {
            "balance": balance,
            "totalTransactions": len(transactions),
            "totalValueMoved": f"{total:.4f}",
            "avgTransactionSize": f"{average:.4f}",
        }
