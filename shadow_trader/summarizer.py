"""Bounded textual digest of a wallet's history for the extraction oracle."""

from collections.abc import Sequence
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from shadow_trader.types import Session, Transaction

MAX_RECENT_TRANSACTIONS = 10
MAX_RECENT_SESSIONS = 5

_TWO_PLACES = Decimal("0.01")


def format_timestamp(timestamp_ms: int | None) -> str:
    """Render a millisecond epoch timestamp as ISO-8601 UTC."""
    if timestamp_ms is None:
        return "unknown"
    seconds, millis = divmod(timestamp_ms, 1000)
    moment = datetime.fromtimestamp(seconds, tz=timezone.utc) + timedelta(
        milliseconds=millis
    )
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def summarize(
    transactions: Sequence[Transaction],
    sessions: Sequence[Session],
) -> str:
    """
    Build the digest handed to the oracle.

    Both sequences are expected newest first, so the leading entries are the
    most recent ones. Only counts and the leading entries are included.
    """
    lines = [
        f"Transaction count: {len(transactions)}",
        f"Active sessions: {len(sessions)}",
        "",
        f"Recent activity (last {MAX_RECENT_TRANSACTIONS} transactions):",
    ]
    for i, tx in enumerate(transactions[:MAX_RECENT_TRANSACTIONS], start=1):
        lines.append(f"{i}. {tx.value} {tx.asset} - {format_timestamp(tx.timestamp)}")

    lines.append("")
    lines.append("Session analysis:")
    for i, session in enumerate(sessions[:MAX_RECENT_SESSIONS], start=1):
        total = session.total_value.quantize(_TWO_PLACES)
        lines.append(
            f"Session {i}: {session.transaction_count} txs, {total} ETH total"
        )

    return "\n".join(lines)
