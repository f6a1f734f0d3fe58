"""
Session segmentation for wallet transaction histories.

A session is a maximal run of transactions with no inactivity gap larger
than the threshold. Input must be ordered newest first, which is the order
the ledger client returns.
"""

import logging
from collections.abc import Iterable, Sequence

from shadow_trader.types import Session, Transaction

logger = logging.getLogger(__name__)

DEFAULT_SESSION_GAP_MS = 24 * 60 * 60 * 1000


class UnsortedTransactionsError(ValueError):
    """Raised when transactions are not ordered newest first."""


def sort_newest_first(transactions: Iterable[Transaction]) -> list[Transaction]:
    """
    Return transactions ordered by descending timestamp.

    The sort is stable; transactions without a timestamp keep their relative
    order and go last.
    """
    return sorted(
        transactions,
        key=lambda tx: (tx.timestamp is None, -(tx.timestamp or 0)),
    )


def segment(
    transactions: Sequence[Transaction],
    gap_threshold_ms: int = DEFAULT_SESSION_GAP_MS,
) -> list[Session]:
    """
    Partition transactions into activity sessions.

    Transactions without a timestamp are skipped. A transaction joins the
    open session when it is at most ``gap_threshold_ms`` older than the
    session's oldest member; otherwise the session is closed and a new one
    starts. Because the boundary moves with each merge, a long run of closely
    spaced transactions can span more than ``gap_threshold_ms`` in total.

    Args:
        transactions: Transactions ordered newest first
        gap_threshold_ms: Inactivity gap that closes a session

    Returns:
        Sessions in input order, each preserving input order of its members

    Raises:
        ValueError: If gap_threshold_ms is not a positive integer
        UnsortedTransactionsError: If a timestamp is newer than its predecessor
    """
    if isinstance(gap_threshold_ms, bool) or not isinstance(gap_threshold_ms, int):
        raise ValueError(f"gap_threshold_ms must be an int: {gap_threshold_ms!r}")
    if gap_threshold_ms <= 0:
        raise ValueError(f"gap_threshold_ms must be positive: {gap_threshold_ms}")

    sessions: list[Session] = []
    current: Session | None = None
    previous_ts: int | None = None
    skipped = 0

    for tx in transactions:
        if tx.timestamp is None:
            skipped += 1
            continue

        if previous_ts is not None and tx.timestamp > previous_ts:
            raise UnsortedTransactionsError(
                f"transactions must be newest first: {tx.hash} at "
                f"{tx.timestamp} follows {previous_ts}"
            )
        previous_ts = tx.timestamp

        if current is None:
            current = _open_session(tx, tx.timestamp)
            continue

        if abs(current.start_time - tx.timestamp) <= gap_threshold_ms:
            current.add(tx)
        else:
            sessions.append(current)
            current = _open_session(tx, tx.timestamp)

    if current is not None:
        sessions.append(current)

    if skipped:
        logger.debug("Skipped %d transactions without a timestamp", skipped)

    return sessions


def _open_session(tx: Transaction, timestamp: int) -> Session:
    return Session(
        start_time=timestamp,
        end_time=timestamp,
        transactions=[tx],
        total_value=tx.amount,
    )
