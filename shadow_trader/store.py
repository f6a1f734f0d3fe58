"""In-memory store of the most recently learned patterns per address."""

import logging
import threading
from collections.abc import Sequence

from shadow_trader.types import Pattern

logger = logging.getLogger(__name__)


class PatternStore:
    """
    Maps wallet addresses to their latest pattern list.

    Addresses are lowercased on every call. Each ``put`` replaces the whole
    list for an address under a single lock, so readers see either the old or
    the new list. Contents live only as long as the process.
    """

    def __init__(self) -> None:
        self._patterns: dict[str, Sequence[Pattern]] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _normalize_address(address: str) -> str:
        if not isinstance(address, str) or not address.strip():
            raise ValueError(f"address must be a non-empty string: {address!r}")
        return address.strip().lower()

    def put(self, address: str, patterns: Sequence[Pattern]) -> None:
        key = self._normalize_address(address)
        with self._lock:
            self._patterns[key] = patterns
        logger.debug("Stored %d patterns for %s", len(patterns), key)

    def get(self, address: str) -> Sequence[Pattern] | None:
        key = self._normalize_address(address)
        with self._lock:
            return self._patterns.get(key)

    def delete(self, address: str) -> bool:
        """Remove an address; returns whether it was present."""
        key = self._normalize_address(address)
        with self._lock:
            return self._patterns.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._patterns.clear()

    def __contains__(self, address: object) -> bool:
        if not isinstance(address, str):
            return False
        return self.get(address) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._patterns)
