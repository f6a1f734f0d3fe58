"""
Typed models for wallet transactions and learned behavioral patterns.

Transactions and patterns are pydantic models so that ledger payloads and
oracle output go through the same validation. Sessions are derived per call
and never leave the process, so they are plain dataclasses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PatternType(str, Enum):
    """Categories of behavioral pattern."""

    TIMING = "timing"
    SEQUENCE = "sequence"
    VALUE = "value"
    PROTOCOL_SWITCH = "protocol_switch"
    MARKET_CORRELATION = "market_correlation"


class ExtractionStatus(str, Enum):
    """Outcome of a single pattern extraction."""

    PARSED = "parsed"
    EMPTY = "empty"
    UNAVAILABLE = "unavailable"


class Transaction(BaseModel):
    """
    A single on-chain transfer as returned by the ledger client.

    ``value`` is kept as the exact decimal string from the ledger; use
    ``amount`` for arithmetic.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    hash: str
    from_address: str = Field(..., alias="from")
    to_address: str | None = Field(default=None, alias="to")
    value: str
    asset: str = "ETH"
    category: str = "external"
    block_number: int = Field(default=0, alias="blockNumber")
    timestamp: int | None = None

    @field_validator("value")
    @classmethod
    def validate_value(cls, v: str) -> str:
        """Reject values that are not finite decimal strings."""
        try:
            amount = Decimal(v)
        except InvalidOperation as e:
            raise ValueError(f"value is not a decimal string: {v!r}") from e
        if not amount.is_finite():
            raise ValueError(f"value is not finite: {v!r}")
        return v

    @property
    def amount(self) -> Decimal:
        return Decimal(self.value)


class PatternDetails(BaseModel):
    """Optional supporting figures for a pattern."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    avg_time_gap: str | None = Field(default=None, alias="avgTimeGap")
    avg_value: str | None = Field(default=None, alias="avgValue")


class Pattern(BaseModel):
    """A confidence-scored behavioral claim about a wallet."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: PatternType
    description: str
    actions: tuple[str, ...] = ()
    confidence: float = Field(..., ge=0.0, le=1.0)
    occurrences: int = Field(default=0, ge=0)
    details: PatternDetails | None = None

    def to_summary(self) -> dict[str, object]:
        """Render for tool output, with confidence as a percentage."""
        return {
            "type": self.type.value,
            "description": self.description,
            "confidence": format_confidence(self.confidence),
            "occurrences": self.occurrences,
        }


class MatchVerdict(BaseModel):
    """Result of checking recent activity against stored patterns."""

    model_config = ConfigDict(frozen=True)

    matched: bool
    pattern: Pattern | None = None
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)


@dataclass
class Session:
    """A run of transactions with no inactivity gap above the threshold."""

    start_time: int
    end_time: int
    transactions: list[Transaction] = field(default_factory=list)
    total_value: Decimal = Decimal("0")

    @property
    def transaction_count(self) -> int:
        return len(self.transactions)

    def add(self, tx: Transaction) -> None:
        """Append a timestamped transaction and widen the time bounds."""
        if tx.timestamp is None:
            raise ValueError("cannot add a transaction without a timestamp")
        self.transactions.append(tx)
        self.start_time = min(self.start_time, tx.timestamp)
        self.end_time = max(self.end_time, tx.timestamp)
        self.total_value += tx.amount


def format_confidence(confidence: float) -> str:
    """Format a [0, 1] confidence as a whole percentage, e.g. ``"70%"``."""
    return f"{confidence * 100:.0f}%"
