"""
Domain entities for the trading bounded context.

Entities represent core business objects with identity and lifecycle.
They contain no framework imports and no IO operations.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from tradesense.domain.trading.errors import InvalidTradeTransitionError


class AnalysisCategory(Enum):
    """Kind of market analysis resolved through the cache."""

    SENTIMENT = "sentiment"
    PREDICTION = "prediction"
    SIGNAL = "signal"


class Timeframe(Enum):
    """Analysis window accepted by the sentiment and prediction models."""

    ONE_HOUR = "1h"
    ONE_DAY = "24h"
    ONE_WEEK = "7d"


class SignalDirection(Enum):
    """Direction emitted by the trading signal model."""

    BUY = "BUY"
    SELL = "SELL"
    HOLD = "HOLD"


class TradeDirection(Enum):
    """Direction of an executable trade."""

    BUY = "BUY"
    SELL = "SELL"


class RequestedDirection(Enum):
    """Direction as typed by the user. AUTO defers to the signal model."""

    BUY = "BUY"
    SELL = "SELL"
    AUTO = "AUTO"


class DirectionSource(Enum):
    """Who chose the direction of a trade."""

    USER = "USER"
    SIGNAL = "SIGNAL"


class TradeStatus(Enum):
    """Lifecycle state of a trade attempt."""

    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class ChainTag(Enum):
    """Supported execution chains."""

    BSC = "BSC"
    NEAR = "NEAR"


@dataclass(frozen=True)
class AnalysisRecord:
    """One stored analysis computation. Never updated after insert."""

    symbol: str
    category: AnalysisCategory
    timeframe: Optional[Timeframe]
    payload: dict[str, Any]
    created_at: datetime

    def age_seconds(self, now: datetime) -> float:
        """Return the record age relative to ``now``."""
        return (now - self.created_at).total_seconds()

    def is_fresh(self, now: datetime, ttl_seconds: float) -> bool:
        """A record is fresh while strictly younger than the TTL."""
        return self.age_seconds(now) < ttl_seconds


@dataclass(frozen=True)
class WalletBinding:
    """A wallet address a user has linked for a chain."""

    user_id: int
    chain: ChainTag
    address: str
    is_default: bool = False


@dataclass(frozen=True)
class TokenBalance:
    """Balance of one asset held by a wallet.

    ``balance`` is a decimal string already scaled by ``decimals``.
    """

    symbol: str
    balance: str
    decimals: int
    is_native: bool
    token_address: Optional[str] = None


@dataclass(frozen=True)
class TransactionRequest:
    """Data handed to a chain adapter for a single transfer."""

    recipient_address: str
    amount: Decimal
    token_address: Optional[str] = None


_TERMINAL_STATUSES = frozenset({TradeStatus.COMPLETED, TradeStatus.FAILED})


@dataclass
class TradeRecord:
    """A single trade attempt and its outcome.

    Created in PENDING before any chain call and moved exactly once to
    COMPLETED or FAILED. Terminal states accept no further transitions.
    """

    user_id: int
    symbol: str
    chain: ChainTag
    amount: Decimal
    direction: TradeDirection
    direction_source: DirectionSource
    created_at: datetime
    updated_at: datetime
    token_address: Optional[str] = None
    status: TradeStatus = TradeStatus.PENDING
    tx_reference: Optional[str] = None
    error: Optional[str] = None
    id: UUID = field(default_factory=uuid4)

    @property
    def is_terminal(self) -> bool:
        return self.status in _TERMINAL_STATUSES

    def mark_completed(self, tx_reference: str, at: datetime) -> None:
        """Move PENDING → COMPLETED with the chain transaction reference."""
        self._ensure_pending(TradeStatus.COMPLETED)
        self.status = TradeStatus.COMPLETED
        self.tx_reference = tx_reference
        self.updated_at = at

    def mark_failed(self, error: str, at: datetime) -> None:
        """Move PENDING → FAILED with the captured error text."""
        self._ensure_pending(TradeStatus.FAILED)
        self.status = TradeStatus.FAILED
        self.error = error
        self.updated_at = at

    def _ensure_pending(self, target: TradeStatus) -> None:
        if self.is_terminal:
            raise InvalidTradeTransitionError(
                str(self.id), self.status.value, target.value
            )
