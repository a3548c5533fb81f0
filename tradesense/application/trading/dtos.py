"""
Data Transfer Objects for the trading application layer.

DTOs carry data between the interface and application layers.
They are plain dataclasses with no behavior.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from tradesense.domain.trading.entities import (
    ChainTag,
    DirectionSource,
    SignalDirection,
    Timeframe,
    TokenBalance,
    TradeDirection,
    TradeStatus,
    WalletBinding,
)


# ------------------------------------------------------------------
# Market intelligence DTOs
# ------------------------------------------------------------------


@dataclass(frozen=True)
class GetSentimentQuery:
    """Input DTO for retrieving sentiment for a symbol.

    Attributes:
        symbol: Asset symbol, already normalized.
        timeframe: Sentiment window. Defaults to 24h.
        force_refresh: Bypass the cache and recompute.
    """

    symbol: str
    timeframe: Timeframe = Timeframe.ONE_DAY
    force_refresh: bool = False


@dataclass(frozen=True)
class SentimentResult:
    """Output DTO for a sentiment analysis result.

    Attributes:
        symbol: Asset symbol.
        timeframe: Window the score refers to.
        score: Sentiment score in [-1, 1].
        sources: Sources the score was built from.
        cached: True when served from a fresh stored record.
        timestamp: Creation time of the served result.
    """

    symbol: str
    timeframe: Timeframe
    score: float
    sources: list[str]
    cached: bool
    timestamp: datetime


@dataclass(frozen=True)
class PredictPriceQuery:
    """Input DTO for requesting a price prediction.

    Attributes:
        symbol: Asset symbol, already normalized.
        timeframe: Prediction horizon. Defaults to 24h.
        force_refresh: Bypass the cache and recompute.
    """

    symbol: str
    timeframe: Timeframe = Timeframe.ONE_DAY
    force_refresh: bool = False


@dataclass(frozen=True)
class PredictionResult:
    """Output DTO for a price prediction."""

    symbol: str
    timeframe: Timeframe
    current_price: float
    predicted_price: float
    percentage_change: float
    confidence: float
    cached: bool
    timestamp: datetime


@dataclass(frozen=True)
class GetSignalQuery:
    """Input DTO for requesting a trading signal.

    Attributes:
        symbol: Asset symbol, already normalized.
        include_analysis: Return the free-text analysis as well.
        force_refresh: Bypass the cache and recompute.
    """

    symbol: str
    include_analysis: bool = False
    force_refresh: bool = False


@dataclass(frozen=True)
class SignalResult:
    """Output DTO for a trading signal."""

    symbol: str
    direction: SignalDirection
    strength: float
    reasons: list[str]
    analysis: Optional[str]
    cached: bool
    timestamp: datetime


@dataclass(frozen=True)
class ComprehensiveAnalysisResult:
    """Output DTO combining all three analyses.

    Attributes:
        symbol: Asset symbol.
        timestamp: When the combination was produced.
        sentiment: Required sentiment result.
        prediction: Prediction, or None when the provider failed.
        signal: Signal, or None when the provider failed.
        recommendation: Signal direction, HOLD when no signal is available.
    """

    symbol: str
    timestamp: datetime
    sentiment: SentimentResult
    prediction: Optional[PredictionResult]
    signal: Optional[SignalResult]
    recommendation: SignalDirection


# ------------------------------------------------------------------
# Trade DTOs
# ------------------------------------------------------------------


@dataclass(frozen=True)
class ResolvedDirection:
    """A direction a trade can execute with, and who chose it."""

    direction: TradeDirection
    source: DirectionSource
    signal_strength: Optional[float] = None


@dataclass(frozen=True)
class TradeDeclined:
    """The signal model advised against trading; nothing was executed."""

    symbol: str
    message: str


@dataclass(frozen=True)
class ExecuteTradeCommand:
    """Input DTO for executing an already-resolved trade."""

    user_id: int
    symbol: str
    amount: Decimal
    direction: TradeDirection
    direction_source: DirectionSource
    wallet: WalletBinding
    token_address: Optional[str] = None


@dataclass(frozen=True)
class TradeResult:
    """Output DTO for a completed trade.

    Attributes:
        simulated: True when the chain adapter only returns placeholders.
    """

    trade_id: UUID
    symbol: str
    chain: ChainTag
    amount: Decimal
    direction: TradeDirection
    direction_source: DirectionSource
    status: TradeStatus
    tx_reference: Optional[str]
    simulated: bool


@dataclass(frozen=True)
class PlaceTradeCommand:
    """Input DTO for a raw trade command coming from the front-end.

    Attributes:
        user_id: Identifier of the requesting user.
        command: Text following ``<symbol> <BUY|SELL|AUTO> [amount]``.
        chain: Restrict wallet selection to one chain.
    """

    user_id: int
    command: str
    chain: Optional[ChainTag] = None


@dataclass(frozen=True)
class TradeOutcome:
    """Output DTO of a trade command: either executed or declined."""

    symbol: str
    declined: bool
    message: str
    trade: Optional[TradeResult] = None


@dataclass(frozen=True)
class GetWalletBalancesQuery:
    """Input DTO for listing wallet balances."""

    user_id: int
    chain: ChainTag
    token_addresses: tuple[str, ...] = ()


@dataclass(frozen=True)
class WalletBalancesResult:
    """Output DTO listing the native balance first, then token balances."""

    user_id: int
    chain: ChainTag
    address: str
    balances: list[TokenBalance] = field(default_factory=list)


@dataclass(frozen=True)
class GetRecentTradesQuery:
    """Input DTO for a user's trade history.

    Attributes:
        user_id: Identifier of the requesting user.
        limit: Maximum number of trades, newest first.
    """

    user_id: int
    limit: int = 5


@dataclass(frozen=True)
class TradeHistoryEntry:
    """One stored trade attempt, whatever its status."""

    trade_id: UUID
    symbol: str
    chain: ChainTag
    amount: Decimal
    direction: TradeDirection
    direction_source: DirectionSource
    status: TradeStatus
    tx_reference: Optional[str]
    error: Optional[str]
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class RecentTradesResult:
    """Output DTO listing a user's trades, newest first."""

    user_id: int
    trades: list[TradeHistoryEntry] = field(default_factory=list)
