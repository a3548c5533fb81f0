"""
Pydantic schemas for trading API request/response validation.

These schemas enforce input validation and define the API contract.
Symbols are stripped and upper-cased before the pattern is checked.
No business logic belongs here.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from tradesense.domain.trading.entities import ChainTag, SignalDirection, Timeframe

SYMBOL_DESCRIPTION = "Asset symbol, e.g. BTC or BNB"
SYMBOL_PATTERN = r"^[A-Z0-9]+$"
SYMBOL_MIN_LEN = 1
SYMBOL_MAX_LEN = 20


class SymbolRequest(BaseModel):
    """Base for requests carrying an asset symbol."""

    symbol: str = Field(
        ...,
        min_length=SYMBOL_MIN_LEN,
        max_length=SYMBOL_MAX_LEN,
        pattern=SYMBOL_PATTERN,
        description=SYMBOL_DESCRIPTION,
    )

    @field_validator("symbol", mode="before")
    @classmethod
    def normalize_symbol(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper()
        return value


# ------------------------------------------------------------------
# Market intelligence
# ------------------------------------------------------------------


class GetSentimentRequest(SymbolRequest):
    """Request schema for the sentiment endpoint.

    Attributes:
        symbol: Asset symbol.
        timeframe: Sentiment window (1h, 24h, 7d).
        force_refresh: Ignore any stored result.
    """

    timeframe: Timeframe = Field(default=Timeframe.ONE_DAY)
    force_refresh: bool = False


class SentimentResponse(BaseModel):
    """Response schema for the sentiment endpoint."""

    symbol: str
    timeframe: Timeframe
    score: float
    sources: list[str]
    cached: bool
    timestamp: datetime


class PredictPriceRequest(SymbolRequest):
    """Request schema for the price prediction endpoint."""

    timeframe: Timeframe = Field(default=Timeframe.ONE_DAY)
    force_refresh: bool = False


class PredictionResponse(BaseModel):
    """Response schema for the price prediction endpoint."""

    symbol: str
    timeframe: Timeframe
    current_price: float
    predicted_price: float
    percentage_change: float
    confidence: float
    cached: bool
    timestamp: datetime


class GetSignalRequest(SymbolRequest):
    """Request schema for the trading signal endpoint."""

    include_analysis: bool = False
    force_refresh: bool = False


class SignalResponse(BaseModel):
    """Response schema for the trading signal endpoint."""

    symbol: str
    direction: SignalDirection
    strength: float
    reasons: list[str]
    analysis: Optional[str] = None
    cached: bool
    timestamp: datetime


class ComprehensiveAnalysisRequest(SymbolRequest):
    """Request schema for the combined analysis endpoint."""


class ComprehensiveAnalysisResponse(BaseModel):
    """Response schema for the combined analysis endpoint.

    ``prediction`` and ``signal`` are null when their provider failed.
    """

    symbol: str
    timestamp: datetime
    sentiment: SentimentResponse
    prediction: Optional[PredictionResponse] = None
    signal: Optional[SignalResponse] = None
    recommendation: SignalDirection


# ------------------------------------------------------------------
# Trades and wallets
# ------------------------------------------------------------------


class PlaceTradeRequest(BaseModel):
    """Request schema for the trade endpoint.

    Attributes:
        user_id: Identifier of the requesting user.
        command: ``<symbol> <BUY|SELL|AUTO> [amount]``.
        chain: Restrict wallet selection to one chain.
    """

    user_id: int = Field(..., ge=1)
    command: str = Field(..., min_length=1, max_length=100)
    chain: Optional[ChainTag] = None


class TradeResponse(BaseModel):
    """Response schema for the trade endpoint.

    A declined trade (HOLD signal for AUTO) has ``status=DECLINED`` and
    no trade fields.
    """

    status: Literal["PENDING", "COMPLETED", "FAILED", "DECLINED"]
    symbol: str
    message: str
    trade_id: Optional[UUID] = None
    direction: Optional[str] = None
    direction_source: Optional[str] = None
    amount: Optional[Decimal] = None
    chain: Optional[ChainTag] = None
    tx_reference: Optional[str] = None
    simulated: bool = False


class RecentTradesRequest(BaseModel):
    """Request schema for the trade history endpoint."""

    user_id: int = Field(..., ge=1)
    limit: int = Field(default=5, ge=1, le=50)


class TradeHistoryItem(BaseModel):
    """A stored trade attempt in the history response."""

    trade_id: UUID
    symbol: str
    chain: ChainTag
    amount: Decimal
    direction: str
    direction_source: str
    status: Literal["PENDING", "COMPLETED", "FAILED"]
    tx_reference: Optional[str] = None
    error: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class RecentTradesResponse(BaseModel):
    """Response schema for the trade history endpoint, newest first."""

    user_id: int
    trades: list[TradeHistoryItem]


class WalletBalancesRequest(BaseModel):
    """Request schema for the wallet balances endpoint."""

    user_id: int = Field(..., ge=1)
    chain: ChainTag
    token_addresses: list[str] = Field(default_factory=list, max_length=20)


class TokenBalanceItem(BaseModel):
    """A single asset balance in the response."""

    symbol: str
    balance: str
    decimals: int
    is_native: bool
    token_address: Optional[str] = None


class WalletBalancesResponse(BaseModel):
    """Response schema for the wallet balances endpoint."""

    user_id: int
    chain: ChainTag
    address: str
    balances: list[TokenBalanceItem]


class HealthResponse(BaseModel):
    """Response schema for health check endpoint."""

    status: str
    version: str


class ErrorResponse(BaseModel):
    """Standard error response schema.

    Never exposes stack traces or internal details.
    """

    error: str
    detail: Optional[str] = None
    symbol: Optional[str] = None
