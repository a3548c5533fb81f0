"""
Port interfaces for the trading bounded context.

Ports define the contracts that the domain requires from the outside world.
Infrastructure adapters implement these interfaces.
The domain layer never depends on concrete implementations.
"""

from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional, Protocol, runtime_checkable

from tradesense.domain.trading.entities import (
    AnalysisCategory,
    AnalysisRecord,
    ChainTag,
    Timeframe,
    TokenBalance,
    TradeRecord,
    TransactionRequest,
    WalletBinding,
)


class AnalysisRecordRepository(ABC):
    """Port for the append-only store of analysis computations."""

    @abstractmethod
    async def get_latest(
        self,
        symbol: str,
        category: AnalysisCategory,
        timeframe: Optional[Timeframe],
    ) -> Optional[AnalysisRecord]:
        """Return the record with the greatest created_at for the key, or None.

        A ``None`` timeframe matches only records stored without one.
        """
        raise NotImplementedError

    @abstractmethod
    async def append(self, record: AnalysisRecord) -> None:
        """Insert a new record. Existing records are never touched."""
        raise NotImplementedError


class TradeRecordRepository(ABC):
    """Port for persisting trade attempts."""

    @abstractmethod
    async def add(self, record: TradeRecord) -> None:
        """Insert a newly opened (PENDING) trade record."""
        raise NotImplementedError

    @abstractmethod
    async def update(self, record: TradeRecord) -> None:
        """Persist the status, reference and error of an existing record."""
        raise NotImplementedError

    @abstractmethod
    async def list_recent(self, user_id: int, limit: int) -> list[TradeRecord]:
        """Return up to ``limit`` trades of a user, newest first."""
        raise NotImplementedError


class WalletBindingRepository(ABC):
    """Port for reading wallet bindings owned by an external collaborator."""

    @abstractmethod
    async def list_for_user(self, user_id: int) -> list[WalletBinding]:
        """Return every wallet binding of a user."""
        raise NotImplementedError


class InferenceProviderPort(ABC):
    """Port for the stateless AI inference endpoints.

    Implementations return the raw decoded response body; shape
    validation belongs to the caller.
    """

    @abstractmethod
    async def fetch_sentiment(
        self, symbol: str, timeframe: Timeframe
    ) -> Mapping[str, Any]:
        """Return the raw sentiment response for a symbol."""
        raise NotImplementedError

    @abstractmethod
    async def fetch_prediction(
        self, symbol: str, timeframe: Timeframe
    ) -> Mapping[str, Any]:
        """Return the raw price prediction response for a symbol."""
        raise NotImplementedError

    @abstractmethod
    async def fetch_signal(
        self, symbol: str, include_analysis: bool
    ) -> Mapping[str, Any]:
        """Return the raw trading signal response for a symbol."""
        raise NotImplementedError


@runtime_checkable
class ChainAdapter(Protocol):
    """Capability set every supported chain provides.

    Variants form a closed set keyed by ChainTag. ``production_ready`` is
    False for variants that only return placeholder values.
    """

    chain: ChainTag
    production_ready: bool

    async def get_balance(
        self, address: str, token_address: Optional[str] = None
    ) -> TokenBalance:
        ...

    async def execute_transaction(self, request: TransactionRequest) -> str:
        ...

    def is_valid_address(self, address: str) -> bool:
        ...
