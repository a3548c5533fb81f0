"""Shared fixtures for the trading test suite."""

from unittest.mock import AsyncMock

import pytest

from tests.fakes import (
    BSC_ADDRESS,
    NEAR_ADDRESS,
    FakeChainAdapter,
    FakeClock,
    InMemoryAnalysisRecordRepository,
    InMemoryTradeRecordRepository,
    InMemoryWalletBindingRepository,
    signal_body,
)
from tradesense.domain.trading.entities import ChainTag, WalletBinding
from tradesense.domain.trading.ports import InferenceProviderPort


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def record_repo() -> InMemoryAnalysisRecordRepository:
    return InMemoryAnalysisRecordRepository()


@pytest.fixture
def trade_repo() -> InMemoryTradeRecordRepository:
    return InMemoryTradeRecordRepository()


@pytest.fixture
def provider() -> AsyncMock:
    """InferenceProviderPort double with healthy default answers."""
    mock = AsyncMock(spec=InferenceProviderPort)
    mock.fetch_sentiment.return_value = {"score": 0.42, "sources": ["twitter", "news"]}
    mock.fetch_prediction.return_value = {
        "currentPrice": 100.0,
        "predictedPrice": 105.0,
        "percentageChange": 5.0,
        "confidence": 0.7,
    }
    mock.fetch_signal.return_value = signal_body("BUY", 0.8, "Uptrend on volume")
    return mock


@pytest.fixture
def bsc_adapter() -> FakeChainAdapter:
    return FakeChainAdapter(ChainTag.BSC)


@pytest.fixture
def near_adapter() -> FakeChainAdapter:
    return FakeChainAdapter(
        ChainTag.NEAR, production_ready=False, tx_reference="transaction-hash-placeholder"
    )


@pytest.fixture
def wallet_repo() -> InMemoryWalletBindingRepository:
    return InMemoryWalletBindingRepository(
        [
            WalletBinding(user_id=7, chain=ChainTag.BSC, address=BSC_ADDRESS, is_default=True),
            WalletBinding(user_id=7, chain=ChainTag.NEAR, address=NEAR_ADDRESS),
        ]
    )
