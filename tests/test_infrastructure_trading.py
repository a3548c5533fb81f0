"""
Tests for the trading infrastructure adapters.

    1. InferenceProviderAdapter: httpx.MockTransport, no network
    2. EvmChainAdapter: AsyncWeb3 replaced by mocks
    3. NearChainAdapter: placeholder behaviour
    4. SQL repositories: SQLite through aiosqlite in a temp directory
    5. ServiceContainer: built from settings against SQLite
"""

import json
from contextlib import asynccontextmanager
from datetime import timedelta
from decimal import Decimal
from typing import Optional
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from pydantic import SecretStr
from sqlalchemy import insert
from web3 import Web3

from tests.fakes import BSC_ADDRESS, T0
from tradesense.application.trading.dtos import GetRecentTradesQuery
from tradesense.application.trading.place_trade import PlaceTradeUseCase
from tradesense.core.config import Settings
from tradesense.core.container import ServiceContainer
from tradesense.domain.trading.entities import (
    AnalysisCategory,
    AnalysisRecord,
    ChainTag,
    DirectionSource,
    Timeframe,
    TradeDirection,
    TradeRecord,
    TradeStatus,
    TransactionRequest,
)
from tradesense.domain.trading.errors import (
    ConfigurationError,
    ExecutionDisabledError,
    PayloadValidationError,
    PersistenceError,
    UpstreamError,
)
from tradesense.domain.trading.ports import ChainAdapter
from tradesense.infrastructure.database import (
    create_engine_from_settings,
    create_tables,
    wallet_bindings,
)
from tradesense.infrastructure.trading.analysis_record_repository import (
    AnalysisRecordRepositoryAdapter,
)
from tradesense.infrastructure.trading.evm_chain_adapter import (
    EvmChainAdapter,
    from_base_units,
    to_base_units,
)
from tradesense.infrastructure.trading.inference_provider_adapter import (
    InferenceProviderAdapter,
)
from tradesense.infrastructure.trading.near_chain_adapter import NearChainAdapter
from tradesense.infrastructure.trading.trade_record_repository import (
    TradeRecordRepositoryAdapter,
)
from tradesense.infrastructure.trading.wallet_binding_repository import (
    WalletBindingRepositoryAdapter,
)

SENTIMENT_URL = "https://inference.test/sentiment"
PREDICTION_URL = "https://inference.test/prediction"
SIGNAL_URL = "https://inference.test/signal"


def _provider(
    client: httpx.AsyncClient,
    token: Optional[str] = "hf_test",
    sentiment_endpoint: Optional[str] = SENTIMENT_URL,
) -> InferenceProviderAdapter:
    return InferenceProviderAdapter(
        client=client,
        api_token=SecretStr(token) if token is not None else None,
        sentiment_endpoint=sentiment_endpoint,
        prediction_endpoint=PREDICTION_URL,
        signal_endpoint=SIGNAL_URL,
    )


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


# ══════════════════════════════════════════════════════════════════════
# PART 1: Inference provider adapter
# ══════════════════════════════════════════════════════════════════════


class TestInferenceProviderAdapter:

    @pytest.mark.asyncio
    async def test_sentiment_request_shape(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"score": 0.42, "sources": ["news"]})

        async with _client(handler) as client:
            data = await _provider(client).fetch_sentiment("BTC", Timeframe.ONE_DAY)

        assert data == {"score": 0.42, "sources": ["news"]}
        assert seen["url"] == SENTIMENT_URL
        assert seen["auth"] == "Bearer hf_test"
        assert seen["body"] == {"token": "BTC", "timeframe": "24h"}

    @pytest.mark.asyncio
    async def test_prediction_and_signal_bodies(self):
        bodies = {}

        def handler(request: httpx.Request) -> httpx.Response:
            bodies[str(request.url)] = json.loads(request.content)
            return httpx.Response(200, json={})

        async with _client(handler) as client:
            provider = _provider(client)
            await provider.fetch_prediction("BNB", Timeframe.ONE_WEEK)
            await provider.fetch_signal("BNB", include_analysis=True)

        assert bodies[PREDICTION_URL] == {"token": "BNB", "timeHorizon": "7d"}
        assert bodies[SIGNAL_URL] == {"token": "BNB", "includeAnalysis": True}

    @pytest.mark.asyncio
    async def test_missing_endpoint_is_configuration_error(self):
        handler = MagicMock()
        async with _client(handler) as client:
            with pytest.raises(ConfigurationError) as exc_info:
                await _provider(client, sentiment_endpoint=None).fetch_sentiment(
                    "BTC", Timeframe.ONE_DAY
                )
        assert exc_info.value.setting == "SENTIMENT_ANALYSIS_ENDPOINT"
        assert exc_info.value.symbol == "BTC"
        assert exc_info.value.category == "sentiment"
        handler.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_token_is_configuration_error(self):
        async with _client(MagicMock()) as client:
            with pytest.raises(ConfigurationError, match="HUGGINGFACE_API_TOKEN"):
                await _provider(client, token=None).fetch_signal("BTC", False)

    @pytest.mark.asyncio
    async def test_non_2xx_is_upstream_error(self):
        async with _client(lambda request: httpx.Response(503)) as client:
            with pytest.raises(UpstreamError, match="HTTP 503") as exc_info:
                await _provider(client).fetch_sentiment("BTC", Timeframe.ONE_DAY)
        assert exc_info.value.symbol == "BTC"

    @pytest.mark.asyncio
    async def test_timeout_is_upstream_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("read timed out", request=request)

        async with _client(handler) as client:
            with pytest.raises(UpstreamError, match="timed out after 8000ms"):
                await _provider(client).fetch_sentiment("BTC", Timeframe.ONE_DAY)

    @pytest.mark.asyncio
    async def test_unreachable_is_upstream_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with _client(handler) as client:
            with pytest.raises(UpstreamError, match="ConnectError"):
                await _provider(client).fetch_prediction("BTC", Timeframe.ONE_DAY)

    @pytest.mark.asyncio
    async def test_non_json_body_is_payload_error(self):
        async with _client(lambda request: httpx.Response(200, content=b"<html>")) as client:
            with pytest.raises(PayloadValidationError):
                await _provider(client).fetch_signal("BTC", False)

    @pytest.mark.asyncio
    async def test_non_object_body_is_payload_error(self):
        async with _client(lambda request: httpx.Response(200, json=[1, 2])) as client:
            with pytest.raises(PayloadValidationError, match="not a JSON object"):
                await _provider(client).fetch_signal("BTC", False)


# ══════════════════════════════════════════════════════════════════════
# PART 2: EVM chain adapter
# ══════════════════════════════════════════════════════════════════════


async def _awaitable(value):
    return value


def _mock_w3() -> MagicMock:
    w3 = MagicMock()
    w3.eth.get_balance = AsyncMock(return_value=1_500_000_000_000_000_000)
    return w3


def _mock_token_contract(balance: int, decimals: int, symbol: str) -> MagicMock:
    contract = MagicMock()
    contract.functions.balanceOf.return_value.call = AsyncMock(return_value=balance)
    contract.functions.decimals.return_value.call = AsyncMock(return_value=decimals)
    contract.functions.symbol.return_value.call = AsyncMock(return_value=symbol)
    return contract


def _live_w3() -> tuple[MagicMock, MagicMock]:
    """Mocked AsyncWeb3 able to sign and broadcast, plus the signing account."""
    w3 = _mock_w3()
    account = MagicMock(address="0x" + "22" * 20)
    account.sign_transaction.return_value = MagicMock(raw_transaction=b"signed")
    w3.eth.account.from_key.return_value = account
    w3.eth.get_transaction_count = AsyncMock(return_value=3)
    w3.eth.gas_price = _awaitable(5_000_000_000)
    w3.eth.chain_id = _awaitable(56)
    w3.eth.send_raw_transaction = AsyncMock(return_value=bytes.fromhex("ab" * 32))
    return w3, account


def _live_adapter(w3: MagicMock) -> EvmChainAdapter:
    return EvmChainAdapter(
        w3,
        live_execution_enabled=True,
        signer_private_key=SecretStr("0x" + "11" * 32),
    )


class TestUnitConversion:

    def test_to_base_units(self):
        assert to_base_units(Decimal("0.01"), 18) == 10_000_000_000_000_000
        assert to_base_units(Decimal("1.5"), 6) == 1_500_000

    def test_from_base_units(self):
        assert from_base_units(1_500_000_000_000_000_000, 18) == "1.5"
        assert from_base_units(0, 18) == "0"
        assert from_base_units(42, 0) == "42"

    def test_large_balance_kept_exact(self):
        assert from_base_units(10**30 + 1, 18) == "1000000000000.000000000000000001"
        assert from_base_units(2**256 - 1, 0) == str(2**256 - 1)

    def test_large_amount_kept_exact(self):
        amount = Decimal("1000000000000.000000000000000001")
        assert to_base_units(amount, 18) == 10**30 + 1

    @pytest.mark.parametrize(
        "amount, decimals",
        [
            (Decimal("0.0000000000000000001"), 18),
            (Decimal("0.0000001"), 6),
            (Decimal("1.5"), 0),
        ],
    )
    def test_amount_finer_than_base_unit_rejected(self, amount, decimals):
        with pytest.raises(ValueError, match="decimal places"):
            to_base_units(amount, decimals)


class TestEvmChainAdapter:

    def test_satisfies_chain_adapter_protocol(self):
        adapter = EvmChainAdapter(_mock_w3())
        assert isinstance(adapter, ChainAdapter)
        assert adapter.chain is ChainTag.BSC
        assert adapter.production_ready is True

    def test_address_validation(self):
        adapter = EvmChainAdapter(_mock_w3())
        assert adapter.is_valid_address(BSC_ADDRESS)
        assert not adapter.is_valid_address("alice.near")
        assert not adapter.is_valid_address("0x1234")

    @pytest.mark.asyncio
    async def test_native_balance(self):
        w3 = _mock_w3()
        balance = await EvmChainAdapter(w3).get_balance(BSC_ADDRESS)

        assert balance.symbol == "BNB"
        assert balance.balance == "1.5"
        assert balance.decimals == 18
        assert balance.is_native is True

    @pytest.mark.asyncio
    async def test_token_balance(self):
        w3 = _mock_w3()
        w3.eth.contract.return_value = _mock_token_contract(2_500_000, 6, "USDT")
        token = "0x" + "55" * 20

        balance = await EvmChainAdapter(w3).get_balance(BSC_ADDRESS, token)

        assert balance.symbol == "USDT"
        assert balance.balance == "2.5"
        assert balance.decimals == 6
        assert balance.is_native is False
        assert balance.token_address == token

    @pytest.mark.asyncio
    async def test_execution_disabled_by_default(self):
        w3 = _mock_w3()
        adapter = EvmChainAdapter(w3, signer_private_key=SecretStr("0x" + "11" * 32))

        with pytest.raises(ExecutionDisabledError):
            await adapter.execute_transaction(
                TransactionRequest(recipient_address=BSC_ADDRESS, amount=Decimal("0.1"))
            )
        w3.eth.get_transaction_count.assert_not_called()

    @pytest.mark.asyncio
    async def test_execution_requires_signer_key(self):
        adapter = EvmChainAdapter(_mock_w3(), live_execution_enabled=True)
        assert adapter.execution_enabled is False
        with pytest.raises(ExecutionDisabledError):
            await adapter.execute_transaction(
                TransactionRequest(recipient_address=BSC_ADDRESS, amount=Decimal("0.1"))
            )

    @pytest.mark.asyncio
    async def test_native_transfer_signed_and_sent(self):
        w3, account = _live_w3()

        tx_reference = await _live_adapter(w3).execute_transaction(
            TransactionRequest(recipient_address=BSC_ADDRESS, amount=Decimal("0.5"))
        )

        assert tx_reference == "0x" + "ab" * 32
        [tx], _ = account.sign_transaction.call_args
        assert tx["value"] == 500_000_000_000_000_000
        assert tx["gas"] == 21_000
        assert tx["nonce"] == 3
        assert tx["chainId"] == 56
        assert tx["to"].lower() == BSC_ADDRESS
        w3.eth.send_raw_transaction.assert_awaited_once_with(b"signed")

    @pytest.mark.asyncio
    async def test_token_transfer_uses_token_decimals(self):
        w3, account = _live_w3()
        contract = MagicMock()
        contract.functions.decimals.return_value.call = AsyncMock(return_value=6)
        built = {"to": "0x" + "cd" * 20, "data": "0xa9059cbb", "gas": 52_000}
        contract.functions.transfer.return_value.build_transaction = AsyncMock(
            return_value=built
        )
        w3.eth.contract.return_value = contract

        tx_reference = await _live_adapter(w3).execute_transaction(
            TransactionRequest(
                recipient_address=BSC_ADDRESS,
                amount=Decimal("2.5"),
                token_address="0x" + "cd" * 20,
            )
        )

        assert tx_reference == "0x" + "ab" * 32
        contract.functions.transfer.assert_called_once_with(
            Web3.to_checksum_address(BSC_ADDRESS), 2_500_000
        )
        [base_tx], _ = contract.functions.transfer.return_value.build_transaction.call_args
        assert base_tx["nonce"] == 3
        assert base_tx["chainId"] == 56
        assert base_tx["gasPrice"] == 5_000_000_000
        account.sign_transaction.assert_called_once_with(built)
        w3.eth.send_raw_transaction.assert_awaited_once_with(b"signed")

    @pytest.mark.asyncio
    async def test_dust_amount_not_broadcast(self):
        w3, account = _live_w3()

        with pytest.raises(ValueError, match="decimal places"):
            await _live_adapter(w3).execute_transaction(
                TransactionRequest(
                    recipient_address=BSC_ADDRESS,
                    amount=Decimal("0.0000000000000000001"),
                )
            )

        account.sign_transaction.assert_not_called()
        w3.eth.send_raw_transaction.assert_not_awaited()


# ══════════════════════════════════════════════════════════════════════
# PART 3: NEAR placeholder adapter
# ══════════════════════════════════════════════════════════════════════


class TestNearChainAdapter:

    def test_not_production_ready(self):
        adapter = NearChainAdapter()
        assert isinstance(adapter, ChainAdapter)
        assert adapter.production_ready is False

    @pytest.mark.parametrize(
        "address, valid",
        [
            ("alice.near", True),
            ("a" * 64, True),
            ("a" * 63, False),
            (BSC_ADDRESS, False),
            ("alice.testnet", False),
        ],
    )
    def test_address_validation(self, address, valid):
        assert NearChainAdapter().is_valid_address(address) is valid

    @pytest.mark.asyncio
    async def test_placeholder_values(self):
        adapter = NearChainAdapter()

        native = await adapter.get_balance("alice.near")
        token = await adapter.get_balance("alice.near", "usdt.near")
        tx = await adapter.execute_transaction(
            TransactionRequest(recipient_address="alice.near", amount=Decimal("1"))
        )

        assert (native.symbol, native.balance, native.decimals) == ("NEAR", "0", 24)
        assert token.symbol == "TOKEN"
        assert token.is_native is False
        assert tx == "transaction-hash-placeholder"


# ══════════════════════════════════════════════════════════════════════
# PART 4: SQL repositories
# ══════════════════════════════════════════════════════════════════════


@asynccontextmanager
async def sqlite_engine(tmp_path):
    engine = create_engine_from_settings(f"sqlite+aiosqlite:///{tmp_path / 'store.db'}")
    await create_tables(engine)
    try:
        yield engine
    finally:
        await engine.dispose()


def _analysis(created_at, timeframe=Timeframe.ONE_DAY, score=0.1, category=AnalysisCategory.SENTIMENT):
    return AnalysisRecord(
        symbol="BTC",
        category=category,
        timeframe=timeframe,
        payload={"score": score, "sources": []},
        created_at=created_at,
    )


class TestAnalysisRecordRepositoryAdapter:

    @pytest.mark.asyncio
    async def test_latest_by_created_at(self, tmp_path):
        async with sqlite_engine(tmp_path) as engine:
            repo = AnalysisRecordRepositoryAdapter(engine)
            await repo.append(_analysis(T0, score=0.1))
            await repo.append(_analysis(T0 + timedelta(minutes=10), score=0.3))
            await repo.append(_analysis(T0 + timedelta(minutes=5), score=0.2))

            latest = await repo.get_latest("BTC", AnalysisCategory.SENTIMENT, Timeframe.ONE_DAY)

        assert latest.payload["score"] == 0.3
        assert latest.created_at == T0 + timedelta(minutes=10)
        assert latest.created_at.tzinfo is not None

    @pytest.mark.asyncio
    async def test_key_isolation(self, tmp_path):
        async with sqlite_engine(tmp_path) as engine:
            repo = AnalysisRecordRepositoryAdapter(engine)
            await repo.append(_analysis(T0, timeframe=Timeframe.ONE_HOUR))

            other_timeframe = await repo.get_latest(
                "BTC", AnalysisCategory.SENTIMENT, Timeframe.ONE_DAY
            )
            other_symbol = await repo.get_latest(
                "ETH", AnalysisCategory.SENTIMENT, Timeframe.ONE_HOUR
            )

        assert other_timeframe is None
        assert other_symbol is None

    @pytest.mark.asyncio
    async def test_null_timeframe_matches_only_null(self, tmp_path):
        async with sqlite_engine(tmp_path) as engine:
            repo = AnalysisRecordRepositoryAdapter(engine)
            await repo.append(
                _analysis(T0, timeframe=Timeframe.ONE_DAY, category=AnalysisCategory.SIGNAL)
            )
            assert await repo.get_latest("BTC", AnalysisCategory.SIGNAL, None) is None

            await repo.append(_analysis(T0, timeframe=None, category=AnalysisCategory.SIGNAL))
            found = await repo.get_latest("BTC", AnalysisCategory.SIGNAL, None)

        assert found is not None
        assert found.timeframe is None


class TestTradeRecordRepositoryAdapter:

    def _trade(self, user_id: int = 7, minutes: int = 0) -> TradeRecord:
        created = T0 + timedelta(minutes=minutes)
        return TradeRecord(
            user_id=user_id,
            symbol="BNB",
            chain=ChainTag.BSC,
            amount=Decimal("0.5"),
            direction=TradeDirection.SELL,
            direction_source=DirectionSource.SIGNAL,
            created_at=created,
            updated_at=created,
        )

    @pytest.mark.asyncio
    async def test_add_then_update(self, tmp_path):
        async with sqlite_engine(tmp_path) as engine:
            repo = TradeRecordRepositoryAdapter(engine)
            trade = self._trade()
            await repo.add(trade)

            [pending] = await repo.list_recent(7, 5)
            trade.mark_completed("0xabc", T0 + timedelta(seconds=4))
            await repo.update(trade)
            [completed] = await repo.list_recent(7, 5)

        assert pending.id == trade.id
        assert pending.status is TradeStatus.PENDING
        assert completed.status is TradeStatus.COMPLETED
        assert completed.tx_reference == "0xabc"
        assert completed.direction_source is DirectionSource.SIGNAL
        assert completed.amount == Decimal("0.5")
        assert completed.updated_at == T0 + timedelta(seconds=4)

    @pytest.mark.asyncio
    async def test_list_recent_newest_first_with_limit(self, tmp_path):
        async with sqlite_engine(tmp_path) as engine:
            repo = TradeRecordRepositoryAdapter(engine)
            trades = [self._trade(minutes=m) for m in range(4)]
            for trade in trades:
                await repo.add(trade)
            await repo.add(self._trade(user_id=8, minutes=10))

            recent = await repo.list_recent(7, 3)
            other_user = await repo.list_recent(8, 5)
            nobody = await repo.list_recent(9, 5)

        assert [t.id for t in recent] == [trades[3].id, trades[2].id, trades[1].id]
        assert [t.user_id for t in other_user] == [8]
        assert nobody == []

    @pytest.mark.asyncio
    async def test_update_unknown_trade_raises(self, tmp_path):
        async with sqlite_engine(tmp_path) as engine:
            repo = TradeRecordRepositoryAdapter(engine)
            with pytest.raises(PersistenceError):
                await repo.update(self._trade())


class TestWalletBindingRepositoryAdapter:

    @pytest.mark.asyncio
    async def test_list_for_user(self, tmp_path):
        async with sqlite_engine(tmp_path) as engine:
            async with engine.begin() as conn:
                await conn.execute(
                    insert(wallet_bindings),
                    [
                        {"user_id": 7, "chain": "BSC", "address": BSC_ADDRESS, "is_default": True},
                        {"user_id": 7, "chain": "NEAR", "address": "alice.near", "is_default": False},
                        {"user_id": 8, "chain": "BSC", "address": "0x" + "cd" * 20, "is_default": True},
                    ],
                )
            bindings = await WalletBindingRepositoryAdapter(engine).list_for_user(7)

        assert [b.chain for b in bindings] == [ChainTag.BSC, ChainTag.NEAR]
        assert bindings[0].is_default is True
        assert bindings[1].address == "alice.near"


# ══════════════════════════════════════════════════════════════════════
# PART 5: Service container
# ══════════════════════════════════════════════════════════════════════


class TestServiceContainer:

    @pytest.mark.asyncio
    async def test_builds_and_closes(self, tmp_path):
        settings = Settings(
            _env_file=None,
            database_url=f"sqlite+aiosqlite:///{tmp_path / 'app.db'}",
            auto_create_tables=True,
        )
        container = await ServiceContainer.from_settings(settings)
        try:
            assert container.evm_adapter.execution_enabled is False
            assert isinstance(container.place_trade, PlaceTradeUseCase)
            assert (
                await WalletBindingRepositoryAdapter(container.engine).list_for_user(1)
                == []
            )
            history = await container.get_recent_trades.execute(
                GetRecentTradesQuery(user_id=1)
            )
            assert history.trades == []
        finally:
            await container.aclose()
