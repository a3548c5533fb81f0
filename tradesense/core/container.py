"""
Service container.

Composition root for the trading context. Long-lived handles (the async
SQLAlchemy engine, the shared httpx client, the chain RPC connections)
are built once at start-up, shared by every request and disposed at
shutdown.
"""

import logging
from dataclasses import dataclass

import httpx
from sqlalchemy.ext.asyncio import AsyncEngine

from tradesense.application.trading.analysis_resolver import AnalysisResolver
from tradesense.application.trading.comprehensive_analysis import (
    ComprehensiveAnalysisUseCase,
)
from tradesense.application.trading.execute_trade import ExecuteTradeUseCase
from tradesense.application.trading.get_recent_trades import GetRecentTradesUseCase
from tradesense.application.trading.get_sentiment import GetSentimentUseCase
from tradesense.application.trading.get_signal import GetSignalUseCase
from tradesense.application.trading.get_wallet_balances import (
    GetWalletBalancesUseCase,
)
from tradesense.application.trading.place_trade import PlaceTradeUseCase
from tradesense.application.trading.predict_price import PredictPriceUseCase
from tradesense.application.trading.resolve_trade_direction import (
    ResolveTradeDirectionUseCase,
)
from tradesense.core.config import Settings
from tradesense.domain.trading.chain_registry import ChainAdapterRegistry
from tradesense.infrastructure.database import (
    create_engine_from_settings,
    create_tables,
)
from tradesense.infrastructure.trading.analysis_record_repository import (
    AnalysisRecordRepositoryAdapter,
)
from tradesense.infrastructure.trading.evm_chain_adapter import EvmChainAdapter
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

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """Use cases and the resources they share."""

    engine: AsyncEngine
    http_client: httpx.AsyncClient
    evm_adapter: EvmChainAdapter
    get_sentiment: GetSentimentUseCase
    predict_price: PredictPriceUseCase
    get_signal: GetSignalUseCase
    comprehensive_analysis: ComprehensiveAnalysisUseCase
    place_trade: PlaceTradeUseCase
    get_wallet_balances: GetWalletBalancesUseCase
    get_recent_trades: GetRecentTradesUseCase

    @classmethod
    async def from_settings(cls, settings: Settings) -> "ServiceContainer":
        """Build every adapter and use case from application settings."""
        engine = create_engine_from_settings(settings.database_url, echo=settings.debug)
        if settings.auto_create_tables:
            await create_tables(engine)

        http_client = httpx.AsyncClient()

        provider = InferenceProviderAdapter(
            client=http_client,
            api_token=settings.huggingface_api_token,
            sentiment_endpoint=settings.sentiment_analysis_endpoint,
            prediction_endpoint=settings.price_prediction_endpoint,
            signal_endpoint=settings.trade_signal_endpoint,
            sentiment_timeout=settings.sentiment_timeout_seconds,
            prediction_timeout=settings.prediction_timeout_seconds,
            signal_timeout=settings.signal_timeout_seconds,
        )
        resolver = AnalysisResolver(AnalysisRecordRepositoryAdapter(engine))

        get_sentiment = GetSentimentUseCase(
            resolver, provider, ttl_seconds=settings.sentiment_cache_ttl_seconds
        )
        predict_price = PredictPriceUseCase(
            resolver, provider, ttl_seconds=settings.prediction_cache_ttl_seconds
        )
        get_signal = GetSignalUseCase(
            resolver, provider, ttl_seconds=settings.signal_cache_ttl_seconds
        )

        evm_adapter = EvmChainAdapter.from_rpc_url(
            settings.bsc_rpc_url,
            live_execution_enabled=settings.live_execution_enabled,
            signer_private_key=settings.evm_signer_private_key,
        )
        registry = ChainAdapterRegistry([evm_adapter, NearChainAdapter()])
        wallet_repo = WalletBindingRepositoryAdapter(engine)
        trade_repo = TradeRecordRepositoryAdapter(engine)

        if not evm_adapter.execution_enabled:
            logger.warning(
                "Live EVM execution is disabled; BSC trades will fail until "
                "LIVE_EXECUTION_ENABLED and EVM_SIGNER_PRIVATE_KEY are set"
            )

        return cls(
            engine=engine,
            http_client=http_client,
            evm_adapter=evm_adapter,
            get_sentiment=get_sentiment,
            predict_price=predict_price,
            get_signal=get_signal,
            comprehensive_analysis=ComprehensiveAnalysisUseCase(
                get_sentiment,
                predict_price,
                get_signal,
                timeout_seconds=settings.comprehensive_timeout_seconds,
            ),
            place_trade=PlaceTradeUseCase(
                wallet_repo=wallet_repo,
                direction_resolver=ResolveTradeDirectionUseCase(get_signal),
                executor=ExecuteTradeUseCase(trade_repo, registry),
                default_amount=settings.default_trade_amount,
                token_addresses=settings.token_addresses,
            ),
            get_wallet_balances=GetWalletBalancesUseCase(wallet_repo, registry),
            get_recent_trades=GetRecentTradesUseCase(trade_repo),
        )

    async def aclose(self) -> None:
        """Release network and database handles."""
        await self.http_client.aclose()
        await self.evm_adapter.aclose()
        await self.engine.dispose()
        logger.info("Service container closed")
