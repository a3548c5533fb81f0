"""
FastAPI router for the trading context.

All routes delegate to use cases. No business logic here.
Input validation is handled by Pydantic schemas.
Error mapping is handled by centralized error handlers.
"""

from fastapi import APIRouter, Depends, Request

from tradesense.application.trading.comprehensive_analysis import (
    ComprehensiveAnalysisUseCase,
)
from tradesense.application.trading.dtos import (
    GetRecentTradesQuery,
    GetSentimentQuery,
    GetSignalQuery,
    GetWalletBalancesQuery,
    PlaceTradeCommand,
    PredictionResult,
    PredictPriceQuery,
    SentimentResult,
    SignalResult,
)
from tradesense.application.trading.get_recent_trades import GetRecentTradesUseCase
from tradesense.application.trading.get_sentiment import GetSentimentUseCase
from tradesense.application.trading.get_signal import GetSignalUseCase
from tradesense.application.trading.get_wallet_balances import (
    GetWalletBalancesUseCase,
)
from tradesense.application.trading.place_trade import PlaceTradeUseCase
from tradesense.application.trading.predict_price import PredictPriceUseCase
from tradesense.core.config import settings
from tradesense.interfaces.trading.dependencies import (
    get_comprehensive_analysis_use_case,
    get_place_trade_use_case,
    get_predict_price_use_case,
    get_recent_trades_use_case,
    get_sentiment_use_case,
    get_signal_use_case,
    get_wallet_balances_use_case,
)
from tradesense.interfaces.trading.schemas import (
    ComprehensiveAnalysisRequest,
    ComprehensiveAnalysisResponse,
    ErrorResponse,
    GetSentimentRequest,
    GetSignalRequest,
    PlaceTradeRequest,
    PredictionResponse,
    PredictPriceRequest,
    RecentTradesRequest,
    RecentTradesResponse,
    SentimentResponse,
    SignalResponse,
    TokenBalanceItem,
    TradeHistoryItem,
    TradeResponse,
    WalletBalancesRequest,
    WalletBalancesResponse,
)
from tradesense.shared.security.rate_limiting import limiter

router = APIRouter(prefix="/trading", tags=["trading"])

UPSTREAM_ERRORS = {502: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}


def _sentiment_response(r: SentimentResult) -> SentimentResponse:
    return SentimentResponse(
        symbol=r.symbol,
        timeframe=r.timeframe,
        score=r.score,
        sources=r.sources,
        cached=r.cached,
        timestamp=r.timestamp,
    )


def _prediction_response(r: PredictionResult) -> PredictionResponse:
    return PredictionResponse(
        symbol=r.symbol,
        timeframe=r.timeframe,
        current_price=r.current_price,
        predicted_price=r.predicted_price,
        percentage_change=r.percentage_change,
        confidence=r.confidence,
        cached=r.cached,
        timestamp=r.timestamp,
    )


def _signal_response(r: SignalResult) -> SignalResponse:
    return SignalResponse(
        symbol=r.symbol,
        direction=r.direction,
        strength=r.strength,
        reasons=r.reasons,
        analysis=r.analysis,
        cached=r.cached,
        timestamp=r.timestamp,
    )


# ------------------------------------------------------------------
# Market intelligence
# ------------------------------------------------------------------


@router.post(
    "/sentiment",
    response_model=SentimentResponse,
    responses={422: {"model": ErrorResponse}, **UPSTREAM_ERRORS},
    summary="Get market sentiment",
    description="Sentiment score in [-1, 1] for an asset, cached for one hour.",
)
async def get_sentiment(
    request: GetSentimentRequest,
    use_case: GetSentimentUseCase = Depends(get_sentiment_use_case),
) -> SentimentResponse:
    """Return the sentiment for a symbol and timeframe."""
    result = await use_case.execute(
        GetSentimentQuery(
            symbol=request.symbol,
            timeframe=request.timeframe,
            force_refresh=request.force_refresh,
        )
    )
    return _sentiment_response(result)


@router.post(
    "/predictions",
    response_model=PredictionResponse,
    responses={422: {"model": ErrorResponse}, **UPSTREAM_ERRORS},
    summary="Predict price",
    description="Predicted price move for an asset, cached for fifteen minutes.",
)
async def predict_price(
    request: PredictPriceRequest,
    use_case: PredictPriceUseCase = Depends(get_predict_price_use_case),
) -> PredictionResponse:
    """Return the price prediction for a symbol and horizon."""
    result = await use_case.execute(
        PredictPriceQuery(
            symbol=request.symbol,
            timeframe=request.timeframe,
            force_refresh=request.force_refresh,
        )
    )
    return _prediction_response(result)


@router.post(
    "/signals",
    response_model=SignalResponse,
    responses={422: {"model": ErrorResponse}, **UPSTREAM_ERRORS},
    summary="Get trading signal",
    description="BUY/SELL/HOLD signal for an asset, cached for thirty minutes.",
)
async def get_signal(
    request: GetSignalRequest,
    use_case: GetSignalUseCase = Depends(get_signal_use_case),
) -> SignalResponse:
    """Return the trading signal for a symbol."""
    result = await use_case.execute(
        GetSignalQuery(
            symbol=request.symbol,
            include_analysis=request.include_analysis,
            force_refresh=request.force_refresh,
        )
    )
    return _signal_response(result)


@router.post(
    "/analysis",
    response_model=ComprehensiveAnalysisResponse,
    responses={422: {"model": ErrorResponse}, **UPSTREAM_ERRORS},
    summary="Comprehensive analysis",
    description=(
        "Sentiment, prediction and signal combined into one recommendation. "
        "Prediction and signal are null when their provider fails."
    ),
)
async def comprehensive_analysis(
    request: ComprehensiveAnalysisRequest,
    use_case: ComprehensiveAnalysisUseCase = Depends(
        get_comprehensive_analysis_use_case
    ),
) -> ComprehensiveAnalysisResponse:
    """Return the combined analysis for a symbol."""
    result = await use_case.execute(request.symbol)
    return ComprehensiveAnalysisResponse(
        symbol=result.symbol,
        timestamp=result.timestamp,
        sentiment=_sentiment_response(result.sentiment),
        prediction=_prediction_response(result.prediction) if result.prediction else None,
        signal=_signal_response(result.signal) if result.signal else None,
        recommendation=result.recommendation,
    )


# ------------------------------------------------------------------
# Trades and wallets
# ------------------------------------------------------------------


@router.post(
    "/trades",
    response_model=TradeResponse,
    responses={
        404: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        **UPSTREAM_ERRORS,
    },
    summary="Place a trade",
    description=(
        "Execute '<symbol> <BUY|SELL|AUTO> [amount]' on the user's wallet. "
        "AUTO follows the trading signal; a HOLD signal returns DECLINED."
    ),
)
@limiter.limit(settings.rate_limit_heavy)
async def place_trade(
    request: Request,
    body: PlaceTradeRequest,
    use_case: PlaceTradeUseCase = Depends(get_place_trade_use_case),
) -> TradeResponse:
    """Parse and execute a trade command."""
    outcome = await use_case.execute(
        PlaceTradeCommand(user_id=body.user_id, command=body.command, chain=body.chain)
    )

    if outcome.declined or outcome.trade is None:
        return TradeResponse(
            status="DECLINED", symbol=outcome.symbol, message=outcome.message
        )

    trade = outcome.trade
    return TradeResponse(
        status=trade.status.value,
        symbol=trade.symbol,
        message=outcome.message,
        trade_id=trade.trade_id,
        direction=trade.direction.value,
        direction_source=trade.direction_source.value,
        amount=trade.amount,
        chain=trade.chain,
        tx_reference=trade.tx_reference,
        simulated=trade.simulated,
    )


@router.post(
    "/trades/recent",
    response_model=RecentTradesResponse,
    responses={422: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Trade history",
    description="The user's latest trade attempts, newest first (default 5).",
)
async def recent_trades(
    request: RecentTradesRequest,
    use_case: GetRecentTradesUseCase = Depends(get_recent_trades_use_case),
) -> RecentTradesResponse:
    """Return the user's most recent trades."""
    result = await use_case.execute(
        GetRecentTradesQuery(user_id=request.user_id, limit=request.limit)
    )
    return RecentTradesResponse(
        user_id=result.user_id,
        trades=[
            TradeHistoryItem(
                trade_id=t.trade_id,
                symbol=t.symbol,
                chain=t.chain,
                amount=t.amount,
                direction=t.direction.value,
                direction_source=t.direction_source.value,
                status=t.status.value,
                tx_reference=t.tx_reference,
                error=t.error,
                created_at=t.created_at,
                updated_at=t.updated_at,
            )
            for t in result.trades
        ],
    )


@router.post(
    "/wallets/balances",
    response_model=WalletBalancesResponse,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
    summary="Wallet balances",
    description="Native balance first, then each requested token balance.",
)
async def wallet_balances(
    request: WalletBalancesRequest,
    use_case: GetWalletBalancesUseCase = Depends(get_wallet_balances_use_case),
) -> WalletBalancesResponse:
    """Return the balances of the user's wallet on a chain."""
    result = await use_case.execute(
        GetWalletBalancesQuery(
            user_id=request.user_id,
            chain=request.chain,
            token_addresses=tuple(request.token_addresses),
        )
    )
    return WalletBalancesResponse(
        user_id=result.user_id,
        chain=result.chain,
        address=result.address,
        balances=[
            TokenBalanceItem(
                symbol=b.symbol,
                balance=b.balance,
                decimals=b.decimals,
                is_native=b.is_native,
                token_address=b.token_address,
            )
            for b in result.balances
        ],
    )
