"""
Dependency injection for the trading context.

Use cases are built once by the ServiceContainer at start-up and stored
on ``app.state.container``; these functions hand them to the routes.
"""

from fastapi import Request

from tradesense.application.trading.comprehensive_analysis import (
    ComprehensiveAnalysisUseCase,
)
from tradesense.application.trading.get_recent_trades import GetRecentTradesUseCase
from tradesense.application.trading.get_sentiment import GetSentimentUseCase
from tradesense.application.trading.get_signal import GetSignalUseCase
from tradesense.application.trading.get_wallet_balances import (
    GetWalletBalancesUseCase,
)
from tradesense.application.trading.place_trade import PlaceTradeUseCase
from tradesense.application.trading.predict_price import PredictPriceUseCase
from tradesense.core.container import ServiceContainer


def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


def get_sentiment_use_case(request: Request) -> GetSentimentUseCase:
    return get_container(request).get_sentiment


def get_predict_price_use_case(request: Request) -> PredictPriceUseCase:
    return get_container(request).predict_price


def get_signal_use_case(request: Request) -> GetSignalUseCase:
    return get_container(request).get_signal


def get_comprehensive_analysis_use_case(
    request: Request,
) -> ComprehensiveAnalysisUseCase:
    return get_container(request).comprehensive_analysis


def get_place_trade_use_case(request: Request) -> PlaceTradeUseCase:
    return get_container(request).place_trade


def get_wallet_balances_use_case(request: Request) -> GetWalletBalancesUseCase:
    return get_container(request).get_wallet_balances


def get_recent_trades_use_case(request: Request) -> GetRecentTradesUseCase:
    return get_container(request).get_recent_trades
