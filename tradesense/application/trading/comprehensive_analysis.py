"""
Use case: Comprehensive analysis combining sentiment, prediction and signal.

Input: symbol
Output: ComprehensiveAnalysisResult
Side effects: Whatever the three category use cases store on cache misses.
Failure cases: Any sentiment failure; UpstreamError when the whole
    fan-out exceeds its time bound.

Sentiment is required. Prediction and signal are advisory: their
failures are logged and their slots left empty, so a partial answer is
still returned.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Generic, Optional, TypeVar

from tradesense.application.trading.dtos import (
    ComprehensiveAnalysisResult,
    GetSentimentQuery,
    GetSignalQuery,
    PredictPriceQuery,
    PredictionResult,
    SentimentResult,
    SignalResult,
)
from tradesense.application.trading.get_sentiment import GetSentimentUseCase
from tradesense.application.trading.get_signal import GetSignalUseCase
from tradesense.application.trading.predict_price import PredictPriceUseCase
from tradesense.domain.trading.entities import SignalDirection
from tradesense.domain.trading.errors import UpstreamError
from tradesense.shared.clock import Clock, utc_now

logger = logging.getLogger(__name__)

COMPREHENSIVE_TIMEOUT_SECONDS = 25.0
DEFAULT_RECOMMENDATION = SignalDirection.HOLD

T = TypeVar("T")


@dataclass(frozen=True)
class AdvisoryResult(Generic[T]):
    """Outcome of an input the analysis can do without."""

    value: Optional[T] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def _advisory(label: str, symbol: str, call: Awaitable[T]) -> AdvisoryResult[T]:
    try:
        return AdvisoryResult(value=await call)
    except Exception as exc:
        logger.warning(
            "Failed to get %s during comprehensive analysis for %s: %s",
            label,
            symbol,
            exc,
        )
        return AdvisoryResult(error=exc)


class ComprehensiveAnalysisUseCase:
    """Fans out to the three category use cases and merges their results."""

    def __init__(
        self,
        sentiment: GetSentimentUseCase,
        prediction: PredictPriceUseCase,
        signal: GetSignalUseCase,
        timeout_seconds: float = COMPREHENSIVE_TIMEOUT_SECONDS,
        clock: Clock = utc_now,
    ) -> None:
        self._sentiment = sentiment
        self._prediction = prediction
        self._signal = signal
        self._timeout_seconds = timeout_seconds
        self._clock = clock

    async def execute(self, symbol: str) -> ComprehensiveAnalysisResult:
        """Run the three analyses concurrently and derive a recommendation.

        Args:
            symbol: Normalized asset symbol.

        Returns:
            Combined result; prediction and signal may be None.

        Raises:
            UpstreamError: If the fan-out times out.
            TradingDomainError: Whatever the sentiment use case raised.
        """
        logger.info("Generating comprehensive analysis for symbol=%s", symbol)

        try:
            sentiment, prediction, signal = await asyncio.wait_for(
                self._fan_out(symbol), timeout=self._timeout_seconds
            )
        except asyncio.TimeoutError:
            raise UpstreamError(
                "comprehensive analysis",
                symbol,
                f"timed out after {self._timeout_seconds:.0f}s",
            ) from None

        recommendation = (
            signal.value.direction if signal.ok and signal.value else DEFAULT_RECOMMENDATION
        )

        logger.info(
            "Comprehensive analysis for %s: recommendation=%s, prediction=%s, signal=%s",
            symbol,
            recommendation.value,
            prediction.ok,
            signal.ok,
        )

        return ComprehensiveAnalysisResult(
            symbol=symbol,
            timestamp=self._clock(),
            sentiment=sentiment,
            prediction=prediction.value,
            signal=signal.value,
            recommendation=recommendation,
        )

    async def _fan_out(
        self, symbol: str
    ) -> tuple[
        SentimentResult,
        AdvisoryResult[PredictionResult],
        AdvisoryResult[SignalResult],
    ]:
        sentiment, prediction, signal = await asyncio.gather(
            self._sentiment.execute(GetSentimentQuery(symbol=symbol)),
            _advisory(
                "price prediction",
                symbol,
                self._prediction.execute(PredictPriceQuery(symbol=symbol)),
            ),
            _advisory(
                "trading signal",
                symbol,
                self._signal.execute(
                    GetSignalQuery(symbol=symbol, include_analysis=True)
                ),
            ),
            return_exceptions=True,
        )
        # Advisory wrappers never raise; only the required input can.
        if isinstance(sentiment, BaseException):
            raise sentiment
        return sentiment, prediction, signal
