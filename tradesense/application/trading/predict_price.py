"""
Use case: Predict the price move of an asset symbol.

Input: PredictPriceQuery (symbol, timeframe, force_refresh)
Output: PredictionResult
Side effects: Stores a new analysis record on a cache miss.
Failure cases: ConfigurationError, UpstreamError, PayloadValidationError.
"""

import logging

from tradesense.application.trading.analysis_resolver import AnalysisResolver
from tradesense.application.trading.dtos import PredictionResult, PredictPriceQuery
from tradesense.domain.trading.entities import AnalysisCategory
from tradesense.domain.trading.ports import InferenceProviderPort

logger = logging.getLogger(__name__)

PREDICTION_TTL_SECONDS = 15 * 60


class PredictPriceUseCase:
    """Orchestrates price prediction for a given asset symbol."""

    def __init__(
        self,
        resolver: AnalysisResolver,
        provider: InferenceProviderPort,
        ttl_seconds: float = PREDICTION_TTL_SECONDS,
    ) -> None:
        self._resolver = resolver
        self._provider = provider
        self._ttl_seconds = ttl_seconds

    async def execute(self, query: PredictPriceQuery) -> PredictionResult:
        """Run the price prediction use case.

        Args:
            query: The prediction request containing symbol and horizon.

        Returns:
            Current and predicted price with model confidence.
        """
        logger.info(
            "Predicting price for symbol=%s, timeframe=%s",
            query.symbol,
            query.timeframe.value,
        )

        resolution = await self._resolver.resolve(
            symbol=query.symbol,
            category=AnalysisCategory.PREDICTION,
            timeframe=query.timeframe,
            ttl_seconds=self._ttl_seconds,
            force_refresh=query.force_refresh,
            compute=lambda: self._provider.fetch_prediction(
                query.symbol, query.timeframe
            ),
        )

        payload = resolution.payload
        return PredictionResult(
            symbol=query.symbol,
            timeframe=query.timeframe,
            current_price=payload.current_price,
            predicted_price=payload.predicted_price,
            percentage_change=payload.percentage_change,
            confidence=payload.confidence,
            cached=resolution.cached,
            timestamp=resolution.timestamp,
        )
