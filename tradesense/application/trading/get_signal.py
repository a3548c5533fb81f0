"""
Use case: Get a BUY/SELL/HOLD trading signal for an asset symbol.

Input: GetSignalQuery (symbol, include_analysis, force_refresh)
Output: SignalResult
Side effects: Stores a new analysis record on a cache miss.
Failure cases: ConfigurationError, UpstreamError, PayloadValidationError.

Signals carry no timeframe. The provider is always asked for the
free-text analysis so the stored record is complete; the text is only
returned to callers that request it.
"""

import logging

from tradesense.application.trading.analysis_resolver import AnalysisResolver
from tradesense.application.trading.dtos import GetSignalQuery, SignalResult
from tradesense.domain.trading.entities import AnalysisCategory
from tradesense.domain.trading.ports import InferenceProviderPort

logger = logging.getLogger(__name__)

SIGNAL_TTL_SECONDS = 30 * 60


class GetSignalUseCase:
    """Orchestrates trading signal retrieval for a given asset symbol."""

    def __init__(
        self,
        resolver: AnalysisResolver,
        provider: InferenceProviderPort,
        ttl_seconds: float = SIGNAL_TTL_SECONDS,
    ) -> None:
        self._resolver = resolver
        self._provider = provider
        self._ttl_seconds = ttl_seconds

    async def execute(self, query: GetSignalQuery) -> SignalResult:
        """Run the trading signal use case.

        Args:
            query: The signal request.

        Returns:
            Signal direction, strength and reasons; analysis text only
            when ``include_analysis`` is set.
        """
        logger.info(
            "Requesting trading signal for symbol=%s, include_analysis=%s",
            query.symbol,
            query.include_analysis,
        )

        resolution = await self._resolver.resolve(
            symbol=query.symbol,
            category=AnalysisCategory.SIGNAL,
            timeframe=None,
            ttl_seconds=self._ttl_seconds,
            force_refresh=query.force_refresh,
            compute=lambda: self._provider.fetch_signal(
                query.symbol, include_analysis=True
            ),
        )

        payload = resolution.payload
        if not query.include_analysis:
            payload = payload.without_analysis()

        return SignalResult(
            symbol=query.symbol,
            direction=payload.direction,
            strength=payload.strength,
            reasons=list(payload.reasons),
            analysis=payload.analysis,
            cached=resolution.cached,
            timestamp=resolution.timestamp,
        )
