"""
Use case: Retrieve market sentiment for an asset symbol.

Input: GetSentimentQuery (symbol, timeframe, force_refresh)
Output: SentimentResult
Side effects: Stores a new analysis record on a cache miss.
Failure cases: ConfigurationError, UpstreamError, PayloadValidationError.
"""

import logging

from tradesense.application.trading.analysis_resolver import AnalysisResolver
from tradesense.application.trading.dtos import GetSentimentQuery, SentimentResult
from tradesense.domain.trading.entities import AnalysisCategory
from tradesense.domain.trading.ports import InferenceProviderPort

logger = logging.getLogger(__name__)

SENTIMENT_TTL_SECONDS = 60 * 60


class GetSentimentUseCase:
    """Orchestrates sentiment retrieval for a given asset symbol.

    Serves a stored score while it is younger than the TTL, otherwise
    asks the InferenceProviderPort and stores the answer.
    """

    def __init__(
        self,
        resolver: AnalysisResolver,
        provider: InferenceProviderPort,
        ttl_seconds: float = SENTIMENT_TTL_SECONDS,
    ) -> None:
        self._resolver = resolver
        self._provider = provider
        self._ttl_seconds = ttl_seconds

    async def execute(self, query: GetSentimentQuery) -> SentimentResult:
        """Run the sentiment retrieval use case.

        Args:
            query: The sentiment request containing symbol and timeframe.

        Returns:
            Sentiment score and sources for the symbol.
        """
        logger.info(
            "Retrieving sentiment for symbol=%s, timeframe=%s, force_refresh=%s",
            query.symbol,
            query.timeframe.value,
            query.force_refresh,
        )

        resolution = await self._resolver.resolve(
            symbol=query.symbol,
            category=AnalysisCategory.SENTIMENT,
            timeframe=query.timeframe,
            ttl_seconds=self._ttl_seconds,
            force_refresh=query.force_refresh,
            compute=lambda: self._provider.fetch_sentiment(
                query.symbol, query.timeframe
            ),
        )

        payload = resolution.payload
        return SentimentResult(
            symbol=query.symbol,
            timeframe=query.timeframe,
            score=payload.score,
            sources=list(payload.sources),
            cached=resolution.cached,
            timestamp=resolution.timestamp,
        )
