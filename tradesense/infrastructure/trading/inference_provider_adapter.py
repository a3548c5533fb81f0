"""
Adapter: Hosted AI inference endpoints.

Implements InferenceProviderPort.
POSTs to the sentiment, prediction and signal endpoints with a bearer
token and returns the decoded JSON body. Shape validation happens in
the application layer.
"""

import logging
import time
from typing import Any, Mapping, Optional

import httpx
from pydantic import SecretStr

from tradesense.domain.trading.entities import Timeframe
from tradesense.domain.trading.errors import (
    ConfigurationError,
    PayloadValidationError,
    UpstreamError,
)
from tradesense.domain.trading.ports import InferenceProviderPort

logger = logging.getLogger(__name__)


class InferenceProviderAdapter(InferenceProviderPort):
    """httpx client for the three inference endpoints.

    Args:
        client: Shared AsyncClient, owned by the service container.
        api_token: Bearer token for every endpoint.
        sentiment_endpoint: URL of the sentiment model.
        prediction_endpoint: URL of the price prediction model.
        signal_endpoint: URL of the trading signal model.
        sentiment_timeout: Per-call timeout in seconds.
        prediction_timeout: Per-call timeout in seconds.
        signal_timeout: Per-call timeout in seconds.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_token: Optional[SecretStr],
        sentiment_endpoint: Optional[str],
        prediction_endpoint: Optional[str],
        signal_endpoint: Optional[str],
        sentiment_timeout: float = 8.0,
        prediction_timeout: float = 10.0,
        signal_timeout: float = 8.0,
    ) -> None:
        self._client = client
        self._api_token = api_token
        self._sentiment_endpoint = sentiment_endpoint
        self._prediction_endpoint = prediction_endpoint
        self._signal_endpoint = signal_endpoint
        self._sentiment_timeout = sentiment_timeout
        self._prediction_timeout = prediction_timeout
        self._signal_timeout = signal_timeout

    async def fetch_sentiment(
        self, symbol: str, timeframe: Timeframe
    ) -> Mapping[str, Any]:
        return await self._post(
            category="sentiment",
            symbol=symbol,
            endpoint=self._sentiment_endpoint,
            endpoint_setting="SENTIMENT_ANALYSIS_ENDPOINT",
            body={"token": symbol, "timeframe": timeframe.value},
            timeout=self._sentiment_timeout,
        )

    async def fetch_prediction(
        self, symbol: str, timeframe: Timeframe
    ) -> Mapping[str, Any]:
        return await self._post(
            category="price prediction",
            symbol=symbol,
            endpoint=self._prediction_endpoint,
            endpoint_setting="PRICE_PREDICTION_ENDPOINT",
            body={"token": symbol, "timeHorizon": timeframe.value},
            timeout=self._prediction_timeout,
        )

    async def fetch_signal(
        self, symbol: str, include_analysis: bool
    ) -> Mapping[str, Any]:
        return await self._post(
            category="trading signal",
            symbol=symbol,
            endpoint=self._signal_endpoint,
            endpoint_setting="TRADE_SIGNAL_ENDPOINT",
            body={"token": symbol, "includeAnalysis": include_analysis},
            timeout=self._signal_timeout,
        )

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    async def _post(
        self,
        category: str,
        symbol: str,
        endpoint: Optional[str],
        endpoint_setting: str,
        body: dict[str, Any],
        timeout: float,
    ) -> Mapping[str, Any]:
        if not endpoint:
            raise ConfigurationError(endpoint_setting, symbol, category)
        if self._api_token is None or not self._api_token.get_secret_value():
            raise ConfigurationError("HUGGINGFACE_API_TOKEN", symbol, category)

        start = time.monotonic()
        try:
            resp = await self._client.post(
                endpoint,
                json=body,
                headers={
                    "Authorization": f"Bearer {self._api_token.get_secret_value()}",
                    "Content-Type": "application/json",
                },
                timeout=timeout,
            )
        except httpx.TimeoutException:
            raise UpstreamError(
                category, symbol, f"timed out after {int(timeout * 1000)}ms"
            ) from None
        except httpx.RequestError as exc:
            raise UpstreamError(
                category, symbol, f"request failed: {type(exc).__name__}"
            ) from exc

        elapsed = (time.monotonic() - start) * 1000
        logger.debug(
            "%s response for %s: status=%d latency_ms=%.1f",
            category,
            symbol,
            resp.status_code,
            elapsed,
        )

        if not resp.is_success:
            raise UpstreamError(
                category, symbol, f"provider returned HTTP {resp.status_code}"
            )

        try:
            data = resp.json()
        except ValueError:
            raise PayloadValidationError(
                category, "response body is not JSON", symbol
            ) from None

        if not isinstance(data, dict):
            raise PayloadValidationError(
                category, "response body is not a JSON object", symbol
            )
        return data
