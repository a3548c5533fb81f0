"""
Cache-aside resolution of market analyses.

Input: symbol, category, timeframe, TTL, force_refresh, compute callable
Output: Resolution (validated payload, cached flag, timestamp)
Side effects: Appends one AnalysisRecord per fresh computation.
Failure cases: UpstreamError / ConfigurationError from compute,
    PayloadValidationError on a malformed provider payload.

Freshness depends only on record age. Store failures never fail a
request: a failed read is a cache miss and a failed write is logged.
Concurrent misses for one key each call the provider and each append a
record; there is no single-flight deduplication.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Awaitable, Callable, Generic, Mapping, Optional, TypeVar

from tradesense.domain.trading.entities import (
    AnalysisCategory,
    AnalysisRecord,
    Timeframe,
)
from tradesense.domain.trading.errors import PayloadValidationError
from tradesense.domain.trading.payloads import Payload, validate_payload
from tradesense.domain.trading.ports import AnalysisRecordRepository
from tradesense.shared.clock import Clock, utc_now

logger = logging.getLogger(__name__)

P = TypeVar("P", bound=Payload)

ComputeFn = Callable[[], Awaitable[Mapping[str, Any]]]


@dataclass(frozen=True)
class Resolution(Generic[P]):
    """A resolved payload and where it came from."""

    payload: P
    cached: bool
    timestamp: datetime


class AnalysisResolver:
    """Freshness-checked retrieve-or-compute over the analysis store.

    One instance is shared by every category use case; the TTL and the
    compute callable are supplied per call.
    """

    def __init__(
        self,
        record_repo: AnalysisRecordRepository,
        clock: Clock = utc_now,
    ) -> None:
        self._record_repo = record_repo
        self._clock = clock

    async def resolve(
        self,
        symbol: str,
        category: AnalysisCategory,
        timeframe: Optional[Timeframe],
        ttl_seconds: float,
        force_refresh: bool,
        compute: ComputeFn,
    ) -> Resolution:
        """Return a fresh stored payload, or compute, validate and store one.

        Args:
            symbol: Normalized asset symbol.
            category: Analysis category, selects the shape validator.
            timeframe: Category timeframe, None for timeframe-less categories.
            ttl_seconds: Maximum age of a stored record still served.
            force_refresh: Skip the store lookup entirely.
            compute: Coroutine factory calling the inference provider.

        Returns:
            The payload with ``cached`` telling whether it was served
            from the store.

        Raises:
            PayloadValidationError: If the computed payload is malformed.
        """
        if not force_refresh:
            hit = await self._lookup(symbol, category, timeframe, ttl_seconds)
            if hit is not None:
                return hit

        logger.info(
            "Computing %s for symbol=%s, timeframe=%s",
            category.value,
            symbol,
            timeframe.value if timeframe else None,
        )
        raw = await compute()

        try:
            payload = validate_payload(category, raw)
        except PayloadValidationError as exc:
            exc.symbol = symbol
            raise

        now = self._clock()
        await self._store(
            AnalysisRecord(
                symbol=symbol,
                category=category,
                timeframe=timeframe,
                payload=payload.to_wire(),
                created_at=now,
            )
        )
        return Resolution(payload=payload, cached=False, timestamp=now)

    async def _lookup(
        self,
        symbol: str,
        category: AnalysisCategory,
        timeframe: Optional[Timeframe],
        ttl_seconds: float,
    ) -> Optional[Resolution]:
        try:
            record = await self._record_repo.get_latest(symbol, category, timeframe)
        except Exception:
            logger.warning(
                "Cache read failed for %s %s; recomputing",
                category.value,
                symbol,
                exc_info=True,
            )
            return None

        if record is None:
            return None

        now = self._clock()
        if not record.is_fresh(now, ttl_seconds):
            logger.debug(
                "Stale %s for %s (age %.0fs, ttl %ss)",
                category.value,
                symbol,
                record.age_seconds(now),
                ttl_seconds,
            )
            return None

        try:
            payload = validate_payload(category, record.payload)
        except PayloadValidationError:
            logger.warning(
                "Stored %s for %s no longer validates; recomputing",
                category.value,
                symbol,
            )
            return None

        logger.info(
            "Using cached %s for symbol=%s (age_minutes=%d)",
            category.value,
            symbol,
            round(record.age_seconds(now) / 60),
        )
        return Resolution(payload=payload, cached=True, timestamp=record.created_at)

    async def _store(self, record: AnalysisRecord) -> None:
        try:
            await self._record_repo.append(record)
        except Exception:
            logger.error(
                "Failed to store %s for %s; returning computed result",
                record.category.value,
                record.symbol,
                exc_info=True,
            )
