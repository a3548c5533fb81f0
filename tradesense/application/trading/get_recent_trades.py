"""
Use case: List a user's most recent trade attempts.

Input: GetRecentTradesQuery (user_id, limit)
Output: RecentTradesResult, newest first
Side effects: None.
Failure cases: PersistenceError when the trade store cannot be read.
"""

import logging

from tradesense.application.trading.dtos import (
    GetRecentTradesQuery,
    RecentTradesResult,
    TradeHistoryEntry,
)
from tradesense.domain.trading.errors import PersistenceError
from tradesense.domain.trading.ports import TradeRecordRepository

logger = logging.getLogger(__name__)


class GetRecentTradesUseCase:
    """Reads trade history straight from the trade store."""

    def __init__(self, trade_repo: TradeRecordRepository) -> None:
        self._trade_repo = trade_repo

    async def execute(self, query: GetRecentTradesQuery) -> RecentTradesResult:
        try:
            records = await self._trade_repo.list_recent(query.user_id, query.limit)
        except PersistenceError:
            raise
        except Exception as exc:
            raise PersistenceError("recent trades read", str(exc)) from exc

        logger.info("Fetched %d recent trades for user %s", len(records), query.user_id)
        return RecentTradesResult(
            user_id=query.user_id,
            trades=[
                TradeHistoryEntry(
                    trade_id=r.id,
                    symbol=r.symbol,
                    chain=r.chain,
                    amount=r.amount,
                    direction=r.direction,
                    direction_source=r.direction_source,
                    status=r.status,
                    tx_reference=r.tx_reference,
                    error=r.error,
                    created_at=r.created_at,
                    updated_at=r.updated_at,
                )
                for r in records
            ],
        )
