"""
Adapter: Trade record repository.

Implements TradeRecordRepository port.
Reads/writes the trades table; the recent-trades read backs trade history.
"""

import logging

from sqlalchemy import insert, select, update
from sqlalchemy.ext.asyncio import AsyncEngine

from tradesense.domain.trading.entities import (
    ChainTag,
    DirectionSource,
    TradeDirection,
    TradeRecord,
    TradeStatus,
)
from tradesense.domain.trading.errors import PersistenceError
from tradesense.domain.trading.ports import TradeRecordRepository
from tradesense.infrastructure.database import as_utc, trades

logger = logging.getLogger(__name__)


class TradeRecordRepositoryAdapter(TradeRecordRepository):
    """SQL adapter for the trades table."""

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine

    async def add(self, record: TradeRecord) -> None:
        """Insert a newly opened trade."""
        async with self._engine.begin() as conn:
            await conn.execute(
                insert(trades).values(
                    id=record.id,
                    user_id=record.user_id,
                    symbol=record.symbol,
                    chain=record.chain.value,
                    amount=record.amount,
                    direction=record.direction.value,
                    direction_source=record.direction_source.value,
                    status=record.status.value,
                    token_address=record.token_address,
                    tx_reference=record.tx_reference,
                    error=record.error,
                    created_at=record.created_at,
                    updated_at=record.updated_at,
                )
            )

    async def update(self, record: TradeRecord) -> None:
        """Persist the lifecycle fields of an existing trade."""
        async with self._engine.begin() as conn:
            result = await conn.execute(
                update(trades)
                .where(trades.c.id == record.id)
                .values(
                    status=record.status.value,
                    tx_reference=record.tx_reference,
                    error=record.error,
                    updated_at=record.updated_at,
                )
            )
        if result.rowcount == 0:
            raise PersistenceError("trade update", f"trade {record.id} not found")
        logger.debug("Updated trade %s to %s", record.id, record.status.value)

    async def list_recent(self, user_id: int, limit: int) -> list[TradeRecord]:
        """Return up to ``limit`` trades of a user, newest first."""
        query = (
            select(trades)
            .where(trades.c.user_id == user_id)
            .order_by(trades.c.created_at.desc())
            .limit(limit)
        )
        async with self._engine.connect() as conn:
            rows = (await conn.execute(query)).fetchall()

        logger.debug("Fetched %d recent trades for user %s", len(rows), user_id)
        return [_to_record(row) for row in rows]


def _to_record(row) -> TradeRecord:
    return TradeRecord(
        id=row.id,
        user_id=row.user_id,
        symbol=row.symbol,
        chain=ChainTag(row.chain),
        amount=row.amount,
        direction=TradeDirection(row.direction),
        direction_source=DirectionSource(row.direction_source),
        status=TradeStatus(row.status),
        token_address=row.token_address,
        tx_reference=row.tx_reference,
        error=row.error,
        created_at=as_utc(row.created_at),
        updated_at=as_utc(row.updated_at),
    )
