"""
Adapter: Analysis record repository.

Implements AnalysisRecordRepository port.
Reads/writes the append-only analysis_records table.
"""

import logging
from typing import Optional

from sqlalchemy import desc, insert, select
from sqlalchemy.ext.asyncio import AsyncEngine

from tradesense.domain.trading.entities import (
    AnalysisCategory,
    AnalysisRecord,
    Timeframe,
)
from tradesense.domain.trading.ports import AnalysisRecordRepository
from tradesense.infrastructure.database import analysis_records, as_utc

logger = logging.getLogger(__name__)


class AnalysisRecordRepositoryAdapter(AnalysisRecordRepository):
    """SQL adapter for the analysis_records table."""

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine

    async def get_latest(
        self,
        symbol: str,
        category: AnalysisCategory,
        timeframe: Optional[Timeframe],
    ) -> Optional[AnalysisRecord]:
        """Return the newest record for the key, or None."""
        table = analysis_records
        query = select(
            table.c.symbol,
            table.c.category,
            table.c.timeframe,
            table.c.payload,
            table.c.created_at,
        ).where(table.c.symbol == symbol, table.c.category == category.value)

        if timeframe is None:
            query = query.where(table.c.timeframe.is_(None))
        else:
            query = query.where(table.c.timeframe == timeframe.value)

        query = query.order_by(desc(table.c.created_at)).limit(1)

        async with self._engine.connect() as conn:
            row = (await conn.execute(query)).fetchone()

        if not row:
            return None

        return AnalysisRecord(
            symbol=row.symbol,
            category=AnalysisCategory(row.category),
            timeframe=Timeframe(row.timeframe) if row.timeframe else None,
            payload=dict(row.payload),
            created_at=as_utc(row.created_at),
        )

    async def append(self, record: AnalysisRecord) -> None:
        """Insert a new analysis record."""
        async with self._engine.begin() as conn:
            await conn.execute(
                insert(analysis_records).values(
                    symbol=record.symbol,
                    category=record.category.value,
                    timeframe=record.timeframe.value if record.timeframe else None,
                    payload=record.payload,
                    created_at=record.created_at,
                )
            )
        logger.debug(
            "Stored analysis record: symbol=%s category=%s",
            record.symbol,
            record.category.value,
        )
