"""
Database engine and table metadata.

The storage engine itself is external; this module only declares the
three tables the adapters read and write and builds the async engine
from settings.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Index,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
    Uuid,
)
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

logger = logging.getLogger(__name__)

metadata = MetaData()

analysis_records = Table(
    "analysis_records",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("symbol", String(20), nullable=False),
    Column("category", String(20), nullable=False),
    Column("timeframe", String(8), nullable=True),
    Column("payload", JSON, nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Index("ix_analysis_records_lookup", "symbol", "category", "timeframe", "created_at"),
)

trades = Table(
    "trades",
    metadata,
    Column("id", Uuid, primary_key=True),
    Column("user_id", Integer, nullable=False, index=True),
    Column("symbol", String(20), nullable=False),
    Column("chain", String(10), nullable=False),
    Column("amount", Numeric(38, 18), nullable=False),
    Column("direction", String(4), nullable=False),
    Column("direction_source", String(10), nullable=False),
    Column("status", String(10), nullable=False),
    Column("token_address", String(128), nullable=True),
    Column("tx_reference", String(128), nullable=True),
    Column("error", Text, nullable=True),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
)

wallet_bindings = Table(
    "wallet_bindings",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", Integer, nullable=False, index=True),
    Column("chain", String(10), nullable=False),
    Column("address", String(128), nullable=False),
    Column("is_default", Boolean, nullable=False, default=False),
)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive timestamps returned by drivers without tz support."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def create_engine_from_settings(database_url: str, echo: bool = False) -> AsyncEngine:
    """Build the async SQLAlchemy engine shared by every repository."""
    return create_async_engine(database_url, echo=echo, pool_pre_ping=True)


async def create_tables(engine: AsyncEngine) -> None:
    """Create missing tables. Used for local runs and tests."""
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
    logger.info("Database tables ensured")
