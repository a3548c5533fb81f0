"""
Adapter: Wallet binding repository.

Implements WalletBindingRepository port.
Read-only view of the wallet_bindings table; linking wallets is done
by the conversational front-end.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine

from tradesense.domain.trading.entities import ChainTag, WalletBinding
from tradesense.domain.trading.ports import WalletBindingRepository
from tradesense.infrastructure.database import wallet_bindings


class WalletBindingRepositoryAdapter(WalletBindingRepository):
    """SQL adapter for the wallet_bindings table."""

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine

    async def list_for_user(self, user_id: int) -> list[WalletBinding]:
        """Return a user's bindings in insertion order."""
        table = wallet_bindings
        query = (
            select(table.c.user_id, table.c.chain, table.c.address, table.c.is_default)
            .where(table.c.user_id == user_id)
            .order_by(table.c.id)
        )
        async with self._engine.connect() as conn:
            rows = (await conn.execute(query)).fetchall()

        return [
            WalletBinding(
                user_id=r.user_id,
                chain=ChainTag(r.chain),
                address=r.address,
                is_default=bool(r.is_default),
            )
            for r in rows
        ]
