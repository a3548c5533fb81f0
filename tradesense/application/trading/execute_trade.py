"""
Use case: Execute a resolved trade on the user's chain.

Input: ExecuteTradeCommand
Output: TradeResult
Side effects: Inserts a PENDING TradeRecord, calls the chain adapter,
    updates the record to COMPLETED or FAILED.
Failure cases: PersistenceError if the PENDING record cannot be stored
    (the chain is never called); TradeExecutionError if the chain call
    fails (the record is moved to FAILED first).
"""

import logging

from tradesense.application.trading.dtos import ExecuteTradeCommand, TradeResult
from tradesense.domain.trading.chain_registry import ChainAdapterRegistry
from tradesense.domain.trading.entities import TradeRecord, TransactionRequest
from tradesense.domain.trading.errors import (
    PersistenceError,
    TradeExecutionError,
)
from tradesense.domain.trading.ports import ChainAdapter, TradeRecordRepository
from tradesense.shared.clock import Clock, utc_now

logger = logging.getLogger(__name__)


class ExecuteTradeUseCase:
    """Runs one trade through the PENDING → COMPLETED/FAILED lifecycle."""

    def __init__(
        self,
        trade_repo: TradeRecordRepository,
        chain_registry: ChainAdapterRegistry,
        clock: Clock = utc_now,
    ) -> None:
        self._trade_repo = trade_repo
        self._chain_registry = chain_registry
        self._clock = clock

    async def execute(self, command: ExecuteTradeCommand) -> TradeResult:
        """Open a trade record, call the chain and close the record.

        Args:
            command: Resolved trade with direction, amount and wallet.

        Returns:
            The completed trade.

        Raises:
            PersistenceError: If the PENDING record cannot be inserted.
            TradeExecutionError: If the chain call fails.
        """
        chain = command.wallet.chain
        adapter = self._chain_registry.select(chain)

        now = self._clock()
        record = TradeRecord(
            user_id=command.user_id,
            symbol=command.symbol,
            chain=chain,
            amount=command.amount,
            direction=command.direction,
            direction_source=command.direction_source,
            token_address=command.token_address,
            created_at=now,
            updated_at=now,
        )

        try:
            await self._trade_repo.add(record)
        except PersistenceError:
            raise
        except Exception as exc:
            raise PersistenceError("trade insert", str(exc)) from exc

        logger.info(
            "Trade %s opened: %s %s %s on %s (source=%s)",
            record.id,
            record.direction.value,
            record.amount,
            record.symbol,
            chain.value,
            record.direction_source.value,
        )

        try:
            tx_reference = await self._send(adapter, command)
        except Exception as exc:
            record.mark_failed(str(exc), self._clock())
            await self._save_terminal(record)
            logger.error("Trade %s failed on %s: %s", record.id, chain.value, exc)
            raise TradeExecutionError(chain.value, str(exc), str(record.id)) from exc

        record.mark_completed(tx_reference, self._clock())
        await self._save_terminal(record)
        logger.info("Trade %s completed: tx=%s", record.id, tx_reference)

        return TradeResult(
            trade_id=record.id,
            symbol=record.symbol,
            chain=chain,
            amount=record.amount,
            direction=record.direction,
            direction_source=record.direction_source,
            status=record.status,
            tx_reference=record.tx_reference,
            simulated=not adapter.production_ready,
        )

    async def _send(self, adapter: ChainAdapter, command: ExecuteTradeCommand) -> str:
        address = command.wallet.address
        if not adapter.is_valid_address(address):
            raise ValueError(f"invalid {adapter.chain.value} address {address!r}")
        return await adapter.execute_transaction(
            TransactionRequest(
                recipient_address=address,
                amount=command.amount,
                token_address=command.token_address,
            )
        )

    async def _save_terminal(self, record: TradeRecord) -> None:
        try:
            await self._trade_repo.update(record)
        except Exception:
            logger.error(
                "Failed to persist %s state of trade %s",
                record.status.value,
                record.id,
                exc_info=True,
            )
