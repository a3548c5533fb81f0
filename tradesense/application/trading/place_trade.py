"""
Use case: Place a trade from a raw front-end command.

Input: PlaceTradeCommand (user_id, command text, optional chain)
Output: TradeOutcome
Side effects: Those of ExecuteTradeUseCase when the trade is not declined.
Failure cases: InvalidTradeCommandError, WalletNotFoundError, signal
    errors for AUTO, PersistenceError, TradeExecutionError.

Order matters: the command is parsed and the wallet picked before any
provider or chain is contacted.
"""

import logging
from decimal import Decimal
from typing import Mapping, Optional

from tradesense.application.trading.dtos import (
    ExecuteTradeCommand,
    PlaceTradeCommand,
    TradeDeclined,
    TradeOutcome,
)
from tradesense.application.trading.execute_trade import ExecuteTradeUseCase
from tradesense.application.trading.resolve_trade_direction import (
    ResolveTradeDirectionUseCase,
)
from tradesense.domain.trading.entities import ChainTag
from tradesense.domain.trading.ports import WalletBindingRepository
from tradesense.domain.trading.trade_command import (
    DEFAULT_TRADE_AMOUNT,
    parse_trade_command,
)
from tradesense.domain.trading.wallet_selection import select_wallet

logger = logging.getLogger(__name__)


def token_address_key(chain: ChainTag, symbol: str) -> str:
    """Key of a token contract in the ``token_addresses`` setting."""
    return f"{chain.value}:{symbol}"


class PlaceTradeUseCase:
    """Parses, routes and executes (or declines) a trade command."""

    def __init__(
        self,
        wallet_repo: WalletBindingRepository,
        direction_resolver: ResolveTradeDirectionUseCase,
        executor: ExecuteTradeUseCase,
        default_amount: Decimal = DEFAULT_TRADE_AMOUNT,
        token_addresses: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._wallet_repo = wallet_repo
        self._direction_resolver = direction_resolver
        self._executor = executor
        self._default_amount = default_amount
        self._token_addresses = dict(token_addresses or {})

    async def execute(self, command: PlaceTradeCommand) -> TradeOutcome:
        parsed = parse_trade_command(command.command, self._default_amount)

        bindings = await self._wallet_repo.list_for_user(command.user_id)
        wallet = select_wallet(command.user_id, bindings, command.chain)

        resolved = await self._direction_resolver.execute(
            parsed.symbol, parsed.direction
        )
        if isinstance(resolved, TradeDeclined):
            logger.info(
                "Trade declined for user=%s symbol=%s", command.user_id, parsed.symbol
            )
            return TradeOutcome(
                symbol=resolved.symbol, declined=True, message=resolved.message
            )

        token_address = self._token_addresses.get(
            token_address_key(wallet.chain, parsed.symbol)
        )

        trade = await self._executor.execute(
            ExecuteTradeCommand(
                user_id=command.user_id,
                symbol=parsed.symbol,
                amount=parsed.amount,
                direction=resolved.direction,
                direction_source=resolved.source,
                wallet=wallet,
                token_address=token_address,
            )
        )

        message = (
            f"{trade.direction.value} {trade.amount} {trade.symbol} on "
            f"{trade.chain.value}: {trade.status.value}"
        )
        if resolved.signal_strength is not None:
            message += f" (signal strength {resolved.signal_strength:.0%})"
        if trade.simulated:
            message += " [simulated]"

        return TradeOutcome(
            symbol=trade.symbol, declined=False, message=message, trade=trade
        )
