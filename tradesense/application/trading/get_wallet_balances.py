"""
Use case: List the balances of a user's wallet on one chain.

Input: GetWalletBalancesQuery (user_id, chain, token_addresses)
Output: WalletBalancesResult, native balance first
Side effects: None (RPC reads only).
Failure cases: WalletNotFoundError; InvalidWalletAddressError when the
    bound address is malformed for the chain; any native balance failure.
    Individual token failures are logged and skipped.
"""

import logging

from tradesense.application.trading.dtos import (
    GetWalletBalancesQuery,
    WalletBalancesResult,
)
from tradesense.domain.trading.chain_registry import ChainAdapterRegistry
from tradesense.domain.trading.errors import InvalidWalletAddressError
from tradesense.domain.trading.ports import WalletBindingRepository
from tradesense.domain.trading.wallet_selection import select_wallet

logger = logging.getLogger(__name__)


class GetWalletBalancesUseCase:
    """Reads native and token balances through the chain adapter."""

    def __init__(
        self,
        wallet_repo: WalletBindingRepository,
        chain_registry: ChainAdapterRegistry,
    ) -> None:
        self._wallet_repo = wallet_repo
        self._chain_registry = chain_registry

    async def execute(self, query: GetWalletBalancesQuery) -> WalletBalancesResult:
        bindings = await self._wallet_repo.list_for_user(query.user_id)
        wallet = select_wallet(query.user_id, bindings, query.chain)
        adapter = self._chain_registry.select(query.chain)
        if not adapter.is_valid_address(wallet.address):
            raise InvalidWalletAddressError(query.user_id, query.chain.value)

        balances = [await adapter.get_balance(wallet.address)]

        for token_address in query.token_addresses:
            try:
                balances.append(await adapter.get_balance(wallet.address, token_address))
            except Exception as exc:
                logger.warning(
                    "Failed to get balance for token %s on %s: %s",
                    token_address,
                    query.chain.value,
                    exc,
                )

        return WalletBalancesResult(
            user_id=query.user_id,
            chain=query.chain,
            address=wallet.address,
            balances=balances,
        )
