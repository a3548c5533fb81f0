"""
Adapter: NEAR chain (placeholder).

Implements the ChainAdapter protocol structurally but talks to no
network. Every call logs a warning and returns fixed values; callers
see ``production_ready = False`` and report results as simulated.
"""

import logging
import re
from typing import Optional

from tradesense.domain.trading.entities import (
    ChainTag,
    TokenBalance,
    TransactionRequest,
)

logger = logging.getLogger(__name__)

NEAR_DECIMALS = 24
PLACEHOLDER_TX_REFERENCE = "transaction-hash-placeholder"

_IMPLICIT_ACCOUNT = re.compile(r"^[a-zA-Z0-9]{64}$")


class NearChainAdapter:
    """Stub ChainAdapter for NEAR."""

    chain = ChainTag.NEAR
    production_ready = False

    def is_valid_address(self, address: str) -> bool:
        """Named ``*.near`` accounts and 64-character implicit accounts."""
        return address.endswith(".near") or bool(_IMPLICIT_ACCOUNT.match(address))

    async def get_balance(
        self, address: str, token_address: Optional[str] = None
    ) -> TokenBalance:
        logger.warning(
            "NEAR balance lookup is not implemented; returning 0 for %s", address
        )
        return TokenBalance(
            symbol="TOKEN" if token_address else "NEAR",
            balance="0",
            decimals=NEAR_DECIMALS,
            is_native=token_address is None,
            token_address=token_address,
        )

    async def execute_transaction(self, request: TransactionRequest) -> str:
        logger.warning(
            "NEAR transactions are not implemented; simulating transfer of %s to %s",
            request.amount,
            request.recipient_address,
        )
        return PLACEHOLDER_TX_REFERENCE
