"""
Picks the wallet a trade or balance query runs against.

Wallet bindings are owned by an external collaborator; this module only
reads them.
"""

from typing import Iterable, Optional

from tradesense.domain.trading.entities import ChainTag, WalletBinding
from tradesense.domain.trading.errors import WalletNotFoundError


def select_wallet(
    user_id: int,
    bindings: Iterable[WalletBinding],
    chain: Optional[ChainTag] = None,
) -> WalletBinding:
    """Return the user's default wallet, optionally restricted to a chain.

    Falls back to the first bound wallet when none is flagged default.

    Raises:
        WalletNotFoundError: If no binding matches.
    """
    candidates = [
        b for b in bindings
        if b.user_id == user_id and (chain is None or b.chain is chain)
    ]
    if not candidates:
        raise WalletNotFoundError(user_id, chain.value if chain else None)

    for binding in candidates:
        if binding.is_default:
            return binding
    return candidates[0]
