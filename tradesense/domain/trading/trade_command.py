"""
Trade command grammar.

The conversational front-end forwards the user's text as-is:

    <symbol> <BUY|SELL|AUTO> [amount]

Parsing happens before any side effect, so a malformed command never
creates a trade record or reaches a chain.
"""

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from tradesense.domain.trading.entities import RequestedDirection
from tradesense.domain.trading.errors import InvalidTradeCommandError

DEFAULT_TRADE_AMOUNT = Decimal("0.01")

SYMBOL_PATTERN = re.compile(r"^[A-Z0-9]{1,20}$")


@dataclass(frozen=True)
class TradeCommand:
    """A parsed trade command."""

    symbol: str
    direction: RequestedDirection
    amount: Decimal


def normalize_symbol(symbol: str) -> str:
    """Strip and upper-case an asset symbol."""
    return symbol.strip().upper()


def parse_trade_command(
    text: str, default_amount: Decimal = DEFAULT_TRADE_AMOUNT
) -> TradeCommand:
    """Parse ``<symbol> <BUY|SELL|AUTO> [amount]``.

    Args:
        text: Raw command text from the front-end.
        default_amount: Amount used when the command omits one.

    Returns:
        The parsed command.

    Raises:
        InvalidTradeCommandError: On a missing or unknown direction, a bad
            symbol, a non-positive amount or extra tokens.
    """
    parts = text.split()
    if len(parts) < 2:
        raise InvalidTradeCommandError(text, "expected '<symbol> <BUY|SELL|AUTO> [amount]'")
    if len(parts) > 3:
        raise InvalidTradeCommandError(text, "too many arguments")

    symbol = normalize_symbol(parts[0])
    if not SYMBOL_PATTERN.match(symbol):
        raise InvalidTradeCommandError(text, f"invalid symbol {parts[0]!r}")

    try:
        direction = RequestedDirection(parts[1].upper())
    except ValueError:
        raise InvalidTradeCommandError(
            text, f"direction must be BUY, SELL or AUTO, got {parts[1]!r}"
        ) from None

    amount = default_amount
    if len(parts) == 3:
        try:
            amount = Decimal(parts[2])
        except InvalidOperation:
            raise InvalidTradeCommandError(text, f"invalid amount {parts[2]!r}") from None
        if not amount.is_finite() or amount <= 0:
            raise InvalidTradeCommandError(text, "amount must be positive")

    return TradeCommand(symbol=symbol, direction=direction, amount=amount)
