"""
Domain-specific errors for the trading bounded context.

All errors raised from the domain layer must be defined here.
These are mapped to HTTP responses at the interface layer.
No framework imports allowed.
"""

from typing import Optional


class TradingDomainError(Exception):
    """Base error for all trading domain errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class ConfigurationError(TradingDomainError):
    """Raised when a provider endpoint, credential or adapter is missing."""

    def __init__(
        self,
        setting: str,
        symbol: Optional[str] = None,
        category: Optional[str] = None,
    ) -> None:
        super().__init__(f"Configuration missing: {setting}")
        self.setting = setting
        self.symbol = symbol
        self.category = category


class UpstreamError(TradingDomainError):
    """Raised when the inference provider fails, times out or is unreachable."""

    def __init__(self, category: str, symbol: str, reason: str) -> None:
        super().__init__(f"Failed to fetch {category} for {symbol}: {reason}")
        self.category = category
        self.symbol = symbol
        self.reason = reason


class PayloadValidationError(TradingDomainError):
    """Raised when a provider payload does not match the category shape."""

    def __init__(self, category: str, reason: str, symbol: Optional[str] = None) -> None:
        super().__init__(f"Invalid {category} payload: {reason}")
        self.category = category
        self.reason = reason
        self.symbol = symbol


class PersistenceError(TradingDomainError):
    """Raised when the result store rejects a read or write."""

    def __init__(self, operation: str, reason: str) -> None:
        super().__init__(f"Persistence failure during {operation}: {reason}")
        self.operation = operation
        self.reason = reason


class InvalidTradeCommandError(TradingDomainError):
    """Raised when a trade command does not follow the command grammar."""

    def __init__(self, command: str, reason: str) -> None:
        super().__init__(f"Invalid trade command {command!r}: {reason}")
        self.command = command
        self.reason = reason


class WalletNotFoundError(TradingDomainError):
    """Raised when a user has no wallet bound for the requested chain."""

    def __init__(self, user_id: int, chain: Optional[str] = None) -> None:
        where = f" on {chain}" if chain else ""
        super().__init__(f"No wallet bound for user {user_id}{where}")
        self.user_id = user_id
        self.chain = chain


class InvalidWalletAddressError(TradingDomainError):
    """Raised when a bound wallet address is not valid for its chain."""

    def __init__(self, user_id: int, chain: str) -> None:
        super().__init__(f"Wallet bound for user {user_id} is not a valid {chain} address")
        self.user_id = user_id
        self.chain = chain


class TradeExecutionError(TradingDomainError):
    """Raised when the chain call of a trade does not complete."""

    def __init__(
        self,
        chain: str,
        reason: str,
        trade_id: Optional[str] = None,
    ) -> None:
        super().__init__(f"Trade execution failed on {chain}: {reason}")
        self.chain = chain
        self.reason = reason
        self.trade_id = trade_id


class ExecutionDisabledError(TradeExecutionError):
    """Raised when live execution is not enabled for a real chain."""

    def __init__(self, chain: str) -> None:
        super().__init__(
            chain,
            "live execution is disabled; set LIVE_EXECUTION_ENABLED and a signer key",
        )


class InvalidTradeTransitionError(TradingDomainError):
    """Raised when a trade record leaves a terminal state."""

    def __init__(self, trade_id: str, current: str, target: str) -> None:
        super().__init__(
            f"Trade {trade_id} cannot move from {current} to {target}"
        )
        self.trade_id = trade_id
        self.current = current
        self.target = target
