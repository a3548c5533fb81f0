"""
Centralized error handlers for FastAPI.

Maps trading domain errors to HTTP responses.
No stack traces or internal details are exposed to clients.
Every error body has the shape ``{error, detail?, symbol?}``.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from tradesense.domain.trading.errors import (
    ConfigurationError,
    InvalidTradeCommandError,
    InvalidTradeTransitionError,
    InvalidWalletAddressError,
    PayloadValidationError,
    PersistenceError,
    TradeExecutionError,
    TradingDomainError,
    UpstreamError,
    WalletNotFoundError,
)

logger = logging.getLogger(__name__)

HTTP_404 = 404
HTTP_422 = 422
HTTP_500 = 500
HTTP_502 = 502


def _error_response(
    status_code: int,
    error: str,
    detail: Optional[str] = None,
    symbol: Optional[str] = None,
    **extra: str,
) -> JSONResponse:
    """Build a consistent JSON error response."""
    body: dict[str, Optional[str]] = {"error": error}
    if detail:
        body["detail"] = detail
    if symbol:
        body["symbol"] = symbol
    body.update(extra)
    return JSONResponse(status_code=status_code, content=body)


def register_error_handlers(app: FastAPI) -> None:
    """Register all domain error handlers on the FastAPI application.

    Args:
        app: The FastAPI application instance.
    """

    @app.exception_handler(ConfigurationError)
    async def handle_configuration(
        _request: Request, exc: ConfigurationError
    ) -> JSONResponse:
        """Missing endpoint, credential or adapter. The setting name stays in the log."""
        logger.error("Configuration error: %s", exc.setting)
        detail = f"{exc.category} is not configured" if exc.category else None
        return _error_response(
            HTTP_500, "Service not configured", detail=detail, symbol=exc.symbol
        )

    @app.exception_handler(UpstreamError)
    async def handle_upstream(_request: Request, exc: UpstreamError) -> JSONResponse:
        """Handle inference provider failures."""
        logger.warning("Upstream error: %s", exc.message)
        return _error_response(
            HTTP_502,
            "Upstream analysis failed",
            detail=exc.message,
            symbol=exc.symbol,
        )

    @app.exception_handler(PayloadValidationError)
    async def handle_payload_validation(
        _request: Request, exc: PayloadValidationError
    ) -> JSONResponse:
        """Handle malformed provider payloads."""
        logger.warning("Invalid provider payload for %s: %s", exc.symbol, exc.reason)
        return _error_response(
            HTTP_502,
            "Invalid analysis payload",
            detail=exc.message,
            symbol=exc.symbol,
        )

    @app.exception_handler(InvalidTradeCommandError)
    async def handle_invalid_command(
        _request: Request, exc: InvalidTradeCommandError
    ) -> JSONResponse:
        """Handle malformed trade commands."""
        logger.info("Rejected trade command: %s", exc.reason)
        return _error_response(HTTP_422, "Invalid trade command", detail=exc.reason)

    @app.exception_handler(WalletNotFoundError)
    async def handle_wallet_not_found(
        _request: Request, exc: WalletNotFoundError
    ) -> JSONResponse:
        """Handle users without a bound wallet."""
        logger.info("Wallet not found: user=%s chain=%s", exc.user_id, exc.chain)
        return _error_response(HTTP_404, "Wallet not found", detail=exc.message)

    @app.exception_handler(InvalidWalletAddressError)
    async def handle_invalid_wallet_address(
        _request: Request, exc: InvalidWalletAddressError
    ) -> JSONResponse:
        """Handle a stored wallet address the chain adapter rejects."""
        logger.warning("Invalid wallet address: user=%s chain=%s", exc.user_id, exc.chain)
        return _error_response(HTTP_422, "Invalid wallet address", detail=exc.message)

    @app.exception_handler(TradeExecutionError)
    async def handle_trade_execution(
        _request: Request, exc: TradeExecutionError
    ) -> JSONResponse:
        """Handle failed chain calls. The FAILED record id is returned."""
        logger.error("Trade execution failed: %s", exc.message)
        extra = {"trade_id": exc.trade_id} if exc.trade_id else {}
        return _error_response(
            HTTP_502, "Trade execution failed", detail=exc.reason, **extra
        )

    @app.exception_handler(PersistenceError)
    async def handle_persistence(
        _request: Request, exc: PersistenceError
    ) -> JSONResponse:
        """Handle store failures that could not be degraded."""
        logger.error("Persistence error during %s: %s", exc.operation, exc.reason)
        return _error_response(HTTP_500, "Storage unavailable")

    @app.exception_handler(InvalidTradeTransitionError)
    async def handle_invalid_transition(
        _request: Request, exc: InvalidTradeTransitionError
    ) -> JSONResponse:
        """Handle a trade record leaving a terminal state."""
        logger.error("Invalid trade transition: %s", exc.message)
        return _error_response(HTTP_500, "Internal server error")

    @app.exception_handler(TradingDomainError)
    async def handle_trading_domain(
        _request: Request, exc: TradingDomainError
    ) -> JSONResponse:
        """Catch-all for unhandled trading domain errors."""
        logger.error("Unhandled trading domain error: %s", exc.message)
        return _error_response(HTTP_500, "Internal server error")

    @app.exception_handler(Exception)
    async def handle_unexpected(
        _request: Request, exc: Exception
    ) -> JSONResponse:
        """Catch-all for unexpected errors. Never exposes internals."""
        logger.exception("Unexpected error: %s", type(exc).__name__)
        return _error_response(HTTP_500, "Internal server error")
