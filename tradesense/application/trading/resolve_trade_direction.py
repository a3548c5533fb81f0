"""
Use case: Decide the direction of a trade request.

Input: symbol, RequestedDirection
Output: ResolvedDirection or TradeDeclined
Side effects: For AUTO, whatever the signal use case stores on a miss.
Failure cases: Signal failures propagate for AUTO requests.
"""

import logging
from typing import Union

from tradesense.application.trading.dtos import (
    GetSignalQuery,
    ResolvedDirection,
    TradeDeclined,
)
from tradesense.application.trading.get_signal import GetSignalUseCase
from tradesense.domain.trading.entities import (
    DirectionSource,
    RequestedDirection,
    SignalDirection,
    TradeDirection,
)

logger = logging.getLogger(__name__)


class ResolveTradeDirectionUseCase:
    """Passes explicit directions through and lets the signal pick for AUTO.

    A HOLD signal declines the trade; nothing is executed.
    """

    def __init__(self, signal: GetSignalUseCase) -> None:
        self._signal = signal

    async def execute(
        self, symbol: str, requested: RequestedDirection
    ) -> Union[ResolvedDirection, TradeDeclined]:
        """Resolve the direction for ``symbol``.

        Args:
            symbol: Normalized asset symbol.
            requested: BUY, SELL or AUTO as typed by the user.

        Returns:
            The direction to execute with, or a declined outcome.
        """
        if requested is not RequestedDirection.AUTO:
            return ResolvedDirection(
                direction=TradeDirection(requested.value),
                source=DirectionSource.USER,
            )

        signal = await self._signal.execute(
            GetSignalQuery(symbol=symbol, include_analysis=False)
        )
        logger.info(
            "AUTO trade for %s resolved by signal: %s (strength=%.2f)",
            symbol,
            signal.direction.value,
            signal.strength,
        )

        if signal.direction is SignalDirection.HOLD:
            return TradeDeclined(
                symbol=symbol,
                message=(
                    f"The trading signal for {symbol} is HOLD "
                    f"(strength {signal.strength:.0%}); no trade was placed."
                ),
            )

        return ResolvedDirection(
            direction=TradeDirection(signal.direction.value),
            source=DirectionSource.SIGNAL,
            signal_strength=signal.strength,
        )
