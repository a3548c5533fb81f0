"""
Selection of the chain adapter serving a chain tag.

The set of chains is closed: the registry refuses to be built unless
every ChainTag has exactly one adapter, so selection never fails at
request time.
"""

from types import MappingProxyType
from typing import Iterable

from tradesense.domain.trading.entities import ChainTag
from tradesense.domain.trading.errors import ConfigurationError
from tradesense.domain.trading.ports import ChainAdapter


class ChainAdapterRegistry:
    """Immutable ChainTag → ChainAdapter mapping, total over ChainTag."""

    def __init__(self, adapters: Iterable[ChainAdapter]) -> None:
        by_chain: dict[ChainTag, ChainAdapter] = {}
        for adapter in adapters:
            if adapter.chain in by_chain:
                raise ConfigurationError(
                    f"chain adapter for {adapter.chain.value} (registered twice)"
                )
            by_chain[adapter.chain] = adapter

        missing = [tag.value for tag in ChainTag if tag not in by_chain]
        if missing:
            raise ConfigurationError(f"chain adapter for {', '.join(missing)}")

        self._adapters = MappingProxyType(by_chain)

    def select(self, chain: ChainTag) -> ChainAdapter:
        return self._adapters[chain]
