"""
Router state objects exposed to the event driver.

``ForwardingRouter`` owns a prefix trie and answers packet lookups.
``DistanceVectorRouter`` owns a route table and processes routing updates.
They are independent simulated routers and share nothing but configuration.

Both follow the same lifecycle: ``initialize()`` allocates state and
``teardown()`` releases it; either can be driven as a context manager.
Operations on a router that is not initialized raise RouterStateError.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Self

from loguru import logger

from routesim.datastructures.prefix_trie import (
    ForwardingRule,
    PrefixTrie,
    PrefixTrieStatistics,
)
from routesim.datastructures.type_aliases import (
    InterfaceId,
    IPv4Int,
    JsonDict,
    Metric,
    PacketId,
    PrefixLength,
    UpdateId,
)
from routesim.errors import RouterStateError

from .config import RouterConfig
from .distance_vector import Advertisement, DistanceVectorProcessor
from .forwarding import ForwardingDecision, ForwardingEngine
from .route_table import RouteRecord, RouteTable


@dataclass(slots=True)
class ForwardingRouter:
    """Router whose forwarding table is populated directly by configuration."""

    config: RouterConfig = field(default_factory=RouterConfig)
    _trie: PrefixTrie | None = None
    _engine: ForwardingEngine | None = None

    def initialize(self) -> Self:
        self._trie = PrefixTrie(num_nics=self.config.num_nics)
        self._engine = ForwardingEngine(trie=self._trie)
        logger.debug("Forwarding router initialized num_nics={}", self.config.num_nics)
        return self

    def teardown(self) -> None:
        if self._trie is not None:
            self._trie.clear()
        self._trie = None
        self._engine = None
        logger.debug("Forwarding router torn down")

    @property
    def is_initialized(self) -> bool:
        return self._trie is not None

    @property
    def trie(self) -> PrefixTrie:
        if self._trie is None:
            raise RouterStateError("Forwarding router is not initialized")
        return self._trie

    @property
    def engine(self) -> ForwardingEngine:
        if self._engine is None:
            raise RouterStateError("Forwarding router is not initialized")
        return self._engine

    def set_forwarding_rule(
        self, prefix: IPv4Int, length: PrefixLength, interface: InterfaceId
    ) -> bool:
        """Install a rule, or withdraw it with NO_INTERFACE."""
        return self.trie.set(prefix, length, interface)

    def forward(self, address: IPv4Int, packet_id: PacketId) -> ForwardingDecision:
        return self.engine.forward(address, packet_id)

    def enumerate_forwarding_table(self) -> Iterator[ForwardingRule]:
        return self.trie.enumerate_rules()

    def get_statistics(self) -> PrefixTrieStatistics:
        return self.trie.get_statistics()

    def stats_snapshot(self) -> JsonDict:
        return {
            "trie": self.get_statistics().to_dict(),
            "forwarding": self.engine.stats.to_dict(),
        }

    def __enter__(self) -> Self:
        return self.initialize()

    def __exit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        self.teardown()


@dataclass(slots=True)
class DistanceVectorRouter:
    """Router that learns routes from neighbor advertisements."""

    config: RouterConfig = field(default_factory=RouterConfig)
    _table: RouteTable | None = None
    _processor: DistanceVectorProcessor | None = None

    def initialize(self) -> Self:
        self._table = RouteTable(config=self.config)
        self._processor = DistanceVectorProcessor(table=self._table)
        logger.debug(
            "Distance-vector router initialized num_nics={} unreachable={}",
            self.config.num_nics,
            self.config.metric_unreachable,
        )
        return self

    def teardown(self) -> None:
        if self._table is not None:
            self._table.clear()
        self._table = None
        self._processor = None
        logger.debug("Distance-vector router torn down")

    @property
    def is_initialized(self) -> bool:
        return self._table is not None

    @property
    def table(self) -> RouteTable:
        if self._table is None:
            raise RouterStateError("Distance-vector router is not initialized")
        return self._table

    @property
    def processor(self) -> DistanceVectorProcessor:
        if self._processor is None:
            raise RouterStateError("Distance-vector router is not initialized")
        return self._processor

    def process_routing_update(
        self,
        prefix: IPv4Int,
        length: PrefixLength,
        interface: InterfaceId,
        metric: Metric,
        update_id: UpdateId,
    ) -> Advertisement | None:
        return self.processor.process_update(
            prefix, length, interface, metric, update_id
        )

    def routes(self) -> Iterator[RouteRecord]:
        return iter(self.table)

    def stats_snapshot(self) -> JsonDict:
        return {
            "routes": len(self.table),
            "distance_vector": self.processor.stats.to_dict(),
        }

    def __enter__(self) -> Self:
        return self.initialize()

    def __exit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        self.teardown()
