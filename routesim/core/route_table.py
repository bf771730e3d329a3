"""Distance-vector route table: learned subnets with per-interface metrics."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from loguru import logger

from routesim.datastructures.prefix import NO_INTERFACE, mask_address
from routesim.datastructures.type_aliases import (
    InterfaceId,
    IPv4Int,
    JsonDict,
    Metric,
    MetricVector,
    PrefixLength,
)
from routesim.errors import DuplicateRouteError, InvalidMetricError

from .config import RouterConfig
from .formatting import format_cidr, format_route_table_entry


@dataclass(eq=False, slots=True)
class RouteRecord:
    """
    A learned subnet and the cost of reaching it through each interface.

    ``neighbor_metrics[i]`` is the last cost learned via interface ``i``
    (advertised metric + 1), or the unreachable sentinel.
    """

    prefix: IPv4Int
    length: PrefixLength
    best_interface: InterfaceId
    best_metric: Metric
    neighbor_metrics: MetricVector

    def matches(self, prefix: IPv4Int, length: PrefixLength) -> bool:
        return self.prefix == prefix and self.length == length

    def format(self) -> str:
        return format_route_table_entry(
            self.prefix, self.length, self.best_interface, self.best_metric
        )

    def to_dict(self) -> JsonDict:
        return {
            "prefix": format_cidr(self.prefix, self.length),
            "best_interface": self.best_interface,
            "best_metric": self.best_metric,
            "neighbor_metrics": list(self.neighbor_metrics),
        }


@dataclass(slots=True)
class RouteTable:
    """
    Ordered collection of route records.

    New records are spliced in front of the first record whose prefix is
    ``<=`` the new prefix and whose length is ``<`` the new length, otherwise
    appended. The resulting order is externally visible and kept as is.
    """

    config: RouterConfig
    records: list[RouteRecord] = field(default_factory=list)

    def find(self, prefix: IPv4Int, length: PrefixLength) -> RouteRecord | None:
        address = mask_address(prefix, length)
        for record in self.records:
            if record.matches(address, length):
                return record
        return None

    def insert(
        self,
        prefix: IPv4Int,
        length: PrefixLength,
        interface: InterfaceId,
        advertised_metric: Metric,
    ) -> RouteRecord:
        """
        Create a record learned from ``interface``.

        Args:
            prefix: Subnet address; bits beyond ``length`` are ignored
            length: Prefix length (0..32)
            interface: Interface the advertisement arrived on
            advertised_metric: Metric reported by the neighbor (cost is +1)

        Returns:
            The newly inserted record
        """
        address = mask_address(prefix, length)
        self.config.validate_interface(interface)
        cost = self.config.saturating_cost(advertised_metric)
        if self.config.is_unreachable(cost):
            raise InvalidMetricError(
                f"Cannot insert unreachable route {format_cidr(address, length)}"
            )
        if self.find(address, length) is not None:
            raise DuplicateRouteError(
                f"Route {format_cidr(address, length)} already present"
            )

        neighbor_metrics = [self.config.metric_unreachable] * self.config.num_nics
        neighbor_metrics[interface] = cost
        record = RouteRecord(
            prefix=address,
            length=length,
            best_interface=interface,
            best_metric=cost,
            neighbor_metrics=neighbor_metrics,
        )

        position = len(self.records)
        for index, existing in enumerate(self.records):
            if existing.prefix <= address and existing.length < length:
                position = index
                break
        self.records.insert(position, record)
        logger.debug(
            "Route record inserted prefix={} interface={} cost={} position={}",
            format_cidr(address, length),
            interface,
            cost,
            position,
        )
        return record

    def recompute_best(self, record: RouteRecord) -> bool:
        """
        Select the cheapest interface, lowest index on ties.

        Returns:
            True if every neighbor is unreachable and the record must be removed
        """
        best_interface = NO_INTERFACE
        best_metric = self.config.metric_unreachable
        for interface, metric in enumerate(record.neighbor_metrics):
            if metric < best_metric:
                best_interface = interface
                best_metric = metric
        record.best_interface = best_interface
        record.best_metric = best_metric
        return best_interface == NO_INTERFACE

    def remove(self, record: RouteRecord) -> bool:
        for index, existing in enumerate(self.records):
            if existing is record:
                del self.records[index]
                logger.debug(
                    "Route record removed prefix={}",
                    format_cidr(record.prefix, record.length),
                )
                return True
        return False

    def snapshot(self) -> list[JsonDict]:
        return [record.to_dict() for record in self.records]

    def clear(self) -> None:
        self.records.clear()

    def __iter__(self) -> Iterator[RouteRecord]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)
