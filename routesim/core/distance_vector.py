"""
Distance-vector update processing.

Each routing update (prefix, length, interface, metric) is applied to the
route table and may trigger a single advertisement. An advertisement is
emitted only when this router's own best route for the prefix changes (or the
neighbor it currently routes through reports a new cost), never for updates
from neighbors that do not affect the chosen path.

Update handling, with ``cost = metric + 1`` saturated at the sentinel:

- Unknown prefix, finite cost: learn it and advertise.
- Unknown prefix, unreachable cost: ignore.
- Known prefix, unreachable cost: mark the neighbor unreachable. If it was
  the best interface, fail over to the next cheapest neighbor, or delete the
  route and advertise a withdrawal when none is left.
- Known prefix, update from the best interface at cost >= best: re-scan all
  neighbors since the previous best may no longer be cheapest.
- Known prefix, cost below best: adopt the cheaper path.
- Known prefix, equal cost from a lower-numbered interface: adopt it.
- Anything else: remember the neighbor's cost silently.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from loguru import logger

from routesim.datastructures.prefix import NO_INTERFACE, mask_address
from routesim.datastructures.type_aliases import (
    EventCount,
    InterfaceId,
    IPv4Int,
    JsonDict,
    Metric,
    PrefixLength,
    UpdateId,
)

from .config import RouterConfig
from .formatting import (
    format_cidr,
    format_forwarding_change,
    format_route_change,
)
from .route_table import RouteRecord, RouteTable


class UpdateOutcome(str, Enum):
    """Which branch a routing update took."""

    LEARNED = "learned"
    IGNORED = "ignored"
    NEIGHBOR_LOST = "neighbor_lost"
    FAILED_OVER = "failed_over"
    WITHDRAWN = "withdrawn"
    BEST_PATH_UPDATED = "best_path_updated"
    IMPROVED = "improved"
    TIE_ADOPTED = "tie_adopted"
    SILENT = "silent"


@dataclass(frozen=True, slots=True)
class RouteChange:
    """The ``A`` half of an advertisement."""

    prefix: IPv4Int
    length: PrefixLength
    metric: Metric
    update_id: UpdateId

    def format(self) -> str:
        return format_route_change(self.prefix, self.length, self.metric, self.update_id)


@dataclass(frozen=True, slots=True)
class ForwardingTableChange:
    """The ``T`` half of an advertisement."""

    prefix: IPv4Int
    length: PrefixLength
    interface: InterfaceId

    def format(self) -> str:
        return format_forwarding_change(self.prefix, self.length, self.interface)


@dataclass(frozen=True, slots=True)
class Advertisement:
    """A change of this router's best route for a prefix."""

    prefix: IPv4Int
    length: PrefixLength
    interface: InterfaceId
    metric: Metric
    update_id: UpdateId

    @property
    def is_withdrawal(self) -> bool:
        return self.interface == NO_INTERFACE

    @property
    def route_change(self) -> RouteChange:
        return RouteChange(
            prefix=self.prefix,
            length=self.length,
            metric=self.metric,
            update_id=self.update_id,
        )

    @property
    def forwarding_change(self) -> ForwardingTableChange:
        return ForwardingTableChange(
            prefix=self.prefix, length=self.length, interface=self.interface
        )

    def lines(self) -> tuple[str, str]:
        return (self.route_change.format(), self.forwarding_change.format())

    def format(self) -> str:
        return "\n".join(self.lines())

    @classmethod
    def for_record(cls, record: RouteRecord, update_id: UpdateId) -> Advertisement:
        return cls(
            prefix=record.prefix,
            length=record.length,
            interface=record.best_interface,
            metric=record.best_metric,
            update_id=update_id,
        )


@dataclass(slots=True)
class DistanceVectorStats:
    """Counters for routing update processing."""

    updates_processed: EventCount = 0
    advertisements_emitted: EventCount = 0
    withdrawals_emitted: EventCount = 0
    routes_learned: EventCount = 0
    routes_deleted: EventCount = 0
    silent_updates: EventCount = 0
    outcomes: dict[str, EventCount] = field(default_factory=dict)

    def record(
        self, outcome: UpdateOutcome, advertisement: Advertisement | None
    ) -> None:
        self.updates_processed += 1
        self.outcomes[outcome.value] = self.outcomes.get(outcome.value, 0) + 1
        if outcome is UpdateOutcome.LEARNED:
            self.routes_learned += 1
        elif outcome is UpdateOutcome.WITHDRAWN:
            self.routes_deleted += 1
        if advertisement is None:
            self.silent_updates += 1
        else:
            self.advertisements_emitted += 1
            if advertisement.is_withdrawal:
                self.withdrawals_emitted += 1

    def to_dict(self) -> JsonDict:
        return {
            "updates_processed": self.updates_processed,
            "advertisements_emitted": self.advertisements_emitted,
            "withdrawals_emitted": self.withdrawals_emitted,
            "routes_learned": self.routes_learned,
            "routes_deleted": self.routes_deleted,
            "silent_updates": self.silent_updates,
            "outcomes": dict(self.outcomes),
        }


@dataclass(slots=True)
class DistanceVectorProcessor:
    """Apply routing updates to a RouteTable and decide what to advertise."""

    table: RouteTable
    stats: DistanceVectorStats = field(default_factory=DistanceVectorStats)

    @property
    def config(self) -> RouterConfig:
        return self.table.config

    def process_update(
        self,
        prefix: IPv4Int,
        length: PrefixLength,
        interface: InterfaceId,
        metric: Metric,
        update_id: UpdateId,
    ) -> Advertisement | None:
        """
        Apply one routing update.

        Args:
            prefix: Subnet address; bits beyond ``length`` are ignored
            length: Prefix length (0..32)
            interface: Interface the update arrived on
            metric: Metric reported by the neighbor, excluding the link to it
            update_id: Identifier echoed in any resulting advertisement

        Returns:
            The advertisement to send, or None if the best route is unchanged
        """
        address = mask_address(prefix, length)
        self.config.validate_interface(interface)
        cost = self.config.saturating_cost(metric)

        outcome, advertisement = self._apply(
            address, length, interface, metric, cost, update_id
        )
        self.stats.record(outcome, advertisement)
        logger.debug(
            "Routing update {} prefix={} interface={} cost={} outcome={}",
            update_id,
            format_cidr(address, length),
            interface,
            cost,
            outcome.value,
        )
        return advertisement

    def _apply(
        self,
        address: IPv4Int,
        length: PrefixLength,
        interface: InterfaceId,
        metric: Metric,
        cost: Metric,
        update_id: UpdateId,
    ) -> tuple[UpdateOutcome, Advertisement | None]:
        unreachable = self.config.is_unreachable(cost)
        record = self.table.find(address, length)

        if record is None:
            if unreachable:
                return UpdateOutcome.IGNORED, None
            record = self.table.insert(address, length, interface, metric)
            return UpdateOutcome.LEARNED, Advertisement.for_record(record, update_id)

        if unreachable:
            record.neighbor_metrics[interface] = self.config.metric_unreachable
            if interface != record.best_interface:
                return UpdateOutcome.NEIGHBOR_LOST, None
            if self.table.recompute_best(record):
                self.table.remove(record)
                return UpdateOutcome.WITHDRAWN, Advertisement(
                    prefix=address,
                    length=length,
                    interface=NO_INTERFACE,
                    metric=self.config.metric_unreachable,
                    update_id=update_id,
                )
            return UpdateOutcome.FAILED_OVER, Advertisement.for_record(
                record, update_id
            )

        record.neighbor_metrics[interface] = cost

        if interface == record.best_interface and cost >= record.best_metric:
            self.table.recompute_best(record)
            return UpdateOutcome.BEST_PATH_UPDATED, Advertisement.for_record(
                record, update_id
            )

        if cost < record.best_metric:
            self.table.recompute_best(record)
            return UpdateOutcome.IMPROVED, Advertisement.for_record(record, update_id)

        if cost == record.best_metric and interface < record.best_interface:
            record.best_interface = interface
            return UpdateOutcome.TIE_ADOPTED, Advertisement.for_record(
                record, update_id
            )

        return UpdateOutcome.SILENT, None
