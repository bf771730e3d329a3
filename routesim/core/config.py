"""Router settings and the metric arithmetic both routers share."""

from dataclasses import dataclass

from routesim.datastructures.prefix import validate_interface
from routesim.datastructures.type_aliases import InterfaceCount, InterfaceId, Metric
from routesim.errors import ConfigurationError, InvalidMetricError

# Largest unsigned 32-bit metric; any finite metric plus one saturates here
DEFAULT_METRIC_UNREACHABLE: Metric = 0xFFFFFFFF
DEFAULT_NUM_NICS: InterfaceCount = 4


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Router construction settings shared by both simulated routers."""

    num_nics: InterfaceCount = DEFAULT_NUM_NICS
    metric_unreachable: Metric = DEFAULT_METRIC_UNREACHABLE
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.num_nics < 1:
            raise ConfigurationError(
                f"num_nics must be a positive integer, got {self.num_nics}"
            )
        if self.metric_unreachable < 1:
            raise ConfigurationError(
                f"metric_unreachable must be positive, got {self.metric_unreachable}"
            )

    def validate_interface(
        self, interface: InterfaceId, *, allow_none: bool = False
    ) -> InterfaceId:
        """Fail fast on interfaces outside 0..num_nics-1."""
        return validate_interface(interface, self.num_nics, allow_none=allow_none)

    def saturating_cost(self, metric: Metric) -> Metric:
        """Cost through a neighbor (metric + 1), clamped to the sentinel."""
        if isinstance(metric, bool) or not isinstance(metric, int) or metric < 0:
            raise InvalidMetricError(f"Metric must be a non-negative int: {metric!r}")
        return min(metric + 1, self.metric_unreachable)

    def is_unreachable(self, metric: Metric) -> bool:
        return metric >= self.metric_unreachable
