"""Router engines, state objects and the event-script driver."""

from .config import DEFAULT_METRIC_UNREACHABLE, DEFAULT_NUM_NICS, RouterConfig
from .distance_vector import (
    Advertisement,
    DistanceVectorProcessor,
    DistanceVectorStats,
    ForwardingTableChange,
    RouteChange,
    UpdateOutcome,
)
from .forwarding import ForwardingDecision, ForwardingEngine, ForwardingStats
from .route_table import RouteRecord, RouteTable
from .router import DistanceVectorRouter, ForwardingRouter

__all__ = [
    "DEFAULT_METRIC_UNREACHABLE",
    "DEFAULT_NUM_NICS",
    "RouterConfig",
    "Advertisement",
    "DistanceVectorProcessor",
    "DistanceVectorStats",
    "ForwardingTableChange",
    "RouteChange",
    "UpdateOutcome",
    "ForwardingDecision",
    "ForwardingEngine",
    "ForwardingStats",
    "RouteRecord",
    "RouteTable",
    "DistanceVectorRouter",
    "ForwardingRouter",
]
