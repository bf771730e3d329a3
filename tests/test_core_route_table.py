import pytest

from routesim.core.route_table import RouteTable
from routesim.datastructures.prefix import NO_INTERFACE, format_address, parse_prefix
from routesim.errors import (
    DuplicateRouteError,
    InvalidInterfaceError,
    InvalidMetricError,
    InvalidPrefixLengthError,
)

# Matches the rip_config fixture
RIP_INFINITY = 16


def _insert(table: RouteTable, cidr: str, interface: int = 0, metric: int = 1):
    prefix = parse_prefix(cidr)
    return table.insert(prefix.address, prefix.length, interface, metric)


def _order(table: RouteTable) -> list[str]:
    return [f"{format_address(r.prefix)}/{r.length}" for r in table]


def test_insert_initializes_neighbor_vector(route_table: RouteTable) -> None:
    record = _insert(route_table, "10.0.0.0/8", interface=2, metric=2)

    assert record.neighbor_metrics == [RIP_INFINITY, RIP_INFINITY, 3, RIP_INFINITY]
    assert record.best_interface == 2
    assert record.best_metric == 3
    assert len(route_table) == 1


def test_find_is_exact_match(route_table: RouteTable) -> None:
    record = _insert(route_table, "10.0.0.0/8")
    ten = parse_prefix("10.0.0.0/8").address

    assert route_table.find(ten, 8) is record
    assert route_table.find(ten, 16) is None
    assert route_table.find(parse_prefix("11.0.0.0/8").address, 8) is None
    # Host bits beyond the prefix length are ignored
    assert route_table.find(ten | 0xFF, 8) is record


def test_insert_ordering_rule(route_table: RouteTable) -> None:
    _insert(route_table, "10.0.0.0/8")
    # 10.0.0.0 <= 10.1.0.0 and 8 < 16, so it goes in front
    _insert(route_table, "10.1.0.0/16")
    # No record has a smaller-or-equal prefix with a shorter length
    _insert(route_table, "9.0.0.0/24")
    _insert(route_table, "11.0.0.0/8")
    _insert(route_table, "12.0.0.0/30")

    assert _order(route_table) == [
        "12.0.0.0/30",
        "10.1.0.0/16",
        "10.0.0.0/8",
        "9.0.0.0/24",
        "11.0.0.0/8",
    ]


def test_recompute_best_prefers_lowest_interface(route_table: RouteTable) -> None:
    record = _insert(route_table, "10.0.0.0/8", interface=3, metric=4)
    record.neighbor_metrics = [RIP_INFINITY, 5, 5, 5]

    assert route_table.recompute_best(record) is False
    assert record.best_interface == 1
    assert record.best_metric == 5


def test_recompute_best_reports_unreachable(route_table: RouteTable) -> None:
    record = _insert(route_table, "10.0.0.0/8", interface=0)
    record.neighbor_metrics[0] = RIP_INFINITY

    assert route_table.recompute_best(record) is True
    assert record.best_interface == NO_INTERFACE
    assert record.best_metric == RIP_INFINITY


def test_remove_by_identity(route_table: RouteTable) -> None:
    first = _insert(route_table, "10.0.0.0/8")
    second = _insert(route_table, "11.0.0.0/8")

    assert route_table.remove(first) is True
    assert route_table.remove(first) is False
    assert list(route_table) == [second]


def test_insert_duplicate_rejected(route_table: RouteTable) -> None:
    _insert(route_table, "10.0.0.0/8")
    with pytest.raises(DuplicateRouteError):
        _insert(route_table, "10.0.0.0/8", interface=1)


def test_insert_unreachable_rejected(route_table: RouteTable) -> None:
    with pytest.raises(InvalidMetricError):
        _insert(route_table, "10.0.0.0/8", metric=RIP_INFINITY - 1)
    with pytest.raises(InvalidMetricError):
        _insert(route_table, "10.0.0.0/8", metric=-1)
    assert len(route_table) == 0


def test_insert_validates_interface_and_length(route_table: RouteTable) -> None:
    with pytest.raises(InvalidInterfaceError):
        _insert(route_table, "10.0.0.0/8", interface=4)
    with pytest.raises(InvalidInterfaceError):
        _insert(route_table, "10.0.0.0/8", interface=NO_INTERFACE)
    with pytest.raises(InvalidPrefixLengthError):
        route_table.insert(0, 33, 0, 1)


def test_snapshot_and_clear(route_table: RouteTable) -> None:
    _insert(route_table, "192.168.1.0/24", interface=1, metric=0)

    assert route_table.snapshot() == [
        {
            "prefix": "192.168.1.0/24",
            "best_interface": 1,
            "best_metric": 1,
            "neighbor_metrics": [RIP_INFINITY, 1, RIP_INFINITY, RIP_INFINITY],
        }
    ]

    route_table.clear()
    assert len(route_table) == 0
    assert route_table.snapshot() == []
