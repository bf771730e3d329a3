"""Literal text formats produced by the routers.

External tooling keys on these lines, so they must stay byte-for-byte stable.
"""

from __future__ import annotations

from routesim.datastructures.prefix import format_address
from routesim.datastructures.type_aliases import (
    InterfaceId,
    IPv4Int,
    Metric,
    PacketId,
    PrefixLength,
    UpdateId,
)


def format_cidr(prefix: IPv4Int, length: PrefixLength) -> str:
    return f"{format_address(prefix)}/{length}"


def format_forwarding_decision(packet_id: PacketId, interface: InterfaceId) -> str:
    return f"O {packet_id} {interface}"


def format_forwarding_table_entry(
    prefix: IPv4Int, length: PrefixLength, interface: InterfaceId
) -> str:
    return f"{format_cidr(prefix, length)} {interface}"


def format_route_change(
    prefix: IPv4Int, length: PrefixLength, metric: Metric, update_id: UpdateId
) -> str:
    return f"A {format_cidr(prefix, length)} {metric} {update_id}"


def format_forwarding_change(
    prefix: IPv4Int, length: PrefixLength, interface: InterfaceId
) -> str:
    return f"T {format_cidr(prefix, length)} {interface}"


def format_route_table_entry(
    prefix: IPv4Int,
    length: PrefixLength,
    interface: InterfaceId,
    metric: Metric,
) -> str:
    return f"{format_cidr(prefix, length)} {interface} {metric}"
