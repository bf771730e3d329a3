"""Packet forwarding over a longest-prefix-match trie."""

from __future__ import annotations

from dataclasses import dataclass, field

from loguru import logger

from routesim.datastructures.prefix import NO_INTERFACE, format_address
from routesim.datastructures.prefix_trie import PrefixTrie
from routesim.datastructures.type_aliases import (
    EventCount,
    InterfaceId,
    IPv4Int,
    JsonDict,
    PacketId,
)

from .formatting import format_forwarding_decision


@dataclass(frozen=True, slots=True)
class ForwardingDecision:
    """Where a packet goes; NO_INTERFACE means broadcast."""

    packet_id: PacketId
    interface: InterfaceId

    @property
    def is_broadcast(self) -> bool:
        return self.interface == NO_INTERFACE

    def format(self) -> str:
        return format_forwarding_decision(self.packet_id, self.interface)


@dataclass(slots=True)
class ForwardingStats:
    """Counters for forwarded packets."""

    packets_forwarded: EventCount = 0
    packets_broadcast: EventCount = 0

    def to_dict(self) -> JsonDict:
        return {
            "packets_forwarded": self.packets_forwarded,
            "packets_broadcast": self.packets_broadcast,
        }


@dataclass(slots=True)
class ForwardingEngine:
    """Resolve destinations against the forwarding trie. Never mutates it."""

    trie: PrefixTrie
    stats: ForwardingStats = field(default_factory=ForwardingStats)

    def forward(self, address: IPv4Int, packet_id: PacketId) -> ForwardingDecision:
        interface = self.trie.lookup(address)
        self.stats.packets_forwarded += 1
        if interface == NO_INTERFACE:
            self.stats.packets_broadcast += 1
            logger.debug(
                "Packet {} to {} has no matching rule, broadcasting",
                packet_id,
                format_address(address),
            )
        return ForwardingDecision(packet_id=packet_id, interface=interface)
