"""
Binary prefix trie for longest-prefix-match forwarding tables.

Each node sits at the depth equal to the number of address bits consumed to
reach it, so a node's prefix length is its depth and deeper nodes are always
more specific. Lookup therefore only has to remember the last rule seen on
the way down.

Withdrawing a prefix clears the rule but keeps the node. Placeholder nodes
are never pruned, so re-inserting a withdrawn prefix reuses the existing path.

Examples:
    >>> trie = PrefixTrie(num_nics=4)
    >>> trie.set(0x0A000000, 8, 0)
    True
    >>> trie.set(0x0A000000, 16, 1)
    True
    >>> trie.lookup(0x0A000505)
    1
    >>> [str(rule) for rule in trie]
    ['10.0.0.0/8 0', '10.0.0.0/16 1']
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from loguru import logger

from .prefix import (
    ADDRESS_BITS,
    NO_INTERFACE,
    format_address,
    mask_address,
    validate_address,
    validate_interface,
)
from .type_aliases import (
    InterfaceCount,
    InterfaceId,
    IPv4Int,
    JsonDict,
    NodeCount,
    PrefixLength,
    RuleCount,
    TrieDepth,
)


def _bit_at(address: IPv4Int, depth: TrieDepth) -> int:
    """Bit of ``address`` consumed when descending from ``depth``."""
    return (address >> (ADDRESS_BITS - 1 - depth)) & 1


@dataclass(frozen=True, slots=True)
class ForwardingRule:
    """An active forwarding table entry."""

    prefix: IPv4Int
    length: PrefixLength
    interface: InterfaceId

    def as_tuple(self) -> tuple[IPv4Int, PrefixLength, InterfaceId]:
        return (self.prefix, self.length, self.interface)

    def __str__(self) -> str:
        return f"{format_address(self.prefix)}/{self.length} {self.interface}"


@dataclass(slots=True)
class PrefixTrieNode:
    """A node of the prefix trie; a node without a rule is a placeholder."""

    zero: PrefixTrieNode | None = None
    one: PrefixTrieNode | None = None
    rule: ForwardingRule | None = None

    def child(self, bit: int) -> PrefixTrieNode | None:
        return self.one if bit else self.zero

    def attach(self, bit: int, node: PrefixTrieNode) -> PrefixTrieNode:
        if bit:
            self.one = node
        else:
            self.zero = node
        return node

    @property
    def is_placeholder(self) -> bool:
        return self.rule is None


@dataclass(frozen=True, slots=True)
class PrefixTrieStatistics:
    """Shape of the trie at a point in time."""

    total_nodes: NodeCount
    placeholder_nodes: NodeCount
    active_rules: RuleCount
    max_depth: TrieDepth

    def to_dict(self) -> JsonDict:
        return {
            "total_nodes": self.total_nodes,
            "placeholder_nodes": self.placeholder_nodes,
            "active_rules": self.active_rules,
            "max_depth": self.max_depth,
        }


@dataclass(slots=True)
class PrefixTrie:
    """
    Longest-prefix-match table keyed by the bits of an IPv4 address.

    Not thread-safe: the owning router serializes access.
    """

    num_nics: InterfaceCount
    root: PrefixTrieNode = field(default_factory=PrefixTrieNode)

    def set(
        self, prefix: IPv4Int, length: PrefixLength, interface: InterfaceId
    ) -> bool:
        """
        Insert, update or withdraw the rule for ``prefix/length``.

        Args:
            prefix: Network address; bits beyond ``length`` are ignored
            length: Prefix length (0..32)
            interface: Outgoing interface, or NO_INTERFACE to withdraw

        Returns:
            True if the table changed, False for a no-op
        """
        address = mask_address(prefix, length)
        validate_interface(interface, self.num_nics, allow_none=True)

        current = self.root
        depth = 0
        while depth < length:
            next_node = current.child(_bit_at(address, depth))
            if next_node is None:
                break
            current = next_node
            depth += 1

        if depth == length:
            if interface == NO_INTERFACE:
                if current.rule is None:
                    return False
                logger.debug(
                    "Forwarding rule withdrawn prefix={}/{} interface={}",
                    format_address(address),
                    length,
                    current.rule.interface,
                )
                current.rule = None
                return True
            rule = ForwardingRule(prefix=address, length=length, interface=interface)
            if current.rule == rule:
                return False
            current.rule = rule
            logger.debug("Forwarding rule set {}", rule)
            return True

        # Nothing to withdraw below a missing branch
        if interface == NO_INTERFACE:
            return False

        while depth < length:
            current = current.attach(_bit_at(address, depth), PrefixTrieNode())
            depth += 1
        current.rule = ForwardingRule(prefix=address, length=length, interface=interface)
        logger.debug("Forwarding rule added {}", current.rule)
        return True

    def withdraw(self, prefix: IPv4Int, length: PrefixLength) -> bool:
        return self.set(prefix, length, NO_INTERFACE)

    def lookup_rule(self, address: IPv4Int) -> ForwardingRule | None:
        """Most specific rule matching ``address``, if any."""
        validate_address(address)
        best: ForwardingRule | None = None
        node: PrefixTrieNode | None = self.root
        depth = 0
        while node is not None:
            if node.rule is not None:
                best = node.rule
            if depth == ADDRESS_BITS:
                break
            node = node.child(_bit_at(address, depth))
            depth += 1
        return best

    def lookup(self, address: IPv4Int) -> InterfaceId:
        """Interface of the longest matching prefix, or NO_INTERFACE."""
        rule = self.lookup_rule(address)
        return rule.interface if rule is not None else NO_INTERFACE

    def enumerate_rules(self) -> Iterator[ForwardingRule]:
        """
        Yield active rules in pre-order, zero subtree before one subtree.

        Shorter prefixes come before their own sub-prefixes. This is not a
        numeric sort of the addresses.
        """
        stack: list[PrefixTrieNode] = [self.root]
        while stack:
            node = stack.pop()
            if node.rule is not None:
                yield node.rule
            if node.one is not None:
                stack.append(node.one)
            if node.zero is not None:
                stack.append(node.zero)

    def __iter__(self) -> Iterator[ForwardingRule]:
        return self.enumerate_rules()

    def get_statistics(self) -> PrefixTrieStatistics:
        total = 0
        placeholders = 0
        max_depth = 0
        stack: list[tuple[PrefixTrieNode, TrieDepth]] = [(self.root, 0)]
        while stack:
            node, depth = stack.pop()
            total += 1
            if node.is_placeholder:
                placeholders += 1
            max_depth = max(max_depth, depth)
            for child in (node.zero, node.one):
                if child is not None:
                    stack.append((child, depth + 1))
        return PrefixTrieStatistics(
            total_nodes=total,
            placeholder_nodes=placeholders,
            active_rules=total - placeholders,
            max_depth=max_depth,
        )

    def clear(self) -> None:
        """Drop every node and start again from an empty root."""
        self.root = PrefixTrieNode()
