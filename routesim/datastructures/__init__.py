"""
routesim datastructures.

Key datastructures:
- Prefix: canonical IPv4 prefix value with masking and dotted-quad helpers
- PrefixTrie: binary trie for longest-prefix-match forwarding tables
"""

from __future__ import annotations

from .prefix import (
    ADDRESS_BITS,
    MAX_ADDRESS,
    NO_INTERFACE,
    Prefix,
    format_address,
    mask_address,
    parse_address,
    parse_prefix,
    validate_address,
    validate_interface,
    validate_prefix_length,
)
from .prefix_trie import (
    ForwardingRule,
    PrefixTrie,
    PrefixTrieNode,
    PrefixTrieStatistics,
)

__all__ = [
    "ADDRESS_BITS",
    "MAX_ADDRESS",
    "NO_INTERFACE",
    "Prefix",
    "format_address",
    "mask_address",
    "parse_address",
    "parse_prefix",
    "validate_address",
    "validate_interface",
    "validate_prefix_length",
    "ForwardingRule",
    "PrefixTrie",
    "PrefixTrieNode",
    "PrefixTrieStatistics",
]
