"""
Semantic type aliases for routesim datastructures.

This module provides meaningful type aliases that make the codebase more
self-documenting by replacing raw ints with names that say what the value
represents on the wire or in the table.
"""

from typing import Any

# Address and prefix types
type IPv4Int = int  # 32-bit unsigned address, most-significant bit first
type PrefixLength = int  # Number of significant leading bits (0..32)
type DottedQuad = str  # "a.b.c.d"

# Interface types
type InterfaceId = int  # 0..num_nics-1, or NO_INTERFACE
type InterfaceCount = int

# Routing types
type Metric = int
type MetricVector = list[Metric]

# Event identifiers
type PacketId = int
type UpdateId = int
type LineNumber = int

# Statistics types
type NodeCount = int
type RuleCount = int
type TrieDepth = int
type EventCount = int

# Serialization types
type JsonDict = dict[str, Any]
