"""Exception hierarchy for routesim.

Caller errors (bad prefix lengths, interfaces, addresses) fail fast with a
``ValueError`` subclass so they can never silently corrupt a table. Absent
entries are not errors and are reported through return values instead.
"""

from __future__ import annotations


class RoutingError(Exception):
    """Base exception for routesim errors."""

    pass


class ConfigurationError(RoutingError, ValueError):
    """Raised when router configuration is invalid."""

    pass


class InvalidPrefixLengthError(RoutingError, ValueError):
    """Raised when a prefix length falls outside 0..32."""

    pass


class InvalidInterfaceError(RoutingError, ValueError):
    """Raised when an interface index is outside the configured range."""

    pass


class InvalidAddressError(RoutingError, ValueError):
    """Raised for addresses or metrics that cannot be represented."""

    pass


class RouterStateError(RoutingError, RuntimeError):
    """Raised when a router is used before initialize() or after teardown()."""

    pass


class CommandParseError(RoutingError):
    """A line of an event script could not be parsed."""

    def __init__(self, line_number: int, line: str, reason: str) -> None:
        self.line_number = line_number
        self.line = line
        self.reason = reason
        super().__init__(f"line {line_number}: {reason}: {line!r}")


class InvalidMetricError(RoutingError, ValueError):
    """Raised for negative or non-integer routing metrics."""

    pass


class DuplicateRouteError(RoutingError, ValueError):
    """Raised when inserting a route that is already in the table."""

    pass
