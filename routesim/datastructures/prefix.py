"""
IPv4 prefix value type and helpers.

Addresses are carried as 32-bit unsigned ints, most-significant bit first.
Only the ``length`` leading bits of a prefix are significant; ``mask_address``
produces the canonical form every table operation works on.
"""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass

from routesim.errors import (
    InvalidAddressError,
    InvalidInterfaceError,
    InvalidPrefixLengthError,
)

from .type_aliases import (
    DottedQuad,
    InterfaceCount,
    InterfaceId,
    IPv4Int,
    PrefixLength,
)

ADDRESS_BITS: PrefixLength = 32
MAX_ADDRESS: IPv4Int = (1 << ADDRESS_BITS) - 1

# Interface id meaning "no rule" on input and "broadcast/withdrawn" on output
NO_INTERFACE: InterfaceId = -1


def validate_prefix_length(length: PrefixLength) -> PrefixLength:
    """Reject prefix lengths outside 0..32 instead of truncating them."""
    if isinstance(length, bool) or not isinstance(length, int):
        raise InvalidPrefixLengthError(f"Prefix length must be an int: {length!r}")
    if length < 0 or length > ADDRESS_BITS:
        raise InvalidPrefixLengthError(
            f"Prefix length {length} outside 0..{ADDRESS_BITS}"
        )
    return length


def validate_address(address: IPv4Int) -> IPv4Int:
    if isinstance(address, bool) or not isinstance(address, int):
        raise InvalidAddressError(f"Address must be an int: {address!r}")
    if address < 0 or address > MAX_ADDRESS:
        raise InvalidAddressError(f"Address {address} outside 32-bit range")
    return address


def validate_interface(
    interface: InterfaceId, num_nics: InterfaceCount, *, allow_none: bool = False
) -> InterfaceId:
    """Reject interfaces outside 0..num_nics-1; NO_INTERFACE only if allowed."""
    if isinstance(interface, bool) or not isinstance(interface, int):
        raise InvalidInterfaceError(f"Interface must be an int: {interface!r}")
    if allow_none and interface == NO_INTERFACE:
        return interface
    if not 0 <= interface < num_nics:
        raise InvalidInterfaceError(f"Interface {interface} outside 0..{num_nics - 1}")
    return interface


def netmask(length: PrefixLength) -> IPv4Int:
    """Mask with ``length`` leading one bits."""
    if length == 0:
        return 0
    return (MAX_ADDRESS << (ADDRESS_BITS - length)) & MAX_ADDRESS


def mask_address(address: IPv4Int, length: PrefixLength) -> IPv4Int:
    """Clear every bit of ``address`` beyond the first ``length`` bits."""
    validate_address(address)
    validate_prefix_length(length)
    return address & netmask(length)


def format_address(address: IPv4Int) -> DottedQuad:
    return str(ipaddress.IPv4Address(validate_address(address)))


def parse_address(text: str) -> IPv4Int:
    try:
        return int(ipaddress.IPv4Address(text.strip()))
    except ipaddress.AddressValueError as e:
        raise InvalidAddressError(f"Invalid IPv4 address {text!r}: {e}") from e


def parse_prefix(text: str) -> Prefix:
    """Parse ``a.b.c.d/len``; host bits are allowed and masked away."""
    address_text, separator, length_text = text.strip().partition("/")
    if not separator:
        raise InvalidPrefixLengthError(f"Missing prefix length in {text!r}")
    try:
        length = int(length_text)
    except ValueError as e:
        raise InvalidPrefixLengthError(
            f"Invalid prefix length in {text!r}"
        ) from e
    return Prefix.of(parse_address(address_text), length)


@dataclass(frozen=True, slots=True)
class Prefix:
    """Canonical IPv4 prefix (address already masked to ``length`` bits)."""

    address: IPv4Int
    length: PrefixLength

    def __post_init__(self) -> None:
        validate_prefix_length(self.length)
        if mask_address(self.address, self.length) != self.address:
            raise InvalidAddressError(
                f"Prefix address {format_address(self.address)} has bits set "
                f"beyond /{self.length}; use Prefix.of() to mask"
            )

    @classmethod
    def of(cls, address: IPv4Int, length: PrefixLength) -> Prefix:
        return cls(address=mask_address(address, length), length=length)

    def contains(self, address: IPv4Int) -> bool:
        return mask_address(address, self.length) == self.address

    def bits(self) -> tuple[int, ...]:
        """Significant bits, most-significant first."""
        return tuple(
            (self.address >> (ADDRESS_BITS - 1 - depth)) & 1
            for depth in range(self.length)
        )

    def __str__(self) -> str:
        return f"{format_address(self.address)}/{self.length}"
