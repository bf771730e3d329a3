"""
Line-oriented event scripts for driving the routers.

Forwarding scripts::

    R 10.0.0.0/8 0        set a rule (interface -1 withdraws)
    P 10.0.5.5 1          forward packet 1
    S                     print the forwarding table

Routing scripts::

    U 192.168.1.0/24 0 1 7    update: prefix, interface, metric, update id
    S                         print the route table

Blank lines and ``#`` comments are ignored.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum

from loguru import logger

from routesim.datastructures.prefix import Prefix, parse_address, parse_prefix
from routesim.datastructures.type_aliases import (
    InterfaceId,
    IPv4Int,
    LineNumber,
    Metric,
    PacketId,
    UpdateId,
)
from routesim.errors import CommandParseError, RoutingError

from .formatting import format_forwarding_table_entry
from .router import DistanceVectorRouter, ForwardingRouter


class ScriptMode(str, Enum):
    FORWARDING = "forwarding"
    ROUTING = "routing"


@dataclass(frozen=True, slots=True)
class SetRuleCommand:
    line_number: LineNumber
    line: str
    prefix: Prefix
    interface: InterfaceId


@dataclass(frozen=True, slots=True)
class ForwardPacketCommand:
    line_number: LineNumber
    line: str
    address: IPv4Int
    packet_id: PacketId


@dataclass(frozen=True, slots=True)
class RoutingUpdateCommand:
    line_number: LineNumber
    line: str
    prefix: Prefix
    interface: InterfaceId
    metric: Metric
    update_id: UpdateId


@dataclass(frozen=True, slots=True)
class ShowStateCommand:
    line_number: LineNumber
    line: str


type ScriptCommand = (
    SetRuleCommand | ForwardPacketCommand | RoutingUpdateCommand | ShowStateCommand
)

_EXPECTED_FIELDS: dict[tuple[ScriptMode, str], int] = {
    (ScriptMode.FORWARDING, "R"): 3,
    (ScriptMode.FORWARDING, "P"): 3,
    (ScriptMode.FORWARDING, "S"): 1,
    (ScriptMode.ROUTING, "U"): 5,
    (ScriptMode.ROUTING, "S"): 1,
}


def _parse_int(
    text: str, line_number: LineNumber, line: str, what: str, *, minimum: int = 0
) -> int:
    try:
        value = int(text)
    except ValueError as e:
        raise CommandParseError(line_number, line, f"invalid {what} {text!r}") from e
    if value < minimum:
        raise CommandParseError(line_number, line, f"{what} below {minimum}")
    return value


def parse_line(
    line: str, line_number: LineNumber, mode: ScriptMode
) -> ScriptCommand | None:
    """Parse one script line; returns None for blank and comment lines."""
    content = line.split("#", 1)[0].strip()
    if not content:
        return None

    fields = content.split()
    opcode = fields[0].upper()
    expected = _EXPECTED_FIELDS.get((mode, opcode))
    if expected is None:
        raise CommandParseError(
            line_number, line, f"unknown {mode.value} command {fields[0]!r}"
        )
    if len(fields) != expected:
        raise CommandParseError(
            line_number,
            line,
            f"{opcode} takes {expected - 1} arguments, got {len(fields) - 1}",
        )

    try:
        if opcode == "S":
            return ShowStateCommand(line_number=line_number, line=line)
        if opcode == "R":
            return SetRuleCommand(
                line_number=line_number,
                line=line,
                prefix=parse_prefix(fields[1]),
                interface=_parse_int(
                    fields[2], line_number, line, "interface", minimum=-1
                ),
            )
        if opcode == "P":
            return ForwardPacketCommand(
                line_number=line_number,
                line=line,
                address=parse_address(fields[1]),
                packet_id=_parse_int(fields[2], line_number, line, "packet id"),
            )
        return RoutingUpdateCommand(
            line_number=line_number,
            line=line,
            prefix=parse_prefix(fields[1]),
            interface=_parse_int(fields[2], line_number, line, "interface"),
            metric=_parse_int(fields[3], line_number, line, "metric"),
            update_id=_parse_int(fields[4], line_number, line, "update id"),
        )
    except CommandParseError:
        raise
    except RoutingError as e:
        raise CommandParseError(line_number, line, str(e)) from e


def parse_script(lines: Iterable[str], mode: ScriptMode) -> Iterator[ScriptCommand]:
    for line_number, line in enumerate(lines, start=1):
        command = parse_line(line.rstrip("\n"), line_number, mode)
        if command is not None:
            yield command


def run_forwarding_script(
    router: ForwardingRouter, lines: Iterable[str]
) -> Iterator[str]:
    """Apply a forwarding script, yielding every output line it produces."""
    for command in parse_script(lines, ScriptMode.FORWARDING):
        try:
            if isinstance(command, SetRuleCommand):
                router.set_forwarding_rule(
                    command.prefix.address, command.prefix.length, command.interface
                )
            elif isinstance(command, ForwardPacketCommand):
                yield router.forward(command.address, command.packet_id).format()
            elif isinstance(command, ShowStateCommand):
                for rule in router.enumerate_forwarding_table():
                    yield format_forwarding_table_entry(
                        rule.prefix, rule.length, rule.interface
                    )
        except RoutingError as e:
            raise CommandParseError(command.line_number, command.line, str(e)) from e


def run_routing_script(
    router: DistanceVectorRouter, lines: Iterable[str]
) -> Iterator[str]:
    """Apply a routing script, yielding advertisement and state lines."""
    for command in parse_script(lines, ScriptMode.ROUTING):
        try:
            if isinstance(command, RoutingUpdateCommand):
                advertisement = router.process_routing_update(
                    command.prefix.address,
                    command.prefix.length,
                    command.interface,
                    command.metric,
                    command.update_id,
                )
                if advertisement is not None:
                    yield from advertisement.lines()
            elif isinstance(command, ShowStateCommand):
                for record in router.routes():
                    yield record.format()
        except RoutingError as e:
            raise CommandParseError(command.line_number, command.line, str(e)) from e
    logger.debug("Routing script finished routes={}", len(router.table))
