"""
Logging setup for the routesim CLI.

Logs go to stderr so stdout stays reserved for router output lines. A debug
scope names a routesim module or subpackage (``core.distance_vector``,
``datastructures``) whose DEBUG lines are shown even when the router runs at
a quieter level.
"""

from __future__ import annotations

import pkgutil
import sys
from collections.abc import Iterable

from loguru import logger

import routesim
from routesim.errors import ConfigurationError

from .config import RouterConfig

LOG_FORMAT = "{time:HH:mm:ss.SSS} | {level: <8} | {name}:{line} - {message}"


def known_scopes() -> frozenset[str]:
    """Fully qualified names of every routesim module and subpackage."""
    names = {routesim.__name__}
    for module in pkgutil.walk_packages(routesim.__path__, f"{routesim.__name__}."):
        names.add(module.name)
    return frozenset(names)


def resolve_scope(scope: str) -> str:
    """Qualify ``scope`` with the package name and check that it exists."""
    name = scope.strip()
    if not name.startswith(f"{routesim.__name__}.") and name != routesim.__name__:
        name = f"{routesim.__name__}.{name}"
    if name not in known_scopes():
        raise ConfigurationError(f"Unknown logging scope {scope!r}")
    return name


def configure_logging(
    config: RouterConfig,
    *,
    debug_scopes: Iterable[str] = (),
    colorize: bool = False,
) -> int:
    """Install a single stderr sink at ``config.log_level``.

    Returns the loguru handler id.
    """
    level = config.log_level.upper()
    levels: dict[str, str] = {"": level}
    for scope in debug_scopes:
        if scope.strip():
            levels[resolve_scope(scope)] = "DEBUG"

    logger.remove()
    return logger.add(
        sys.stderr,
        level="DEBUG" if len(levels) > 1 else level,
        format=LOG_FORMAT,
        colorize=colorize,
        filter=levels,
    )
