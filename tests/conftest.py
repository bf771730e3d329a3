"""Pytest configuration and shared fixtures for routesim tests.

Fixtures hand out fresh router state for every test and make sure loguru
sinks installed by the CLI do not leak into later tests.
"""

from collections.abc import Generator

import pytest
from loguru import logger

from routesim.core.config import RouterConfig
from routesim.core.distance_vector import DistanceVectorProcessor
from routesim.core.route_table import RouteTable
from routesim.core.router import DistanceVectorRouter, ForwardingRouter
from routesim.datastructures.prefix_trie import PrefixTrie

# RIP-style infinity keeps withdrawal lines readable in assertions
RIP_INFINITY = 16


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    yield
    logger.remove()


@pytest.fixture
def config() -> RouterConfig:
    return RouterConfig(num_nics=4)


@pytest.fixture
def rip_config() -> RouterConfig:
    return RouterConfig(num_nics=4, metric_unreachable=RIP_INFINITY)


@pytest.fixture
def trie(config: RouterConfig) -> PrefixTrie:
    return PrefixTrie(num_nics=config.num_nics)


@pytest.fixture
def route_table(rip_config: RouterConfig) -> RouteTable:
    return RouteTable(config=rip_config)


@pytest.fixture
def processor(route_table: RouteTable) -> DistanceVectorProcessor:
    return DistanceVectorProcessor(table=route_table)


@pytest.fixture
def forwarding_router(
    config: RouterConfig,
) -> Generator[ForwardingRouter, None, None]:
    with ForwardingRouter(config) as router:
        yield router


@pytest.fixture
def dv_router(
    rip_config: RouterConfig,
) -> Generator[DistanceVectorRouter, None, None]:
    with DistanceVectorRouter(rip_config) as router:
        yield router
