import pytest
from loguru import logger

from routesim.core.config import RouterConfig
from routesim.core.distance_vector import DistanceVectorProcessor
from routesim.core.logging import configure_logging, known_scopes, resolve_scope
from routesim.core.route_table import RouteTable
from routesim.errors import ConfigurationError


def test_known_scopes_are_routesim_modules() -> None:
    scopes = known_scopes()

    assert "routesim" in scopes
    assert "routesim.core" in scopes
    assert "routesim.core.distance_vector" in scopes
    assert "routesim.datastructures.prefix_trie" in scopes


@pytest.mark.parametrize(
    ("scope", "expected"),
    [
        ("core.distance_vector", "routesim.core.distance_vector"),
        ("routesim.core.route_table", "routesim.core.route_table"),
        ("datastructures", "routesim.datastructures"),
        (" core ", "routesim.core"),
    ],
)
def test_resolve_scope(scope: str, expected: str) -> None:
    assert resolve_scope(scope) == expected


@pytest.mark.parametrize("scope", ["core.nope", "fabric", "routesim.cache"])
def test_unknown_scope_rejected(scope: str) -> None:
    with pytest.raises(ConfigurationError):
        resolve_scope(scope)


def test_level_comes_from_config(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging(RouterConfig(log_level="INFO"))
    logger.debug("hidden debug line")
    logger.info("shown info line")

    err = capsys.readouterr().err
    assert "shown info line" in err
    assert "hidden debug line" not in err


def test_debug_scope_only_opens_named_module(
    capsys: pytest.CaptureFixture[str],
) -> None:
    config = RouterConfig(num_nics=2, log_level="WARNING")
    configure_logging(config, debug_scopes=["core.distance_vector"])
    processor = DistanceVectorProcessor(table=RouteTable(config=config))

    processor.process_update(0x0A000000, 8, 0, 1, 7)

    err = capsys.readouterr().err
    assert "Routing update 7" in err
    assert "Route record inserted" not in err


def test_nothing_written_to_stdout(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging(RouterConfig(log_level="DEBUG"))
    logger.debug("debug line")

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "debug line" in captured.err
