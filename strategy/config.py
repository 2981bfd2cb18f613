"""
strategy/config.py - Watcher configuration.

Venues, token metadata, RPC endpoints and simulation parameters loaded from
YAML (default: config/watch.yaml).
"""

import os
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Any

import yaml

from config import load_yaml
from core.constants import (
    DEFAULT_CHECK_INTERVAL_SECONDS,
    DEFAULT_DB_PATH,
    DEFAULT_MIN_PRICE,
    DEFAULT_RPC_TIMEOUT_SECONDS,
    RPC_URL_ENV_VAR,
    UINT256_MAX,
    DexType,
)
from core.exceptions import ConfigError, ValidationError
from core.math import safe_decimal, validate_decimals
from core.models import Token, TokenPair


@dataclass
class VenueConfig:
    """One quoting venue (router contract)."""
    venue_id: str
    router: str
    dex_type: DexType = DexType.UNISWAP_V2


@dataclass
class SimulationConfig:
    """Trade size and profit filter."""

    # Base-token input per quote, in raw units (1 WETH = 10**18)
    fixed_trade_size: int

    # Quote-token units
    gas_cost: Decimal = Decimal("0")
    threshold: Decimal = Decimal("0")
    min_price: Decimal = DEFAULT_MIN_PRICE

    check_interval_secs: int = DEFAULT_CHECK_INTERVAL_SECONDS


@dataclass
class WatchConfig:
    """Full watcher configuration."""
    chain_id: int
    rpc_urls: list[str]
    venues: list[VenueConfig]
    pair: TokenPair
    simulation: SimulationConfig
    rpc_timeout_seconds: int = DEFAULT_RPC_TIMEOUT_SECONDS
    db_path: str = DEFAULT_DB_PATH


def _money(value: Any, name: str) -> Decimal:
    """Parse a money value; YAML floats go through str to keep their digits."""
    if isinstance(value, float):
        value = str(value)
    try:
        return safe_decimal(value)
    except ValidationError as e:
        raise ConfigError(f"Invalid {name}: {value!r}", e.details)


def _positive_int(value: Any, name: str, maximum: int | None = None) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigError(f"{name} must be a positive integer", {name: value})
    if maximum is not None and value > maximum:
        raise ConfigError(f"{name} must be <= {maximum}", {name: str(value)})
    return value


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    """Optional mapping section; an empty YAML section parses as None."""
    value = data.get(name)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"{name} must be a mapping", {name: repr(value)})
    return value


def _chain_id(value: Any) -> int:
    if isinstance(value, bool):
        raise ConfigError("chain_id must be an integer", {"chain_id": value})
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigError("chain_id must be an integer", {"chain_id": repr(value)})


def _parse_token(data: Any, role: str) -> Token:
    if not isinstance(data, dict):
        raise ConfigError(f"tokens.{role} must be a mapping")
    try:
        return Token(
            symbol=str(data["symbol"]),
            address=str(data["address"]),
            decimals=validate_decimals(data["decimals"]),
        )
    except KeyError as e:
        raise ConfigError(f"tokens.{role} missing field {e}")
    except ValidationError as e:
        raise ConfigError(f"tokens.{role}: {e.message}", e.details)


def _parse_venues(data: Any) -> list[VenueConfig]:
    if not isinstance(data, list) or len(data) != 2:
        raise ConfigError(
            "Exactly two venues must be configured",
            {"venues": data},
        )

    venues = []
    for entry in data:
        try:
            venue = VenueConfig(
                venue_id=str(entry["id"]),
                router=str(entry["router"]),
                dex_type=DexType(entry.get("type", DexType.UNISWAP_V2.value)),
            )
        except (KeyError, TypeError, AttributeError) as e:
            raise ConfigError(f"Invalid venue entry: {entry!r}", {"error": str(e)})
        except ValueError:
            raise ConfigError(f"Unsupported venue type: {entry.get('type')}")
        venues.append(venue)

    if venues[0].venue_id == venues[1].venue_id:
        raise ConfigError(
            "Venue ids must be distinct",
            {"venue_id": venues[0].venue_id},
        )
    return venues


def _parse_rpc_urls(rpc_data: dict) -> list[str]:
    override = os.getenv(RPC_URL_ENV_VAR, "").strip()
    if override:
        return [url.strip() for url in override.split(",") if url.strip()]

    urls = rpc_data.get("urls", [])
    if isinstance(urls, str):
        urls = [urls]
    return [str(url) for url in urls]


def parse_watch_config(data: dict[str, Any]) -> WatchConfig:
    """
    Build WatchConfig from an already-parsed YAML mapping.

    Raises:
        ConfigError: missing or invalid fields
    """
    tokens = _section(data, "tokens")
    pair = TokenPair(
        base=_parse_token(tokens.get("base"), "base"),
        quote=_parse_token(tokens.get("quote"), "quote"),
    )

    sim_data = _section(data, "simulation")
    trade_size = sim_data.get("fixed_trade_size", 10**pair.base.decimals)
    simulation = SimulationConfig(
        fixed_trade_size=_positive_int(trade_size, "fixed_trade_size", maximum=UINT256_MAX),
        gas_cost=_money(sim_data.get("simulated_gas_cost", "0"), "simulated_gas_cost"),
        threshold=_money(sim_data.get("min_profit_threshold", "0"), "min_profit_threshold"),
        min_price=_money(sim_data.get("min_price", DEFAULT_MIN_PRICE), "min_price"),
        check_interval_secs=_positive_int(
            sim_data.get("check_interval_secs", DEFAULT_CHECK_INTERVAL_SECONDS),
            "check_interval_secs",
        ),
    )
    if simulation.gas_cost < 0:
        raise ConfigError("simulated_gas_cost must be >= 0", {"gas_cost": str(simulation.gas_cost)})
    if simulation.min_price < 0:
        raise ConfigError("min_price must be >= 0", {"min_price": str(simulation.min_price)})

    rpc_data = _section(data, "rpc")
    rpc_urls = _parse_rpc_urls(rpc_data)
    if not rpc_urls:
        raise ConfigError("At least one RPC url is required")

    return WatchConfig(
        chain_id=_chain_id(data.get("chain_id", 0)),
        rpc_urls=rpc_urls,
        venues=_parse_venues(data.get("venues")),
        pair=pair,
        simulation=simulation,
        rpc_timeout_seconds=_positive_int(
            rpc_data.get("timeout_seconds", DEFAULT_RPC_TIMEOUT_SECONDS),
            "rpc.timeout_seconds",
        ),
        db_path=str(_section(data, "storage").get("db_path", DEFAULT_DB_PATH)),
    )


def load_watch_config(config_path: Path | str | None = None) -> WatchConfig:
    """
    Load watcher configuration from YAML file.

    Args:
        config_path: Path to YAML (default: config/watch.yaml)

    Returns:
        Validated WatchConfig

    Raises:
        ConfigError: file missing, unparsable or invalid
    """
    try:
        data = load_yaml(config_path or "watch.yaml")
    except FileNotFoundError as e:
        raise ConfigError(str(e))
    except yaml.YAMLError as e:
        raise ConfigError(f"Cannot parse config: {e}")

    if not isinstance(data, dict):
        raise ConfigError("Config root must be a mapping")
    return parse_watch_config(data)

