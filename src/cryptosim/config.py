"""
Configuration loading and management for the Crypto Portfolio Simulator.

This module handles loading simulator configurations from YAML files,
environment overrides from .env files and the process environment, and
validation of configuration parameters.
"""

import os
from dataclasses import replace
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import dotenv_values

from cryptosim.data.assets import DEFAULT_ASSET_SPECS
from cryptosim.models import AssetSpec, SimulatorConfig


# Default paths for configuration files
DEFAULT_ENV_FILENAME = ".env"

ENV_SEED = "CRYPTOSIM_SEED"
ENV_SNAPSHOT_PATH = "CRYPTOSIM_SNAPSHOT_PATH"


class ConfigurationError(Exception):
    """Raised when configuration is invalid or cannot be loaded."""
    pass


def load_environment_overrides(
    env_file: str | Path | None = None,
) -> dict[str, str]:
    """
    Load configuration overrides from the environment.

    Sources are checked in this order (later sources override earlier):
    1. .env file (defaults to .env in the working directory)
    2. Environment variables

    Recognised keys are CRYPTOSIM_SEED and CRYPTOSIM_SNAPSHOT_PATH.

    Args:
        env_file: Path to .env file

    Returns:
        Dictionary with any of: seed, snapshot_path
    """
    overrides: dict[str, str] = {}
    keys = {ENV_SEED: "seed", ENV_SNAPSHOT_PATH: "snapshot_path"}

    env_path = Path(env_file) if env_file else Path.cwd() / DEFAULT_ENV_FILENAME
    if env_path.exists():
        env_values = dotenv_values(env_path)
        for env_key, name in keys.items():
            if env_values.get(env_key):
                overrides[name] = str(env_values[env_key])

    for env_key, name in keys.items():
        if os.environ.get(env_key):
            overrides[name] = os.environ[env_key]

    return overrides


def apply_environment_overrides(
    config: SimulatorConfig,
    overrides: dict[str, str],
) -> SimulatorConfig:
    """
    Return a copy of config with environment overrides applied.

    Raises:
        ConfigurationError: If an override value is invalid
    """
    changes: dict[str, Any] = {}

    if "seed" in overrides:
        changes["seed"] = _parse_seed(overrides["seed"], ENV_SEED)
    if "snapshot_path" in overrides:
        changes["snapshot_path"] = overrides["snapshot_path"]

    return replace(config, **changes)


def load_simulator_config(config_path: str | Path) -> SimulatorConfig:
    """
    Load simulator configuration from a YAML file.

    Args:
        config_path: Path to the YAML configuration file

    Returns:
        SimulatorConfig object with validated settings

    Raises:
        ConfigurationError: If the file cannot be loaded or is invalid
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r") as f:
            raw_config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in configuration file: {e}")

    if raw_config is None:
        raw_config = {}
    if not isinstance(raw_config, dict):
        raise ConfigurationError("Configuration file must contain a mapping")

    return _parse_simulator_config(raw_config)


def _parse_simulator_config(raw: dict[str, Any]) -> SimulatorConfig:
    """
    Parse and validate raw configuration dictionary into SimulatorConfig.

    Every field is optional; missing fields take their defaults.

    Raises:
        ConfigurationError: If a field is invalid
    """
    seed = None
    if raw.get("seed") is not None:
        seed = _parse_seed(raw["seed"], "seed")

    price_floor = _parse_decimal(
        raw.get("price_floor", "0.0001"),
        "price_floor",
        min_val=Decimal("0"),
    )
    if price_floor == 0:
        raise ConfigurationError("price_floor must be positive")

    max_fluctuation = _parse_decimal(
        raw.get("max_fluctuation", "0.05"),
        "max_fluctuation",
        min_val=Decimal("0"),
        max_val=Decimal("1"),
    )
    if max_fluctuation in (Decimal("0"), Decimal("1")):
        raise ConfigurationError("max_fluctuation must be between 0 and 1 (exclusive)")

    snapshot_path = str(raw.get("snapshot_path", "portfolio.json"))
    output_dir = str(raw.get("output_dir", "output"))

    if "assets" in raw:
        assets = _parse_asset_specs(raw["assets"])
    else:
        assets = list(DEFAULT_ASSET_SPECS)

    assets_file = None
    if raw.get("assets_file") is not None:
        assets_file = str(raw["assets_file"])

    # An assets_file replaces these specs; its ranges are checked when the
    # catalog is generated
    if assets_file is None:
        for spec in assets:
            if spec.min_price < price_floor:
                raise ConfigurationError(
                    f"{spec.symbol}.min_price {spec.min_price} is below price_floor {price_floor}"
                )

    return SimulatorConfig(
        seed=seed,
        price_floor=price_floor,
        max_fluctuation=max_fluctuation,
        snapshot_path=snapshot_path,
        output_dir=output_dir,
        assets=assets,
        assets_file=assets_file,
    )


def _parse_asset_specs(raw_assets: Any) -> list[AssetSpec]:
    """
    Parse the inline asset list of a configuration file.

    Raises:
        ConfigurationError: If the list or any entry is invalid
    """
    if not isinstance(raw_assets, list) or not raw_assets:
        raise ConfigurationError("assets must be a non-empty list")

    specs = []
    for entry in raw_assets:
        if not isinstance(entry, dict):
            raise ConfigurationError(f"Invalid asset entry: {entry}")
        for field in ("symbol", "name", "min_price", "max_price"):
            if field not in entry:
                raise ConfigurationError(f"Asset entry missing field {field}: {entry}")

        symbol = str(entry["symbol"]).upper().strip()
        min_price = _parse_decimal(entry["min_price"], f"{symbol}.min_price", min_val=Decimal("0"))
        max_price = _parse_decimal(entry["max_price"], f"{symbol}.max_price", min_val=min_price)
        if min_price == 0:
            raise ConfigurationError(f"{symbol}.min_price must be positive")

        specs.append(
            AssetSpec(
                symbol=symbol,
                name=str(entry["name"]),
                min_price=min_price,
                max_price=max_price,
            )
        )

    return specs


def _parse_seed(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"Invalid integer value for {field_name}: {value}")
    try:
        return int(str(value).strip())
    except ValueError:
        raise ConfigurationError(f"Invalid integer value for {field_name}: {value}")


def _parse_decimal(
    value: Any,
    field_name: str,
    min_val: Decimal | None = None,
    max_val: Decimal | None = None,
) -> Decimal:
    """
    Parse a decimal value with optional range validation.

    Args:
        value: The value to parse
        field_name: Name of the field for error messages
        min_val: Minimum allowed value (inclusive)
        max_val: Maximum allowed value (inclusive)

    Returns:
        Parsed Decimal

    Raises:
        ConfigurationError: If the value is invalid or out of range
    """
    try:
        decimal_value = Decimal(str(value))
    except InvalidOperation:
        raise ConfigurationError(f"Invalid decimal value for {field_name}: {value}")

    if not decimal_value.is_finite():
        raise ConfigurationError(f"Invalid decimal value for {field_name}: {value}")

    if min_val is not None and decimal_value < min_val:
        raise ConfigurationError(
            f"{field_name} must be >= {min_val}, got {decimal_value}"
        )

    if max_val is not None and decimal_value > max_val:
        raise ConfigurationError(
            f"{field_name} must be <= {max_val}, got {decimal_value}"
        )

    return decimal_value


def create_default_config(
    seed: Optional[int] = None,
    output_path: str | Path | None = None,
) -> SimulatorConfig:
    """
    Create a simulator config with default parameters.

    Useful for programmatic configuration without a YAML file.

    Args:
        seed: Optional random seed
        output_path: Optional path to write config YAML

    Returns:
        SimulatorConfig with the default catalog
    """
    config = SimulatorConfig(seed=seed, assets=list(DEFAULT_ASSET_SPECS))

    if output_path:
        write_config(config, output_path)

    return config


def write_config(config: SimulatorConfig, output_path: str | Path) -> None:
    """
    Write a SimulatorConfig to a YAML file.

    Args:
        config: The configuration to write
        output_path: Path to write the YAML file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    config_dict = {
        "seed": config.seed,
        "price_floor": str(config.price_floor),
        "max_fluctuation": str(config.max_fluctuation),
        "snapshot_path": config.snapshot_path,
        "output_dir": config.output_dir,
        "assets_file": config.assets_file,
        "assets": [
            {
                "symbol": spec.symbol,
                "name": spec.name,
                "min_price": str(spec.min_price),
                "max_price": str(spec.max_price),
            }
            for spec in config.assets
        ],
    }

    with open(output_path, "w") as f:
        yaml.dump(config_dict, f, default_flow_style=False, sort_keys=False)
