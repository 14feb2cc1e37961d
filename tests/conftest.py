"""
Pytest fixtures for the Crypto Portfolio Simulator tests.

Provides common test data and utilities used across test modules.
"""

import random
import tempfile
from decimal import Decimal
from pathlib import Path

import pytest

from cryptosim.market.catalog import AssetCatalog
from cryptosim.models import Asset, AssetSpec, SimulatorConfig
from cryptosim.portfolio.ledger import Ledger


class FixedRandom:
    """Random source that always returns the same draw."""

    def __init__(self, value: float):
        self.value = value

    def random(self) -> float:
        return self.value


@pytest.fixture
def seeded_rng() -> random.Random:
    """Deterministic random source."""
    return random.Random(42)


@pytest.fixture
def sample_specs() -> list[AssetSpec]:
    """Create a small set of catalog bootstrap entries."""
    return [
        AssetSpec("BTC", "Bitcoin", Decimal("30000"), Decimal("60000")),
        AssetSpec("ETH", "Ethereum", Decimal("1500"), Decimal("4000")),
        AssetSpec("DOGE", "Dogecoin", Decimal("0.05"), Decimal("0.5")),
    ]


@pytest.fixture
def fixed_catalog() -> AssetCatalog:
    """Create a catalog with known prices."""
    return AssetCatalog([
        Asset(symbol="BTC", name="Bitcoin", current_price=Decimal("50000")),
        Asset(symbol="ETH", name="Ethereum", current_price=Decimal("2000")),
        Asset(symbol="SOL", name="Solana", current_price=Decimal("100")),
    ])


@pytest.fixture
def sample_ledger(fixed_catalog: AssetCatalog) -> Ledger:
    """Create a ledger holding 2 BTC and 10 ETH (total $120,000)."""
    ledger = Ledger()
    ledger.add(fixed_catalog.get("BTC"), Decimal("2"))
    ledger.add(fixed_catalog.get("ETH"), Decimal("10"))
    return ledger


@pytest.fixture
def sample_config(sample_specs: list[AssetSpec]) -> SimulatorConfig:
    """Create a sample simulator configuration for testing."""
    return SimulatorConfig(
        seed=7,
        price_floor=Decimal("0.0001"),
        max_fluctuation=Decimal("0.05"),
        snapshot_path="portfolio.json",
        output_dir="output",
        assets=sample_specs,
    )


@pytest.fixture
def temp_output_dir() -> Path:
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)
