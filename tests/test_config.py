"""
Tests for configuration loading.
"""

from decimal import Decimal
from pathlib import Path

import pytest

from cryptosim.config import (
    ConfigurationError,
    apply_environment_overrides,
    create_default_config,
    load_environment_overrides,
    load_simulator_config,
    write_config,
)
from cryptosim.data.assets import DEFAULT_ASSET_SPECS
from cryptosim.models import SimulatorConfig


@pytest.fixture(autouse=True)
def clear_environment(monkeypatch):
    """Keep the caller's environment out of the tests."""
    monkeypatch.delenv("CRYPTOSIM_SEED", raising=False)
    monkeypatch.delenv("CRYPTOSIM_SNAPSHOT_PATH", raising=False)


class TestLoadSimulatorConfig:
    """Tests for the load_simulator_config function."""

    def test_full_config(self, temp_output_dir: Path):
        path = temp_output_dir / "config.yaml"
        path.write_text(
            "seed: 42\n"
            "price_floor: '0.001'\n"
            "max_fluctuation: 0.1\n"
            "snapshot_path: data/holdings.json\n"
            "output_dir: logs\n"
            "assets:\n"
            "  - symbol: btc\n"
            "    name: Bitcoin\n"
            "    min_price: 30000\n"
            "    max_price: 60000\n"
        )

        config = load_simulator_config(path)

        assert config.seed == 42
        assert config.price_floor == Decimal("0.001")
        assert config.max_fluctuation == Decimal("0.1")
        assert config.snapshot_path == "data/holdings.json"
        assert config.output_dir == "logs"
        assert len(config.assets) == 1
        assert config.assets[0].symbol == "BTC"
        assert config.assets[0].max_price == Decimal("60000")

    def test_empty_file_uses_defaults(self, temp_output_dir: Path):
        path = temp_output_dir / "config.yaml"
        path.write_text("")

        config = load_simulator_config(path)

        assert config.seed is None
        assert config.price_floor == Decimal("0.0001")
        assert config.max_fluctuation == Decimal("0.05")
        assert config.snapshot_path == "portfolio.json"
        assert config.assets == list(DEFAULT_ASSET_SPECS)

    def test_assets_file(self, temp_output_dir: Path):
        path = temp_output_dir / "config.yaml"
        path.write_text("assets_file: catalog.csv\n")

        config = load_simulator_config(path)

        assert config.assets_file == "catalog.csv"

    def test_price_floor_above_range_rejected(self, temp_output_dir: Path):
        """Test a floor above an asset's minimum starting price is refused."""
        path = temp_output_dir / "config.yaml"
        path.write_text("price_floor: 0.1\n")

        with pytest.raises(ConfigurationError, match="TRX.min_price 0.05 is below price_floor 0.1"):
            load_simulator_config(path)

    def test_missing_file(self, temp_output_dir: Path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_simulator_config(temp_output_dir / "absent.yaml")

    def test_invalid_yaml(self, temp_output_dir: Path):
        path = temp_output_dir / "config.yaml"
        path.write_text("seed: [unclosed\n")

        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            load_simulator_config(path)

    def test_non_mapping(self, temp_output_dir: Path):
        path = temp_output_dir / "config.yaml"
        path.write_text("- just\n- a list\n")

        with pytest.raises(ConfigurationError):
            load_simulator_config(path)

    @pytest.mark.parametrize(
        "content",
        [
            "max_fluctuation: 0\n",
            "max_fluctuation: 1.5\n",
            "price_floor: 0\n",
            "price_floor: -1\n",
            "price_floor: abc\n",
            "seed: abc\n",
            "assets: []\n",
            "assets:\n  - symbol: BTC\n    name: Bitcoin\n    min_price: 10\n",
            "assets:\n  - symbol: BTC\n    name: Bitcoin\n    min_price: 10\n    max_price: 5\n",
            "price_floor: 1\nassets:\n  - symbol: TRX\n    name: Tron\n    min_price: 0.05\n    max_price: 0.20\n",
            "price_floor: 0.1\n",
        ],
    )
    def test_invalid_values(self, temp_output_dir: Path, content: str):
        path = temp_output_dir / "config.yaml"
        path.write_text(content)

        with pytest.raises(ConfigurationError):
            load_simulator_config(path)


class TestWriteConfig:
    """Tests for writing configuration files."""

    def test_write_and_reload(self, sample_config: SimulatorConfig, temp_output_dir: Path):
        path = temp_output_dir / "out" / "config.yaml"

        write_config(sample_config, path)
        reloaded = load_simulator_config(path)

        assert reloaded == sample_config

    def test_create_default_config(self, temp_output_dir: Path):
        path = temp_output_dir / "default.yaml"

        config = create_default_config(seed=5, output_path=path)

        assert path.exists()
        assert config.seed == 5
        assert len(config.assets) == 8


class TestEnvironmentOverrides:
    """Tests for .env and environment variable overrides."""

    def test_env_file(self, temp_output_dir: Path):
        env_file = temp_output_dir / ".env"
        env_file.write_text("CRYPTOSIM_SEED=123\nCRYPTOSIM_SNAPSHOT_PATH=saved.csv\n")

        overrides = load_environment_overrides(env_file)

        assert overrides == {"seed": "123", "snapshot_path": "saved.csv"}

    def test_environment_beats_env_file(self, temp_output_dir: Path, monkeypatch):
        env_file = temp_output_dir / ".env"
        env_file.write_text("CRYPTOSIM_SEED=123\n")
        monkeypatch.setenv("CRYPTOSIM_SEED", "456")

        overrides = load_environment_overrides(env_file)

        assert overrides["seed"] == "456"

    def test_missing_env_file(self, temp_output_dir: Path):
        assert load_environment_overrides(temp_output_dir / ".env") == {}

    def test_apply_overrides(self, sample_config: SimulatorConfig):
        config = apply_environment_overrides(
            sample_config, {"seed": "9", "snapshot_path": "other.json"}
        )

        assert config.seed == 9
        assert config.snapshot_path == "other.json"
        assert sample_config.seed == 7

    def test_invalid_seed_override(self, sample_config: SimulatorConfig):
        with pytest.raises(ConfigurationError):
            apply_environment_overrides(sample_config, {"seed": "not-a-number"})
