"""
Core data models for the Crypto Portfolio Simulator.

This module defines the fundamental data structures used throughout the system,
including assets, ledger positions, valuations, snapshot records and
simulator configuration. All monetary values and quantities use Decimal
for precision.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


def normalize_symbol(symbol: str) -> str:
    """Normalize a ticker symbol for lookups (upper-case, no surrounding space)."""
    return symbol.strip().upper()


class ActionType(Enum):
    """Types of logged actions for the decision log."""
    CONFIG_LOADED = "CONFIG_LOADED"
    MARKET_GENERATED = "MARKET_GENERATED"
    MARKET_SIMULATED = "MARKET_SIMULATED"
    ASSET_ADDED = "ASSET_ADDED"
    ASSET_REMOVED = "ASSET_REMOVED"
    SNAPSHOT_SAVED = "SNAPSHOT_SAVED"
    SNAPSHOT_LOADED = "SNAPSHOT_LOADED"


@dataclass
class Asset:
    """
    A tradable instrument in the market catalog.

    Assets are owned by the catalog and mutated in place when the market
    moves. Positions keep a reference to the same object, so a price change
    is reflected in every holding of the asset.

    Attributes:
        symbol: Ticker symbol (upper-case, unique within the catalog)
        name: Display name
        current_price: Current price per unit, always strictly positive
    """
    symbol: str
    name: str
    current_price: Decimal

    def __str__(self) -> str:
        return f"{self.symbol} ({self.name}) - ${self.current_price}"


@dataclass(frozen=True)
class AssetSpec:
    """
    Catalog bootstrap entry.

    Attributes:
        symbol: Ticker symbol
        name: Display name
        min_price: Lower bound of the initial price range
        max_price: Upper bound of the initial price range
    """
    symbol: str
    name: str
    min_price: Decimal
    max_price: Decimal


@dataclass
class Position:
    """
    A held quantity of a single asset.

    Attributes:
        asset: The catalog asset (shared reference, not a copy)
        quantity: Units held, strictly positive while in the ledger
    """
    asset: Asset
    quantity: Decimal

    @property
    def symbol(self) -> str:
        """Ticker symbol of the held asset."""
        return self.asset.symbol

    @property
    def value(self) -> Decimal:
        """Current market value (quantity * current price)."""
        return self.quantity * self.asset.current_price


@dataclass
class PositionValuation:
    """
    Point-in-time valuation of a single position.

    Attributes:
        symbol: Ticker symbol
        name: Asset display name
        price: Price used for the valuation
        quantity: Units held
        value: quantity * price
    """
    symbol: str
    name: str
    price: Decimal
    quantity: Decimal
    value: Decimal

    @classmethod
    def from_position(cls, position: Position) -> "PositionValuation":
        """Capture the current state of a position."""
        price = position.asset.current_price
        return cls(
            symbol=position.symbol,
            name=position.asset.name,
            price=price,
            quantity=position.quantity,
            value=position.quantity * price,
        )


@dataclass
class AllocationEntry:
    """
    Share of total portfolio value held in one position.

    Attributes:
        symbol: Ticker symbol
        value: Position market value
        percent: value / total * 100 (unrounded)
    """
    symbol: str
    value: Decimal
    percent: Decimal


@dataclass
class PortfolioValuation:
    """
    Complete portfolio valuation summary.

    Attributes:
        total_value: Sum of all position values
        position_valuations: Per-position valuations in ledger order
        valued_at: When the valuation was taken
    """
    total_value: Decimal
    position_valuations: list[PositionValuation]
    valued_at: datetime = field(default_factory=datetime.now)

    @property
    def num_positions(self) -> int:
        return len(self.position_valuations)


@dataclass
class SnapshotRecord:
    """
    Externalized form of one position.

    The full asset state is embedded; on decode only the symbol and quantity
    are trusted, the price is re-read from the live catalog.
    """
    symbol: str
    name: str
    price: Decimal
    quantity: Decimal


@dataclass
class SimulatorConfig:
    """
    Simulator configuration loaded from YAML.

    Attributes:
        seed: Random seed for market generation and fluctuation (None = random)
        price_floor: Lowest price any asset may reach
        max_fluctuation: Largest relative price move per simulation step
        snapshot_path: Where the portfolio snapshot is saved and loaded
        output_dir: Directory for the decision log
        assets: Catalog bootstrap entries
        assets_file: CSV/Parquet catalog file that replaces assets when set
    """
    seed: Optional[int] = None
    price_floor: Decimal = Decimal("0.0001")
    max_fluctuation: Decimal = Decimal("0.05")
    snapshot_path: str = "portfolio.json"
    output_dir: str = "output"
    assets: list[AssetSpec] = field(default_factory=list)
    assets_file: Optional[str] = None


@dataclass
class DecisionLogEntry:
    """
    Entry for the append-only decision log.

    Attributes:
        timestamp: When the action occurred
        action_type: Type of action
        details: JSON-serializable details dictionary
    """
    timestamp: datetime
    action_type: ActionType
    details: dict

    @classmethod
    def create(
        cls,
        action_type: ActionType,
        details: dict,
    ) -> "DecisionLogEntry":
        """Factory method with auto-generated timestamp."""
        return cls(
            timestamp=datetime.now(),
            action_type=action_type,
            details=details,
        )
