"""
Asset catalog for the simulated market.

The catalog owns every tradable asset. Assets are created once from
bootstrap specs and afterwards only their prices change.
"""

import random
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Iterator, Optional

from cryptosim.models import Asset, AssetSpec, normalize_symbol


# Prices are carried to 8 decimal places (one satoshi for BTC)
PRICE_PRECISION = Decimal("0.00000001")


class CatalogError(Exception):
    """Raised when the catalog cannot be built from its specs."""
    pass


class AssetNotFoundError(Exception):
    """Raised when a symbol is not present in the catalog."""

    def __init__(self, symbol: str):
        self.symbol = symbol
        super().__init__(f"Asset not found: {symbol}")


def draw_uniform(rng: random.Random) -> Decimal:
    """Draw U(0, 1) from rng as a Decimal."""
    return Decimal(str(rng.random()))


def random_price(
    min_price: Decimal,
    max_price: Decimal,
    rng: random.Random,
    precision: Decimal = PRICE_PRECISION,
) -> Decimal:
    """
    Draw a price uniformly from [min_price, max_price].

    Args:
        min_price: Lower bound (inclusive)
        max_price: Upper bound (inclusive)
        rng: Random source
        precision: Quantum the price is rounded to

    Returns:
        Price, never below min_price
    """
    price = min_price + draw_uniform(rng) * (max_price - min_price)
    price = price.quantize(precision, rounding=ROUND_HALF_UP)
    return max(price, min_price)


def validate_specs(
    specs: Iterable[AssetSpec],
    price_floor: Optional[Decimal] = None,
) -> list[AssetSpec]:
    """
    Check bootstrap specs before generating a catalog.

    Args:
        specs: Bootstrap entries
        price_floor: Lowest allowed price; every min_price must reach it

    Returns:
        The specs with normalized symbols

    Raises:
        CatalogError: On empty symbols, bad price ranges, ranges below the
                      floor or duplicates
    """
    validated = []
    seen: set[str] = set()

    for spec in specs:
        symbol = normalize_symbol(spec.symbol)
        if not symbol:
            raise CatalogError("Asset symbol cannot be empty")
        if symbol in seen:
            raise CatalogError(f"Duplicate asset symbol: {symbol}")
        if spec.min_price <= 0:
            raise CatalogError(f"{symbol}: min_price must be positive, got {spec.min_price}")
        if spec.max_price < spec.min_price:
            raise CatalogError(
                f"{symbol}: max_price {spec.max_price} is below min_price {spec.min_price}"
            )
        if price_floor is not None and spec.min_price < price_floor:
            raise CatalogError(
                f"{symbol}: min_price {spec.min_price} is below the price floor {price_floor}"
            )
        seen.add(symbol)
        validated.append(
            AssetSpec(
                symbol=symbol,
                name=spec.name,
                min_price=spec.min_price,
                max_price=spec.max_price,
            )
        )

    return validated


class AssetCatalog:
    """
    Ordered collection of tradable assets, unique by symbol.
    """

    def __init__(self, assets: Iterable[Asset] = ()):
        self._assets: dict[str, Asset] = {}
        for asset in assets:
            symbol = normalize_symbol(asset.symbol)
            if symbol in self._assets:
                raise CatalogError(f"Duplicate asset symbol: {symbol}")
            asset.symbol = symbol
            self._assets[symbol] = asset

    @classmethod
    def generate(
        cls,
        specs: Iterable[AssetSpec],
        rng: Optional[random.Random] = None,
        precision: Decimal = PRICE_PRECISION,
        price_floor: Optional[Decimal] = None,
    ) -> "AssetCatalog":
        """
        Build a catalog with random starting prices.

        Args:
            specs: Bootstrap entries (symbol, name, price range)
            rng: Random source; pass a seeded Random for reproducible prices.
                 A fresh unseeded Random is used when omitted.
            precision: Quantum for generated prices
            price_floor: Lowest price any asset may start at

        Returns:
            New AssetCatalog in spec order

        Raises:
            CatalogError: If the specs are invalid
        """
        if rng is None:
            rng = random.Random()

        assets = [
            Asset(
                symbol=spec.symbol,
                name=spec.name,
                current_price=random_price(spec.min_price, spec.max_price, rng, precision),
            )
            for spec in validate_specs(specs, price_floor)
        ]
        return cls(assets)

    @property
    def assets(self) -> tuple[Asset, ...]:
        """Read-only view of all assets in catalog order."""
        return tuple(self._assets.values())

    def find_by_symbol(self, symbol: str) -> Optional[Asset]:
        """
        Look up an asset by symbol (case-insensitive).

        Returns:
            The asset, or None if the symbol is unknown
        """
        return self._assets.get(normalize_symbol(symbol))

    def get(self, symbol: str) -> Asset:
        """
        Look up an asset by symbol, raising if it is unknown.

        Raises:
            AssetNotFoundError: If the symbol is not in the catalog
        """
        asset = self.find_by_symbol(symbol)
        if asset is None:
            raise AssetNotFoundError(normalize_symbol(symbol))
        return asset

    def symbols(self) -> list[str]:
        return list(self._assets)

    def prices(self) -> dict[str, Decimal]:
        """Current price of every asset by symbol."""
        return {symbol: asset.current_price for symbol, asset in self._assets.items()}

    def __len__(self) -> int:
        return len(self._assets)

    def __iter__(self) -> Iterator[Asset]:
        return iter(self._assets.values())

    def __contains__(self, symbol: object) -> bool:
        return isinstance(symbol, str) and normalize_symbol(symbol) in self._assets
