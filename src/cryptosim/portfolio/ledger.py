"""
Holdings ledger for the Crypto Portfolio Simulator.

The ledger is the portfolio: an ordered set of positions, at most one per
symbol, each with a strictly positive quantity. Adding to a held symbol
merges into the existing position; removing down to zero or below deletes
the position.
"""

from decimal import Decimal
from typing import Iterator, Optional

from cryptosim.models import Asset, Position, normalize_symbol


class InvalidQuantityError(ValueError):
    """Raised when a non-positive or non-finite quantity is passed to add or remove."""

    def __init__(self, quantity: Decimal):
        self.quantity = quantity
        super().__init__(f"Quantity must be positive and finite, got {quantity}")


def _check_quantity(quantity: Decimal) -> None:
    if not quantity.is_finite() or quantity <= 0:
        raise InvalidQuantityError(quantity)


class Ledger:
    """
    Ordered collection of positions, unique by symbol.

    Positions reference catalog assets directly, so valuation always uses
    the asset's current price.
    """

    def __init__(self):
        self._positions: dict[str, Position] = {}

    def add(self, asset: Asset, quantity: Decimal) -> Position:
        """
        Add quantity of an asset, merging into an existing position.

        Args:
            asset: Catalog asset to hold
            quantity: Units to add, must be positive

        Returns:
            The new or updated position

        Raises:
            InvalidQuantityError: If quantity <= 0 or not finite
        """
        _check_quantity(quantity)

        symbol = normalize_symbol(asset.symbol)
        existing = self._positions.get(symbol)
        if existing is not None:
            existing.quantity += quantity
            return existing

        position = Position(asset=asset, quantity=quantity)
        self._positions[symbol] = position
        return position

    def remove(self, symbol: str, quantity: Decimal) -> Decimal:
        """
        Reduce a position, deleting it once nothing is left.

        Removing more than is held deletes the position; the excess is
        ignored. Removing a symbol that is not held does nothing.

        Args:
            symbol: Ticker symbol (case-insensitive)
            quantity: Units to remove, must be positive

        Returns:
            Quantity actually removed (0 if the symbol was not held)

        Raises:
            InvalidQuantityError: If quantity <= 0 or not finite
        """
        _check_quantity(quantity)

        symbol = normalize_symbol(symbol)
        existing = self._positions.get(symbol)
        if existing is None:
            return Decimal("0")

        remaining = existing.quantity - quantity
        if remaining <= 0:
            del self._positions[symbol]
            return existing.quantity

        existing.quantity = remaining
        return quantity

    def total_value(self) -> Decimal:
        """Sum of all position values (0 for an empty ledger)."""
        return sum((p.value for p in self._positions.values()), Decimal("0"))

    def positions(self) -> tuple[Position, ...]:
        """Read-only view of positions in insertion order."""
        return tuple(self._positions.values())

    def get(self, symbol: str) -> Optional[Position]:
        return self._positions.get(normalize_symbol(symbol))

    def quantity_of(self, symbol: str) -> Decimal:
        """Units held of symbol (0 if not held)."""
        position = self.get(symbol)
        return position.quantity if position is not None else Decimal("0")

    def symbols(self) -> list[str]:
        return list(self._positions)

    @property
    def is_empty(self) -> bool:
        return not self._positions

    def __len__(self) -> int:
        return len(self._positions)

    def __iter__(self) -> Iterator[Position]:
        return iter(self.positions())

    def __contains__(self, symbol: object) -> bool:
        return isinstance(symbol, str) and normalize_symbol(symbol) in self._positions
