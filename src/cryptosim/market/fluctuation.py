"""
Random price fluctuation for the simulated market.

Each call moves every asset price by a bounded random relative change and
floor-clamps the result so prices stay strictly positive.
"""

import random
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from cryptosim.market.catalog import PRICE_PRECISION, draw_uniform
from cryptosim.models import Asset


DEFAULT_MAX_CHANGE = Decimal("0.05")  # +/- 5% per step
DEFAULT_PRICE_FLOOR = Decimal("0.0001")


def draw_change(rng: random.Random, max_change: Decimal = DEFAULT_MAX_CHANGE) -> Decimal:
    """
    Draw a relative price change uniformly from [-max_change, +max_change].

    With the default bound this is (U(0,1) - 0.5) * 0.1.
    """
    return (draw_uniform(rng) - Decimal("0.5")) * (max_change * 2)


def apply_change(
    price: Decimal,
    change: Decimal,
    price_floor: Decimal = DEFAULT_PRICE_FLOOR,
    precision: Decimal = PRICE_PRECISION,
) -> Decimal:
    """
    Apply a relative change to a price.

    Args:
        price: Current price
        change: Relative change (e.g. -0.03 for -3%)
        price_floor: Minimum resulting price
        precision: Quantum the new price is rounded to

    Returns:
        New price, never below price_floor
    """
    new_price = (price + price * change).quantize(precision, rounding=ROUND_HALF_UP)
    if new_price < price_floor:
        new_price = price_floor
    return new_price


def perturb(
    assets: Iterable[Asset],
    rng: random.Random,
    max_change: Decimal = DEFAULT_MAX_CHANGE,
    price_floor: Decimal = DEFAULT_PRICE_FLOOR,
) -> None:
    """
    Simulate one market move, updating asset prices in place.

    Args:
        assets: Assets to move (typically an AssetCatalog)
        rng: Random source
        max_change: Largest relative move per asset, in (0, 1)
        price_floor: Lowest allowed price, must be positive

    Raises:
        ValueError: If max_change or price_floor is out of range
    """
    if not Decimal("0") < max_change < Decimal("1"):
        raise ValueError(f"max_change must be between 0 and 1, got {max_change}")
    if price_floor <= 0:
        raise ValueError(f"price_floor must be positive, got {price_floor}")

    for asset in assets:
        change = draw_change(rng, max_change)
        asset.current_price = apply_change(asset.current_price, change, price_floor)
