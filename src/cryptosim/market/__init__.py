"""
Market module for the Crypto Portfolio Simulator.

Provides the asset catalog and the random price fluctuation model.
"""

from cryptosim.market.catalog import (
    AssetCatalog,
    AssetNotFoundError,
    CatalogError,
    PRICE_PRECISION,
)
from cryptosim.market.fluctuation import (
    perturb,
    DEFAULT_MAX_CHANGE,
    DEFAULT_PRICE_FLOOR,
)

__all__ = [
    "AssetCatalog",
    "AssetNotFoundError",
    "CatalogError",
    "PRICE_PRECISION",
    "perturb",
    "DEFAULT_MAX_CHANGE",
    "DEFAULT_PRICE_FLOOR",
]
