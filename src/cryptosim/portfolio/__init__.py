"""
Portfolio management module for the Crypto Portfolio Simulator.

Provides the holdings ledger and valuation at current market prices.
"""

from cryptosim.portfolio.ledger import Ledger, InvalidQuantityError
from cryptosim.portfolio.valuation import (
    value_portfolio,
    value_positions,
    round_currency,
)

__all__ = [
    "Ledger",
    "InvalidQuantityError",
    "value_portfolio",
    "value_positions",
    "round_currency",
]
