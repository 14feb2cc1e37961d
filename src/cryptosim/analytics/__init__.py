"""
Analytics module for the Crypto Portfolio Simulator.

Provides allocation breakdowns and top-holding queries.
"""

from cryptosim.analytics.allocation import (
    calculate_allocation,
    get_top_holding,
    summarize_allocation,
)

__all__ = [
    "calculate_allocation",
    "get_top_holding",
    "summarize_allocation",
]
