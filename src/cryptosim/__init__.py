"""
Crypto Portfolio Simulator (cryptosim)

A paper-only cryptocurrency portfolio simulator. It generates a market of
tradable assets with randomly fluctuating prices, tracks holdings in a
ledger, reports value and allocation, and saves/restores holdings between
runs.

This is a simulation tool. No real market data, no live trading.
"""

__version__ = "0.1.0"
__author__ = "cryptosim Team"
