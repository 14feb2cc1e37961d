"""
Decision logging module for the Crypto Portfolio Simulator.

Provides append-only decision logging for audit and reproducibility.
"""

from cryptosim.logging.decision_log import (
    DecisionLogger,
    log_action,
    get_logger,
)

__all__ = [
    "DecisionLogger",
    "log_action",
    "get_logger",
]
