"""
Allocation analytics for the holdings ledger.

Derives each position's share of total value and the largest holding.
An empty portfolio yields empty results rather than errors.
"""

from decimal import Decimal
from typing import Any, Optional

from cryptosim.models import AllocationEntry, Position
from cryptosim.portfolio.ledger import Ledger


HUNDRED = Decimal("100")


def calculate_allocation(ledger: Ledger) -> list[AllocationEntry]:
    """
    Calculate each position's percentage of total portfolio value.

    Args:
        ledger: Ledger to analyze

    Returns:
        List of AllocationEntry objects in ledger order; empty when the
        portfolio has no value
    """
    positions = ledger.positions()
    values = [(p.symbol, p.value) for p in positions]
    total_value = sum((value for _, value in values), Decimal("0"))

    if total_value == Decimal("0"):
        return []

    return [
        AllocationEntry(
            symbol=symbol,
            value=value,
            percent=value / total_value * HUNDRED,
        )
        for symbol, value in values
    ]


def get_top_holding(ledger: Ledger) -> Optional[Position]:
    """
    Get the position with the highest market value.

    Ties go to the position added to the ledger first.

    Args:
        ledger: Ledger to analyze

    Returns:
        The top position, or None if the ledger is empty
    """
    top: Optional[Position] = None
    top_value = Decimal("0")

    for position in ledger.positions():
        value = position.value
        if top is None or value > top_value:
            top = position
            top_value = value

    return top


def summarize_allocation(ledger: Ledger) -> dict[str, Any]:
    """
    Summarize ledger allocation for display or logging.

    Args:
        ledger: Ledger to summarize

    Returns:
        Dictionary with total_value, num_positions, top_holding (symbol or
        None) and allocation (symbol -> percent)
    """
    top = get_top_holding(ledger)

    return {
        "total_value": ledger.total_value(),
        "num_positions": len(ledger),
        "top_holding": top.symbol if top is not None else None,
        "allocation": {
            entry.symbol: entry.percent for entry in calculate_allocation(ledger)
        },
    }
