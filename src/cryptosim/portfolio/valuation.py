"""
Portfolio valuation at current market prices.

Values are computed from the live asset prices and never rounded;
round_currency is for display only.
"""

from decimal import Decimal, ROUND_HALF_UP

from cryptosim.models import PortfolioValuation, PositionValuation
from cryptosim.portfolio.ledger import Ledger


CURRENCY_QUANTUM = Decimal("0.01")


def value_positions(ledger: Ledger) -> list[PositionValuation]:
    """
    Value every position in a ledger at current prices.

    Args:
        ledger: Ledger to value

    Returns:
        List of PositionValuation objects in ledger order
    """
    return [PositionValuation.from_position(p) for p in ledger.positions()]


def value_portfolio(ledger: Ledger) -> PortfolioValuation:
    """
    Create a complete portfolio valuation.

    The total is the sum of the captured position values, so it matches
    the per-position figures even if prices move afterwards.

    Args:
        ledger: Ledger to value

    Returns:
        PortfolioValuation with position valuations and total
    """
    position_valuations = value_positions(ledger)
    total_value = sum((v.value for v in position_valuations), Decimal("0"))

    return PortfolioValuation(
        total_value=total_value,
        position_valuations=position_valuations,
    )


def round_currency(value: Decimal) -> Decimal:
    """Round a monetary amount to cents for display."""
    return value.quantize(CURRENCY_QUANTUM, rounding=ROUND_HALF_UP)
