"""
Tests for portfolio valuation functionality.
"""

from decimal import Decimal

from cryptosim.market.catalog import AssetCatalog
from cryptosim.portfolio.ledger import Ledger
from cryptosim.portfolio.valuation import (
    round_currency,
    value_portfolio,
    value_positions,
)


class TestValuePositions:
    """Tests for the value_positions function."""

    def test_basic_valuation(self, sample_ledger: Ledger):
        valuations = value_positions(sample_ledger)

        assert [v.symbol for v in valuations] == ["BTC", "ETH"]
        assert valuations[0].name == "Bitcoin"
        assert valuations[0].price == Decimal("50000")
        assert valuations[0].value == Decimal("100000")
        assert valuations[1].value == Decimal("20000")

    def test_valuation_is_point_in_time(self, sample_ledger: Ledger, fixed_catalog: AssetCatalog):
        """Test captured valuations do not change when prices move later."""
        valuations = value_positions(sample_ledger)

        fixed_catalog.get("BTC").current_price = Decimal("1")

        assert valuations[0].value == Decimal("100000")

    def test_empty_ledger(self):
        assert value_positions(Ledger()) == []


class TestValuePortfolio:
    """Tests for the value_portfolio function."""

    def test_portfolio_valuation_totals(self, sample_ledger: Ledger):
        valuation = value_portfolio(sample_ledger)

        assert valuation.total_value == Decimal("120000")
        assert valuation.total_value == sample_ledger.total_value()
        assert valuation.num_positions == 2

    def test_empty_portfolio(self):
        valuation = value_portfolio(Ledger())

        assert valuation.total_value == Decimal("0")
        assert valuation.num_positions == 0


class TestRoundCurrency:
    """Tests for display rounding."""

    def test_rounds_half_up(self):
        assert round_currency(Decimal("1.005")) == Decimal("1.01")
        assert round_currency(Decimal("1.004")) == Decimal("1.00")

    def test_keeps_two_places(self):
        assert str(round_currency(Decimal("100000"))) == "100000.00"
