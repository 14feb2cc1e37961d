"""
Tests for the holdings ledger.
"""

import random
from decimal import Decimal

import pytest

from cryptosim.market.catalog import AssetCatalog
from cryptosim.models import Asset
from cryptosim.portfolio.ledger import InvalidQuantityError, Ledger


class TestAdd:
    """Tests for Ledger.add."""

    def test_add_creates_position(self, fixed_catalog: AssetCatalog):
        ledger = Ledger()
        position = ledger.add(fixed_catalog.get("BTC"), Decimal("2"))

        assert len(ledger) == 1
        assert position.symbol == "BTC"
        assert position.quantity == Decimal("2")

    def test_add_merges_existing_position(self, fixed_catalog: AssetCatalog):
        """Test adding a held symbol increases the quantity of one position."""
        ledger = Ledger()
        btc = fixed_catalog.get("BTC")

        ledger.add(btc, Decimal("1.5"))
        ledger.add(btc, Decimal("0.25"))

        assert len(ledger) == 1
        assert ledger.quantity_of("BTC") == Decimal("1.75")

    def test_insertion_order_preserved(self, fixed_catalog: AssetCatalog):
        ledger = Ledger()
        ledger.add(fixed_catalog.get("SOL"), Decimal("1"))
        ledger.add(fixed_catalog.get("BTC"), Decimal("1"))
        ledger.add(fixed_catalog.get("SOL"), Decimal("1"))

        assert ledger.symbols() == ["SOL", "BTC"]

    @pytest.mark.parametrize("quantity", [Decimal("0"), Decimal("-1"), Decimal("-0.0001")])
    def test_add_rejects_non_positive_quantity(self, fixed_catalog: AssetCatalog, quantity: Decimal):
        """Test non-positive quantities raise and leave the ledger unchanged."""
        ledger = Ledger()
        ledger.add(fixed_catalog.get("BTC"), Decimal("1"))

        with pytest.raises(InvalidQuantityError):
            ledger.add(fixed_catalog.get("BTC"), quantity)

        with pytest.raises(InvalidQuantityError):
            ledger.add(fixed_catalog.get("ETH"), quantity)

        assert ledger.quantity_of("BTC") == Decimal("1")
        assert "ETH" not in ledger

    @pytest.mark.parametrize("quantity", [Decimal("Infinity"), Decimal("NaN"), Decimal("-Infinity")])
    def test_add_rejects_non_finite_quantity(self, fixed_catalog: AssetCatalog, quantity: Decimal):
        ledger = Ledger()

        with pytest.raises(InvalidQuantityError):
            ledger.add(fixed_catalog.get("BTC"), quantity)

        assert ledger.is_empty

    def test_invalid_quantity_is_value_error(self, fixed_catalog: AssetCatalog):
        with pytest.raises(ValueError):
            Ledger().add(fixed_catalog.get("BTC"), Decimal("0"))

    def test_no_upper_bound(self, fixed_catalog: AssetCatalog):
        ledger = Ledger()
        ledger.add(fixed_catalog.get("SOL"), Decimal("1E+12"))

        assert ledger.total_value() == Decimal("1E+14")


class TestRemove:
    """Tests for Ledger.remove."""

    def test_partial_remove(self, sample_ledger: Ledger):
        removed = sample_ledger.remove("ETH", Decimal("4"))

        assert removed == Decimal("4")
        assert sample_ledger.quantity_of("ETH") == Decimal("6")

    def test_remove_exact_quantity_deletes_position(self, sample_ledger: Ledger):
        sample_ledger.remove("BTC", Decimal("2"))

        assert "BTC" not in sample_ledger
        assert sample_ledger.get("BTC") is None

    def test_over_removal_deletes_position(self, sample_ledger: Ledger):
        """Test removing more than held removes everything, without error."""
        removed = sample_ledger.remove("BTC", Decimal("5"))

        assert removed == Decimal("2")
        assert "BTC" not in sample_ledger
        assert sample_ledger.symbols() == ["ETH"]

    def test_remove_absent_symbol_is_noop(self, sample_ledger: Ledger):
        before = [(p.symbol, p.quantity) for p in sample_ledger.positions()]

        removed = sample_ledger.remove("SOL", Decimal("1"))

        assert removed == Decimal("0")
        assert [(p.symbol, p.quantity) for p in sample_ledger.positions()] == before

    def test_remove_is_case_insensitive(self, sample_ledger: Ledger):
        sample_ledger.remove(" eth ", Decimal("10"))

        assert "ETH" not in sample_ledger

    def test_remove_rejects_non_positive_quantity(self, sample_ledger: Ledger):
        with pytest.raises(InvalidQuantityError):
            sample_ledger.remove("BTC", Decimal("-1"))

        assert sample_ledger.quantity_of("BTC") == Decimal("2")

    @pytest.mark.parametrize("quantity", [Decimal("Infinity"), Decimal("NaN")])
    def test_remove_rejects_non_finite_quantity(self, sample_ledger: Ledger, quantity: Decimal):
        with pytest.raises(InvalidQuantityError):
            sample_ledger.remove("BTC", quantity)

        assert sample_ledger.quantity_of("BTC") == Decimal("2")


class TestTotalValue:
    """Tests for Ledger.total_value."""

    def test_empty_ledger_is_zero(self):
        total = Ledger().total_value()

        assert total == Decimal("0")
        assert isinstance(total, Decimal)

    def test_total_is_sum_of_positions(self, sample_ledger: Ledger):
        assert sample_ledger.total_value() == Decimal("120000")
        assert sample_ledger.total_value() == sum(p.quantity * p.asset.current_price for p in sample_ledger)

    def test_no_drift_across_repeated_additions(self):
        """Test many small additions stay exact."""
        asset = Asset(symbol="TRX", name="Tron", current_price=Decimal("0.1"))
        ledger = Ledger()

        for _ in range(1000):
            ledger.add(asset, Decimal("0.1"))

        assert ledger.quantity_of("TRX") == Decimal("100.0")
        assert ledger.total_value() == Decimal("10")

    def test_value_follows_live_price(self, fixed_catalog: AssetCatalog):
        """Test positions see catalog price changes."""
        ledger = Ledger()
        btc = fixed_catalog.get("BTC")
        ledger.add(btc, Decimal("2"))

        btc.current_price = Decimal("60000")

        assert ledger.total_value() == Decimal("120000")


class TestPositionsView:
    """Tests for read-only accessors."""

    def test_positions_is_snapshot_tuple(self, sample_ledger: Ledger):
        positions = sample_ledger.positions()

        assert isinstance(positions, tuple)
        assert [p.symbol for p in positions] == ["BTC", "ETH"]

    def test_is_empty(self, sample_ledger: Ledger):
        assert not sample_ledger.is_empty
        assert Ledger().is_empty

    def test_iteration_during_removal(self, sample_ledger: Ledger):
        """Test positions can be removed while iterating the ledger."""
        for position in sample_ledger:
            sample_ledger.remove(position.symbol, position.quantity)

        assert sample_ledger.is_empty


class TestScenarios:
    """End-to-end ledger scenarios."""

    def test_buy_merge_sell_all(self):
        ledger = Ledger()
        btc = Asset(symbol="BTC", name="Bitcoin", current_price=Decimal("50000"))

        ledger.add(btc, Decimal("2"))
        assert ledger.total_value() == Decimal("100000")

        ledger.add(btc, Decimal("1"))
        assert ledger.quantity_of("BTC") == Decimal("3")
        assert ledger.get("BTC").value == Decimal("150000")

        ledger.remove("BTC", Decimal("5"))
        assert ledger.is_empty
        assert ledger.total_value() == Decimal("0")

    def test_invariants_hold_for_random_sequences(self, fixed_catalog: AssetCatalog):
        """Test quantities stay positive and symbols unique under random add/remove."""
        rng = random.Random(2024)
        symbols = fixed_catalog.symbols() + ["XRP"]
        ledger = Ledger()

        for _ in range(500):
            symbol = rng.choice(symbols)
            quantity = Decimal(rng.randint(1, 400)) / Decimal("100")
            if rng.random() < 0.5 and symbol in fixed_catalog:
                ledger.add(fixed_catalog.get(symbol), quantity)
            else:
                ledger.remove(symbol, quantity)

            held = ledger.symbols()
            assert len(held) == len(set(held))
            for position in ledger.positions():
                assert position.quantity > Decimal("0")
