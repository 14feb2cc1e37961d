"""
Default asset catalog for the simulated market.

Symbols, display names and the range each starting price is drawn from.
"""

from decimal import Decimal

from cryptosim.models import AssetSpec


DEFAULT_ASSET_SPECS: tuple[AssetSpec, ...] = (
    AssetSpec("BTC", "Bitcoin", Decimal("30000"), Decimal("60000")),
    AssetSpec("ETH", "Ethereum", Decimal("1500"), Decimal("4000")),
    AssetSpec("TRX", "Tron", Decimal("0.05"), Decimal("0.20")),
    AssetSpec("BNB", "Binance Coin", Decimal("200"), Decimal("600")),
    AssetSpec("SOL", "Solana", Decimal("20"), Decimal("200")),
    AssetSpec("ADA", "Cardano", Decimal("0.2"), Decimal("2.0")),
    AssetSpec("XRP", "Ripple", Decimal("0.3"), Decimal("1.5")),
    AssetSpec("DOGE", "Dogecoin", Decimal("0.05"), Decimal("0.5")),
)


def get_default_symbols() -> list[str]:
    """Symbols of the default catalog, in catalog order."""
    return [spec.symbol for spec in DEFAULT_ASSET_SPECS]
