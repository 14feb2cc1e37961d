"""
Snapshot codec for the holdings ledger.

Encodes ledger positions as flat {symbol, name, price, quantity} records and
decodes them back into a fresh ledger against the live catalog. Records for
symbols the catalog does not know are dropped.
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable

from cryptosim.market.catalog import AssetCatalog
from cryptosim.models import SnapshotRecord, normalize_symbol
from cryptosim.portfolio.ledger import Ledger


logger = logging.getLogger(__name__)

SNAPSHOT_FIELDS = ("symbol", "name", "price", "quantity")


class SnapshotError(Exception):
    """Raised when snapshot records are malformed."""
    pass


def encode_ledger(ledger: Ledger) -> list[SnapshotRecord]:
    """
    Encode ledger positions as snapshot records.

    Args:
        ledger: Ledger to encode

    Returns:
        One SnapshotRecord per position, in ledger order
    """
    return [
        SnapshotRecord(
            symbol=position.symbol,
            name=position.asset.name,
            price=position.asset.current_price,
            quantity=position.quantity,
        )
        for position in ledger.positions()
    ]


def decode_snapshot(
    records: Iterable[SnapshotRecord],
    catalog: AssetCatalog,
) -> Ledger:
    """
    Rebuild a ledger from snapshot records.

    Each record is resolved against the catalog by symbol; the embedded
    price and name are ignored in favour of the live asset. Records with
    unknown symbols are skipped, and repeated symbols are merged.

    Args:
        records: Snapshot records
        catalog: Live asset catalog

    Returns:
        New Ledger

    Raises:
        SnapshotError: If a record has a non-positive quantity
    """
    ledger = Ledger()

    for record in records:
        asset = catalog.find_by_symbol(record.symbol)
        if asset is None:
            logger.debug("Skipping snapshot record for unknown symbol %s", record.symbol)
            continue
        if record.quantity <= 0:
            raise SnapshotError(
                f"Snapshot quantity for {record.symbol} must be positive, got {record.quantity}"
            )
        ledger.add(asset, record.quantity)

    return ledger


def records_to_dicts(records: Iterable[SnapshotRecord]) -> list[dict[str, str]]:
    """
    Convert snapshot records to plain dictionaries.

    Decimals are written as strings so no precision is lost in JSON.
    """
    return [
        {
            "symbol": record.symbol,
            "name": record.name,
            "price": str(record.price),
            "quantity": str(record.quantity),
        }
        for record in records
    ]


def dicts_to_records(raw_records: Iterable[Any]) -> list[SnapshotRecord]:
    """
    Parse plain dictionaries into snapshot records.

    Args:
        raw_records: Iterable of mappings with symbol, name, price, quantity

    Returns:
        List of SnapshotRecord objects

    Raises:
        SnapshotError: If a record is not a mapping, misses a field, or has
            a non-numeric price or quantity
    """
    records = []

    for index, raw in enumerate(raw_records):
        if not isinstance(raw, dict):
            raise SnapshotError(f"Snapshot record {index} is not an object: {raw!r}")

        missing = [name for name in SNAPSHOT_FIELDS if name not in raw]
        if missing:
            raise SnapshotError(f"Snapshot record {index} is missing fields: {missing}")

        records.append(
            SnapshotRecord(
                symbol=normalize_symbol(str(raw["symbol"])),
                name=str(raw["name"]),
                price=_parse_decimal(raw["price"], "price", index),
                quantity=_parse_decimal(raw["quantity"], "quantity", index),
            )
        )

    return records


def _parse_decimal(value: Any, field_name: str, index: int) -> Decimal:
    try:
        parsed = Decimal(str(value))
    except InvalidOperation:
        raise SnapshotError(f"Invalid {field_name} in snapshot record {index}: {value!r}")

    if not parsed.is_finite():
        raise SnapshotError(f"Invalid {field_name} in snapshot record {index}: {value!r}")

    return parsed
