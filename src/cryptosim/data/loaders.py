"""
Data loading and saving functions for portfolio snapshots and catalog files.

Snapshots are written as JSON by default, or as CSV/Parquet when the path
has one of those suffixes. Tabular files go through pandas and are checked
against the schemas in cryptosim.data.schemas.
"""

import json
from decimal import Decimal, InvalidOperation
from pathlib import Path

import pandas as pd

from cryptosim.data.schemas import (
    ASSET_CATALOG_SCHEMA,
    SNAPSHOT_SCHEMA,
    FileSchema,
)
from cryptosim.data.snapshot import (
    SnapshotError,
    decode_snapshot,
    dicts_to_records,
    encode_ledger,
    records_to_dicts,
)
from cryptosim.market.catalog import AssetCatalog
from cryptosim.models import AssetSpec
from cryptosim.portfolio.ledger import Ledger


TABULAR_SUFFIXES = (".csv", ".parquet")


class DataLoadError(Exception):
    """Raised when data cannot be loaded or is invalid."""
    pass


def save_snapshot(
    ledger: Ledger,
    output_path: str | Path,
) -> Path:
    """
    Save a ledger snapshot to file.

    Args:
        ledger: Ledger to save
        output_path: Destination; .csv and .parquet are written as tables,
                     anything else as a JSON array

    Returns:
        Path to the saved file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    records = records_to_dicts(encode_ledger(ledger))
    suffix = output_path.suffix.lower()

    if suffix in TABULAR_SUFFIXES:
        df = pd.DataFrame(records, columns=SNAPSHOT_SCHEMA.all_columns)
        if suffix == ".parquet":
            df.to_parquet(output_path, index=False)
        else:
            df.to_csv(output_path, index=False)
    else:
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(records, f, indent=2)

    return output_path


def load_snapshot(
    file_path: str | Path,
    catalog: AssetCatalog,
) -> Ledger:
    """
    Load a ledger snapshot from file.

    A missing file yields an empty ledger. Positions whose symbol is not in
    the catalog are dropped; the rest are valued at live catalog prices.

    Args:
        file_path: Snapshot file (JSON, CSV or Parquet)
        catalog: Live asset catalog used to resolve symbols

    Returns:
        Restored Ledger

    Raises:
        DataLoadError: If the file cannot be read or is invalid
    """
    file_path = Path(file_path)
    if not file_path.exists():
        return Ledger()

    if file_path.suffix.lower() in TABULAR_SUFFIXES:
        df = _load_table(file_path, SNAPSHOT_SCHEMA)
        raw_records = df[SNAPSHOT_SCHEMA.all_columns].to_dict(orient="records")
    else:
        raw_records = _load_json_records(file_path)

    try:
        return decode_snapshot(dicts_to_records(raw_records), catalog)
    except SnapshotError as e:
        raise DataLoadError(f"Invalid snapshot {file_path}: {e}")


def load_asset_specs(file_path: str | Path) -> list[AssetSpec]:
    """
    Load catalog bootstrap entries from CSV/Parquet file.

    Args:
        file_path: File with columns: symbol, name, min_price, max_price

    Returns:
        List of AssetSpec objects in file order

    Raises:
        DataLoadError: If file cannot be loaded or is invalid
    """
    file_path = Path(file_path)
    df = _load_table(file_path, ASSET_CATALOG_SCHEMA)

    specs = []
    for _, row in df.iterrows():
        symbol = str(row["symbol"]).upper().strip()
        try:
            min_price = Decimal(str(row["min_price"]).strip())
            max_price = Decimal(str(row["max_price"]).strip())
        except InvalidOperation:
            raise DataLoadError(f"Invalid price range for {symbol} in {file_path}")

        specs.append(
            AssetSpec(
                symbol=symbol,
                name=str(row["name"]).strip(),
                min_price=min_price,
                max_price=max_price,
            )
        )

    return specs


def _load_json_records(file_path: Path) -> list:
    """
    Load the record list from a JSON snapshot.

    Raises:
        DataLoadError: If the file is not valid JSON or not a list
    """
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            # Keep numeric values exact if the file stores them unquoted
            data = json.load(f, parse_float=Decimal)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise DataLoadError(f"Failed to load JSON file {file_path}: {e}")

    if not isinstance(data, list):
        raise DataLoadError(f"Snapshot {file_path} must contain a list of positions")

    return data


def _load_table(file_path: Path, schema: FileSchema) -> pd.DataFrame:
    """
    Load a CSV or Parquet file and validate against schema.

    Args:
        file_path: Path to file
        schema: Expected file schema

    Returns:
        Loaded DataFrame

    Raises:
        DataLoadError: If file cannot be loaded or has missing columns
    """
    if not file_path.exists():
        raise DataLoadError(f"File not found: {file_path}")

    if file_path.suffix.lower() == ".parquet":
        try:
            df = pd.read_parquet(file_path)
        except Exception as e:
            raise DataLoadError(f"Failed to load parquet file {file_path}: {e}")
        df = df.astype(str)
    else:
        try:
            df = pd.read_csv(file_path, dtype=schema.dtypes, keep_default_na=False)
        except Exception as e:
            raise DataLoadError(f"Failed to load CSV file {file_path}: {e}")

    # Validate columns
    is_valid, missing = schema.validate_columns(df.columns.tolist())
    if not is_valid:
        raise DataLoadError(
            f"File {file_path} is missing required columns: {missing}"
        )

    return df
