"""
Data module for the Crypto Portfolio Simulator.

Provides the default asset catalog, the snapshot codec, and loading/saving
of snapshots and catalog files.
"""

from cryptosim.data.assets import DEFAULT_ASSET_SPECS
from cryptosim.data.loaders import (
    DataLoadError,
    load_asset_specs,
    load_snapshot,
    save_snapshot,
)
from cryptosim.data.schemas import (
    ASSET_CATALOG_SCHEMA,
    SNAPSHOT_SCHEMA,
)
from cryptosim.data.snapshot import (
    SnapshotError,
    decode_snapshot,
    encode_ledger,
)

__all__ = [
    "DEFAULT_ASSET_SPECS",
    "DataLoadError",
    "load_asset_specs",
    "load_snapshot",
    "save_snapshot",
    "ASSET_CATALOG_SCHEMA",
    "SNAPSHOT_SCHEMA",
    "SnapshotError",
    "decode_snapshot",
    "encode_ledger",
]
