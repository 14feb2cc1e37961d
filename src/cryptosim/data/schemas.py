"""
Data schemas for CSV/Parquet file validation.

Defines expected columns and data types for snapshot and catalog files.
"""

from dataclasses import dataclass


@dataclass
class ColumnSchema:
    """Schema definition for a single column."""
    name: str
    dtype: str  # pandas dtype string
    required: bool = True
    nullable: bool = False


@dataclass
class FileSchema:
    """Schema definition for a file."""
    name: str
    columns: list[ColumnSchema]
    description: str

    @property
    def required_columns(self) -> list[str]:
        """Get list of required column names."""
        return [c.name for c in self.columns if c.required]

    @property
    def all_columns(self) -> list[str]:
        """Get list of all column names."""
        return [c.name for c in self.columns]

    @property
    def dtypes(self) -> dict[str, str]:
        """Column name -> pandas dtype, for read_csv."""
        return {c.name: c.dtype for c in self.columns}

    def validate_columns(self, df_columns: list[str]) -> tuple[bool, list[str]]:
        """
        Validate that a dataframe has the required columns.

        Args:
            df_columns: List of column names from the dataframe

        Returns:
            Tuple of (is_valid, list of missing columns)
        """
        missing = [col for col in self.required_columns if col not in df_columns]
        return len(missing) == 0, missing


# Numeric columns are read as strings and converted to Decimal afterwards,
# so values round-trip without float error.

# Portfolio Snapshot Schema (input/output)
SNAPSHOT_SCHEMA = FileSchema(
    name="portfolio_snapshot",
    description="Held positions with the asset state at save time",
    columns=[
        ColumnSchema(name="symbol", dtype="str", required=True),
        ColumnSchema(name="name", dtype="str", required=True),
        ColumnSchema(name="price", dtype="str", required=True),
        ColumnSchema(name="quantity", dtype="str", required=True),
    ],
)

# Asset Catalog Schema (input)
ASSET_CATALOG_SCHEMA = FileSchema(
    name="asset_catalog",
    description="Tradable assets with starting price ranges",
    columns=[
        ColumnSchema(name="symbol", dtype="str", required=True),
        ColumnSchema(name="name", dtype="str", required=True),
        ColumnSchema(name="min_price", dtype="str", required=True),
        ColumnSchema(name="max_price", dtype="str", required=True),
    ],
)
