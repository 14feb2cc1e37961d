"""
Append-only decision logging for the Crypto Portfolio Simulator.

Every state-changing action (market generation and moves, buys, sells,
snapshot saves and loads) is logged with a timestamp to support
auditability and reproducibility.
"""

import json
from datetime import datetime, date
from decimal import Decimal
from pathlib import Path
from typing import Any, Optional

from cryptosim.analytics.allocation import summarize_allocation
from cryptosim.models import (
    ActionType,
    Asset,
    DecisionLogEntry,
    SimulatorConfig,
)
from cryptosim.portfolio.ledger import Ledger


class DecisionLogger:
    """
    Append-only decision logger.

    Writes all decisions to a JSONL file for audit purposes.
    Each line is a complete JSON object representing one action.
    """

    def __init__(self, log_path: str | Path):
        """
        Initialize the decision logger.

        Args:
            log_path: Path to the log file (will be created if not exists)
        """
        self.log_path = Path(log_path)
        self.log_path.parent.mkdir(parents=True, exist_ok=True)

    def log(self, entry: DecisionLogEntry) -> None:
        """
        Write a decision log entry.

        Args:
            entry: DecisionLogEntry to write
        """
        record = {
            "timestamp": entry.timestamp.isoformat(),
            "action_type": entry.action_type.value,
            "details": entry.details,
        }

        with open(self.log_path, "a") as f:
            f.write(json.dumps(record, cls=DecimalEncoder) + "\n")

    def _log_action(self, action_type: ActionType, details: dict) -> None:
        self.log(DecisionLogEntry.create(action_type=action_type, details=details))

    def log_config_loaded(
        self,
        config: SimulatorConfig,
        config_path: Optional[str],
    ) -> None:
        """
        Log configuration loading.

        Args:
            config: Loaded configuration
            config_path: Path to configuration file (None for defaults)
        """
        details = {
            "config_path": config_path,
            "seed": config.seed,
            "price_floor": str(config.price_floor),
            "max_fluctuation": str(config.max_fluctuation),
            "snapshot_path": config.snapshot_path,
            "num_assets": len(config.assets),
            "assets_file": config.assets_file,
        }
        self._log_action(ActionType.CONFIG_LOADED, details)

    def log_market_generated(self, assets: list[Asset], seed: Optional[int]) -> None:
        """
        Log catalog generation with the starting prices.

        Args:
            assets: Generated assets
            seed: Seed used (None if unseeded)
        """
        details = {
            "seed": seed,
            "prices": {a.symbol: str(a.current_price) for a in assets},
        }
        self._log_action(ActionType.MARKET_GENERATED, details)

    def log_market_simulated(
        self,
        previous_prices: dict[str, Decimal],
        assets: list[Asset],
        rounds: int = 1,
    ) -> None:
        """
        Log a market simulation step.

        Args:
            previous_prices: Prices by symbol before the move
            assets: Assets after the move
            rounds: Number of fluctuation steps applied
        """
        changes = {}
        for asset in assets:
            before = previous_prices.get(asset.symbol)
            if before is None:
                continue
            changes[asset.symbol] = {
                "from": str(before),
                "to": str(asset.current_price),
            }

        details = {
            "rounds": rounds,
            "changes": changes,
        }
        self._log_action(ActionType.MARKET_SIMULATED, details)

    def log_asset_added(self, asset: Asset, quantity: Decimal, ledger: Ledger) -> None:
        """
        Log a buy.

        Args:
            asset: Asset bought
            quantity: Units added
            ledger: Ledger after the update
        """
        details = {
            "symbol": asset.symbol,
            "quantity": str(quantity),
            "price": str(asset.current_price),
            "position_quantity": str(ledger.quantity_of(asset.symbol)),
            **summarize_allocation(ledger),
        }
        self._log_action(ActionType.ASSET_ADDED, details)

    def log_asset_removed(
        self,
        symbol: str,
        requested: Decimal,
        removed: Decimal,
        ledger: Ledger,
    ) -> None:
        """
        Log a sell.

        Args:
            symbol: Symbol sold
            requested: Units requested for removal
            removed: Units actually removed (capped at the held quantity)
            ledger: Ledger after the update
        """
        details = {
            "symbol": symbol,
            "requested_quantity": str(requested),
            "removed_quantity": str(removed),
            "position_closed": symbol not in ledger,
            **summarize_allocation(ledger),
        }
        self._log_action(ActionType.ASSET_REMOVED, details)

    def log_snapshot_saved(self, path: str | Path, ledger: Ledger) -> None:
        """
        Log a snapshot save.

        Args:
            path: Snapshot file written
            ledger: Ledger saved
        """
        details = {
            "path": str(path),
            "num_positions": len(ledger),
            "symbols": ledger.symbols(),
        }
        self._log_action(ActionType.SNAPSHOT_SAVED, details)

    def log_snapshot_loaded(self, path: str | Path, ledger: Ledger) -> None:
        """
        Log a snapshot load.

        Args:
            path: Snapshot file read
            ledger: Restored ledger
        """
        details = {
            "path": str(path),
            "num_positions": len(ledger),
            "symbols": ledger.symbols(),
            "total_value": str(ledger.total_value()),
        }
        self._log_action(ActionType.SNAPSHOT_LOADED, details)

    def read_log(self) -> list[DecisionLogEntry]:
        """
        Read all entries from the log file.

        Returns:
            List of DecisionLogEntry objects
        """
        if not self.log_path.exists():
            return []

        entries = []
        with open(self.log_path, "r") as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue
                record = json.loads(line)
                entries.append(
                    DecisionLogEntry(
                        timestamp=datetime.fromisoformat(record["timestamp"]),
                        action_type=ActionType(record["action_type"]),
                        details=record.get("details", {}),
                    )
                )

        return entries

    def filter_by_action_type(
        self,
        action_type: ActionType,
    ) -> list[DecisionLogEntry]:
        """
        Get log entries of a specific action type.

        Args:
            action_type: Action type to filter by

        Returns:
            Filtered list of entries
        """
        return [e for e in self.read_log() if e.action_type == action_type]


class DecimalEncoder(json.JSONEncoder):
    """JSON encoder that handles Decimal types."""

    def default(self, obj: Any) -> Any:
        if isinstance(obj, Decimal):
            return str(obj)
        if isinstance(obj, (date, datetime)):
            return obj.isoformat()
        return super().default(obj)


# Global logger instance (initialized on first use)
_global_logger: Optional[DecisionLogger] = None


def get_logger(log_path: Optional[str | Path] = None) -> DecisionLogger:
    """
    Get or create the global decision logger.

    Args:
        log_path: Optional path to initialize logger (required on first call)

    Returns:
        DecisionLogger instance
    """
    global _global_logger

    if _global_logger is None:
        if log_path is None:
            log_path = "output/decision_log.jsonl"
        _global_logger = DecisionLogger(log_path)
    elif log_path is not None:
        # Allow reinitializing with new path
        _global_logger = DecisionLogger(log_path)

    return _global_logger


def log_action(
    action_type: ActionType,
    details: dict,
    log_path: Optional[str | Path] = None,
) -> None:
    """
    Convenience function to log an action.

    Args:
        action_type: Type of action
        details: Action details dictionary
        log_path: Optional path to log file
    """
    logger = get_logger(log_path)
    entry = DecisionLogEntry.create(
        action_type=action_type,
        details=details,
    )
    logger.log(entry)
