"""
Command-line interface for the Crypto Portfolio Simulator.

Provides commands for:
- market: Show the simulated market
- buy / sell: Add to or reduce a holding
- portfolio: Show holdings and total value
- allocation: Show each holding's share of total value
- top: Show the largest holding
- simulate: Move market prices
- shell: Interactive menu
"""

import logging
import random
import sys
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Optional

import click

from cryptosim.analytics import calculate_allocation, get_top_holding
from cryptosim.config import (
    ConfigurationError,
    apply_environment_overrides,
    create_default_config,
    load_environment_overrides,
    load_simulator_config,
)
from cryptosim.data import DataLoadError, load_asset_specs, load_snapshot, save_snapshot
from cryptosim.logging import DecisionLogger, get_logger
from cryptosim.market import AssetCatalog, AssetNotFoundError, CatalogError, perturb
from cryptosim.models import SimulatorConfig
from cryptosim.portfolio import InvalidQuantityError, Ledger, round_currency, value_portfolio


logger = logging.getLogger(__name__)


class DecimalParamType(click.ParamType):
    """Click parameter type for Decimal quantities."""
    name = "decimal"

    def convert(self, value, param, ctx):
        if isinstance(value, Decimal):
            return value
        try:
            parsed = Decimal(str(value).strip())
        except InvalidOperation:
            self.fail(f"{value!r} is not a valid number", param, ctx)
        if not parsed.is_finite():
            self.fail(f"{value!r} is not a valid number", param, ctx)
        return parsed


DECIMAL = DecimalParamType()


class Session:
    """
    Market, ledger and collaborators for one CLI run.
    """

    def __init__(self, config: SimulatorConfig, decision_log: DecisionLogger):
        self.config = config
        self.decision_log = decision_log
        self.rng = random.Random(config.seed)
        self.catalog = AssetCatalog.generate(
            config.assets, rng=self.rng, price_floor=config.price_floor
        )
        self.ledger = Ledger()
        self.snapshot_path = Path(config.snapshot_path)

        self.decision_log.log_market_generated(list(self.catalog.assets), config.seed)

    def load(self) -> None:
        self.ledger = load_snapshot(self.snapshot_path, self.catalog)
        self.decision_log.log_snapshot_loaded(self.snapshot_path, self.ledger)
        logger.info("Loaded %d positions from %s", len(self.ledger), self.snapshot_path)

    def save(self) -> Path:
        path = save_snapshot(self.ledger, self.snapshot_path)
        self.decision_log.log_snapshot_saved(path, self.ledger)
        logger.info("Saved %d positions to %s", len(self.ledger), path)
        return path

    def buy(self, symbol: str, quantity: Decimal) -> None:
        """
        Raises:
            AssetNotFoundError: If the symbol is not in the market
            InvalidQuantityError: If quantity <= 0
        """
        asset = self.catalog.get(symbol)
        self.ledger.add(asset, quantity)
        self.decision_log.log_asset_added(asset, quantity, self.ledger)

    def sell(self, symbol: str, quantity: Decimal) -> Decimal:
        """
        Raises:
            InvalidQuantityError: If quantity <= 0
        """
        symbol = symbol.strip().upper()
        removed = self.ledger.remove(symbol, quantity)
        self.decision_log.log_asset_removed(symbol, quantity, removed, self.ledger)
        return removed

    def simulate(self, rounds: int = 1) -> None:
        previous_prices = self.catalog.prices()
        for _ in range(rounds):
            perturb(
                self.catalog,
                self.rng,
                max_change=self.config.max_fluctuation,
                price_floor=self.config.price_floor,
            )
        self.decision_log.log_market_simulated(previous_prices, list(self.catalog.assets), rounds)


def print_market(catalog: AssetCatalog) -> None:
    click.echo("=== MARKET ===")
    for asset in catalog:
        click.echo(str(asset))


def print_portfolio(ledger: Ledger) -> None:
    valuation = value_portfolio(ledger)
    click.echo("==== PORTFOLIO ====")
    for val in valuation.position_valuations:
        click.echo(f"{val.symbol} | Qty: {val.quantity} | Value: ${round_currency(val.value):,.2f}")
    click.echo(f"TOTAL: ${round_currency(valuation.total_value):,.2f}")
    click.echo("===================")


def print_allocation(ledger: Ledger) -> None:
    allocation = calculate_allocation(ledger)
    if not allocation:
        click.echo("Portfolio empty.")
        return

    click.echo("=== Allocation ===")
    for entry in allocation:
        click.echo(f"{entry.symbol}: {entry.percent:.2f}%")


def print_top_holding(ledger: Ledger) -> None:
    top = get_top_holding(ledger)
    if top is None:
        click.echo("Portfolio empty.")
        return

    click.echo(f"Top Holding: {top.symbol} - ${round_currency(top.value):,.2f}")


def _fail(message: str) -> None:
    click.echo(message, err=True)
    sys.exit(1)


def _load_session(session: Session) -> None:
    try:
        session.load()
    except DataLoadError as e:
        _fail(f"Error loading portfolio: {e}")


@click.group()
@click.version_option(version="0.1.0", prog_name="cryptosim")
@click.option(
    "--config", "-c",
    type=click.Path(exists=True),
    default=None,
    help="Path to simulator configuration YAML file",
)
@click.option(
    "--seed",
    type=int,
    default=None,
    help="Random seed for market prices (overrides config and environment)",
)
@click.option(
    "--snapshot", "-s",
    type=click.Path(),
    default=None,
    help="Portfolio snapshot file (.json, .csv or .parquet)",
)
@click.option(
    "--assets", "-a",
    type=click.Path(exists=True),
    default=None,
    help="Asset catalog file (.csv or .parquet) replacing the configured assets",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable debug logging",
)
@click.pass_context
def main(
    ctx: click.Context,
    config: Optional[str],
    seed: Optional[int],
    snapshot: Optional[str],
    assets: Optional[str],
    verbose: bool,
):
    """
    Crypto Portfolio Simulator.

    A paper-only cryptocurrency portfolio on a simulated market.
    No real market data, no live trading.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    try:
        if config:
            simulator_config = load_simulator_config(config)
        else:
            simulator_config = create_default_config()
        simulator_config = apply_environment_overrides(
            simulator_config, load_environment_overrides()
        )
    except ConfigurationError as e:
        _fail(f"Error loading config: {e}")

    if seed is not None:
        simulator_config.seed = seed
    if snapshot:
        simulator_config.snapshot_path = snapshot
    if assets:
        simulator_config.assets_file = assets

    if simulator_config.assets_file:
        try:
            simulator_config.assets = load_asset_specs(simulator_config.assets_file)
        except DataLoadError as e:
            _fail(f"Error loading assets: {e}")

    decision_log = get_logger(Path(simulator_config.output_dir) / "decision_log.jsonl")
    decision_log.log_config_loaded(simulator_config, config)

    try:
        ctx.obj = Session(simulator_config, decision_log)
    except CatalogError as e:
        _fail(f"Error building market: {e}")


@main.command()
@click.pass_obj
def market(session: Session):
    """Show all assets and current prices."""
    print_market(session.catalog)


@main.command()
@click.argument("symbol")
@click.argument("quantity", type=DECIMAL)
@click.pass_obj
def buy(session: Session, symbol: str, quantity: Decimal):
    """
    Buy QUANTITY units of SYMBOL.

    Adds to an existing holding or opens a new one, then saves the snapshot.
    """
    _load_session(session)

    try:
        session.buy(symbol, quantity)
    except AssetNotFoundError:
        _fail("Not found.")
    except InvalidQuantityError as e:
        _fail(f"Error: {e}")

    session.save()
    click.echo("Added.")


@main.command()
@click.argument("symbol")
@click.argument("quantity", type=DECIMAL)
@click.pass_obj
def sell(session: Session, symbol: str, quantity: Decimal):
    """
    Sell QUANTITY units of SYMBOL.

    Selling the full holding or more closes the position.
    """
    _load_session(session)

    try:
        session.sell(symbol, quantity)
    except InvalidQuantityError as e:
        _fail(f"Error: {e}")

    session.save()
    click.echo("Removed.")


@main.command()
@click.pass_obj
def portfolio(session: Session):
    """Show holdings valued at current prices."""
    _load_session(session)
    print_portfolio(session.ledger)


@main.command()
@click.pass_obj
def allocation(session: Session):
    """Show each holding as a percentage of total value."""
    _load_session(session)
    print_allocation(session.ledger)


@main.command()
@click.pass_obj
def top(session: Session):
    """Show the largest holding by value."""
    _load_session(session)
    print_top_holding(session.ledger)


@main.command()
@click.option(
    "--rounds", "-n",
    type=click.IntRange(min=1),
    default=1,
    help="Number of market moves to simulate",
)
@click.pass_obj
def simulate(session: Session, rounds: int):
    """Simulate market moves and show the resulting prices."""
    session.simulate(rounds)
    click.echo("Market updated.")
    print_market(session.catalog)


MENU = """
1. View Market
2. Buy Asset
3. Sell Asset
4. View Portfolio
5. Allocation
6. Top Holding
7. Simulate Market Move
8. Save Portfolio
9. Load Portfolio
0. Exit"""


def _prompt_quantity() -> Optional[Decimal]:
    raw = click.prompt("Quantity", default="", show_default=False)
    try:
        quantity = Decimal(raw.strip())
    except InvalidOperation:
        click.echo("Invalid quantity.")
        return None
    if not quantity.is_finite():
        click.echo("Invalid quantity.")
        return None
    return quantity


def _shell_buy(session: Session) -> None:
    symbol = click.prompt("Symbol", default="", show_default=False)
    if session.catalog.find_by_symbol(symbol) is None:
        click.echo("Not found.")
        return

    quantity = _prompt_quantity()
    if quantity is None:
        return

    try:
        session.buy(symbol, quantity)
    except InvalidQuantityError as e:
        click.echo(f"Error: {e}")
        return
    click.echo("Added.")


def _shell_sell(session: Session) -> None:
    symbol = click.prompt("Symbol", default="", show_default=False)
    quantity = _prompt_quantity()
    if quantity is None:
        return

    try:
        session.sell(symbol, quantity)
    except InvalidQuantityError as e:
        click.echo(f"Error: {e}")
        return
    click.echo("Removed.")


@main.command()
@click.pass_obj
def shell(session: Session):
    """
    Interactive menu.

    Market prices and holdings live for the whole session; use Save/Load
    to persist holdings between runs.
    """
    while True:
        click.echo(MENU)
        choice = click.prompt("Select", default="", show_default=False).strip()

        if choice == "1":
            print_market(session.catalog)
        elif choice == "2":
            _shell_buy(session)
        elif choice == "3":
            _shell_sell(session)
        elif choice == "4":
            print_portfolio(session.ledger)
        elif choice == "5":
            print_allocation(session.ledger)
        elif choice == "6":
            print_top_holding(session.ledger)
        elif choice == "7":
            session.simulate()
            click.echo("Market updated.")
        elif choice == "8":
            session.save()
            click.echo("Saved.")
        elif choice == "9":
            try:
                session.load()
            except DataLoadError as e:
                click.echo(f"Error loading portfolio: {e}")
                continue
            click.echo("Loaded.")
        elif choice == "0":
            break


if __name__ == "__main__":
    main()
