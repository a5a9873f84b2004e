"""
Command-Line Interface for fincalc.

Purpose
-------
Runs the most common calculators from the shell without writing Python.

Commands
--------
- bond: Price a fixed-coupon bond with duration and convexity
- option: Black-Scholes price and Greeks
- irr: NPV, IRR, payback and profitability index of a cash-flow series
- monte-carlo: Terminal-value distribution of a portfolio
- frontier: Greedy efficient frontier from an asset file
- ddm: Gordon-growth dividend discount valuation
- life: Life expectancy and death probability
- info: Version and dependency information

Example Usage
-------------
    $ fincalc bond --face 1000 --coupon 5 --years 10 --yield 6
    $ fincalc irr --initial 1000 --flows 400,400,400 --rate 10
    $ fincalc monte-carlo --initial 10000 --return 7 --std-dev 15 --years 30 --seed 42
    $ fincalc frontier --assets assets.json --output results/frontier.json
    $ fincalc --quiet ddm --dividend 2 --growth 3 --required 8
"""

from __future__ import annotations

import logging
import sys
from importlib import metadata
from pathlib import Path
from typing import List, NoReturn, Optional, Tuple

import click
from pydantic import ValidationError as PydanticValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .exceptions import FinCalcError

logger = logging.getLogger(__name__)


def _fail(message: str) -> NoReturn:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _render(ctx: click.Context, title: str, rows: List[Tuple[str, str]]) -> None:
    """Print metric rows as a rich table, or as plain ``name: value`` lines when quiet."""
    if ctx.obj.get("quiet", False):
        for name, value in rows:
            click.echo(f"{name}: {value}")
        return

    console: Console = ctx.obj["console"]
    table = Table(title=title, show_header=True)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green", justify="right")
    for name, value in rows:
        table.add_row(name, value)
    console.print(table)


def _save(ctx: click.Context, result, output: Optional[Path]) -> None:
    if output is None:
        return
    from .serialization import save_result

    save_result(result, output)
    if not ctx.obj.get("quiet", False):
        click.echo(f"Results saved to {output}")


def _parse_flows(text: str) -> List[float]:
    try:
        return [float(x.strip()) for x in text.split(",") if x.strip()]
    except ValueError as e:
        raise click.BadParameter(f"cash flows must be comma-separated numbers ({e})")


@click.group()
@click.version_option(version=__version__, prog_name="fincalc")
@click.option("--quiet", "-q", is_flag=True, help="Plain output without tables")
@click.pass_context
def main(ctx: click.Context, quiet: bool) -> None:
    """
    fincalc - Financial calculation engine.

    Time-value, fixed income, options, capital budgeting, portfolio and
    actuarial calculators.

    Use 'fincalc COMMAND --help' for command-specific help.
    """
    from .config import load_settings

    try:
        settings = load_settings()
    except FinCalcError as e:
        _fail(str(e))

    _configure_logging(settings.effective_log_level)
    ctx.ensure_object(dict)
    ctx.obj["quiet"] = quiet
    ctx.obj["console"] = Console()
    ctx.obj["settings"] = settings


@main.command()
@click.option("--face", type=float, default=1000.0, show_default=True, help="Face value")
@click.option("--coupon", type=float, required=True, help="Annual coupon rate (%)")
@click.option("--years", type=float, required=True, help="Years to maturity")
@click.option("--yield", "market_yield", type=float, required=True, help="Market yield (%)")
@click.option("--frequency", type=int, default=2, show_default=True, help="Coupons per year")
@click.pass_context
def bond(
    ctx: click.Context,
    face: float,
    coupon: float,
    years: float,
    market_yield: float,
    frequency: int,
) -> None:
    """
    Price a bond.

    Example:
        fincalc bond --coupon 5 --years 10 --yield 6
    """
    from .config import BondConfig

    try:
        result = BondConfig(
            face_value=face,
            coupon_rate=coupon,
            years=years,
            market_yield=market_yield,
            payments_per_year=frequency,
        ).price()
    except (PydanticValidationError, FinCalcError) as e:
        _fail(str(e))

    if result.premium:
        standing = "Premium"
    elif result.discount:
        standing = "Discount"
    else:
        standing = "Par"

    _render(ctx, "Bond", [
        ("Price", f"{result.price:,.2f}"),
        ("Duration", f"{result.duration:.4f}"),
        ("Modified duration", f"{result.modified_duration:.4f}"),
        ("Convexity", f"{result.convexity:.4f}"),
        ("Current yield", f"{result.current_yield:.2f}%"),
        ("Standing", standing),
    ])


@main.command()
@click.option("--spot", type=float, required=True, help="Underlying price")
@click.option("--strike", type=float, required=True, help="Strike price")
@click.option("--time", "maturity", type=float, required=True, help="Years to expiry")
@click.option("--rate", type=float, default=0.05, show_default=True, help="Risk-free rate (decimal)")
@click.option("--vol", type=float, required=True, help="Volatility (decimal)")
@click.option("--type", "option_type", type=click.Choice(["call", "put"]), default="call", show_default=True)
@click.option("--cdf", type=click.Choice(["zelen_severo", "exact"]), default="zelen_severo", show_default=True)
@click.pass_context
def option(
    ctx: click.Context,
    spot: float,
    strike: float,
    maturity: float,
    rate: float,
    vol: float,
    option_type: str,
    cdf: str,
) -> None:
    """
    Black-Scholes price and Greeks of a European option.

    Example:
        fincalc option --spot 100 --strike 100 --time 1 --vol 0.2
    """
    from .config import OptionConfig
    from .options import black_scholes

    try:
        config = OptionConfig(
            spot=spot,
            strike=strike,
            time_to_maturity_years=maturity,
            risk_free_rate=rate,
            volatility=vol,
            option_type=option_type,
            cdf=cdf,
        )
        result = black_scholes(config.to_domain(), cdf=config.cdf)
    except (PydanticValidationError, FinCalcError) as e:
        _fail(str(e))

    _render(ctx, f"European {option_type}", [
        ("Price", f"{result.price:.4f}"),
        ("Delta", f"{result.delta:.4f}"),
        ("Gamma", f"{result.gamma:.6f}"),
        ("Vega", f"{result.vega:.4f}"),
        ("Theta", f"{result.theta:.4f}"),
        ("Rho", f"{result.rho:.4f}"),
    ])


@main.command()
@click.option("--initial", type=float, required=True, help="Initial investment")
@click.option("--flows", type=str, required=True, help="Cash flows, comma-separated (e.g. 400,400,400)")
@click.option("--rate", type=float, default=10.0, show_default=True, help="Discount rate (%)")
@click.pass_context
def irr(ctx: click.Context, initial: float, flows: str, rate: float) -> None:
    """
    NPV, IRR and payback of an investment.

    Example:
        fincalc irr --initial 1000 --flows 400,400,400 --rate 10
    """
    from .config import CashFlowConfig

    try:
        result = CashFlowConfig(
            initial_investment=initial,
            cash_flows=_parse_flows(flows),
            discount_rate=rate,
        ).evaluate()
    except (PydanticValidationError, FinCalcError) as e:
        _fail(str(e))

    irr_text = f"{result.irr:.2f}%" if result.irr_converged else "did not converge"
    payback_text = f"{result.payback:.2f}" if result.payback is not None else "never"
    pi_text = f"{result.profitability_index:.4f}" if result.profitability_index is not None else "n/a"
    _render(ctx, "Cash Flow Analysis", [
        ("NPV", f"{result.npv:,.2f}"),
        ("IRR", irr_text),
        ("Payback (periods)", payback_text),
        ("Profitability index", pi_text),
        ("Total cash flow", f"{result.total_cashflow:,.2f}"),
    ])


@main.command("monte-carlo")
@click.option("--initial", type=float, required=True, help="Initial investment")
@click.option("--return", "annual_return", type=float, required=True, help="Expected annual return (%)")
@click.option("--std-dev", type=float, required=True, help="Annual volatility (%)")
@click.option("--years", type=int, required=True, help="Horizon in years")
@click.option("--simulations", "-n", type=int, default=1000, show_default=True, help="Number of trials")
@click.option("--seed", "-s", type=int, default=None, help="Random seed (default: FINCALC_DEFAULT_SEED)")
@click.option("--output", "-o", type=click.Path(path_type=Path), default=None, help="Save result as JSON")
@click.pass_context
def monte_carlo(
    ctx: click.Context,
    initial: float,
    annual_return: float,
    std_dev: float,
    years: int,
    simulations: int,
    seed: Optional[int],
    output: Optional[Path],
) -> None:
    """
    Monte Carlo simulation of terminal portfolio value.

    Example:
        fincalc monte-carlo --initial 10000 --return 7 --std-dev 15 --years 30 -n 5000
    """
    from .config import MonteCarloConfig

    if seed is None:
        seed = ctx.obj["settings"].default_seed

    try:
        config = MonteCarloConfig(
            initial=initial,
            annual_return=annual_return,
            std_dev=std_dev,
            years=years,
            simulations=simulations,
            seed=seed,
        )
        if not ctx.obj.get("quiet", False):
            ctx.obj["console"].print(
                f"[bold]Running {config.simulations:,} simulations over {config.years} years...[/bold]"
            )
        result = config.run()
    except (PydanticValidationError, FinCalcError) as e:
        _fail(str(e))

    _render(ctx, "Simulation Results", [
        ("Simulations", f"{result.simulations:,}"),
        ("Mean", f"{result.mean:,.2f}"),
        ("Median", f"{result.median:,.2f}"),
        ("10th percentile", f"{result.percentile_10:,.2f}"),
        ("90th percentile", f"{result.percentile_90:,.2f}"),
        ("Best case", f"{result.best_case:,.2f}"),
        ("Worst case", f"{result.worst_case:,.2f}"),
        ("Probability of loss", f"{result.probability_of_loss:.1%}"),
    ])
    _save(ctx, result, output)


@main.command()
@click.option(
    "--assets", "-a",
    type=click.Path(exists=True, path_type=Path),
    required=True,
    help="JSON list of assets (name, expected_return, std_dev, correlations)"
)
@click.option("--risk-free-rate", type=float, default=2.0, show_default=True, help="Risk-free rate (%)")
@click.option("--output", "-o", type=click.Path(path_type=Path), default=None, help="Save frontier as JSON")
@click.pass_context
def frontier(ctx: click.Context, assets: Path, risk_free_rate: float, output: Optional[Path]) -> None:
    """
    Trace the greedy efficient frontier and report the max-Sharpe point.

    Example:
        fincalc frontier -a assets.json --risk-free-rate 3
    """
    from .config import FrontierConfig
    from .serialization import load_assets

    try:
        asset_configs = load_assets(assets)
        config = FrontierConfig(risk_free_rate=risk_free_rate)
        result = config.to_domain().run(
            [a.to_domain() for a in asset_configs],
            risk_free_rate=config.risk_free_rate,
        )
    except (PydanticValidationError, FinCalcError) as e:
        _fail(str(e))

    best = result.optimal
    rows = [
        ("Points", f"{len(result.frontier)}"),
        ("Optimal return", f"{best.expected_return:.2f}%"),
        ("Optimal risk", f"{best.risk:.2f}%"),
        ("Optimal Sharpe", f"{best.sharpe:.4f}"),
    ]
    rows.extend((f"Weight {w['asset']}", f"{w['weight']:.1%}") for w in best.weights)
    _render(ctx, "Efficient Frontier", rows)
    _save(ctx, result, output)


@main.command()
@click.option("--dividend", type=float, required=True, help="Current annual dividend")
@click.option("--growth", type=float, required=True, help="Dividend growth rate (%)")
@click.option("--required", "required_return", type=float, required=True, help="Required return (%)")
@click.pass_context
def ddm(ctx: click.Context, dividend: float, growth: float, required_return: float) -> None:
    """
    Gordon-growth dividend discount valuation.

    Exits with an error when the required return does not exceed growth.
    """
    from .valuation import calculate_ddm

    result = calculate_ddm(dividend, growth, required_return)
    if not result.ok:
        _fail(result.error)

    _render(ctx, "Dividend Discount Model", [
        ("Intrinsic value", f"{result.intrinsic_value:,.2f}"),
        ("Next dividend", f"{result.next_dividend:,.4f}"),
        ("Dividend yield", f"{result.dividend_yield_pct:.2f}%"),
    ])


@main.command()
@click.option("--age", type=float, required=True, help="Current age")
@click.option("--smoker", is_flag=True, help="Apply smoker adjustments")
@click.option(
    "--health",
    type=click.Choice(["excellent", "good", "average", "poor"]),
    default="good",
    show_default=True,
)
@click.option("--years", type=int, default=10, show_default=True, help="Horizon for death probability")
@click.pass_context
def life(ctx: click.Context, age: float, smoker: bool, health: str, years: int) -> None:
    """
    Life expectancy and probability of death within a horizon.

    Example:
        fincalc life --age 45 --smoker --years 20
    """
    from .actuarial import death_probability, life_expectancy

    try:
        expectancy = life_expectancy(age, is_smoker=smoker, health=health)
        probability = death_probability(age, years, is_smoker=smoker)
    except FinCalcError as e:
        _fail(str(e))

    _render(ctx, "Life Expectancy", [
        ("Life expectancy", f"{expectancy:.1f}"),
        ("Years remaining", f"{max(0.0, expectancy - age):.1f}"),
        (f"Death probability ({years}y)", f"{probability:.2%}"),
    ])


@main.command()
@click.pass_context
def info(ctx: click.Context) -> None:
    """
    Display package, dependency and settings information.
    """
    settings = ctx.obj["settings"]
    info_lines = [
        f"fincalc Version: {__version__}",
        f"Python: {sys.version.split()[0]}",
    ]

    for name in ("numpy", "pandas", "scipy", "pydantic", "pydantic-settings", "click", "rich"):
        try:
            info_lines.append(f"{name}: {metadata.version(name)}")
        except metadata.PackageNotFoundError:
            info_lines.append(f"{name}: not installed")

    info_lines.append(f"Log level: {settings.effective_log_level}")
    info_lines.append(f"Default seed: {settings.default_seed}")

    if ctx.obj.get("quiet", False):
        for line in info_lines:
            click.echo(line)
    else:
        ctx.obj["console"].print(Panel("\n".join(info_lines), title="System Information"))


if __name__ == "__main__":
    main()
