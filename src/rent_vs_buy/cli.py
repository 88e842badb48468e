from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict
from pathlib import Path
from typing import Optional

import typer

from .config import SCENARIO_ENV_VAR, Scenario, build_scenario, dump_scenario, load_scenario
from .model import DEFAULT_TOLERANCE, evaluate
from .schemas import Evaluation, InvalidInputError

app = typer.Typer(help="Compare the total cost of buying versus renting a home.")


def _default_scenario_path() -> Optional[Path]:
    value = os.environ.get(SCENARIO_ENV_VAR)
    return Path(value) if value else None


def _money(value: float) -> str:
    return f"${value:,.0f}"


@app.command()
def run(
    scenario: Optional[Path] = typer.Option(
        default_factory=_default_scenario_path,
        exists=True,
        dir_okay=False,
        help=f"YAML scenario file (env {SCENARIO_ENV_VAR} if omitted).",
    ),
    home_price: Optional[float] = typer.Option(None, help="Purchase price of the home."),
    down_payment: Optional[float] = typer.Option(None, help="Cash down payment."),
    interest_rate: Optional[float] = typer.Option(
        None, help="Annual mortgage rate in percent (e.g., 4.5)."
    ),
    loan_term_years: Optional[int] = typer.Option(None, help="Mortgage term in years."),
    monthly_rent: Optional[float] = typer.Option(None, help="Starting monthly rent."),
    holding_period: Optional[int] = typer.Option(
        None, help="Years before selling or moving, shared by both sides."
    ),
    investment_return: Optional[float] = typer.Option(
        None, help="Annual return on invested cash in percent, shared by both sides."
    ),
    tolerance: float = typer.Option(
        DEFAULT_TOLERANCE, help="Relative gap treated as roughly equal (0.01 = 1%)."
    ),
    show_timeline: bool = typer.Option(
        False, help="If set, print cumulative costs for each year."
    ),
    as_json: bool = typer.Option(False, "--json", help="Emit the full evaluation as JSON."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """
    Load the scenario, apply command-line overrides, and compare buying with renting.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level)
    logging.getLogger(__package__).setLevel(level)

    try:
        base = load_scenario(scenario) if scenario else Scenario()
        data = base.to_dict()
        overrides = {
            "home_price": home_price,
            "down_payment": down_payment,
            "interest_rate": interest_rate,
            "loan_term_years": loan_term_years,
        }
        data["buying"].update({k: v for k, v in overrides.items() if v is not None})
        if monthly_rent is not None:
            data["renting"]["monthly_rent"] = monthly_rent
        if holding_period is not None:
            data["shared"]["holding_period_years"] = holding_period
        if investment_return is not None:
            data["shared"]["opportunity_cost_rate"] = investment_return

        resolved = build_scenario(data)
        result = evaluate(resolved.buying, resolved.renting, tolerance=tolerance)
    except InvalidInputError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    if as_json:
        typer.echo(json.dumps(_payload(result, show_timeline), indent=2))
        return

    _print_report(result)
    if show_timeline:
        typer.echo("")
        typer.echo("Year  Buying (cumulative)  Renting (cumulative)")
        for snap in result.timeline:
            typer.echo(
                f"{snap.year:>4}  {_money(snap.buying_cost):>19}  {_money(snap.renting_cost):>20}"
            )


@app.command()
def defaults() -> None:
    """Print the default scenario as YAML, ready to edit and pass to --scenario."""
    typer.echo(dump_scenario(Scenario()), nl=False)


def _print_report(result: Evaluation) -> None:
    buying = result.buying
    renting = result.renting
    inputs = result.buying_inputs

    typer.echo(
        f"Home price: {_money(inputs.home_price)} "
        f"(down payment {_money(inputs.down_payment)}, {buying.down_payment_ratio:.1%})"
    )
    typer.echo(f"Holding period: {buying.holding_period_years} years")
    typer.echo("")
    typer.echo("Buying")
    for name, value in buying.monthly_breakdown.items():
        typer.echo(f"  {name}: {_money(value)}/mo")
    typer.echo(f"  Total monthly payment: {_money(buying.total_monthly_payment)}")
    typer.echo(f"  Initial investment: {_money(buying.initial_investment)}")
    typer.echo(f"  Future home value: {_money(buying.future_home_value)}")
    typer.echo(f"  Remaining loan balance: {_money(buying.remaining_balance)}")
    typer.echo(f"  Principal paid: {_money(buying.total_principal_paid)}")
    typer.echo(f"  Interest paid: {_money(buying.total_interest_paid)}")
    typer.echo(f"  Tax savings: {_money(buying.total_tax_savings)}")
    typer.echo(f"  Opportunity cost: {_money(buying.opportunity_cost)}")
    typer.echo(f"  Equity gain: {_money(buying.equity_gain)}")
    typer.echo(f"  Net proceeds from sale: {_money(buying.net_proceeds_from_sale)}")
    typer.echo(f"  Total cost of owning: {_money(buying.total_cost_of_owning)}")
    typer.echo(f"  Monthly cost of owning: {_money(buying.monthly_cost_of_owning)}")
    typer.echo("")
    typer.echo("Renting")
    for name, value in renting.monthly_breakdown.items():
        typer.echo(f"  {name}: {_money(value)}/mo")
    typer.echo(f"  Initial costs: {_money(renting.initial_costs)}")
    typer.echo(f"  Total rent: {_money(renting.total_rent)}")
    typer.echo(f"  Deposit returned: {_money(renting.deposit_returned)}")
    typer.echo(f"  Opportunity cost: {_money(renting.opportunity_cost)}")
    typer.echo(f"  Total cost of renting: {_money(renting.total_cost_of_renting)}")
    typer.echo(f"  Monthly cost of renting: {_money(renting.monthly_cost_of_renting)}")
    typer.echo("")
    typer.echo(result.comparison.message)


def _payload(result: Evaluation, include_timeline: bool) -> dict:
    comparison = result.comparison
    payload = {
        "buying": asdict(result.buying),
        "renting": asdict(result.renting),
        "comparison": {
            "buying_total": comparison.buying_total,
            "renting_total": comparison.renting_total,
            "difference": comparison.difference,
            "recommendation": comparison.recommendation.value,
            "message": comparison.message,
        },
    }
    if include_timeline:
        payload["timeline"] = [asdict(snap) for snap in result.timeline]
    return payload


if __name__ == "__main__":
    app()
