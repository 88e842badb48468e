from __future__ import annotations

import logging
import math
from typing import List, Optional, Tuple

from .schemas import (
    BuyingInputs,
    BuyingResults,
    Comparison,
    Evaluation,
    InvalidInputError,
    Recommendation,
    RentingInputs,
    RentingResults,
    YearlySnapshot,
)

logger = logging.getLogger(__name__)

DEFAULT_TOLERANCE = 0.01  # share of the larger total treated as a tie
BALANCE_EPSILON = 1e-6


def compute_buying_results(
    inputs: BuyingInputs, *, monthly_cost_baseline: float = 0.0
) -> BuyingResults:
    """
    Project the cost of owning over the holding period.

    ``monthly_cost_baseline`` is what the household would spend each month
    anyway (typically the renter's average monthly payment). Only the excess
    of the owner's monthly payment over it is treated as investable cash when
    pricing the opportunity cost.
    """
    inputs.validate()
    if not math.isfinite(monthly_cost_baseline) or monthly_cost_baseline < 0:
        raise InvalidInputError("monthly_cost_baseline must be a non-negative number")

    years = int(inputs.holding_period_years)
    months = inputs.holding_months
    principal = inputs.loan_principal
    price = inputs.home_price

    mortgage_payment = monthly_mortgage_payment(
        principal, inputs.interest_rate, int(inputs.loan_term_years) * 12
    )
    _require_finite(mortgage_payment, "interest_rate")
    monthly_tax = price * inputs.property_tax_rate / 100.0 / 12.0
    monthly_maintenance = price * inputs.maintenance_percentage / 100.0 / 12.0
    non_mortgage = (
        monthly_tax
        + inputs.home_insurance
        + inputs.hoa_fees
        + monthly_maintenance
        + inputs.utility_expenses
    )
    total_monthly_payment = mortgage_payment + non_mortgage

    balance, principal_paid, interest_paid, yearly_paid = amortize(
        principal, annual_to_monthly_rate(inputs.interest_rate), mortgage_payment, months
    )

    future_home_value = future_value(
        price, inputs.home_appreciation_rate, years, name="home_appreciation_rate"
    )
    closing_costs = inputs.closing_cost_percentage / 100.0 * price
    initial_investment = inputs.down_payment + closing_costs
    selling_costs = inputs.selling_cost_percentage / 100.0 * future_home_value
    net_proceeds = future_home_value - balance - selling_costs
    equity_gain = (future_home_value - balance) - inputs.down_payment

    total_property_tax = monthly_tax * months
    tax_savings = inputs.income_tax_rate / 100.0 * (interest_paid + total_property_tax)

    monthly_delta = max(total_monthly_payment - monthly_cost_baseline, 0.0)
    opportunity_cost = foregone_return(
        initial_investment, inputs.opportunity_cost_rate, years
    ) + foregone_annuity_return(monthly_delta, inputs.opportunity_cost_rate, months)

    # The full monthly payment is charged for every month held, even past payoff.
    total_payments = total_monthly_payment * months
    total_cost = (
        initial_investment
        + total_payments
        - tax_savings
        - net_proceeds
        + opportunity_cost
    )
    _require_finite(total_cost, "BuyingInputs")
    logger.debug(
        "Buying: payment=%.2f balance=%.2f proceeds=%.2f total=%.2f",
        mortgage_payment,
        balance,
        net_proceeds,
        total_cost,
    )

    return BuyingResults(
        holding_period_years=years,
        loan_principal=principal,
        down_payment_ratio=inputs.down_payment / price,
        monthly_mortgage=mortgage_payment,
        monthly_property_tax=monthly_tax,
        monthly_insurance=inputs.home_insurance,
        monthly_hoa=inputs.hoa_fees,
        monthly_maintenance=monthly_maintenance,
        monthly_utilities=inputs.utility_expenses,
        total_monthly_payment=total_monthly_payment,
        initial_investment=initial_investment,
        closing_costs=closing_costs,
        future_home_value=future_home_value,
        remaining_balance=balance,
        total_principal_paid=principal_paid,
        total_interest_paid=interest_paid,
        total_property_tax=total_property_tax,
        total_payments=total_payments,
        total_mortgage_paid=principal_paid + interest_paid,
        total_tax_savings=tax_savings,
        opportunity_cost=opportunity_cost,
        selling_costs=selling_costs,
        equity_gain=equity_gain,
        net_proceeds_from_sale=net_proceeds,
        total_cost_of_owning=total_cost,
        monthly_cost_of_owning=total_cost / months,
        yearly_mortgage_paid=yearly_paid,
    )


def compute_renting_results(inputs: RentingInputs) -> RentingResults:
    """Opportunity cost is the return foregone on the deposit, not its future value."""
    inputs.validate()
    years = int(inputs.holding_period_years)
    months = inputs.holding_months

    # Rent steps up once per anniversary, never mid-year.
    yearly_rents = tuple(
        future_value(
            inputs.monthly_rent, inputs.rent_increase_rate, year, name="rent_increase_rate"
        )
        for year in range(years)
    )

    total_rent = sum(rent * 12 for rent in yearly_rents)
    total_utilities = inputs.utility_expenses * months
    total_insurance = inputs.renters_insurance * months
    total_fees = inputs.additional_fees * months
    initial_costs = inputs.security_deposit + inputs.additional_fees
    deposit_returned = inputs.security_deposit
    opportunity_cost = foregone_return(
        inputs.security_deposit, inputs.opportunity_cost_rate, years
    )

    total_cost = (
        total_rent
        + total_utilities
        + total_insurance
        + total_fees
        + initial_costs
        - deposit_returned
        + opportunity_cost
    )
    _require_finite(total_cost, "RentingInputs")
    logger.debug("Renting: rent=%.2f total=%.2f", total_rent, total_cost)

    return RentingResults(
        holding_period_years=years,
        average_monthly_rent=sum(yearly_rents) / len(yearly_rents),
        final_monthly_rent=yearly_rents[-1],
        monthly_insurance=inputs.renters_insurance,
        monthly_utilities=inputs.utility_expenses,
        monthly_additional_fees=inputs.additional_fees,
        initial_costs=initial_costs,
        total_rent=total_rent,
        total_utilities=total_utilities,
        total_insurance=total_insurance,
        total_additional_fees=total_fees,
        deposit_returned=deposit_returned,
        opportunity_cost=opportunity_cost,
        total_cost_of_renting=total_cost,
        monthly_cost_of_renting=total_cost / months,
        yearly_rents=yearly_rents,
    )


def compare(
    buying: BuyingResults,
    renting: RentingResults,
    *,
    tolerance: float = DEFAULT_TOLERANCE,
) -> Comparison:
    """Recommend the cheaper option, calling totals within ``tolerance`` a tie."""
    if not math.isfinite(tolerance) or tolerance < 0:
        raise InvalidInputError("tolerance must be a non-negative number")

    buying_total = buying.total_cost_of_owning
    renting_total = renting.total_cost_of_renting
    savings = abs(buying_total - renting_total)
    scale = max(abs(buying_total), abs(renting_total))
    period = _years_label(buying.holding_period_years)

    if savings <= tolerance * scale:
        recommendation = Recommendation.ROUGHLY_EQUAL
        message = f"Buying and renting cost roughly the same over {period}."
    elif buying_total < renting_total:
        recommendation = Recommendation.BUYING_CHEAPER
        message = f"Buying is cheaper than renting by ${savings:,.0f} over {period}."
    else:
        recommendation = Recommendation.RENTING_CHEAPER
        message = f"Renting is cheaper than buying by ${savings:,.0f} over {period}."

    return Comparison(
        buying_total=buying_total,
        renting_total=renting_total,
        recommendation=recommendation,
        message=message,
    )


def cost_timeline(buying: BuyingResults, renting: RentingResults) -> List[YearlySnapshot]:
    """Cumulative cash outlays at the end of each year of the holding period."""
    years = min(buying.holding_period_years, len(renting.yearly_rents))
    renting_extras = (
        renting.monthly_insurance
        + renting.monthly_utilities
        + renting.monthly_additional_fees
    )

    timeline: List[YearlySnapshot] = []
    rent_to_date = 0.0
    for index in range(years):
        year = index + 1
        rent_to_date += renting.yearly_rents[index] * 12
        timeline.append(
            YearlySnapshot(
                year=year,
                buying_cost=buying.total_monthly_payment * 12 * year,
                renting_cost=rent_to_date + renting_extras * 12 * year,
            )
        )
    return timeline


def evaluate(
    buying_inputs: BuyingInputs,
    renting_inputs: Optional[RentingInputs] = None,
    *,
    tolerance: float = DEFAULT_TOLERANCE,
) -> Evaluation:
    renting_inputs = renting_inputs or RentingInputs()
    renting = compute_renting_results(renting_inputs)
    buying = compute_buying_results(
        buying_inputs, monthly_cost_baseline=renting.average_monthly_payment
    )
    comparison = compare(buying, renting, tolerance=tolerance)
    logger.debug("Recommendation: %s", comparison.recommendation.value)

    return Evaluation(
        buying_inputs=buying_inputs,
        renting_inputs=renting_inputs,
        buying=buying,
        renting=renting,
        comparison=comparison,
        timeline=cost_timeline(buying, renting),
    )


def amortize(
    principal: float, monthly_rate: float, payment: float, months: int
) -> Tuple[float, float, float, Tuple[float, ...]]:
    """
    Walk a fixed-payment loan for ``months`` months.

    Returns the remaining balance, principal paid, interest paid and the
    mortgage cash paid in each full year walked.
    """
    balance = float(principal)
    principal_paid = 0.0
    interest_paid = 0.0
    paid_this_year = 0.0
    yearly: List[float] = []

    for month in range(1, months + 1):
        if balance > 0:
            interest = balance * monthly_rate
            principal_portion = min(max(payment - interest, 0.0), balance)
            if balance - principal_portion < BALANCE_EPSILON:
                principal_portion = balance
            balance -= principal_portion
            principal_paid += principal_portion
            interest_paid += interest
            paid_this_year += interest + principal_portion
        if month % 12 == 0:
            yearly.append(paid_this_year)
            paid_this_year = 0.0

    return balance, principal_paid, interest_paid, tuple(yearly)


def monthly_mortgage_payment(
    principal: float, annual_rate_pct: float, term_months: int
) -> float:
    if principal <= 0 or term_months <= 0:
        return 0.0
    monthly_rate = annual_to_monthly_rate(annual_rate_pct)
    if monthly_rate == 0:
        return principal / term_months
    discount = (1 + monthly_rate) ** (-term_months)
    return principal * monthly_rate / (1 - discount)


def annual_to_monthly_rate(annual_rate_pct: float) -> float:
    if annual_rate_pct <= 0:
        return 0.0
    return annual_rate_pct / 100.0 / 12.0


def annual_to_monthly_growth(annual_rate_pct: float) -> float:
    if annual_rate_pct <= -100:
        raise InvalidInputError("annual rate must be greater than -100%")
    return (1 + annual_rate_pct / 100.0) ** (1 / 12.0) - 1


def future_value(
    amount: float, annual_rate_pct: float, years: int, *, name: str = "annual rate"
) -> float:
    try:
        value = amount * (1 + annual_rate_pct / 100.0) ** years
    except OverflowError as exc:
        raise InvalidInputError(f"{name} is too large to compound over {years} years") from exc
    return _require_finite(value, name)


def foregone_return(amount: float, annual_rate_pct: float, years: int) -> float:
    """Investment return given up by tying ``amount`` up for ``years``."""
    fv = future_value(amount, annual_rate_pct, years, name="opportunity_cost_rate")
    return fv - amount


def foregone_annuity_return(
    monthly_amount: float, annual_rate_pct: float, months: int
) -> float:
    # Contributions land at month end and earn the effective monthly rate.
    monthly_rate = annual_to_monthly_growth(annual_rate_pct)
    if monthly_rate == 0 or monthly_amount == 0:
        return 0.0
    try:
        growth = (1 + monthly_rate) ** months
    except OverflowError as exc:
        raise InvalidInputError("opportunity_cost_rate is too large to compound") from exc
    accumulated = monthly_amount * (growth - 1) / monthly_rate
    return _require_finite(accumulated - monthly_amount * months, "opportunity_cost_rate")


def _require_finite(value: float, name: str) -> float:
    if not math.isfinite(value):
        raise InvalidInputError(f"{name} produces a non-finite result")
    return value


def _years_label(years: int) -> str:
    return "1 year" if years == 1 else f"{years} years"
