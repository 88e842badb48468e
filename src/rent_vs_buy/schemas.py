from __future__ import annotations

import math
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Dict, List, Tuple


class InvalidInputError(ValueError):
    """Raised when scenario inputs fall outside the model's domain."""


def _validate_numbers(
    obj: object,
    *,
    positive: Tuple[str, ...] = (),
    whole: Tuple[str, ...] = (),
) -> None:
    name = type(obj).__name__
    for spec in fields(obj):
        value = getattr(obj, spec.name)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InvalidInputError(f"{name}.{spec.name} must be a number, got {value!r}")
        if not math.isfinite(value):
            raise InvalidInputError(f"{name}.{spec.name} must be finite")
        if value < 0:
            raise InvalidInputError(f"{name}.{spec.name} must not be negative")
        if spec.name in positive and value <= 0:
            raise InvalidInputError(f"{name}.{spec.name} must be positive")
        if spec.name in whole and value != int(value):
            raise InvalidInputError(f"{name}.{spec.name} must be a whole number of years")


@dataclass
class BuyingInputs:
    """Assumptions for purchasing and holding a home."""

    home_price: float = 350_000.0
    down_payment: float = 70_000.0
    loan_term_years: int = 30
    interest_rate: float = 4.5  # annual percentage
    property_tax_rate: float = 1.2  # annual % of price
    home_insurance: float = 125.0  # monthly
    hoa_fees: float = 50.0  # monthly
    maintenance_percentage: float = 1.0  # annual % of price
    utility_expenses: float = 200.0  # monthly
    home_appreciation_rate: float = 3.0  # annual percentage
    holding_period_years: int = 7
    closing_cost_percentage: float = 3.0
    selling_cost_percentage: float = 6.0
    income_tax_rate: float = 22.0
    opportunity_cost_rate: float = 7.0  # annual percentage

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        _validate_numbers(
            self,
            positive=("home_price", "loan_term_years", "holding_period_years"),
            whole=("loan_term_years", "holding_period_years"),
        )
        if self.down_payment >= self.home_price:
            raise InvalidInputError("down_payment must be less than home_price")

    @property
    def loan_principal(self) -> float:
        return self.home_price - self.down_payment

    @property
    def holding_months(self) -> int:
        return int(self.holding_period_years) * 12


@dataclass
class RentingInputs:
    """Assumptions for renting over the same holding period."""

    monthly_rent: float = 1_800.0
    renters_insurance: float = 30.0  # monthly
    utility_expenses: float = 150.0  # monthly
    rent_increase_rate: float = 3.0  # annual percentage, applied each anniversary
    security_deposit: float = 3_600.0
    additional_fees: float = 50.0  # monthly
    holding_period_years: int = 7
    opportunity_cost_rate: float = 7.0  # annual percentage

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        _validate_numbers(
            self,
            positive=("holding_period_years",),
            whole=("holding_period_years",),
        )

    @property
    def holding_months(self) -> int:
        return int(self.holding_period_years) * 12


@dataclass(frozen=True)
class BuyingResults:
    holding_period_years: int
    loan_principal: float
    down_payment_ratio: float
    monthly_mortgage: float
    monthly_property_tax: float
    monthly_insurance: float
    monthly_hoa: float
    monthly_maintenance: float
    monthly_utilities: float
    total_monthly_payment: float
    initial_investment: float
    closing_costs: float
    future_home_value: float
    remaining_balance: float
    total_principal_paid: float
    total_interest_paid: float
    total_property_tax: float
    total_payments: float
    total_mortgage_paid: float
    total_tax_savings: float
    opportunity_cost: float
    selling_costs: float
    equity_gain: float
    net_proceeds_from_sale: float
    total_cost_of_owning: float
    monthly_cost_of_owning: float
    yearly_mortgage_paid: Tuple[float, ...] = ()

    @property
    def monthly_non_mortgage_costs(self) -> float:
        return self.total_monthly_payment - self.monthly_mortgage

    @property
    def monthly_breakdown(self) -> Dict[str, float]:
        return {
            "Mortgage": self.monthly_mortgage,
            "Property Tax": self.monthly_property_tax,
            "Insurance": self.monthly_insurance,
            "HOA": self.monthly_hoa,
            "Maintenance": self.monthly_maintenance,
            "Utilities": self.monthly_utilities,
        }


@dataclass(frozen=True)
class RentingResults:
    holding_period_years: int
    average_monthly_rent: float
    final_monthly_rent: float
    monthly_insurance: float
    monthly_utilities: float
    monthly_additional_fees: float
    initial_costs: float
    total_rent: float
    total_utilities: float
    total_insurance: float
    total_additional_fees: float
    deposit_returned: float
    opportunity_cost: float
    total_cost_of_renting: float
    monthly_cost_of_renting: float
    yearly_rents: Tuple[float, ...] = ()

    @property
    def average_monthly_payment(self) -> float:
        return (
            self.average_monthly_rent
            + self.monthly_insurance
            + self.monthly_utilities
            + self.monthly_additional_fees
        )

    @property
    def monthly_breakdown(self) -> Dict[str, float]:
        return {
            "Rent": self.average_monthly_rent,
            "Insurance": self.monthly_insurance,
            "Utilities": self.monthly_utilities,
            "Additional Fees": self.monthly_additional_fees,
        }


class Recommendation(str, Enum):
    BUYING_CHEAPER = "buying_cheaper"
    RENTING_CHEAPER = "renting_cheaper"
    ROUGHLY_EQUAL = "roughly_equal"


@dataclass(frozen=True)
class Comparison:
    buying_total: float
    renting_total: float
    recommendation: Recommendation
    message: str

    @property
    def difference(self) -> float:
        return self.buying_total - self.renting_total

    @property
    def savings(self) -> float:
        return abs(self.difference)

    @property
    def is_buying_cheaper(self) -> bool:
        return self.recommendation is Recommendation.BUYING_CHEAPER

    @property
    def is_renting_cheaper(self) -> bool:
        return self.recommendation is Recommendation.RENTING_CHEAPER


@dataclass(frozen=True)
class YearlySnapshot:
    year: int
    buying_cost: float
    renting_cost: float


@dataclass(frozen=True)
class Evaluation:
    buying_inputs: BuyingInputs
    renting_inputs: RentingInputs
    buying: BuyingResults
    renting: RentingResults
    comparison: Comparison
    timeline: List[YearlySnapshot] = field(default_factory=list)
