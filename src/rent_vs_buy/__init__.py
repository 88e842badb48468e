"""
Rent vs. Buy cost comparison toolkit.

This package projects the total cost of owning a home over a holding period
(mortgage amortization, carrying costs, tax savings, sale proceeds and the
investment return given up) and sets it against the cost of renting over the
same period, then recommends the cheaper option.
"""

import logging

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
from .model import (
    compare,
    compute_buying_results,
    compute_renting_results,
    cost_timeline,
    evaluate,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "BuyingInputs",
    "BuyingResults",
    "Comparison",
    "Evaluation",
    "InvalidInputError",
    "Recommendation",
    "RentingInputs",
    "RentingResults",
    "YearlySnapshot",
    "compare",
    "compute_buying_results",
    "compute_renting_results",
    "cost_timeline",
    "evaluate",
]
