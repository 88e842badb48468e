"""
Tests for the comparison, timeline and evaluation pipeline.
"""

from dataclasses import replace

import pytest

from rent_vs_buy import (
    BuyingInputs,
    Recommendation,
    RentingInputs,
    compare,
    compute_buying_results,
    compute_renting_results,
    cost_timeline,
    evaluate,
)
from rent_vs_buy.schemas import InvalidInputError


@pytest.fixture
def buying():
    return compute_buying_results(BuyingInputs())


@pytest.fixture
def renting():
    return compute_renting_results(RentingInputs())


def _with_totals(buying, renting, buying_total, renting_total):
    return (
        replace(buying, total_cost_of_owning=buying_total),
        replace(renting, total_cost_of_renting=renting_total),
    )


class TestCompare:
    def test_buying_cheaper(self, buying, renting):
        b, r = _with_totals(buying, renting, 150_000, 200_000)
        result = compare(b, r)
        assert result.recommendation is Recommendation.BUYING_CHEAPER
        assert result.is_buying_cheaper
        assert not result.is_renting_cheaper
        assert result.difference == -50_000
        assert result.message == "Buying is cheaper than renting by $50,000 over 7 years."

    def test_renting_cheaper(self, buying, renting):
        b, r = _with_totals(buying, renting, 210_000, 180_000)
        result = compare(b, r)
        assert result.recommendation is Recommendation.RENTING_CHEAPER
        assert result.is_renting_cheaper
        assert "$30,000" in result.message

    def test_swap_keeps_savings_magnitude(self, buying, renting):
        first = compare(*_with_totals(buying, renting, 150_000, 200_000))
        swapped = compare(*_with_totals(buying, renting, 200_000, 150_000))
        assert first.savings == swapped.savings == 50_000
        assert first.recommendation is Recommendation.BUYING_CHEAPER
        assert swapped.recommendation is Recommendation.RENTING_CHEAPER

    def test_identical_totals_are_roughly_equal(self, buying, renting):
        result = compare(*_with_totals(buying, renting, 175_000, 175_000))
        assert result.recommendation is Recommendation.ROUGHLY_EQUAL
        assert not result.is_buying_cheaper
        assert not result.is_renting_cheaper

    def test_within_one_percent_is_roughly_equal(self, buying, renting):
        result = compare(*_with_totals(buying, renting, 100_000, 100_500))
        assert result.recommendation is Recommendation.ROUGHLY_EQUAL
        assert "roughly the same" in result.message

    def test_tolerance_is_configurable(self, buying, renting):
        b, r = _with_totals(buying, renting, 100_000, 100_500)
        assert compare(b, r, tolerance=0).recommendation is Recommendation.BUYING_CHEAPER

    def test_zero_totals_are_roughly_equal(self, buying, renting):
        result = compare(*_with_totals(buying, renting, 0.0, 0.0))
        assert result.recommendation is Recommendation.ROUGHLY_EQUAL

    def test_negative_buying_total(self, buying, renting):
        result = compare(*_with_totals(buying, renting, -20_000, 150_000))
        assert result.recommendation is Recommendation.BUYING_CHEAPER

    def test_single_year_label(self):
        b = compute_buying_results(BuyingInputs(holding_period_years=1))
        r = compute_renting_results(RentingInputs(holding_period_years=1))
        b, r = _with_totals(b, r, 10_000, 20_000)
        assert compare(b, r).message.endswith("over 1 year.")

    def test_negative_tolerance_rejected(self, buying, renting):
        with pytest.raises(InvalidInputError):
            compare(buying, renting, tolerance=-0.1)


class TestCostTimeline:
    def test_one_snapshot_per_year(self, buying, renting):
        timeline = cost_timeline(buying, renting)
        assert [snap.year for snap in timeline] == list(range(1, 8))

    def test_first_year_costs(self, buying, renting):
        first = cost_timeline(buying, renting)[0]
        assert first.renting_cost == pytest.approx(1800 * 12 + (30 + 150 + 50) * 12)
        assert first.buying_cost == pytest.approx(buying.total_monthly_payment * 12)

    def test_costs_accumulate(self, buying, renting):
        timeline = cost_timeline(buying, renting)
        for earlier, later in zip(timeline, timeline[1:]):
            assert later.buying_cost > earlier.buying_cost
            assert later.renting_cost > earlier.renting_cost

    def test_final_renting_cost_matches_totals(self, buying, renting):
        last = cost_timeline(buying, renting)[-1]
        assert last.renting_cost == pytest.approx(
            renting.total_rent
            + renting.total_utilities
            + renting.total_insurance
            + renting.total_additional_fees
        )
        assert last.buying_cost == pytest.approx(buying.total_payments)

    def test_buying_cost_keeps_full_payment_after_payoff(self):
        buying = compute_buying_results(BuyingInputs(loan_term_years=5, holding_period_years=8))
        renting = compute_renting_results(RentingInputs(holding_period_years=8))
        timeline = cost_timeline(buying, renting)
        assert len(timeline) == 8
        assert timeline[-1].buying_cost == pytest.approx(buying.total_monthly_payment * 96)
        assert timeline[-1].buying_cost == pytest.approx(buying.total_payments)


class TestEvaluate:
    def test_default_scenario(self):
        result = evaluate(BuyingInputs(), RentingInputs())
        assert result.comparison.buying_total == result.buying.total_cost_of_owning
        assert result.comparison.renting_total == result.renting.total_cost_of_renting
        assert len(result.timeline) == 7

    def test_uses_renting_payment_as_baseline(self):
        result = evaluate(BuyingInputs(), RentingInputs())
        expected = compute_buying_results(
            BuyingInputs(),
            monthly_cost_baseline=result.renting.average_monthly_payment,
        )
        assert result.buying.opportunity_cost == pytest.approx(expected.opportunity_cost)

    def test_renting_defaults_when_omitted(self):
        result = evaluate(BuyingInputs())
        assert result.renting_inputs == RentingInputs()

    def test_invalid_inputs_surface(self):
        inputs = BuyingInputs()
        inputs.home_price = 0
        with pytest.raises(InvalidInputError):
            evaluate(inputs, RentingInputs())
