"""Tests for mortgage math and the purchase-price solvers."""

import pytest

from homewise_core import (
    loan_totals,
    piti,
    pmt,
    principal_from_payment,
    solve_price_with_dynamic_down_payment,
    solve_purchase_price,
    solve_purchase_price_for_monthly_budget,
)
from homewise_core.defaults import DEFAULT_SOLVER_SETTINGS
from homewise_core.models import DownPaymentMode, LoanParams, LoanTerms


@pytest.fixture
def terms() -> LoanTerms:
    """Conventional 30-year terms at 20% down."""
    return LoanTerms(interest_rate_percent=6.5, term_years=30, down_payment_percent=20)


class TestPmt:
    """Test suite for the amortization formula."""

    def test_known_payment(self):
        """$200k at 6% over 30 years is about $1,199.10."""
        assert pmt(200000, 0.06 / 12, 360) == pytest.approx(1199.10, abs=0.01)

    def test_zero_rate_is_straight_line(self):
        """With no interest the payment is principal divided by months."""
        assert pmt(120000, 0, 360) == pytest.approx(333.33, abs=0.01)

    @pytest.mark.parametrize("principal,rate,n", [(0, 0.005, 360), (-1000, 0.005, 360), (1000, 0.005, 0)])
    def test_nothing_to_amortize(self, principal, rate, n):
        """Non-positive principal or term gives a zero payment."""
        assert pmt(principal, rate, n) == 0.0

    def test_negative_rate_treated_as_zero(self):
        """A negative periodic rate should not produce a negative payment."""
        assert pmt(36000, -0.01, 36) == pytest.approx(1000.0)

    def test_principal_from_payment_inverts_pmt(self):
        """Inverse annuity should recover the original principal."""
        payment = pmt(250000, 0.065 / 12, 360)
        assert principal_from_payment(payment, 0.065 / 12, 360) == pytest.approx(250000)


class TestPiti:
    """Test suite for the monthly PITI breakdown."""

    def test_components_sum_to_monthly(self):
        """Monthly total is the sum of its parts."""
        result = piti(
            LoanParams(price=400000, interest_rate_percent=6.5, term_years=30, down_payment_percent=20)
        )
        parts = (
            result.principal_and_interest
            + result.property_tax
            + result.insurance
            + result.hoa
            + result.pmi
        )
        assert result.monthly == pytest.approx(parts)
        assert result.loan_amount == pytest.approx(320000)

    def test_policy_defaults_fill_missing_costs(self):
        """Unset costs use 1.5% tax, $1,800 insurance and no HOA."""
        result = piti(
            LoanParams(price=400000, interest_rate_percent=6.5, term_years=30, down_payment_percent=20)
        )
        assert result.property_tax == pytest.approx(500.0)
        assert result.insurance == pytest.approx(150.0)
        assert result.hoa == 0.0

    def test_no_pmi_at_twenty_percent_down(self):
        """PMI only applies below the 20% threshold."""
        at_threshold = piti(LoanParams(price=300000, interest_rate_percent=6.5, down_payment_percent=20))
        below = piti(LoanParams(price=300000, interest_rate_percent=6.5, down_payment_percent=10))

        assert at_threshold.pmi == 0.0
        assert below.pmi == pytest.approx(270000 * 0.006 / 12)

    def test_no_pmi_when_paid_in_cash(self):
        """With nothing borrowed there is no PMI and no P&I."""
        result = piti(LoanParams(price=300000, interest_rate_percent=6.5, down_payment_percent=100))
        assert result.pmi == 0.0
        assert result.principal_and_interest == 0.0

    def test_monotone_in_price(self):
        """A more expensive home never costs less per month."""
        payments = [
            piti(LoanParams(price=price, interest_rate_percent=7, down_payment_percent=10)).monthly
            for price in (100000, 200000, 350000, 500000, 900000)
        ]
        assert payments == sorted(payments)

    def test_malformed_inputs_do_not_raise(self):
        """Blank or garbage fields are coerced to safe values."""
        result = piti(LoanParams(price="", interest_rate_percent="abc", down_payment_percent=None))
        assert result.loan_amount == 0.0
        assert result.principal_and_interest == 0.0


class TestLoanTotals:
    """Test suite for lifetime loan totals."""

    def test_interest_is_payments_minus_principal(self):
        """Total interest should equal lifetime payments less the loan."""
        totals = loan_totals(200000, 6, 30)
        assert totals.total_payments == pytest.approx(totals.monthly_payment * 360)
        assert totals.total_interest == pytest.approx(totals.total_payments - 200000)


class TestPriceSolvers:
    """Test suite for inverting PITI into a purchase price."""

    @pytest.mark.parametrize("budget", [1200, 2500, 4000])
    def test_fixed_percent_price_fits_budget(self, terms: LoanTerms, budget: float):
        """PITI at the solved price should land on the budget."""
        price = solve_purchase_price_for_monthly_budget(budget, terms)
        monthly = piti(LoanParams(**terms.model_dump(), price=price)).monthly

        assert price > 0
        assert monthly == pytest.approx(budget, abs=DEFAULT_SOLVER_SETTINGS.monthly_tolerance)

    @pytest.mark.parametrize("down_payment_pct", [60, 70, 75, 80, 90, 95, 99])
    def test_high_down_payment_price_fits_budget(self, down_payment_pct: float):
        """Large down payments, where tax outweighs loan cost, still land on the budget."""
        high_down = LoanTerms(
            interest_rate_percent=6.5,
            term_years=30,
            down_payment_percent=down_payment_pct,
            property_tax_rate_percent=1.81,
            annual_insurance=1800,
            monthly_hoa=0,
            pmi_annual_rate_percent=0,
        )
        price = solve_purchase_price_for_monthly_budget(2100, high_down)
        monthly = piti(LoanParams(**high_down.model_dump(), price=price)).monthly

        assert price > 0
        assert monthly == pytest.approx(2100, abs=DEFAULT_SOLVER_SETTINGS.monthly_tolerance)

    def test_price_capped_at_max(self):
        """A tiny tax rate at near-full cash is capped at the solver ceiling."""
        cheap = LoanTerms(
            interest_rate_percent=6.5,
            down_payment_percent=99.9,
            property_tax_rate_percent=0.01,
            annual_insurance=0,
            monthly_hoa=0,
        )
        price = solve_purchase_price_for_monthly_budget(50000, cheap)
        assert price == DEFAULT_SOLVER_SETTINGS.max_price

    def test_capped_price_fits_budget(self, terms: LoanTerms):
        """Capped mode spends the cash on hand and still fits the budget."""
        price = solve_price_with_dynamic_down_payment(2500, terms, available_down_payment=30000)
        down_payment_pct = min(20, 30000 / price * 100)
        monthly = piti(
            LoanParams(**{**terms.model_dump(), "price": price, "down_payment_percent": down_payment_pct})
        ).monthly

        assert monthly == pytest.approx(2500, abs=DEFAULT_SOLVER_SETTINGS.monthly_tolerance + 1)

    def test_capped_price_is_whole_dollars(self, terms: LoanTerms):
        """Bisection results are rounded to the dollar."""
        price = solve_price_with_dynamic_down_payment(2500, terms, available_down_payment=30000)
        assert price == round(price)

    @pytest.mark.parametrize("mode", list(DownPaymentMode))
    @pytest.mark.parametrize("budget", [0, -100, None, "nope"])
    def test_non_positive_budget_gives_zero(self, terms: LoanTerms, mode, budget):
        """No budget means no house."""
        assert solve_purchase_price(budget, terms, mode=mode) == 0.0

    def test_budget_below_fixed_costs_gives_zero(self, terms: LoanTerms):
        """A budget that cannot cover insurance affords nothing."""
        assert solve_purchase_price_for_monthly_budget(100, terms) == 0.0

    def test_more_budget_buys_more_house(self, terms: LoanTerms):
        """Price rises with the monthly budget."""
        prices = [solve_purchase_price_for_monthly_budget(b, terms) for b in (1500, 2500, 3500)]
        assert prices == sorted(prices)
        assert len(set(prices)) == 3

    def test_all_cash_solves_from_property_tax(self):
        """At 100% down only tax and fixed costs scale the budget."""
        cash_terms = LoanTerms(
            interest_rate_percent=6.5,
            down_payment_percent=100,
            property_tax_rate_percent=1.2,
            annual_insurance=1200,
            monthly_hoa=0,
        )
        price = solve_purchase_price_for_monthly_budget(600, cash_terms)
        assert price == pytest.approx((600 - 100) / (0.012 / 12))
